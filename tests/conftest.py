"""
Configuration for pytest tests.
"""

import os
import json
import tempfile

# logger.py creates its log directory at import time
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "video_summarizer_test_logs"))
os.environ["ENVIRONMENT"] = "development"

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from video_summarizer.models.schemas import RetryPolicy, SummaryConfig


def make_response(status_code, body=None, headers=None, text=None):
    """Build a real requests.Response with the given status and JSON body."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = "test"
    response.url = "https://api-inference.huggingface.co/models/test"
    response.headers = CaseInsensitiveDict(headers or {})
    if text is not None:
        response._content = text.encode("utf-8")
    else:
        response._content = json.dumps(body).encode("utf-8")
    response.encoding = "utf-8"
    return response


@pytest.fixture
def fast_retry_policy():
    """Retry policy with no waiting between attempts."""
    return RetryPolicy(max_attempts=3, base_delay=0.0, max_delay=0.0, rate_limit_delay=0.0)


@pytest.fixture
def summary_config():
    """Summary configuration used across tests."""
    return SummaryConfig(max_chunk_chars=1024, max_workers=4, timeout=5.0)


@pytest.fixture
def test_video_url():
    """Return a test YouTube video URL."""
    return "https://youtu.be/V3TUEeB0kW0?si=-InVol0JhtWji-6R"


@pytest.fixture
def token_file(tmp_path):
    """Credential file holding a test token."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"token": "hf_test_token"}), encoding="utf-8")
    return path


@pytest.fixture
def response_factory():
    """Factory for fake endpoint responses."""
    return make_response

"""
Tests for the summarization client and its retry loop.
"""

import threading
import pytest
import requests
from unittest.mock import patch, MagicMock

from video_summarizer.core.retry import (
    RATE_LIMITED,
    SERVICE_UNAVAILABLE,
    TransientFailure,
    call_with_retry,
    next_delay,
)
from video_summarizer.core.summarizer import HuggingFaceSummarizer
from video_summarizer.models.schemas import Chunk, RetryPolicy, SummaryResult
from video_summarizer.utils.errors import (
    AuthError,
    OperationCancelled,
    RateLimitExceeded,
    ResponseParseError,
    SummarizationRequestFailed,
    SummarizationUnavailable,
)


@pytest.fixture
def mock_post():
    """Fixture to mock requests.post in the summarizer module."""
    with patch('video_summarizer.core.summarizer.requests.post') as mock:
        yield mock


@pytest.fixture
def summarizer(summary_config, fast_retry_policy):
    """Fixture to create a summarizer with a fast retry policy."""
    return HuggingFaceSummarizer(
        "hf_test_token",
        summary_config,
        fast_retry_policy,
        api_url="https://api-inference.huggingface.co/models/test",
    )


@pytest.fixture
def chunk():
    return Chunk(index=3, text="This is a chunk of a transcript about testing.")


def test_init_requires_token(summary_config):
    with pytest.raises(ValueError):
        HuggingFaceSummarizer("", summary_config)


def test_default_api_url_uses_model(summary_config):
    summarizer = HuggingFaceSummarizer("hf_test_token", summary_config)
    assert summarizer.api_url.endswith("/facebook/bart-large-cnn")


def test_summarize_success(mock_post, summarizer, chunk, response_factory):
    """A successful response yields a SummaryResult with the chunk's index."""
    mock_post.return_value = response_factory(200, [{"summary_text": " A test summary. "}])

    result = summarizer.summarize(chunk)

    assert result == SummaryResult(chunk_index=3, summary_text="A test summary.")
    mock_post.assert_called_once()
    _, kwargs = mock_post.call_args
    assert kwargs["headers"] == {"Authorization": "Bearer hf_test_token"}
    assert kwargs["json"]["inputs"] == chunk.text
    assert kwargs["json"]["parameters"] == {"max_length": 150, "min_length": 30, "do_sample": False}
    assert kwargs["timeout"] == 5.0


def test_retries_service_unavailable_up_to_max_attempts(mock_post, summarizer, chunk, response_factory):
    """Repeated 503s use the whole budget, then surface SummarizationUnavailable."""
    mock_post.return_value = response_factory(
        503, {"error": "Model facebook/bart-large-cnn is currently loading", "estimated_time": 20.0}
    )

    with pytest.raises(SummarizationUnavailable) as exc_info:
        summarizer.summarize(chunk)

    assert mock_post.call_count == 3
    assert exc_info.value.attempts == 3
    assert exc_info.value.chunk_index == 3
    assert exc_info.value.retryable


def test_recovers_after_model_loads(mock_post, summarizer, chunk, response_factory):
    mock_post.side_effect = [
        response_factory(503, {"error": "loading"}),
        response_factory(200, [{"summary_text": "Loaded now."}]),
    ]

    result = summarizer.summarize(chunk)

    assert result.summary_text == "Loaded now."
    assert mock_post.call_count == 2


def test_timeouts_share_retry_budget(mock_post, summarizer, chunk, response_factory):
    """Timeouts and 503s count against the same attempt budget."""
    mock_post.side_effect = [
        requests.Timeout("read timed out"),
        response_factory(503, {"error": "loading"}),
        requests.ConnectionError("connection reset"),
    ]

    with pytest.raises(SummarizationUnavailable):
        summarizer.summarize(chunk)

    assert mock_post.call_count == 3


def test_authentication_failure_is_not_retried(mock_post, summarizer, chunk, response_factory):
    """A single 401 yields AuthError with zero retries."""
    mock_post.return_value = response_factory(401, {"error": "Invalid credentials in Authorization header"})

    with pytest.raises(AuthError) as exc_info:
        summarizer.summarize(chunk)

    mock_post.assert_called_once()
    assert not exc_info.value.retryable


def test_rate_limit_exhaustion(mock_post, summarizer, chunk, response_factory):
    mock_post.return_value = response_factory(429, {"error": "Rate limit reached"}, headers={"Retry-After": "0"})

    with pytest.raises(RateLimitExceeded):
        summarizer.summarize(chunk)

    assert mock_post.call_count == 3


def test_rate_limit_waits_for_retry_after(summary_config, chunk, response_factory):
    """The Retry-After header sets the wait before the next attempt."""
    summarizer = HuggingFaceSummarizer("hf_test_token", summary_config, RetryPolicy(max_attempts=2, base_delay=0.0))
    with patch('video_summarizer.core.summarizer.requests.post') as mock_post, \
            patch('video_summarizer.core.retry.time.sleep') as mock_sleep:
        mock_post.side_effect = [
            response_factory(429, {"error": "Rate limit reached"}, headers={"Retry-After": "7"}),
            response_factory(200, [{"summary_text": "Finally."}]),
        ]
        result = summarizer.summarize(chunk)

    assert result.summary_text == "Finally."
    mock_sleep.assert_called_once_with(7.0)


@pytest.mark.parametrize("header,expected_wait", [
    ("inf", 5.0),
    ("nan", 5.0),
    ("100000", 30.0),
])
def test_rate_limit_wait_is_bounded(summary_config, chunk, response_factory, header, expected_wait):
    """Unusable or huge Retry-After values never stall or crash the client."""
    policy = RetryPolicy(max_attempts=2, base_delay=0.0, max_delay=30.0, rate_limit_delay=5.0)
    summarizer = HuggingFaceSummarizer("hf_test_token", summary_config, policy)
    with patch('video_summarizer.core.summarizer.requests.post') as mock_post, \
            patch('video_summarizer.core.retry.time.sleep') as mock_sleep:
        mock_post.side_effect = [
            response_factory(429, {"error": "Rate limit reached"}, headers={"Retry-After": header}),
            response_factory(200, [{"summary_text": "Finally."}]),
        ]
        result = summarizer.summarize(chunk)

    assert result.summary_text == "Finally."
    mock_sleep.assert_called_once_with(expected_wait)


@pytest.mark.parametrize("body,text", [
    (None, "<html>not json</html>"),
    ({"unexpected": "shape"}, None),
    ([], None),
    ([{"summary_text": "   "}], None),
])
def test_malformed_response_is_terminal(mock_post, summarizer, chunk, response_factory, body, text):
    mock_post.return_value = response_factory(200, body, text=text)

    with pytest.raises(ResponseParseError):
        summarizer.summarize(chunk)

    mock_post.assert_called_once()


def test_other_http_errors_are_terminal(mock_post, summarizer, chunk, response_factory):
    mock_post.return_value = response_factory(400, {"error": "Input is too long"})

    with pytest.raises(SummarizationRequestFailed) as exc_info:
        summarizer.summarize(chunk)

    mock_post.assert_called_once()
    assert exc_info.value.status_code == 400
    assert "Input is too long" in str(exc_info.value)


def test_retry_loop_backoff_doubles_and_caps():
    policy = RetryPolicy(max_attempts=6, base_delay=1.0, max_delay=5.0)
    operation = MagicMock(side_effect=TransientFailure(SERVICE_UNAVAILABLE, "loading"))
    sleep = MagicMock()

    with pytest.raises(SummarizationUnavailable):
        call_with_retry(operation, policy, sleep=sleep)

    assert operation.call_count == 6
    assert [call.args[0] for call in sleep.call_args_list] == [1.0, 2.0, 4.0, 5.0, 5.0]


def test_retry_loop_propagates_terminal_errors_unchanged():
    error = AuthError("bad token")
    operation = MagicMock(side_effect=error)

    with pytest.raises(AuthError) as exc_info:
        call_with_retry(operation, RetryPolicy(max_attempts=5), sleep=MagicMock())

    assert exc_info.value is error
    operation.assert_called_once()


def test_rate_limit_default_delay_without_header():
    policy = RetryPolicy(base_delay=1.0, max_delay=30.0, rate_limit_delay=5.0)
    assert next_delay(policy, TransientFailure(RATE_LIMITED), 1) == 5.0
    assert next_delay(policy, TransientFailure(RATE_LIMITED), 4) == 8.0
    assert next_delay(policy, TransientFailure(RATE_LIMITED, retry_after=2.5), 4) == 2.5
    assert next_delay(policy, TransientFailure(RATE_LIMITED, retry_after=100000.0), 1) == 30.0


def test_retry_loop_stops_when_cancelled():
    """Setting the cancel event aborts the wait between attempts."""
    cancel_event = threading.Event()
    cancel_event.set()
    operation = MagicMock(side_effect=TransientFailure(SERVICE_UNAVAILABLE, "loading"))

    with pytest.raises(OperationCancelled):
        call_with_retry(operation, RetryPolicy(max_attempts=5, base_delay=10.0), cancel_event=cancel_event)

    operation.assert_not_called()


def test_retry_loop_cancelled_during_backoff():
    cancel_event = threading.Event()

    def operation():
        cancel_event.set()
        raise TransientFailure(SERVICE_UNAVAILABLE, "loading")

    with pytest.raises(OperationCancelled):
        call_with_retry(operation, RetryPolicy(max_attempts=5, base_delay=10.0), cancel_event=cancel_event)

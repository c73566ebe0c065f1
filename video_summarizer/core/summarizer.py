"""
Module for summarizing transcript chunks through the Hugging Face Inference API.
"""

import threading
from typing import Optional

import requests

from video_summarizer.config import config
from video_summarizer.core.retry import (
    RATE_LIMITED,
    SERVICE_UNAVAILABLE,
    TIMEOUT,
    TransientFailure,
    call_with_retry,
)
from video_summarizer.models.schemas import Chunk, RetryPolicy, SummaryConfig, SummaryResult
from video_summarizer.utils.errors import AuthError, ResponseParseError, SummarizationRequestFailed
from video_summarizer.utils.helpers import parse_retry_after, truncate_text
from video_summarizer.utils.logger import logging

UNAVAILABLE_STATUSES = {502, 503, 504}
AUTH_STATUSES = {401, 403}


class HuggingFaceSummarizer:
    """Client for a hosted summarization model."""

    def __init__(
        self,
        api_token: str,
        summary_config: Optional[SummaryConfig] = None,
        retry_policy: Optional[RetryPolicy] = None,
        api_url: Optional[str] = None,
    ):
        """
        Initialize the client.

        Args:
            api_token: Bearer token for the inference API
            summary_config: Model and generation parameters
            retry_policy: Retry budget for transient failures
            api_url: Endpoint override (defaults to the configured model's URL)
        """
        if not api_token:
            raise ValueError("An inference API token is required.")

        self.api_token = api_token
        self.summary_config = summary_config or SummaryConfig()
        self.retry_policy = retry_policy or RetryPolicy()
        self.api_url = api_url or config.api_url(self.summary_config.model)

    def _payload(self, text: str) -> dict:
        return {
            "inputs": text,
            "parameters": {
                "max_length": self.summary_config.max_length,
                "min_length": self.summary_config.min_length,
                "do_sample": self.summary_config.do_sample,
            },
        }

    def _error_detail(self, response: requests.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return truncate_text(response.text or response.reason or "", 200)
        if isinstance(data, dict) and "error" in data:
            return str(data["error"])
        return truncate_text(str(data), 200)

    def _parse_summary(self, response: requests.Response, chunk_index: int) -> str:
        try:
            data = response.json()
        except ValueError as e:
            raise ResponseParseError(f"Response is not JSON: {e}", chunk_index=chunk_index)

        if isinstance(data, list) and data:
            data = data[0]
        if isinstance(data, dict):
            data = data.get("summary_text")

        if not isinstance(data, str) or not data.strip():
            raise ResponseParseError(
                f"Unexpected response shape: {truncate_text(response.text, 200)}",
                chunk_index=chunk_index,
            )
        return data.strip()

    def request_summary(self, text: str, chunk_index: int = 0) -> str:
        """
        Make a single request to the endpoint and classify its outcome.

        Args:
            text: Text to summarize
            chunk_index: Index of the chunk, for error reporting

        Returns:
            The summary text

        Raises:
            TransientFailure: Retryable condition (503/502/504, 429, timeout)
            AuthError: The token was rejected
            ResponseParseError: The body is not a summary
            SummarizationRequestFailed: Any other non-success status
        """
        try:
            response = requests.post(
                self.api_url,
                headers={"Authorization": f"Bearer {self.api_token}"},
                json=self._payload(text),
                timeout=self.summary_config.timeout,
            )
        except (requests.Timeout, requests.ConnectionError) as e:
            raise TransientFailure(TIMEOUT, str(e))

        status = response.status_code
        if status in UNAVAILABLE_STATUSES:
            raise TransientFailure(SERVICE_UNAVAILABLE, f"HTTP {status}: {self._error_detail(response)}")
        if status == 429:
            raise TransientFailure(
                RATE_LIMITED,
                f"HTTP 429: {self._error_detail(response)}",
                retry_after=parse_retry_after(response.headers.get("Retry-After")),
            )
        if status in AUTH_STATUSES:
            raise AuthError(
                f"Authentication failed (HTTP {status}): {self._error_detail(response)}",
                chunk_index=chunk_index,
                attempts=1,
            )
        if not response.ok:
            raise SummarizationRequestFailed(
                f"Summarization request failed (HTTP {status}): {self._error_detail(response)}",
                status_code=status,
                chunk_index=chunk_index,
            )

        return self._parse_summary(response, chunk_index)

    def summarize(self, chunk: Chunk, cancel_event: Optional[threading.Event] = None) -> SummaryResult:
        """
        Summarize one chunk, retrying transient failures.

        Args:
            chunk: Chunk to summarize
            cancel_event: Set by the orchestrator to abandon this chunk

        Returns:
            SummaryResult carrying the chunk's index
        """
        logging.info(f"Summarizing chunk {chunk.index} ({len(chunk.text)} chars)")
        summary_text = call_with_retry(
            lambda: self.request_summary(chunk.text, chunk.index),
            self.retry_policy,
            cancel_event=cancel_event,
            chunk_index=chunk.index,
        )
        logging.debug(f"Chunk {chunk.index} summary: {truncate_text(summary_text)}")
        return SummaryResult(chunk_index=chunk.index, summary_text=summary_text)

"""
Bounded retry loop for transient summarization failures.

The loop knows nothing about HTTP: operations signal a retryable condition by
raising TransientFailure, anything else propagates untouched.
"""

import threading
import time
from typing import Callable, Optional, TypeVar

from video_summarizer.models.schemas import RetryPolicy
from video_summarizer.utils.errors import (
    OperationCancelled,
    RateLimitExceeded,
    SummarizationUnavailable,
)
from video_summarizer.utils.logger import logging

T = TypeVar("T")

SERVICE_UNAVAILABLE = "service_unavailable"
RATE_LIMITED = "rate_limited"
TIMEOUT = "timeout"


class TransientFailure(Exception):
    """A failure worth retrying: model loading, rate limiting or a network timeout."""

    def __init__(self, kind: str, detail: str = "", retry_after: Optional[float] = None):
        super().__init__(detail or kind)
        self.kind = kind
        self.detail = detail
        self.retry_after = retry_after


def wait(delay: float, cancel_event: Optional[threading.Event] = None) -> None:
    """Sleep for *delay* seconds, aborting early if *cancel_event* gets set."""
    if cancel_event is None:
        time.sleep(delay)
        return
    if cancel_event.wait(delay):
        raise OperationCancelled("Cancelled while waiting to retry")


def next_delay(policy: RetryPolicy, failure: TransientFailure, attempt: int) -> float:
    """Delay before the attempt following *attempt*."""
    if failure.kind == RATE_LIMITED:
        if failure.retry_after is not None:
            # never wait longer than max_delay, whatever the server asks
            return min(failure.retry_after, policy.max_delay)
        return max(policy.rate_limit_delay, policy.backoff(attempt))
    return policy.backoff(attempt)


def call_with_retry(
    operation: Callable[[], T],
    policy: RetryPolicy,
    cancel_event: Optional[threading.Event] = None,
    chunk_index: Optional[int] = None,
    sleep: Optional[Callable[[float, Optional[threading.Event]], None]] = None,
) -> T:
    """
    Call *operation* until it succeeds, fails terminally, or the budget runs out.

    Args:
        operation: Zero-argument callable doing one attempt
        policy: Retry budget and backoff settings
        cancel_event: Set by the caller to abandon the remaining attempts
        chunk_index: Chunk being processed, for error reporting
        sleep: Waits between attempts (defaults to wait)

    Returns:
        Whatever *operation* returns on its first successful attempt

    Raises:
        SummarizationUnavailable: The budget ran out on service-unavailable
            responses or timeouts
        RateLimitExceeded: The budget ran out while being rate limited
        OperationCancelled: *cancel_event* was set
    """
    sleep = sleep or wait
    attempt = 0
    while True:
        if cancel_event is not None and cancel_event.is_set():
            raise OperationCancelled("Cancelled before attempt")

        attempt += 1
        try:
            return operation()
        except TransientFailure as failure:
            if attempt >= policy.max_attempts:
                logging.error(
                    f"Chunk {chunk_index}: giving up after {attempt} attempts ({failure.kind}: {failure.detail})"
                )
                error_cls = RateLimitExceeded if failure.kind == RATE_LIMITED else SummarizationUnavailable
                raise error_cls(
                    f"Summarization endpoint still failing after {attempt} attempts: {failure.detail or failure.kind}",
                    chunk_index=chunk_index,
                    attempts=attempt,
                ) from failure

            delay = next_delay(policy, failure, attempt)
            logging.warning(
                f"Chunk {chunk_index}: {failure.kind} on attempt {attempt}/{policy.max_attempts}, "
                f"retrying in {delay:.1f}s"
            )
            sleep(delay, cancel_event)

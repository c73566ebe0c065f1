"""
Error taxonomy for the video summarizer.

Every failure the pipeline can surface derives from VideoSummarizerError.
Transient conditions (model loading, rate limiting, timeouts) are retried
inside the summarization client and only reach callers as
SummarizationUnavailable or RateLimitExceeded once the retry budget is spent.
"""

from typing import Optional


class VideoSummarizerError(Exception):
    """Base class for all summarizer errors."""

    retryable = False

    def __init__(self, message: str, video_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.video_id = video_id


class ConfigError(VideoSummarizerError):
    """The credential file is missing or malformed."""


class InvalidVideoURL(VideoSummarizerError):
    """No video id could be extracted from the given URL."""


class TranscriptError(VideoSummarizerError):
    """Base class for transcript retrieval failures."""


class NoCaptionsAvailable(TranscriptError):
    """The video has no retrievable transcript."""


class VideoUnavailable(TranscriptError):
    """The video is private, deleted, region-locked or otherwise unreachable."""


class FetchFailed(TranscriptError):
    """The transcript service or transport failed."""


class EmptyTranscript(VideoSummarizerError):
    """The transcript contains no non-whitespace text."""


class SummarizationError(VideoSummarizerError):
    """Base class for summarization endpoint failures."""

    def __init__(self, message: str, chunk_index: Optional[int] = None, attempts: int = 0):
        super().__init__(message)
        self.chunk_index = chunk_index
        self.attempts = attempts


class AuthError(SummarizationError):
    """The endpoint rejected the credential."""


class ResponseParseError(SummarizationError):
    """The endpoint answered with something that is not a summary."""


class SummarizationRequestFailed(SummarizationError):
    """The endpoint rejected the request with a non-retryable status."""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code


class SummarizationUnavailable(SummarizationError):
    """The model stayed unavailable for the whole retry budget."""

    retryable = True


class RateLimitExceeded(SummarizationError):
    """The endpoint kept rate limiting for the whole retry budget."""

    retryable = True


class OperationCancelled(VideoSummarizerError):
    """A chunk call was abandoned because a sibling chunk failed."""

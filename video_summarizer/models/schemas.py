"""
Data models for the video summarizer application.
"""
import time
from enum import Enum
from typing import Optional, Tuple
from pydantic import BaseModel, Field, field_validator
from video_summarizer.config import config


class TranscriptSegment(BaseModel):
    """A timed caption span as returned by the transcript service."""
    start: float
    duration: float = 0.0
    text: str

    model_config = {"frozen": True, "from_attributes": True}


class Transcript(BaseModel):
    """Ordered caption segments of one video."""
    video_id: str
    segments: Tuple[TranscriptSegment, ...] = ()
    language_code: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def text(self) -> str:
        """Segment texts joined in order, with whitespace collapsed to single spaces."""
        return " ".join(" ".join(segment.text for segment in self.segments).split())


class Chunk(BaseModel):
    """A bounded slice of transcript text submitted as one summarization request."""
    index: int = Field(ge=0)
    text: str

    model_config = {"frozen": True}


class SummaryResult(BaseModel):
    """Summary of a single chunk."""
    chunk_index: int = Field(ge=0)
    summary_text: str

    model_config = {"frozen": True}

    @field_validator("summary_text")
    def validate_summary_text(cls, v):
        if not v.strip():
            raise ValueError("summary_text must not be empty")
        return v


class FinalSummary(BaseModel):
    """Aggregated summary of a whole video."""
    video_id: str
    summary: str
    chunk_count: int
    second_pass: bool = False
    created_at: str = Field(default_factory=lambda: time.strftime("%Y-%m-%d %H:%M:%S"))

    model_config = {"frozen": True}


class SummaryConfig(BaseModel):
    """Configuration for chunking and summarization."""
    model: str = config.SUMMARY_MODEL
    max_chunk_chars: int = Field(default=config.MAX_CHUNK_CHARS, gt=0)
    max_length: int = config.SUMMARY_MAX_LENGTH
    min_length: int = config.SUMMARY_MIN_LENGTH
    do_sample: bool = False
    target_summary_chars: Optional[int] = config.TARGET_SUMMARY_CHARS
    max_workers: int = Field(default=config.MAX_WORKERS, ge=1)
    separator: str = " "
    timeout: float = config.REQUEST_TIMEOUT


class RetryPolicy(BaseModel):
    """Bounded exponential backoff for transient endpoint failures."""
    max_attempts: int = Field(default=config.MAX_ATTEMPTS, ge=1)
    base_delay: float = Field(default=config.BASE_DELAY, ge=0)
    max_delay: float = Field(default=config.MAX_DELAY, ge=0)
    rate_limit_delay: float = Field(default=config.RATE_LIMIT_DELAY, ge=0)

    model_config = {"frozen": True}

    def backoff(self, attempt: int) -> float:
        """Delay after the given (1-based) failed attempt."""
        return min(self.base_delay * (2 ** (attempt - 1)), self.max_delay)


class PipelineState(str, Enum):
    """States a pipeline run moves through."""
    IDLE = "idle"
    FETCHING = "fetching"
    CHUNKING = "chunking"
    SUMMARIZING = "summarizing"
    AGGREGATING = "aggregating"
    DONE = "done"
    FAILED = "failed"

"""
Tests for the transcript fetcher module.
"""

import pytest
import requests
from unittest.mock import MagicMock

from youtube_transcript_api import (
    AgeRestricted,
    CouldNotRetrieveTranscript,
    InvalidVideoId,
    NoTranscriptFound,
    TranscriptsDisabled,
    VideoUnavailable as YouTubeVideoUnavailable,
    VideoUnplayable,
)

from video_summarizer.core.transcript_fetcher import TranscriptFetcher
from video_summarizer.models.schemas import Transcript, TranscriptSegment
from video_summarizer.utils.errors import FetchFailed, NoCaptionsAvailable, VideoUnavailable


def snippet(text, start, duration=2.0):
    return MagicMock(text=text, start=start, duration=duration)


@pytest.fixture
def mock_api():
    """Fixture to create a mock transcript API."""
    api = MagicMock()
    api.fetch.return_value = [
        snippet("Welcome back to\nthe channel.", 0.0),
        snippet("Today we test   things.", 2.0),
        snippet("[Music]", 4.0),
    ]
    return api


def test_fetch_returns_ordered_segments(mock_api):
    fetcher = TranscriptFetcher(languages=["en", "de"], api=mock_api)

    transcript = fetcher.fetch("abc123def45")

    mock_api.fetch.assert_called_once_with("abc123def45", languages=("en", "de"))
    assert isinstance(transcript, Transcript)
    assert transcript.segments[0] == TranscriptSegment(start=0.0, duration=2.0, text="Welcome back to\nthe channel.")
    assert [segment.start for segment in transcript.segments] == [0.0, 2.0, 4.0]


def test_fetch_text_flattens_whitespace(mock_api):
    fetcher = TranscriptFetcher(api=mock_api)

    text = fetcher.fetch_text("abc123def45")

    assert text == "Welcome back to the channel. Today we test things. [Music]"


def test_zero_segments_means_no_captions(mock_api):
    mock_api.fetch.return_value = []
    fetcher = TranscriptFetcher(api=mock_api)

    with pytest.raises(NoCaptionsAvailable):
        fetcher.fetch("abc123def45")


@pytest.mark.parametrize("error,expected", [
    (TranscriptsDisabled("abc123def45"), NoCaptionsAvailable),
    (NoTranscriptFound("abc123def45", ["en"], MagicMock()), NoCaptionsAvailable),
    (YouTubeVideoUnavailable("abc123def45"), VideoUnavailable),
    (InvalidVideoId("abc123def45"), VideoUnavailable),
    (VideoUnplayable("abc123def45", "This video is private", []), VideoUnavailable),
    (VideoUnplayable("abc123def45", "The uploader has not made this video available in your country", []),
     VideoUnavailable),
    (AgeRestricted("abc123def45"), VideoUnavailable),
    (CouldNotRetrieveTranscript("abc123def45"), FetchFailed),
    (requests.ConnectionError("network down"), FetchFailed),
])
def test_errors_are_mapped(mock_api, error, expected):
    """Transcript service errors map onto the pipeline's error types."""
    mock_api.fetch.side_effect = error
    fetcher = TranscriptFetcher(api=mock_api)

    with pytest.raises(expected) as exc_info:
        fetcher.fetch("abc123def45")

    assert exc_info.value.video_id == "abc123def45"
    assert exc_info.value.__cause__ is error
    mock_api.fetch.assert_called_once()

"""
Module for fetching video transcripts from YouTube captions.
"""

from typing import Optional, Sequence

import requests
from youtube_transcript_api import (
    YouTubeTranscriptApi,
    AgeRestricted,
    CouldNotRetrieveTranscript,
    InvalidVideoId,
    NoTranscriptFound,
    TranscriptsDisabled,
    VideoUnavailable as YouTubeVideoUnavailable,
    VideoUnplayable,
)

from video_summarizer.models.schemas import Transcript, TranscriptSegment
from video_summarizer.utils.errors import FetchFailed, NoCaptionsAvailable, VideoUnavailable
from video_summarizer.utils.logger import logging
from video_summarizer.config import config


class TranscriptFetcher:
    """Class to retrieve the caption track of a video."""

    def __init__(self, languages: Optional[Sequence[str]] = None, api: Optional[YouTubeTranscriptApi] = None):
        """
        Initialize the fetcher.

        Args:
            languages: Caption languages in order of preference
            api: Transcript API instance (a default one is created if None)
        """
        self.languages = tuple(languages or config.TRANSCRIPT_LANGUAGES)
        self.api = api or YouTubeTranscriptApi()

    def fetch(self, video_id: str) -> Transcript:
        """
        Fetch the ordered caption segments of a video.

        Args:
            video_id: YouTube video ID

        Returns:
            Transcript with at least one segment

        Raises:
            NoCaptionsAvailable: The video has no transcript
            VideoUnavailable: The video cannot be accessed
            FetchFailed: The transcript service or transport failed
        """
        logging.info(f"Fetching transcript for video: {video_id}")

        try:
            fetched = self.api.fetch(video_id, languages=self.languages)
        except (TranscriptsDisabled, NoTranscriptFound) as e:
            raise NoCaptionsAvailable(f"No transcript available for video {video_id}", video_id) from e
        except (YouTubeVideoUnavailable, VideoUnplayable, AgeRestricted, InvalidVideoId) as e:
            raise VideoUnavailable(f"Video {video_id} is unavailable", video_id) from e
        except (CouldNotRetrieveTranscript, requests.RequestException) as e:
            raise FetchFailed(f"Failed to fetch transcript for video {video_id}: {e}", video_id) from e

        segments = tuple(
            TranscriptSegment(start=snippet.start, duration=snippet.duration, text=snippet.text)
            for snippet in fetched
        )
        if not segments:
            raise NoCaptionsAvailable(f"Transcript for video {video_id} has no segments", video_id)

        logging.info(f"Fetched {len(segments)} transcript segments")
        return Transcript(
            video_id=video_id,
            segments=segments,
            language_code=getattr(fetched, "language_code", None),
        )

    def fetch_text(self, video_id: str) -> str:
        """Fetch a transcript and return it as flattened plain text."""
        return self.fetch(video_id).text

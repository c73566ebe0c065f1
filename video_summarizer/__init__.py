"""
Video Transcript Summarizer.

Fetches the captions of a YouTube video, splits them into chunks the
summarization model accepts, summarizes each chunk through the Hugging Face
Inference API and stitches the partial summaries back together.
"""

from video_summarizer.config import config

__version__ = config.APP_VERSION

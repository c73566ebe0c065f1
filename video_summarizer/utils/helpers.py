"""
Helper utility functions for the video summarizer application.
"""

import json
import math
import re
from typing import Dict, Any, Optional

from video_summarizer.utils.errors import InvalidVideoURL

VIDEO_ID_PATTERN = re.compile(r"(?:v=|/)([0-9A-Za-z_-]{11}).*")


def extract_video_id(url: str) -> str:
    """
    Extract the 11-character video id from a YouTube URL.

    Accepts watch, short (youtu.be), embed and shorts URLs.

    Args:
        url: The URL as typed or pasted by the user

    Returns:
        The video id

    Raises:
        InvalidVideoURL: If no id can be found
    """
    match = VIDEO_ID_PATTERN.search(url.strip())
    if not match:
        raise InvalidVideoURL(f"Failed to extract video ID from URL: {url.strip()!r}")
    return match.group(1)


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Seconds from a Retry-After header, or None when absent, not numeric or not finite."""
    if value is None:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    if not math.isfinite(seconds):
        return None
    return max(seconds, 0.0)


def save_json(data: Dict[str, Any], filepath: str, pretty: bool = True) -> None:
    """
    Save data to a JSON file.

    Args:
        data: Data to save
        filepath: Path to save the file
        pretty: Whether to format the JSON for readability
    """
    with open(filepath, 'w', encoding='utf-8') as f:
        if pretty:
            json.dump(data, f, indent=2, ensure_ascii=False, default=str)
        else:
            json.dump(data, f, ensure_ascii=False, default=str)

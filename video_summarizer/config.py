"""
Configuration settings for the video summarizer application.
"""

import os
import json
from typing import Optional, Tuple
from pathlib import Path
from dotenv import load_dotenv

from video_summarizer.utils.errors import ConfigError


# Ensure environment variables are loaded
load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return int(value)


class Config:
    """Base configuration class."""

    # Application info
    APP_NAME = "Video Transcript Summarizer"
    APP_VERSION = "0.2.0"

    # Data directories
    BASE_DIR = Path.cwd()
    SUMMARIES_DIR = Path(os.getenv("SUMMARIES_DIR", BASE_DIR / "data" / "summaries"))

    # Credential file holding {"token": "..."}
    CONFIG_PATH = os.getenv("CONFIG_PATH", "config.json")

    # Summarization endpoint
    HF_API_BASE = os.getenv("HF_API_BASE", "https://api-inference.huggingface.co/models")
    SUMMARY_MODEL = os.getenv("SUMMARY_MODEL", "facebook/bart-large-cnn")
    REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "60"))

    # Chunking and generation parameters
    MAX_CHUNK_CHARS = int(os.getenv("MAX_CHUNK_CHARS", "1024"))
    SUMMARY_MAX_LENGTH = int(os.getenv("SUMMARY_MAX_LENGTH", "150"))
    SUMMARY_MIN_LENGTH = int(os.getenv("SUMMARY_MIN_LENGTH", "30"))
    TARGET_SUMMARY_CHARS = _optional_int("TARGET_SUMMARY_CHARS")
    MAX_WORKERS = int(os.getenv("MAX_WORKERS", "4"))

    # Retry policy
    MAX_ATTEMPTS = int(os.getenv("MAX_ATTEMPTS", "5"))
    BASE_DELAY = float(os.getenv("BASE_DELAY", "1.0"))
    MAX_DELAY = float(os.getenv("MAX_DELAY", "30.0"))
    RATE_LIMIT_DELAY = float(os.getenv("RATE_LIMIT_DELAY", "5.0"))

    # Transcript languages, in order of preference
    TRANSCRIPT_LANGUAGES: Tuple[str, ...] = tuple(
        lang.strip() for lang in os.getenv("TRANSCRIPT_LANGUAGES", "en").split(",") if lang.strip()
    )

    @classmethod
    def initialize(cls):
        """Initialize the application configuration."""
        cls.SUMMARIES_DIR.mkdir(parents=True, exist_ok=True)

    @classmethod
    def api_url(cls, model: Optional[str] = None) -> str:
        """Inference endpoint for a model (defaults to SUMMARY_MODEL)."""
        return f"{cls.HF_API_BASE.rstrip('/')}/{model or cls.SUMMARY_MODEL}"


class DevelopmentConfig(Config):
    """Development configuration."""

    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    """Production configuration."""

    LOG_LEVEL = "INFO"


def get_config():
    """Get the appropriate configuration based on environment."""
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env == "production":
        return ProductionConfig
    else:
        return DevelopmentConfig


def load_api_token(path: Optional[str] = None) -> str:
    """
    Read the inference API token from the credential file.

    Args:
        path: JSON file containing a single "token" field
              (defaults to Config.CONFIG_PATH)

    Returns:
        The bearer token

    Raises:
        ConfigError: If the file is missing, unreadable or has no token
    """
    path = path or config.CONFIG_PATH
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigError(f"Failed to open config file at {path}")
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}")

    token = data.get("token") if isinstance(data, dict) else None
    if not isinstance(token, str) or not token.strip():
        raise ConfigError(f"Config file {path} has no \"token\" field")
    return token.strip()


# Create a config instance
config = get_config()

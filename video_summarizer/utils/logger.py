import os
import sys
import logging

from video_summarizer.config import config


def resolve_log_level(selected_config=config) -> str:
    """LOG_LEVEL from the environment, else the level of the selected config class."""
    return os.getenv("LOG_LEVEL", selected_config.LOG_LEVEL).upper()


logging_str = "[%(asctime)s] {%(pathname)s:%(lineno)d} %(levelname)s - %(message)s"
logging_dir = os.getenv("LOG_DIR", os.path.join(os.getcwd(), "logs"))
loging_path = os.path.join(logging_dir, "videosummarizer.log")
if not os.path.exists(logging_dir):
    os.makedirs(logging_dir)

# stdout carries the summary itself, so log records go to stderr
logging.basicConfig(
    level=resolve_log_level(),
    format=logging_str,
    handlers=[
        logging.FileHandler(loging_path),
        logging.StreamHandler(sys.stderr)
    ]
)

logging = logging.getLogger('videosummarizer')
logging.setLevel(resolve_log_level())

"""
Main entry point for the Video Transcript Summarizer.
"""

import sys
import argparse
from pathlib import Path
from typing import List, Optional

from video_summarizer.config import config, load_api_token
from video_summarizer.core.pipeline import SummaryPipeline
from video_summarizer.core.summarizer import HuggingFaceSummarizer
from video_summarizer.core.transcript_fetcher import TranscriptFetcher
from video_summarizer.models.schemas import FinalSummary, RetryPolicy, SummaryConfig
from video_summarizer.utils.errors import RateLimitExceeded, VideoSummarizerError
from video_summarizer.utils.helpers import extract_video_id, save_json
from video_summarizer.utils.logger import logging

EXIT_OK = 0
EXIT_FAILURE = 1
# the API quota ran out; retry once the rate limit window has passed
EXIT_RATE_LIMITED = 3
# sysexits.h EX_TEMPFAIL: a later retry may succeed
EXIT_RETRY_LATER = 75


def save_summary(summary: FinalSummary, output_file: Optional[str] = None) -> Path:
    """Save the summary to a JSON file."""
    if output_file is None:
        config.initialize()
        output_file = Path(config.SUMMARIES_DIR) / f"{summary.video_id or 'unknown'}_summary.json"
    else:
        output_file = Path(output_file)

    save_json(summary.model_dump(), str(output_file))
    logging.info(f"Summary saved to: {output_file}")
    return output_file


def summarize_youtube_video(
    url: str,
    api_token: str,
    summary_config: Optional[SummaryConfig] = None,
    retry_policy: Optional[RetryPolicy] = None,
    output_file: Optional[str] = None,
) -> FinalSummary:
    """
    Process a YouTube video: fetch its transcript and summarize it.

    Args:
        url: YouTube video URL
        api_token: Inference API token
        summary_config: Chunking and model settings
        retry_policy: Retry budget for the summarization endpoint
        output_file: Optional file path to save the summary

    Returns:
        FinalSummary object
    """
    video_id = extract_video_id(url)
    logging.info(f"Extracted video ID: {video_id}")

    summary_config = summary_config or SummaryConfig()
    summarizer = HuggingFaceSummarizer(api_token, summary_config, retry_policy)
    pipeline = SummaryPipeline(TranscriptFetcher(), summarizer, summary_config=summary_config)

    summary = pipeline.run(video_id)

    if output_file:
        save_summary(summary, output_file)

    return summary


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"{config.APP_NAME}: summarize a YouTube video from its captions")
    parser.add_argument("url", nargs="?", help="YouTube video URL (prompted for if omitted)")
    parser.add_argument("--config", default=config.CONFIG_PATH,
                        help="JSON file holding the inference API token")
    parser.add_argument("--model", default=config.SUMMARY_MODEL,
                        help="Hugging Face summarization model")
    parser.add_argument("--max-chunk-chars", type=_positive_int, default=config.MAX_CHUNK_CHARS,
                        help="Maximum characters sent per summarization request")
    parser.add_argument("--workers", type=_positive_int, default=config.MAX_WORKERS,
                        help="Chunks summarized concurrently")
    parser.add_argument("--target-chars", type=_positive_int, default=config.TARGET_SUMMARY_CHARS,
                        help="Run a second summarization pass when the result is longer than this")
    parser.add_argument("--output", help="Output file path for the summary JSON")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main function to run the application from command line."""
    args = build_parser().parse_args(argv)

    try:
        api_token = load_api_token(args.config)

        url = args.url
        if not url:
            print("Enter YouTube video URL: ", end="", flush=True)
            url = sys.stdin.readline()

        summary_config = SummaryConfig(
            model=args.model,
            max_chunk_chars=args.max_chunk_chars,
            max_workers=args.workers,
            target_summary_chars=args.target_chars,
        )
        summary = summarize_youtube_video(url, api_token, summary_config, output_file=args.output)
    except VideoSummarizerError as e:
        logging.error(f"{type(e).__name__}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        if isinstance(e, RateLimitExceeded):
            print("The summarization API rate limit was reached; try again later.", file=sys.stderr)
            return EXIT_RATE_LIMITED
        if e.retryable:
            print("The summarization service is busy; try again later.", file=sys.stderr)
            return EXIT_RETRY_LATER
        return EXIT_FAILURE

    print("\nVideo Summary:")
    print("-" * 50)
    print(summary.summary)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

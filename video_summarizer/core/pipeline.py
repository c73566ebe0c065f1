"""
Pipeline orchestrating transcript fetching, chunking, summarization and aggregation.
"""

import threading
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, Dict, List, Optional, Tuple

from video_summarizer.core import chunker
from video_summarizer.core.aggregator import Aggregator
from video_summarizer.core.summarizer import HuggingFaceSummarizer
from video_summarizer.core.transcript_fetcher import TranscriptFetcher
from video_summarizer.models.schemas import (
    Chunk,
    FinalSummary,
    PipelineState,
    SummaryConfig,
    SummaryResult,
)
from video_summarizer.utils.errors import OperationCancelled
from video_summarizer.utils.logger import logging

ALLOWED_TRANSITIONS: Dict[PipelineState, Tuple[PipelineState, ...]] = {
    PipelineState.IDLE: (PipelineState.FETCHING,),
    PipelineState.FETCHING: (PipelineState.CHUNKING, PipelineState.FAILED),
    PipelineState.CHUNKING: (PipelineState.SUMMARIZING, PipelineState.FAILED),
    PipelineState.SUMMARIZING: (PipelineState.AGGREGATING, PipelineState.FAILED),
    PipelineState.AGGREGATING: (PipelineState.DONE, PipelineState.FAILED),
    PipelineState.DONE: (),
    PipelineState.FAILED: (),
}


class PipelineRun:
    """State of a single summarization run."""

    def __init__(self, pipeline: "SummaryPipeline", video_id: str):
        self.pipeline = pipeline
        self.video_id = video_id
        self.state = PipelineState.IDLE
        self.history: List[PipelineState] = [PipelineState.IDLE]
        self.error: Optional[Exception] = None
        self.result: Optional[FinalSummary] = None

    def _transition(self, state: PipelineState) -> None:
        if state not in ALLOWED_TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid pipeline transition {self.state.value} -> {state.value}")
        logging.debug(f"Pipeline {self.video_id}: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def execute(self) -> FinalSummary:
        """
        Drive the run to completion.

        Returns:
            The final summary

        Raises:
            The component error that stopped the run, unchanged.
        """
        if self.state is not PipelineState.IDLE:
            raise RuntimeError("A pipeline run can only be executed once")

        pipeline = self.pipeline
        self._transition(PipelineState.FETCHING)
        try:
            text = pipeline.fetcher.fetch_text(self.video_id)

            self._transition(PipelineState.CHUNKING)
            chunks = pipeline.split(text, pipeline.summary_config.max_chunk_chars)
            logging.info(f"Split transcript ({len(text)} chars) into {len(chunks)} chunks")

            self._transition(PipelineState.SUMMARIZING)
            results = pipeline.summarize_chunks(chunks)

            self._transition(PipelineState.AGGREGATING)
            self.result = pipeline.aggregator.aggregate(results, video_id=self.video_id)
        except Exception as e:
            self.error = e
            self._transition(PipelineState.FAILED)
            logging.error(f"Pipeline for video {self.video_id} failed: {type(e).__name__}: {e}")
            raise

        self._transition(PipelineState.DONE)
        logging.info(f"Summary for video {self.video_id} complete ({len(self.result.summary)} chars)")
        return self.result


class SummaryPipeline:
    """Sequences fetcher, chunker, summarizer and aggregator for one video at a time."""

    def __init__(
        self,
        fetcher: TranscriptFetcher,
        summarizer: HuggingFaceSummarizer,
        aggregator: Optional[Aggregator] = None,
        summary_config: Optional[SummaryConfig] = None,
        split: Callable[[str, int], List[Chunk]] = chunker.split,
    ):
        self.fetcher = fetcher
        self.summarizer = summarizer
        self.summary_config = summary_config or summarizer.summary_config
        self.aggregator = aggregator or Aggregator(self.summary_config, summarizer)
        self.split = split

    def start(self, video_id: str) -> PipelineRun:
        """Create a fresh run for a video without executing it."""
        return PipelineRun(self, video_id)

    def run(self, video_id: str) -> FinalSummary:
        """Summarize a video end to end."""
        return self.start(video_id).execute()

    def summarize_chunks(self, chunks: List[Chunk]) -> List[SummaryResult]:
        """
        Summarize all chunks concurrently, failing fast on the first error.

        Args:
            chunks: Chunks to summarize

        Returns:
            One SummaryResult per chunk, ordered by chunk index

        Raises:
            The error of the lowest-index chunk that failed; pending and
            in-flight siblings are cancelled and their results discarded.
        """
        cancel_event = threading.Event()
        workers = min(self.summary_config.max_workers, len(chunks)) or 1

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="summarize") as executor:
            futures = {
                executor.submit(self.summarizer.summarize, chunk, cancel_event): chunk.index
                for chunk in chunks
            }
            done, not_done = wait(futures, return_when=FIRST_EXCEPTION)

            if any(future.exception() is not None for future in done):
                cancel_event.set()
                for future in not_done:
                    future.cancel()
                wait(not_done)

                failures = sorted(
                    (futures[future], future.exception())
                    for future in futures
                    if not future.cancelled()
                    and future.exception() is not None
                    and not isinstance(future.exception(), OperationCancelled)
                )
                chunk_index, error = failures[0]
                logging.error(f"Chunk {chunk_index} failed, discarding {len(chunks)} chunk summaries")
                raise error

        return sorted((future.result() for future in futures), key=lambda result: result.chunk_index)

"""
Module for combining per-chunk summaries into the final summary.
"""

from typing import Iterable, Optional

from video_summarizer.core.summarizer import HuggingFaceSummarizer
from video_summarizer.models.schemas import Chunk, FinalSummary, SummaryConfig, SummaryResult
from video_summarizer.utils.logger import logging


class Aggregator:
    """Reassembles chunk summaries in transcript order."""

    def __init__(
        self,
        summary_config: Optional[SummaryConfig] = None,
        summarizer: Optional[HuggingFaceSummarizer] = None,
    ):
        """
        Initialize the aggregator.

        Args:
            summary_config: Separator, target length and chunk size limit
            summarizer: Client for the optional second pass (disabled if None)
        """
        self.summary_config = summary_config or SummaryConfig()
        self.summarizer = summarizer

    def combine(self, results: Iterable[SummaryResult]) -> str:
        """Join summaries ordered by chunk index."""
        ordered = sorted(results, key=lambda result: result.chunk_index)
        indices = [result.chunk_index for result in ordered]
        if len(set(indices)) != len(indices):
            raise ValueError(f"Duplicate chunk indices in summary results: {indices}")
        return self.summary_config.separator.join(result.summary_text.strip() for result in ordered)

    def _needs_second_pass(self, combined: str, result_count: int) -> bool:
        target = self.summary_config.target_summary_chars
        if self.summarizer is None or target is None or result_count < 2:
            return False
        if len(combined) <= target:
            return False
        if len(combined) > self.summary_config.max_chunk_chars:
            logging.warning(
                f"Combined summary ({len(combined)} chars) exceeds the model input limit "
                f"of {self.summary_config.max_chunk_chars}; skipping second pass"
            )
            return False
        return True

    def aggregate(self, results: Iterable[SummaryResult], video_id: str = "") -> FinalSummary:
        """
        Build the final summary.

        Args:
            results: Chunk summaries, in any order
            video_id: Video the summaries belong to

        Returns:
            FinalSummary with summaries in chunk order
        """
        results = list(results)
        combined = self.combine(results)

        if self._needs_second_pass(combined, len(results)):
            logging.info(f"Combined summary is {len(combined)} chars, running second pass")
            second = self.summarizer.summarize(Chunk(index=0, text=combined))
            return FinalSummary(
                video_id=video_id,
                summary=second.summary_text,
                chunk_count=len(results),
                second_pass=True,
            )

        return FinalSummary(video_id=video_id, summary=combined, chunk_count=len(results))

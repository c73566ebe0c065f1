"""Splitting transcript text into chunks the summarization model accepts."""

from __future__ import annotations

from video_summarizer.models.schemas import Chunk
from video_summarizer.utils.errors import EmptyTranscript

SENTENCE_TERMINATORS = ".?!"


def _skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def _find_cut(text: str, start: int, max_chunk_chars: int) -> int:
    """Return the exclusive end of the chunk starting at *start*.

    Prefers the last sentence end within the budget, then the last word
    boundary, then a hard cut.
    """
    limit = start + max_chunk_chars
    # a terminator at limit - 1 still qualifies when the next char is whitespace
    word_cut = 0
    for end in range(min(limit, len(text) - 1), start, -1):
        if not text[end].isspace():
            continue
        if text[end - 1] in SENTENCE_TERMINATORS:
            return end
        if not word_cut and not text[end - 1].isspace():
            word_cut = end
    if word_cut:
        return word_cut
    return limit


def split(text: str, max_chunk_chars: int) -> list[Chunk]:
    """Split transcript text into ordered chunks of at most *max_chunk_chars*.

    Whitespace at the split points is dropped; concatenating the chunks with
    single spaces reproduces the text up to that whitespace.

    Args:
        text: Flattened transcript text.
        max_chunk_chars: Maximum number of characters per chunk.

    Returns:
        List of :class:`Chunk` with contiguous indices starting at 0.

    Raises:
        EmptyTranscript: If *text* has no non-whitespace content.
        ValueError: If *max_chunk_chars* is not positive.
    """
    if max_chunk_chars <= 0:
        raise ValueError("max_chunk_chars must be positive")
    if not text or not text.strip():
        raise EmptyTranscript("Transcript text is empty")

    chunks: list[Chunk] = []
    pos = _skip_whitespace(text, 0)

    while pos < len(text):
        remaining = text[pos:].rstrip()
        if len(remaining) <= max_chunk_chars:
            chunks.append(Chunk(index=len(chunks), text=remaining))
            break

        end = _find_cut(text, pos, max_chunk_chars)
        chunks.append(Chunk(index=len(chunks), text=text[pos:end].rstrip()))
        pos = _skip_whitespace(text, end)

    return chunks

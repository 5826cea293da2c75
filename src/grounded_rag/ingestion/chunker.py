"""Sentence-aware text chunking with character overlap."""

from __future__ import annotations

import logging
import re

from grounded_rag.retrieval.models import Chunk

logger = logging.getLogger(__name__)

# A sentence ends after Western punctuation followed by whitespace, or after
# East-Asian punctuation (which is usually not followed by a space at all).
# Trailing whitespace stays attached to the sentence it closes.
_SENTENCE_END = re.compile(r"(?<=[。？！.!?])\s+|(?<=[。？！])(?![。？！\s])")


def split_sentences(text: str) -> list[str]:
    """Split *text* into sentence-like units.

    Joining the returned list gives back *text* exactly.
    """
    sentences: list[str] = []
    start = 0
    for match in _SENTENCE_END.finditer(text):
        end = match.end()
        if end > start:
            sentences.append(text[start:end])
            start = end
    if start < len(text):
        sentences.append(text[start:])
    return sentences


def _overlap_tail(sealed: str, overlap: int, room: int) -> str:
    """Last characters of *sealed* to carry into the next chunk.

    Clamped to the sealed chunk's length and to the *room* left next to
    the sentence that triggered the seal.
    """
    keep = max(0, min(overlap, len(sealed), room))
    return sealed[len(sealed) - keep :] if keep else ""


def chunk_text(
    text: str,
    max_size: int = 300,
    overlap: int = 50,
    *,
    source_key: str = "",
) -> list[Chunk]:
    """Split *text* into overlapping chunks of at most *max_size* characters.

    Sentences are accumulated greedily.  When the next sentence would push
    the buffer past *max_size*, the buffer is sealed as a chunk and a new
    one starts with the last *overlap* characters of the sealed chunk
    followed by that sentence.  When the sealed text ended in whitespace
    (a Western sentence end) a single space goes between the two.

    A single sentence longer than *max_size* is never cut: it becomes one
    oversized chunk on its own, and a warning is logged.

    Parameters
    ----------
    text:
        Raw document text.
    max_size:
        Maximum number of characters per chunk.
    overlap:
        Number of trailing characters repeated at the start of the next chunk.
    source_key:
        Storage key of the document, copied onto every chunk.

    Returns
    -------
    list[Chunk]
        Chunks with dense indices starting at 0; empty for blank input.
    """
    if max_size <= 0:
        raise ValueError(f"max_size must be > 0, got {max_size}")
    if overlap < 0 or overlap >= max_size:
        raise ValueError(f"overlap ({overlap}) must be in [0, max_size={max_size})")

    chunks: list[Chunk] = []

    def seal(buffer: str) -> str:
        content = buffer.strip()
        if not content:
            return ""
        if len(content) > max_size:
            logger.warning(
                "%s: sentence of %d chars exceeds max_size=%d; kept as one chunk",
                source_key or "<text>",
                len(content),
                max_size,
            )
        chunks.append(Chunk(text=content, source_key=source_key, index=len(chunks)))
        return content

    if not text or not text.strip():
        return chunks

    buffer = ""
    for sentence in split_sentences(text):
        if buffer and len(buffer) + len(sentence) > max_size:
            sealed = seal(buffer)
            # Whitespace that followed the sealed text separates tail and sentence.
            gap = " " if buffer[-1].isspace() else ""
            tail = _overlap_tail(sealed, overlap, max_size - len(sentence) - len(gap))
            buffer = (tail + gap if tail else "") + sentence
        else:
            buffer += sentence

    seal(buffer)
    return chunks

"""Text segmenter - splits long text into chunks that fit one synthesis call."""

import logging
import re

from text2podcast.errors import ErrorKind, SegmentationError
from text2podcast.models import DEFAULT_CEILING, MIN_CHUNK_CHARS, TextChunk

logger = logging.getLogger(__name__)

_PARAGRAPH_RE = re.compile(r"\n\s*\n")
_SENTENCE_RE = re.compile(r"(?<=[.!?])\s+")
# Break after commas/semicolons, or before a coordinating conjunction
_CLAUSE_RE = re.compile(r"(?<=[,;])\s+|\s+(?=(?:and|or|but)\s)", re.IGNORECASE)


def require_text(text: str) -> str:
    """Return the text unchanged, or raise if there is nothing to speak."""
    if not text or not text.strip():
        raise SegmentationError("Empty text: nothing to convert", kind=ErrorKind.EMPTY_TEXT)
    return text


def segment(
    text: str,
    ceiling: int = DEFAULT_CEILING,
    min_size: int = MIN_CHUNK_CHARS,
) -> list[TextChunk]:
    """Split text into ordered, 1-indexed chunks no longer than ``ceiling``.

    Paragraphs that fit are kept whole; oversized ones are broken into
    sentences, then clauses, then words. Small pieces are merged into a
    running buffer, which is closed at a paragraph end once it reaches
    ``min_size`` or earlier when the next piece would overflow it.

    Joining the chunk texts with single spaces gives back the input with
    whitespace collapsed. A ``min_size`` above the ceiling is clamped to it.
    """
    if ceiling < 1:
        raise SegmentationError(
            f"Chunk ceiling must be positive, got {ceiling}",
            kind=ErrorKind.INVALID_CEILING,
        )
    min_size = min(min_size, ceiling)

    texts: list[str] = []
    buffer = ""

    for paragraph in _paragraphs(text):
        for piece in _split_to_fit(paragraph, ceiling):
            if buffer and len(buffer) + 1 + len(piece) > ceiling:
                texts.append(buffer)
                buffer = piece
            else:
                buffer = f"{buffer} {piece}" if buffer else piece

        if len(buffer) >= min_size:
            texts.append(buffer)
            buffer = ""

    if buffer:
        texts.append(buffer)

    chunks = [TextChunk(index=i, text=t) for i, t in enumerate(texts, start=1)]
    logger.debug(
        "Segmented %d chars into %d chunks (ceiling %d)",
        len(text or ""), len(chunks), ceiling,
    )
    return chunks


def _paragraphs(text: str) -> list[str]:
    """Split on blank lines and collapse whitespace inside each paragraph."""
    paragraphs = []
    for raw in _PARAGRAPH_RE.split(text or ""):
        normalized = " ".join(raw.split())
        if normalized:
            paragraphs.append(normalized)
    return paragraphs


def _split_to_fit(paragraph: str, ceiling: int) -> list[str]:
    """Break a paragraph into pieces that are each at most ``ceiling`` chars."""
    if len(paragraph) <= ceiling:
        return [paragraph]

    pieces = []
    for sentence in _SENTENCE_RE.split(paragraph):
        if len(sentence) <= ceiling:
            pieces.append(sentence)
            continue
        for clause in _CLAUSE_RE.split(sentence):
            if not clause:
                continue
            if len(clause) <= ceiling:
                pieces.append(clause)
            else:
                pieces.extend(_split_words(clause, ceiling))
    return pieces


def _split_words(clause: str, ceiling: int) -> list[str]:
    """Greedy word accumulation that never breaks a word.

    A single word longer than the ceiling has no other split point and is
    cut into ceiling-sized slices.
    """
    pieces = []
    current = ""
    for word in clause.split(" "):
        if len(word) > ceiling:
            if current:
                pieces.append(current)
                current = ""
            pieces.extend(word[i:i + ceiling] for i in range(0, len(word), ceiling))
            continue
        if current and len(current) + 1 + len(word) > ceiling:
            pieces.append(current)
            current = word
        else:
            current = f"{current} {word}" if current else word
    if current:
        pieces.append(current)
    return pieces

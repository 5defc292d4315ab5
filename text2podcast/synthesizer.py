"""Synthesizer - turns one text chunk into one audio segment."""

import logging

from text2podcast.errors import ErrorKind, SynthesisError
from text2podcast.models import ENGINE_HARD_LIMIT, AudioSegment, TextChunk, TTSConfig
from text2podcast.tts.base import TTSEngine

logger = logging.getLogger(__name__)


def looks_like_mp3(data: bytes) -> bool:
    """True if data starts with an ID3 tag or an MPEG audio frame sync."""
    if data[:3] == b"ID3":
        return True
    return len(data) >= 2 and data[0] == 0xFF and (data[1] & 0xE0) == 0xE0


class Synthesizer:
    """Stateless wrapper around a TTS engine; one request per chunk, no retries."""

    def __init__(self, engine: TTSEngine, config: TTSConfig, hard_limit: int | None = None):
        self.engine = engine
        self.config = config
        self.hard_limit = hard_limit or min(engine.max_input_chars, ENGINE_HARD_LIMIT)

    def synthesize(self, chunk: TextChunk) -> AudioSegment:
        if not chunk.text.strip():
            raise SynthesisError(
                f"Chunk {chunk.index} is empty", kind=ErrorKind.EMPTY_INPUT,
            )
        if chunk.length > self.hard_limit:
            raise SynthesisError(
                f"Chunk {chunk.index} has {chunk.length} chars, "
                f"engine limit is {self.hard_limit}",
                kind=ErrorKind.INPUT_TOO_LONG,
            )

        logger.debug("Synthesizing chunk %d (%d chars)", chunk.index, chunk.length)
        try:
            data = self.engine.synthesize(chunk.text, self.config)
        except SynthesisError:
            raise
        except Exception as e:
            raise SynthesisError(
                f"{self.engine.name} failed on chunk {chunk.index}: {e}",
                kind=ErrorKind.ENGINE,
            ) from e

        if not isinstance(data, (bytes, bytearray)) or not data:
            raise SynthesisError(
                f"Engine returned no audio for chunk {chunk.index}",
                kind=ErrorKind.MALFORMED_AUDIO,
            )
        data = bytes(data)
        if self.engine.output_format == "mp3" and not looks_like_mp3(data):
            raise SynthesisError(
                f"Engine returned data that is not MP3 for chunk {chunk.index}",
                kind=ErrorKind.MALFORMED_AUDIO,
            )

        return AudioSegment(index=chunk.index, data=data, format=self.engine.output_format)

"""Abstract base class for speech synthesis engines."""

from abc import ABC, abstractmethod
from typing import Optional

from text2podcast.models import ENGINE_HARD_LIMIT, TTSConfig


class TTSEngine(ABC):
    """Abstract base class that all TTS engines must implement."""

    #: Longest input, in characters, a single request accepts.
    max_input_chars: int = ENGINE_HARD_LIMIT

    @abstractmethod
    def initialize(self) -> None:
        """Check that the engine can be used (credentials, optional deps).

        Raises:
            RuntimeError: If the engine is unavailable.
        """
        ...

    @abstractmethod
    def synthesize(self, text: str, config: TTSConfig) -> bytes:
        """Synthesize text and return the encoded audio bytes.

        Exactly one outbound request is made per call.

        Raises:
            SynthesisError: With a kind describing why the request failed.
        """
        ...

    @abstractmethod
    def list_voices(self, language: Optional[str] = None) -> list[dict]:
        """Return available voices, optionally filtered by language.

        Each dict contains at least 'name' and 'language' keys.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable engine name."""
        ...

    @property
    def output_format(self) -> str:
        """Codec of the bytes returned by synthesize()."""
        return "mp3"

"""OpenAI TTS engine - hosted speech synthesis through the OpenAI audio API."""

import logging
import os
from typing import Optional

from text2podcast.errors import ErrorKind, SynthesisError
from text2podcast.models import TTSConfig
from text2podcast.tts import register_engine
from text2podcast.tts.base import TTSEngine

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "tts-1-hd"
DEFAULT_VOICE = "alloy"
VALID_MODELS = ("tts-1", "tts-1-hd", "gpt-4o-mini-tts")
VOICES = ("alloy", "echo", "fable", "onyx", "nova", "shimmer")


@register_engine("openai")
class OpenAITTSEngine(TTSEngine):
    """TTS engine backed by OpenAI's ``audio.speech`` endpoint."""

    max_input_chars = 4096

    def __init__(self, client=None):
        self._client = client
        self.model = os.getenv("OPENAI_TTS_MODEL", DEFAULT_MODEL)
        self.default_voice = os.getenv("OPENAI_TTS_VOICE", DEFAULT_VOICE)

        if self.model not in VALID_MODELS:
            logger.warning(
                "Invalid OpenAI TTS model '%s', using '%s'. Valid models: %s",
                self.model, DEFAULT_MODEL, ", ".join(VALID_MODELS),
            )
            self.model = DEFAULT_MODEL

    def initialize(self) -> None:
        if self._client is not None:
            return
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise RuntimeError("OPENAI_API_KEY environment variable is not set")

        import openai
        self._client = openai.OpenAI(api_key=api_key)

    def synthesize(self, text: str, config: TTSConfig) -> bytes:
        import openai

        if self._client is None:
            self.initialize()

        try:
            response = self._client.audio.speech.create(
                model=config.model or self.model,
                voice=config.voice or self.default_voice,
                input=text,
                response_format=config.response_format,
                speed=config.speed,
            )
            return response.content
        except openai.RateLimitError as e:
            raise SynthesisError(
                f"OpenAI TTS rate limit or quota exceeded: {e}", kind=ErrorKind.RATE_LIMIT,
            ) from e
        except openai.APIConnectionError as e:
            raise SynthesisError(
                f"OpenAI TTS connection failed: {e}", kind=ErrorKind.NETWORK,
            ) from e
        except openai.BadRequestError as e:
            kind = ErrorKind.INPUT_TOO_LONG if e.code == "string_too_long" else ErrorKind.ENGINE
            raise SynthesisError(
                f"OpenAI TTS rejected the request ({len(text)} chars): {e}", kind=kind,
            ) from e
        except openai.APIStatusError as e:
            kind = ErrorKind.NETWORK if e.status_code >= 500 else ErrorKind.ENGINE
            raise SynthesisError(f"OpenAI TTS failed: {e}", kind=kind) from e

    def list_voices(self, language: Optional[str] = None) -> list[dict]:
        # OpenAI voices are multilingual
        return [{"name": v, "language": language or "multi"} for v in VOICES]

    @property
    def name(self) -> str:
        return "OpenAI TTS"

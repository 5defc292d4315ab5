"""Edge TTS engine - free online neural TTS via Microsoft Edge."""

import asyncio
import logging
from threading import Thread
from typing import Optional

from text2podcast.errors import ErrorKind, SynthesisError
from text2podcast.models import TTSConfig
from text2podcast.tts import register_engine
from text2podcast.tts.base import TTSEngine

logger = logging.getLogger(__name__)

DEFAULT_VOICE = "en-US-AriaNeural"


def _run_async(coro):
    """Run a coroutine to completion, even if an event loop is already running.

    From a sync context asyncio.run() is used directly. Inside a running
    loop the coroutine gets a fresh loop on a separate thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    result = None
    exception = None

    def _target():
        nonlocal result, exception
        try:
            result = asyncio.run(coro)
        except Exception as e:
            exception = e

    t = Thread(target=_target)
    t.start()
    t.join()

    if exception:
        raise exception
    return result


@register_engine("edge")
class EdgeTTSEngine(TTSEngine):
    """TTS engine using Microsoft Edge's free online neural voices."""

    def initialize(self) -> None:
        import edge_tts  # noqa: F401

    def synthesize(self, text: str, config: TTSConfig) -> bytes:
        import edge_tts
        from edge_tts.exceptions import NoAudioReceived, WebSocketError

        try:
            return _run_async(self._synthesize_async(text, config))
        except NoAudioReceived as e:
            raise SynthesisError(
                f"Edge TTS returned no audio: {e}", kind=ErrorKind.MALFORMED_AUDIO,
            ) from e
        except (WebSocketError, OSError, asyncio.TimeoutError) as e:
            raise SynthesisError(
                f"Edge TTS connection failed: {e}", kind=ErrorKind.NETWORK,
            ) from e
        except edge_tts.exceptions.EdgeTTSException as e:
            raise SynthesisError(
                f"Edge TTS failed: {e}", kind=ErrorKind.ENGINE,
            ) from e

    async def _synthesize_async(self, text: str, config: TTSConfig) -> bytes:
        import edge_tts

        voice = config.voice or DEFAULT_VOICE
        communicate = edge_tts.Communicate(text, voice, rate=self._speed_to_rate(config.speed))

        audio = bytearray()
        async for message in communicate.stream():
            if message["type"] == "audio":
                audio.extend(message["data"])
        return bytes(audio)

    def list_voices(self, language: Optional[str] = None) -> list[dict]:
        return _run_async(self._list_voices_async(language))

    async def _list_voices_async(self, language: Optional[str] = None) -> list[dict]:
        import edge_tts

        voices = await edge_tts.list_voices()
        result = []
        for v in voices:
            locale = v.get("Locale", "")
            if language and not locale.lower().startswith(language.lower()):
                continue
            result.append({
                "name": v["ShortName"],
                "language": locale,
                "gender": v.get("Gender", ""),
            })
        return result

    @property
    def name(self) -> str:
        return "Edge TTS"

    @staticmethod
    def _speed_to_rate(speed: float) -> str:
        """Convert a speed multiplier (e.g. 1.2) to an Edge rate string (e.g. '+20%')."""
        percent = round((speed - 1.0) * 100)
        if percent >= 0:
            return f"+{percent}%"
        return f"{percent}%"

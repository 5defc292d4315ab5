"""Shared fakes: an MP3-ish engine plus file-content driven ffmpeg/ffprobe doubles.

Fake audio files are plain bytes starting with ``ID3``. The fake probe reads
``bitrate=<kbps>`` and ``sr=<hz>`` markers from the content (last one wins,
defaults 128 kbps / 44100 Hz) and reports tags when the content holds
``TAGS``.
"""

import re
from pathlib import Path
from typing import Optional
from unittest.mock import patch

import pytest

from text2podcast.errors import ErrorKind, ValidationError
from text2podcast.models import TTSConfig
from text2podcast.tts.base import TTSEngine


class FakeEngine(TTSEngine):
    """Returns ``ID3`` + a marker for each request; can be scripted to fail."""

    def __init__(self, failures=None, payload: bytes = b""):
        self.calls: list[str] = []
        self._failures = list(failures or [])
        self._payload = payload

    def initialize(self) -> None:
        pass

    def synthesize(self, text: str, config: TTSConfig) -> bytes:
        self.calls.append(text)
        if self._failures:
            failure = self._failures.pop(0)
            if failure is not None:
                raise failure
        return b"ID3" + f"[seg{len(self.calls)}]".encode() + self._payload

    def list_voices(self, language: Optional[str] = None) -> list[dict]:
        return [{"name": "fake", "language": "en"}]

    @property
    def name(self) -> str:
        return "Fake TTS"


class FakeFFmpeg:
    """Stands in for run_ffmpeg: concat joins files, re-encode appends markers."""

    def __init__(self):
        self.calls: list[list[str]] = []
        self.fail = False

    def __call__(self, args, error_cls, kind=ErrorKind.FFMPEG_FAILED):
        self.calls.append(list(args))
        output = Path(args[-1])
        if self.fail:
            output.write_bytes(b"partial")
            raise error_cls("ffmpeg exited with code 1: boom", kind=kind)

        source = Path(args[args.index("-i") + 1])
        if "concat" in args:
            data = b"".join(
                Path(line[len("file '"):-1]).read_bytes()
                for line in source.read_text().splitlines()
            )
            output.write_bytes(b"TAGS" + data)
        else:
            data = source.read_bytes()
            if "-b:a" in args:
                data += b"\nbitrate=128"
            if "-ar" in args:
                data += f"\nsr={args[args.index('-ar') + 1]}".encode()
            output.write_bytes(data)


def fake_probe_media(path):
    content = Path(path).read_bytes()
    if content.startswith(b"CORRUPT"):
        raise ValidationError("ffprobe could not read file", kind=ErrorKind.PROBE_FAILED)
    if content.startswith(b"NOAUDIO"):
        return {"format": {"format_name": "mp3"}, "streams": [{"codec_type": "video"}]}

    bitrates = re.findall(rb"bitrate=(\d+)", content)
    rates = re.findall(rb"sr=(\d+)", content)
    fmt = {
        "format_name": "mp3",
        "bit_rate": str(int(bitrates[-1] if bitrates else 128) * 1000),
        "duration": "12.5",
    }
    if b"TAGS" in content:
        fmt["tags"] = {"title": "Episode"}
    return {
        "format": fmt,
        "streams": [{
            "codec_type": "audio",
            "codec_name": "mp3",
            "sample_rate": (rates[-1] if rates else b"44100").decode(),
            "channels": 2,
        }],
    }


@pytest.fixture
def fake_ffmpeg():
    ffmpeg = FakeFFmpeg()
    with (
        patch("text2podcast.audio.concatenator.run_ffmpeg", ffmpeg),
        patch("text2podcast.audio.repairer.run_ffmpeg", ffmpeg),
    ):
        yield ffmpeg


@pytest.fixture
def fake_probe():
    with patch("text2podcast.audio.validator.probe_media", side_effect=fake_probe_media) as probe:
        yield probe

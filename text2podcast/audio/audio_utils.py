"""Audio utility functions - ffmpeg/ffprobe paths, command runner and probing."""

import json
import logging
import subprocess
from pathlib import Path

import static_ffmpeg

from text2podcast.errors import ErrorKind, PipelineError, ValidationError
from text2podcast.models import AudioProbe

logger = logging.getLogger(__name__)

# Keep this much of ffmpeg's stderr in error messages
STDERR_TAIL = 800


def get_ffmpeg_paths() -> tuple[str, str]:
    """Return (ffmpeg_path, ffprobe_path) using the bundled static-ffmpeg binaries.

    Downloads binaries on first use if not already present.
    """
    ffmpeg_path, ffprobe_path = static_ffmpeg.run.get_or_fetch_platform_executables_else_raise()
    return ffmpeg_path, ffprobe_path


def get_ffmpeg() -> str:
    """Return the path to the ffmpeg executable."""
    ffmpeg, _ = get_ffmpeg_paths()
    return ffmpeg


def get_ffprobe() -> str:
    """Return the path to the ffprobe executable."""
    _, ffprobe = get_ffmpeg_paths()
    return ffprobe


def check_ffmpeg() -> None:
    """Verify that ffmpeg and ffprobe are available (downloads if needed)."""
    try:
        get_ffmpeg_paths()
    except Exception as e:
        raise RuntimeError(
            f"Could not obtain ffmpeg: {e}\n"
            f"Try reinstalling: pip install --force-reinstall static-ffmpeg"
        ) from e


def run_ffmpeg(
    args: list[str],
    error_cls: type[PipelineError],
    kind: ErrorKind = ErrorKind.FFMPEG_FAILED,
) -> None:
    """Run ffmpeg with ``args``; raise ``error_cls`` on a missing binary or non-zero exit."""
    try:
        ffmpeg = get_ffmpeg()
    except Exception as e:
        raise error_cls(f"ffmpeg is not available: {e}", kind=ErrorKind.FFMPEG_MISSING) from e

    cmd = [ffmpeg, "-hide_banner", "-y", *args]
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise error_cls(f"Could not start ffmpeg: {e}", kind=ErrorKind.FFMPEG_MISSING) from e

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()[-STDERR_TAIL:]
        raise error_cls(
            f"ffmpeg exited with code {result.returncode}: {stderr}", kind=kind,
        )


def probe_media(audio_path: Path) -> dict:
    """Return ffprobe's JSON description (format + streams) of a media file.

    Raises:
        ValidationError: If ffprobe is missing or cannot read the file.
    """
    try:
        ffprobe = get_ffprobe()
    except Exception as e:
        raise ValidationError(f"ffprobe is not available: {e}", kind=ErrorKind.FFMPEG_MISSING) from e

    try:
        result = subprocess.run(
            [
                ffprobe, "-v", "quiet",
                "-print_format", "json",
                "-show_format",
                "-show_streams",
                str(audio_path),
            ],
            capture_output=True,
            text=True,
            check=True,
        )
        return json.loads(result.stdout)
    except (OSError, subprocess.CalledProcessError, json.JSONDecodeError) as e:
        raise ValidationError(
            f"ffprobe could not read {audio_path}: {e}", kind=ErrorKind.PROBE_FAILED,
        ) from e


def audio_probe_from(data: dict, file_size: int | None = None) -> AudioProbe:
    """Build an :class:`AudioProbe` from ffprobe JSON output.

    The bitrate comes from the container-level ``bit_rate`` in kbps.
    """
    fmt = data.get("format") or {}
    stream = next(
        (s for s in data.get("streams") or [] if s.get("codec_type") == "audio"),
        None,
    )
    tags = {str(k): str(v) for k, v in (fmt.get("tags") or {}).items()}

    if stream is None:
        return AudioProbe(
            format=fmt.get("format_name"),
            file_size=file_size,
            has_id3_tags=bool(tags),
            tags=tags,
        )

    return AudioProbe(
        format=fmt.get("format_name"),
        codec=stream.get("codec_name"),
        bitrate=_to_float(fmt.get("bit_rate"), scale=1000),
        sample_rate=_to_int(stream.get("sample_rate")),
        channels=_to_int(stream.get("channels")),
        duration=_to_float(fmt.get("duration")),
        file_size=file_size,
        has_id3_tags=bool(tags),
        tags=tags,
    )


def _to_float(value, scale: float = 1.0) -> float | None:
    try:
        return float(value) / scale
    except (TypeError, ValueError):
        return None


def _to_int(value) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None

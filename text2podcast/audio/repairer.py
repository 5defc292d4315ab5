"""Repairer - re-encodes an artifact to bring bitrate and sample rate into range."""

import logging
from pathlib import Path

from text2podcast.audio.audio_utils import run_ffmpeg
from text2podcast.errors import ErrorKind, RepairError
from text2podcast.models import AudioRequirements, ValidationReport
from text2podcast.scratch import ScratchArea

logger = logging.getLogger(__name__)

TARGET_BITRATE = "128k"

CODECS = {
    "mp3": "libmp3lame",
    "m4a": "aac",
}


def repair_args(report: ValidationReport, requirements: AudioRequirements) -> list[str]:
    """ffmpeg output options fixing what the report measured, or [] if nothing is fixable."""
    probe = report.metadata
    args = []

    if probe.bitrate is not None and not (
        requirements.min_bitrate <= probe.bitrate <= requirements.max_bitrate
    ):
        args += ["-b:a", TARGET_BITRATE]

    if (
        probe.sample_rate is not None
        and requirements.allowed_sample_rates
        and probe.sample_rate not in requirements.allowed_sample_rates
    ):
        args += ["-ar", str(requirements.allowed_sample_rates[0])]

    return args


def repair(
    artifact_path: Path,
    report: ValidationReport,
    requirements: AudioRequirements,
    scratch: ScratchArea,
) -> Path:
    """Fix bitrate and/or sample rate in a single re-encode.

    Returns the original path unchanged when the report is valid or holds
    no fixable condition (file size and format are never repaired).
    """
    artifact_path = Path(artifact_path)
    if report.is_valid:
        return artifact_path

    fixes = repair_args(report, requirements)
    if not fixes:
        logger.info("No automatic fix for: %s", "; ".join(report.errors))
        return artifact_path

    ext = artifact_path.suffix.lower().lstrip(".")
    codec = CODECS.get(ext, "libmp3lame")
    name = artifact_path.name.removeprefix(f"{scratch.token}_")
    output = scratch.path(f"fixed_{name}")

    tag_args = ["-map_metadata", "0"]
    if codec == "libmp3lame":
        tag_args += ["-id3v2_version", "3"]

    logger.info("Repairing %s with %s", artifact_path.name, " ".join(fixes))
    run_ffmpeg(
        [
            "-i", str(artifact_path),
            "-map", "0:a",
            *tag_args,
            "-c:a", codec,
            *fixes,
            str(output),
        ],
        RepairError,
        kind=ErrorKind.REPAIR_FAILED,
    )
    return output

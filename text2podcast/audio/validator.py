"""Validator - checks a finished artifact against podcast distribution requirements."""

import logging
from pathlib import Path

from text2podcast.audio.audio_utils import audio_probe_from, probe_media
from text2podcast.errors import ValidationError
from text2podcast.models import AudioProbe, AudioRequirements, ValidationReport

logger = logging.getLogger(__name__)

MB = 1024 * 1024


def validate(artifact_path: Path, requirements: AudioRequirements) -> ValidationReport:
    """Inspect ``artifact_path`` and report every problem found.

    Each check contributes independently, so one run lists all violations.
    Probe failures become error entries; this function does not raise for
    problems with the file.
    """
    path = Path(artifact_path)
    errors: list[str] = []
    warnings: list[str] = []

    try:
        file_size = path.stat().st_size
    except OSError as e:
        errors.append(f"Failed to access file: {e}")
        return _report(errors, warnings, AudioProbe())

    # 1. File size
    if file_size > requirements.max_file_size_bytes:
        errors.append(
            f"File size {file_size / MB:.2f}MB exceeds maximum allowed size of "
            f"{requirements.max_file_size_bytes / MB:g}MB"
        )

    # 2. Container/extension
    ext = path.suffix.lower().lstrip(".")
    if ext not in requirements.allowed_formats:
        errors.append(
            f"File format {ext or '(none)'} is not supported. "
            f"Supported formats: {', '.join(requirements.allowed_formats)}"
        )

    # 3. Stream probe
    probe = AudioProbe(file_size=file_size)
    probed = False
    try:
        probe = audio_probe_from(probe_media(path), file_size=file_size)
        probed = True
    except ValidationError as e:
        logger.warning("Probe failed for %s: %s", path.name, e)
        errors.append(
            "Failed to read audio metadata. Ensure ffmpeg is installed "
            "and the file is not corrupted."
        )

    if probed and probe.codec is None:
        errors.append("No audio stream found in file")

    # 4. Bitrate
    if probe.bitrate is not None:
        if probe.bitrate < requirements.min_bitrate:
            errors.append(
                f"Bitrate {probe.bitrate:g}kbps is below minimum {requirements.min_bitrate:g}kbps"
            )
        if probe.bitrate > requirements.max_bitrate:
            errors.append(
                f"Bitrate {probe.bitrate:g}kbps exceeds maximum {requirements.max_bitrate:g}kbps"
            )

    # 5. Sample rate
    if probe.sample_rate is not None and probe.sample_rate not in requirements.allowed_sample_rates:
        rates = ", ".join(str(r) for r in requirements.allowed_sample_rates)
        errors.append(
            f"Sample rate {probe.sample_rate}Hz is not supported. Supported rates: {rates}Hz"
        )

    # 6. Tags (MP3 only)
    if ext == "mp3":
        if not probed:
            warnings.append("Could not check ID3 tags")
        elif not probe.has_id3_tags:
            warnings.append(
                "Missing ID3 tags. While not required, tags help with podcast metadata."
            )

    return _report(errors, warnings, probe)


def _report(errors: list[str], warnings: list[str], probe: AudioProbe) -> ValidationReport:
    report = ValidationReport(
        is_valid=not errors,
        errors=tuple(errors),
        warnings=tuple(warnings),
        metadata=probe,
    )
    if report.is_valid:
        logger.info("Audio validation passed (%d warnings)", len(warnings))
    else:
        logger.info("Audio validation failed: %s", "; ".join(errors))
    for warning in warnings:
        logger.warning("Audio validation warning: %s", warning)
    return report

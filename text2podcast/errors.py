"""Typed failures raised by the pipeline components."""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure reasons, set by the component that detects them."""

    EMPTY_TEXT = "empty_text"
    INVALID_CEILING = "invalid_ceiling"
    INPUT_TOO_LONG = "input_too_long"
    EMPTY_INPUT = "empty_input"
    MALFORMED_AUDIO = "malformed_audio"
    RATE_LIMIT = "rate_limit"
    NETWORK = "network"
    ENGINE = "engine"
    ORDER = "order"
    FFMPEG_FAILED = "ffmpeg_failed"
    FFMPEG_MISSING = "ffmpeg_missing"
    PROBE_FAILED = "probe_failed"
    REPAIR_FAILED = "repair_failed"


RETRYABLE_KINDS = frozenset({ErrorKind.RATE_LIMIT, ErrorKind.NETWORK})


class PipelineError(RuntimeError):
    """Base class for every failure the pipeline can raise."""

    def __init__(self, message: str, *, kind: ErrorKind):
        super().__init__(message)
        self.kind = kind

    @property
    def retryable(self) -> bool:
        return self.kind in RETRYABLE_KINDS


class SegmentationError(PipelineError):
    """Input text is empty or the segmentation limits are inconsistent."""


class SynthesisError(PipelineError):
    """The speech engine failed or returned unusable audio for a chunk."""


class ConcatenationError(PipelineError):
    """ffmpeg could not join the segments into one tagged file."""


class ValidationError(PipelineError):
    """Probing the artifact failed (reported, never propagated by validate())."""


class RepairError(PipelineError):
    """Re-encoding during a repair attempt failed."""

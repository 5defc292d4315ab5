"""Data models for the text2podcast pipeline."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

# Safety margin below the 4096-character limit of the speech API
DEFAULT_CEILING = 3800
ENGINE_HARD_LIMIT = 4096
MIN_CHUNK_CHARS = 100


@dataclass(frozen=True)
class TextChunk:
    """A bounded slice of source text destined for one synthesis call."""
    index: int
    text: str

    @property
    def length(self) -> int:
        return len(self.text)


@dataclass
class AudioSegment:
    """Synthesized audio for one chunk."""
    index: int
    data: bytes
    format: str = "mp3"


@dataclass(frozen=True)
class PodcastMetadata:
    """Episode metadata embedded into the artifact's tag block."""
    title: str
    episode_number: int
    subtitle: str = ""
    description: str = ""
    author: str = "Speasy"
    artist: str = "Speasy"
    category: str = "Technology"
    explicit: bool = False
    season: int = 1
    episode_type: str = "full"
    album: str = "Speasy Podcast"

    @property
    def effective_subtitle(self) -> str:
        return self.subtitle or self.title


@dataclass(frozen=True)
class AudioRequirements:
    """Distribution constraints checked by the validator.

    Bitrates are in kbps (inclusive range), sample rates in Hz (exact match).
    """
    max_file_size_bytes: int = 200 * 1024 * 1024
    min_bitrate: float = 64
    max_bitrate: float = 320
    allowed_sample_rates: tuple[int, ...] = (44100, 48000)
    allowed_formats: tuple[str, ...] = ("mp3", "m4a")


@dataclass(frozen=True)
class AudioProbe:
    """Facts measured from an audio file."""
    format: Optional[str] = None
    codec: Optional[str] = None
    bitrate: Optional[float] = None
    sample_rate: Optional[int] = None
    channels: Optional[int] = None
    duration: Optional[float] = None
    file_size: Optional[int] = None
    has_id3_tags: Optional[bool] = None
    tags: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of one validator run. Warnings never affect validity."""
    is_valid: bool
    errors: tuple[str, ...]
    warnings: tuple[str, ...]
    metadata: AudioProbe


@dataclass(frozen=True)
class AudioArtifact:
    """An encoded audio file plus the facts derived from probing it.

    ``path`` is None once the file only exists as ``data`` (its scratch
    copy has been cleaned up).
    """
    path: Optional[Path]
    data: bytes
    format: Optional[str] = None
    bitrate_kbps: Optional[float] = None
    sample_rate: Optional[int] = None
    channels: Optional[int] = None
    duration_seconds: Optional[float] = None
    size_bytes: int = 0
    has_tags: bool = False

    def with_probe(self, probe: AudioProbe) -> "AudioArtifact":
        """Return a new artifact carrying the measured stream properties."""
        return AudioArtifact(
            path=self.path,
            data=self.data,
            format=probe.format,
            bitrate_kbps=probe.bitrate,
            sample_rate=probe.sample_rate,
            channels=probe.channels,
            duration_seconds=probe.duration,
            size_bytes=probe.file_size if probe.file_size is not None else len(self.data),
            has_tags=bool(probe.has_id3_tags),
        )


@dataclass
class TTSConfig:
    """Configuration for TTS synthesis."""
    voice: str = ""
    speed: float = 1.0
    model: str = ""
    response_format: str = "mp3"


@dataclass
class PipelineSettings:
    """Tunables for one pipeline run."""
    ceiling: int = DEFAULT_CEILING
    min_chunk_chars: int = MIN_CHUNK_CHARS
    max_attempts: int = 3
    retry_backoff_seconds: float = 1.0
    retry_backoff_max_seconds: float = 20.0
    scratch_root: Optional[Path] = None


@dataclass
class PipelineResult:
    """Final (or best-effort) artifact together with the definitive report."""
    artifact: AudioArtifact
    report: ValidationReport
    chunk_count: int
    filename: str
    repaired: bool = False

    @property
    def succeeded(self) -> bool:
        return self.report.is_valid

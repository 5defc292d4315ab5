"""Concatenator - joins same-codec MP3 segments and stamps podcast tags."""

import logging
import re
from datetime import date
from typing import Optional

from text2podcast.audio.audio_utils import run_ffmpeg
from text2podcast.errors import ConcatenationError, ErrorKind
from text2podcast.models import AudioArtifact, AudioSegment, PodcastMetadata
from text2podcast.scratch import ScratchArea

logger = logging.getLogger(__name__)


def concatenate(
    segments: list[AudioSegment],
    metadata: PodcastMetadata,
    scratch: ScratchArea,
    today: Optional[date] = None,
) -> AudioArtifact:
    """Join ordered segments into one tagged artifact inside the scratch area.

    A single segment is used as-is, with no ffmpeg call. Otherwise the
    segments are stream-copied through ffmpeg's concat demuxer, and the
    ID3v2.3 tag block is written in the same pass.
    """
    if not segments:
        raise ConcatenationError("No audio segments to concatenate", kind=ErrorKind.EMPTY_INPUT)
    indices = [s.index for s in segments]
    if indices != sorted(indices):
        raise ConcatenationError(
            f"Segments are out of order: {indices}", kind=ErrorKind.ORDER,
        )

    filename = podcast_filename(metadata.episode_number, metadata.title, today)

    if len(segments) == 1:
        logger.info("Single segment, skipping concatenation")
        out = scratch.write(filename, segments[0].data)
        return AudioArtifact(path=out, data=segments[0].data, size_bytes=len(segments[0].data))

    # Step 1: segment files and concat list
    segment_paths = []
    list_path = scratch.path("list.txt")
    try:
        with open(list_path, "w", encoding="utf-8") as f:
            for seg in segments:
                seg_path = scratch.write(f"{seg.index:04d}.{seg.format}", seg.data)
                segment_paths.append(seg_path)
                safe_path = str(seg_path).replace("'", "'\\''")
                f.write(f"file '{safe_path}'\n")

        # Step 2: stream-copy + tags
        out = scratch.path(filename)
        logger.info("Concatenating %d segments into %s", len(segments), out.name)
        run_ffmpeg(
            [
                "-f", "concat", "-safe", "0", "-i", str(list_path),
                "-map", "0:a",
                "-c", "copy",
                "-id3v2_version", "3",
                *metadata_args(metadata),
                str(out),
            ],
            ConcatenationError,
        )
        data = out.read_bytes()
    finally:
        for p in [*segment_paths, list_path]:
            scratch.release(p)

    return AudioArtifact(path=out, data=data, size_bytes=len(data))


def podcast_tags(metadata: PodcastMetadata) -> list[tuple[str, str]]:
    """Ordered (key, value) pairs for the artifact's tag block."""
    return [
        ("title", metadata.title),
        ("artist", metadata.artist),
        ("album", metadata.album),
        ("genre", "Podcast"),
        ("podcast", "true"),
        ("podcast:season", str(metadata.season)),
        ("podcast:episode", str(metadata.episode_number)),
        ("podcast:episodeType", metadata.episode_type),
        ("itunes:subtitle", metadata.effective_subtitle),
        ("itunes:summary", metadata.description),
        ("itunes:author", metadata.author),
        ("itunes:category", metadata.category),
        ("itunes:explicit", "true" if metadata.explicit else "false"),
    ]


def metadata_args(metadata: PodcastMetadata) -> list[str]:
    args = []
    for key, value in podcast_tags(metadata):
        args += ["-metadata", f"{key}={value}"]
    return args


def podcast_filename(episode_number: int, title: str, today: Optional[date] = None) -> str:
    """Standard file name: ``YYYY-MM-DD-episode-N-<slug>.mp3``."""
    day = (today or date.today()).isoformat()
    return f"{day}-episode-{episode_number}-{_slugify(title)}.mp3"


def _slugify(title: str) -> str:
    slug = re.sub(r"[^\w\s-]", "", title.lower())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug[:100]

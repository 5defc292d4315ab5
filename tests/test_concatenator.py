"""Tests for segment concatenation and podcast tagging."""

from datetime import date

import pytest

from text2podcast.audio.concatenator import concatenate, metadata_args, podcast_filename, podcast_tags
from text2podcast.errors import ConcatenationError, ErrorKind
from text2podcast.models import AudioSegment, PodcastMetadata
from text2podcast.scratch import ScratchArea


def _segments(n: int) -> list[AudioSegment]:
    return [AudioSegment(index=i, data=b"ID3" + f"<{i}>".encode()) for i in range(1, n + 1)]


def _metadata(**overrides) -> PodcastMetadata:
    values = dict(title="Deep Dive", episode_number=7, description="Show notes")
    values.update(overrides)
    return PodcastMetadata(**values)


class TestConcatenate:
    def test_single_segment_skips_ffmpeg(self, tmp_path, fake_ffmpeg):
        scratch = ScratchArea(tmp_path)
        segment = AudioSegment(index=1, data=b"ID3raw-bytes")

        artifact = concatenate([segment], _metadata(), scratch, today=date(2024, 5, 1))

        assert fake_ffmpeg.calls == []
        assert artifact.data == b"ID3raw-bytes"
        assert artifact.path.read_bytes() == b"ID3raw-bytes"
        assert artifact.path.name.endswith("2024-05-01-episode-7-deep-dive.mp3")

    def test_segments_joined_in_order_with_stream_copy(self, tmp_path, fake_ffmpeg):
        scratch = ScratchArea(tmp_path)

        artifact = concatenate(_segments(3), _metadata(), scratch)

        assert len(fake_ffmpeg.calls) == 1
        args = fake_ffmpeg.calls[0]
        assert args[:5] == ["-f", "concat", "-safe", "0", "-i"]
        assert args[args.index("-c") + 1] == "copy"
        assert args[args.index("-id3v2_version") + 1] == "3"
        assert artifact.data.index(b"<1>") < artifact.data.index(b"<2>") < artifact.data.index(b"<3>")

    def test_episode_number_written_to_tags(self, tmp_path, fake_ffmpeg):
        concatenate(_segments(2), _metadata(episode_number=42), ScratchArea(tmp_path))
        assert "podcast:episode=42" in fake_ffmpeg.calls[0]

    def test_intermediate_files_removed_on_success(self, tmp_path, fake_ffmpeg):
        scratch = ScratchArea(tmp_path)
        artifact = concatenate(_segments(3), _metadata(), scratch)
        assert scratch.leftovers() == [artifact.path]

    def test_failure_raises_and_cleans_up(self, tmp_path, fake_ffmpeg):
        fake_ffmpeg.fail = True
        scratch = ScratchArea(tmp_path)

        with pytest.raises(ConcatenationError) as exc:
            concatenate(_segments(3), _metadata(), scratch)
        assert exc.value.kind is ErrorKind.FFMPEG_FAILED

        scratch.cleanup()
        assert scratch.leftovers() == []

    def test_out_of_order_segments_rejected(self, tmp_path, fake_ffmpeg):
        segments = list(reversed(_segments(2)))
        with pytest.raises(ConcatenationError) as exc:
            concatenate(segments, _metadata(), ScratchArea(tmp_path))
        assert exc.value.kind is ErrorKind.ORDER
        assert fake_ffmpeg.calls == []

    def test_no_segments_rejected(self, tmp_path, fake_ffmpeg):
        with pytest.raises(ConcatenationError):
            concatenate([], _metadata(), ScratchArea(tmp_path))


class TestPodcastTags:
    def test_standard_and_podcast_fields(self):
        tags = dict(podcast_tags(_metadata()))

        assert tags["title"] == "Deep Dive"
        assert tags["artist"] == "Speasy"
        assert tags["album"] == "Speasy Podcast"
        assert tags["genre"] == "Podcast"
        assert tags["podcast:season"] == "1"
        assert tags["podcast:episode"] == "7"
        assert tags["podcast:episodeType"] == "full"
        assert tags["itunes:summary"] == "Show notes"
        assert tags["itunes:category"] == "Technology"
        assert tags["itunes:explicit"] == "false"

    def test_author_does_not_replace_artist(self):
        tags = dict(podcast_tags(_metadata(author="Jane Doe")))

        assert tags["artist"] == "Speasy"
        assert tags["itunes:author"] == "Jane Doe"

    def test_subtitle_defaults_to_title(self):
        assert dict(podcast_tags(_metadata()))["itunes:subtitle"] == "Deep Dive"
        tags = dict(podcast_tags(_metadata(subtitle="Short", explicit=True)))
        assert tags["itunes:subtitle"] == "Short"
        assert tags["itunes:explicit"] == "true"

    def test_metadata_args_pairs(self):
        args = metadata_args(_metadata())
        assert args[0] == "-metadata"
        assert args[1] == "title=Deep Dive"
        assert len(args) == 2 * len(podcast_tags(_metadata()))


class TestPodcastFilename:
    def test_slug(self):
        name = podcast_filename(3, "Hello, World! -- A  Story", today=date(2024, 1, 2))
        assert name == "2024-01-02-episode-3-hello-world-a-story.mp3"

    def test_slug_truncated(self):
        name = podcast_filename(1, "x" * 300, today=date(2024, 1, 2))
        assert name == "2024-01-02-episode-1-" + "x" * 100 + ".mp3"

"""Converter - orchestrates the full text → TTS → tagged MP3 pipeline."""

import logging
import random
import time
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional

from text2podcast.audio.concatenator import concatenate
from text2podcast.audio.repairer import repair
from text2podcast.audio.validator import validate
from text2podcast.errors import SynthesisError
from text2podcast.models import (
    AudioArtifact,
    AudioRequirements,
    AudioSegment,
    PipelineResult,
    PipelineSettings,
    PodcastMetadata,
    TextChunk,
    TTSConfig,
)
from text2podcast.scratch import ScratchArea
from text2podcast.segmenter import require_text, segment
from text2podcast.synthesizer import Synthesizer
from text2podcast.tts.base import TTSEngine

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class Converter:
    """Orchestrates the full conversion pipeline for one piece of text."""

    def __init__(
        self,
        engine: TTSEngine,
        config: TTSConfig,
        requirements: Optional[AudioRequirements] = None,
        settings: Optional[PipelineSettings] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.synthesizer = Synthesizer(engine, config)
        self.requirements = requirements or AudioRequirements()
        self.settings = settings or PipelineSettings()
        self._sleep = sleep

    def convert(
        self,
        text: str,
        metadata: PodcastMetadata,
        output_path: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> PipelineResult:
        """Full pipeline: text → chunks → TTS → concat + tags → validate → repair.

        Args:
            text: Text to speak.
            metadata: Episode metadata for the tag block.
            output_path: If set, the final artifact is also written here.
            on_progress: Callback(current, total) after each synthesized chunk.

        Returns:
            The final artifact and the definitive validation report. A
            failing report still comes with the best-effort artifact.

        Raises:
            SegmentationError, SynthesisError, ConcatenationError, RepairError
        """
        # 1. Segment
        require_text(text)
        chunks = segment(text, self.settings.ceiling, self.settings.min_chunk_chars)
        logger.info("Text of %d chars split into %d chunks", len(text), len(chunks))

        scratch = ScratchArea(self.settings.scratch_root)
        logger.debug("Scratch session %s in %s", scratch.token, scratch.root)

        try:
            # 2. Synthesize each chunk, in order
            segments = []
            for chunk in chunks:
                logger.info("Synthesizing chunk %d/%d (%d chars)", chunk.index, len(chunks), chunk.length)
                segments.append(self._synthesize_with_retry(chunk))
                if on_progress:
                    on_progress(chunk.index, len(chunks))

            # 3. Concatenate + tag
            artifact = concatenate(segments, metadata, scratch)
            filename = artifact.path.name.removeprefix(f"{scratch.token}_")

            # 4. Validate, repair once if needed
            report = validate(artifact.path, self.requirements)
            repaired = False
            if not report.is_valid:
                fixed_path = repair(artifact.path, report, self.requirements, scratch)
                if fixed_path != artifact.path:
                    repaired = True
                    artifact = AudioArtifact(path=fixed_path, data=fixed_path.read_bytes())
                    report = validate(fixed_path, self.requirements)
                    logger.info("Revalidated repaired audio: valid=%s", report.is_valid)

            artifact = replace(artifact.with_probe(report.metadata), path=None)
            if output_path:
                out = Path(output_path)
                out.write_bytes(artifact.data)
                artifact = replace(artifact, path=out)
                logger.info("Podcast audio written: %s", out)

            return PipelineResult(
                artifact=artifact,
                report=report,
                chunk_count=len(chunks),
                filename=filename,
                repaired=repaired,
            )
        finally:
            scratch.cleanup()

    def _synthesize_with_retry(self, chunk: TextChunk) -> AudioSegment:
        """Synthesize one chunk, retrying rate-limit and network failures with backoff."""
        attempts = max(1, self.settings.max_attempts)
        attempt = 0
        while True:
            attempt += 1
            try:
                return self.synthesizer.synthesize(chunk)
            except SynthesisError as e:
                if not e.retryable or attempt >= attempts:
                    logger.error(
                        "Chunk %d failed after %d attempt(s): %s", chunk.index, attempt, e,
                    )
                    raise
                backoff = min(
                    self.settings.retry_backoff_max_seconds,
                    self.settings.retry_backoff_seconds * (2 ** (attempt - 1)),
                )
                backoff += random.uniform(0.0, 0.2)
                logger.warning(
                    "Chunk %d attempt %d/%d failed (%s), retrying in %.1fs",
                    chunk.index, attempt, attempts, e.kind.value, backoff,
                )
                self._sleep(backoff)

"""Progress reporting for the conversion pipeline."""

from tqdm import tqdm


class ProgressReporter:
    """Wraps tqdm for chunk-level progress reporting."""

    def __init__(self, total_chunks: int):
        self._bar = tqdm(
            total=total_chunks,
            desc="Synthesis",
            unit="chunk",
            bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt} chunks [{elapsed}<{remaining}]",
        )

    def update(self, current: int, total: int) -> None:
        """Advance the bar to ``current`` of ``total`` synthesized chunks."""
        self._bar.update(current - self._bar.n)

    def close(self) -> None:
        self._bar.close()

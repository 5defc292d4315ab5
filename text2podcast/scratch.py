"""Per-run scratch area with collision-free names and best-effort cleanup."""

import logging
import secrets
import tempfile
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class ScratchArea:
    """Hands out temp file paths prefixed with a random session token.

    Every path created through :meth:`path` is remembered and removed by
    :meth:`cleanup`. Usable as a context manager.
    """

    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root else Path(tempfile.gettempdir())
        self.root.mkdir(parents=True, exist_ok=True)
        self.token = secrets.token_hex(16)
        self._paths: list[Path] = []

    def path(self, name: str) -> Path:
        """Return (and track) a scratch path for ``name`` unique to this run."""
        p = self.root / f"{self.token}_{name}"
        self._paths.append(p)
        return p

    def write(self, name: str, data: bytes) -> Path:
        p = self.path(name)
        p.write_bytes(data)
        return p

    def release(self, path: Path) -> None:
        """Delete one tracked file now; failures are logged, not raised."""
        self._remove(path)
        if path in self._paths:
            self._paths.remove(path)

    def cleanup(self) -> None:
        """Delete every tracked file; failures are logged, not raised."""
        for p in self._paths:
            self._remove(p)
        self._paths.clear()

    def leftovers(self) -> list[Path]:
        """Files in the scratch root that still carry this run's token."""
        return sorted(self.root.glob(f"{self.token}_*"))

    @staticmethod
    def _remove(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
            logger.debug("Removed scratch file %s", path.name)
        except OSError as e:
            logger.warning("Could not remove scratch file %s: %s", path, e)

    def __enter__(self) -> "ScratchArea":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

"""File storage rooted at the configured base directory."""

from __future__ import annotations

import logging
from pathlib import Path

from utils import resolve_file_path

logger = logging.getLogger(__name__)


class FileStore:
    """Reads and writes named files under one base directory.

    Access is not coordinated across connections: concurrent writers race and
    the last one wins, and a reader may observe a partially written file.
    """

    def __init__(self, base_dir: str | Path | None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else None

    def read(self, name: str) -> bytes:
        return self._path_for(name).read_bytes()

    def write(self, name: str, data: bytes) -> None:
        path = self._path_for(name)
        path.write_bytes(data)
        logger.debug("Wrote %d bytes to %s", len(data), path)

    def _path_for(self, name: str) -> Path:
        if self._base_dir is None:
            raise FileNotFoundError("No files directory configured")
        try:
            path = resolve_file_path(self._base_dir, name)
        except ValueError as exc:
            raise FileNotFoundError(f"Invalid file name {name!r}: {exc}") from exc
        if path is None:
            raise FileNotFoundError(f"File name escapes the files directory: {name!r}")
        return path

"""Filesystem object store."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from ....application.exceptions import SnapshotNotFoundError

logger = logging.getLogger(__name__)


class LocalObjectStore:
    """
    Object store backed by a local directory.

    Writes go to a temporary file that is fsynced and renamed over the
    target, so a concurrent reader sees either the old or the new blob.
    """

    def __init__(self, root: Path) -> None:
        """Initialize the store rooted at ``root``."""
        self._root = root

    def _path(self, name: str) -> Path:
        path = (self._root / name).resolve()
        if self._root.resolve() not in path.parents:
            msg = f"Blob name escapes the store root: {name}"
            raise ValueError(msg)
        return path

    async def put_blob(self, name: str, data: bytes) -> None:
        """Write a blob atomically."""
        target = self._path(name)
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=target.parent, prefix=".upload-", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, target)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
        logger.info("Wrote blob %s (%d bytes)", target, len(data))

    async def get_blob(self, name: str) -> bytes:
        """Read a blob."""
        try:
            return self._path(name).read_bytes()
        except FileNotFoundError as e:
            msg = f"Blob {name} does not exist in {self._root}"
            raise SnapshotNotFoundError(msg) from e

    async def list_blobs(self, pattern: str) -> list[str]:
        """List blob names matching a shell-style pattern."""
        if not self._root.is_dir():
            return []
        return sorted(p.name for p in self._root.glob(pattern) if p.is_file())

    async def delete_blob(self, name: str) -> None:
        """Delete a blob if it exists."""
        self._path(name).unlink(missing_ok=True)

"""Persists snapshots under a logical report name."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from ...domain.entities import Snapshot
from ..exceptions import SnapshotWriteError
from ..ports import ObjectStore
from .report_codec import decode_snapshot, encode_snapshot

logger = logging.getLogger(__name__)

REPORT_SUFFIX = ".csv"


class SnapshotStore:
    """
    Write-then-read store for the credential report.

    A write fully replaces the previous report: stale artifacts matching
    ``<name>*.csv`` are pruned from the staging directory and the object
    store, and the target blob is overwritten in a single put.
    """

    def __init__(
        self,
        object_store: ObjectStore,
        report_name: str,
        *,
        staging_dir: Path | None = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            object_store: Durable blob storage adapter.
            report_name: Logical snapshot name; the blob is ``<name>.csv``.
            staging_dir: Local directory for the staged copy, if any.
        """
        self._object_store = object_store
        self._report_name = report_name
        self._staging_dir = staging_dir

    @property
    def blob_name(self) -> str:
        """Name of the durable report blob."""
        return f"{self._report_name}{REPORT_SUFFIX}"

    @property
    def pattern(self) -> str:
        """Shell-style pattern matching every artifact of this report."""
        return f"{self._report_name}*{REPORT_SUFFIX}"

    async def write(self, snapshot: Snapshot) -> None:
        """
        Persist a snapshot, superseding any previous one.

        Raises:
            SnapshotWriteError: If staging or upload fails.
        """
        data = encode_snapshot(snapshot)
        try:
            if self._staging_dir is not None:
                self._stage(self._staging_dir, data)
            await self._prune_durable()
            await self._object_store.put_blob(self.blob_name, data)
        except Exception as e:
            msg = f"Failed to write snapshot {self.blob_name}: {e}"
            raise SnapshotWriteError(msg) from e

        logger.info("Wrote snapshot %s with %d records", self.blob_name, len(snapshot))

    async def read(self) -> Snapshot:
        """
        Load the last written snapshot.

        Raises:
            SnapshotNotFoundError: If nothing was ever written.
        """
        data = await self._object_store.get_blob(self.blob_name)
        snapshot = decode_snapshot(self._report_name, data)
        logger.info("Read snapshot %s with %d records", self.blob_name, len(snapshot))
        return snapshot

    def _stage(self, staging: Path, data: bytes) -> None:
        """Replace local staging artifacts with a fresh copy of the report."""
        staging.mkdir(parents=True, exist_ok=True)

        for stale in staging.glob(self.pattern):
            logger.debug("Removing staged artifact %s", stale)
            stale.unlink(missing_ok=True)

        target = staging / self.blob_name
        fd, tmp_path = tempfile.mkstemp(dir=staging, prefix=".staging-", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, target)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    async def _prune_durable(self) -> None:
        """Delete stale blobs of this report other than the target itself."""
        for name in await self._object_store.list_blobs(self.pattern):
            if name != self.blob_name:
                logger.info("Pruning stale report blob %s", name)
                await self._object_store.delete_blob(name)


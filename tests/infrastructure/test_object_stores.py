"""Tests for the object store adapters."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path
from types import SimpleNamespace

import pytest
from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError

from credential_alerts.application.exceptions import SnapshotNotFoundError
from credential_alerts.infrastructure.adapters.storage import (
    AzureBlobConfig,
    AzureBlobObjectStore,
    LocalObjectStore,
)


class TestLocalObjectStore:
    """Tests for the filesystem store."""

    @pytest.mark.asyncio
    async def test_put_get_overwrite(self, tmp_path: Path) -> None:
        store = LocalObjectStore(tmp_path / "reports")

        await store.put_blob("AppCredentialReport.csv", b"first")
        await store.put_blob("AppCredentialReport.csv", b"second")

        assert await store.get_blob("AppCredentialReport.csv") == b"second"
        assert [p.name for p in (tmp_path / "reports").iterdir()] == ["AppCredentialReport.csv"]

    @pytest.mark.asyncio
    async def test_missing_blob(self, tmp_path: Path) -> None:
        with pytest.raises(SnapshotNotFoundError):
            await LocalObjectStore(tmp_path).get_blob("AppCredentialReport.csv")

    @pytest.mark.asyncio
    async def test_list_and_delete(self, tmp_path: Path) -> None:
        store = LocalObjectStore(tmp_path)
        for name in ("Report.csv", "Report-old.csv", "Other.csv"):
            await store.put_blob(name, b"x")

        assert await store.list_blobs("Report*.csv") == ["Report-old.csv", "Report.csv"]

        await store.delete_blob("Report-old.csv")
        await store.delete_blob("never-existed.csv")

        assert await store.list_blobs("Report*.csv") == ["Report.csv"]

    @pytest.mark.asyncio
    async def test_list_on_missing_root(self, tmp_path: Path) -> None:
        assert await LocalObjectStore(tmp_path / "absent").list_blobs("*.csv") == []

    @pytest.mark.asyncio
    async def test_name_cannot_escape_root(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="escapes"):
            await LocalObjectStore(tmp_path / "reports").put_blob("../outside.csv", b"x")


class FakeContainerClient:
    """Stand-in for ``azure.storage.blob.aio.ContainerClient``."""

    def __init__(self, *, exists: bool = True) -> None:
        self.exists = exists
        self.blobs: dict[str, bytes] = {}
        self.uploads: list[tuple[str, bool]] = []
        self.prefixes: list[str | None] = []

    async def create_container(self) -> None:
        if self.exists:
            raise ResourceExistsError("ContainerAlreadyExists")
        self.exists = True

    async def upload_blob(self, name: str, data: bytes, overwrite: bool = False) -> None:
        self.uploads.append((name, overwrite))
        self.blobs[name] = data

    async def download_blob(self, name: str) -> SimpleNamespace:
        if name not in self.blobs:
            raise ResourceNotFoundError("BlobNotFound")
        data = self.blobs[name]

        async def readall() -> bytes:
            return data

        return SimpleNamespace(readall=readall)

    async def _iterate(self, prefix: str | None) -> AsyncIterator[SimpleNamespace]:
        for name in sorted(self.blobs):
            if prefix is None or name.startswith(prefix):
                yield SimpleNamespace(name=name)

    def list_blobs(self, name_starts_with: str | None = None) -> AsyncIterator[SimpleNamespace]:
        self.prefixes.append(name_starts_with)
        return self._iterate(name_starts_with)

    async def delete_blob(self, name: str) -> None:
        if name not in self.blobs:
            raise ResourceNotFoundError("BlobNotFound")
        del self.blobs[name]


def _blob_store(container: FakeContainerClient) -> AzureBlobObjectStore:
    return AzureBlobObjectStore(AzureBlobConfig(container="reports"), container_client=container)


class TestAzureBlobObjectStore:
    """Tests for the Azure Blob Storage store."""

    @pytest.mark.asyncio
    async def test_upload_overwrites(self) -> None:
        container = FakeContainerClient()
        store = _blob_store(container)

        await store.put_blob("AppCredentialReport.csv", b"data")

        assert container.uploads == [("AppCredentialReport.csv", True)]
        assert await store.get_blob("AppCredentialReport.csv") == b"data"

    @pytest.mark.asyncio
    async def test_container_created_on_first_upload(self) -> None:
        container = FakeContainerClient(exists=False)

        await _blob_store(container).put_blob("AppCredentialReport.csv", b"data")

        assert container.exists

    @pytest.mark.asyncio
    async def test_missing_blob(self) -> None:
        with pytest.raises(SnapshotNotFoundError):
            await _blob_store(FakeContainerClient()).get_blob("AppCredentialReport.csv")

    @pytest.mark.asyncio
    async def test_list_uses_prefix_and_pattern(self) -> None:
        container = FakeContainerClient()
        container.blobs = {"Report.csv": b"", "Report-old.csv": b"", "Report.json": b"", "Other.csv": b""}

        names = await _blob_store(container).list_blobs("Report*.csv")

        assert names == ["Report-old.csv", "Report.csv"]
        assert container.prefixes == ["Report"]

    @pytest.mark.asyncio
    async def test_delete_missing_is_ignored(self) -> None:
        await _blob_store(FakeContainerClient()).delete_blob("absent.csv")

"""Azure Blob Storage object store."""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob.aio import ContainerClient

from ....application.exceptions import SnapshotNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AzureBlobConfig:
    """Azure Blob Storage configuration."""

    connection_string: str = ""
    container: str = ""


class AzureBlobObjectStore:
    """
    Object store backed by one Azure Blob Storage container.

    Uploads use ``overwrite=True``, which replaces the blob in a single
    commit so readers never see a partial report.
    """

    def __init__(self, config: AzureBlobConfig, *, container_client: ContainerClient | None = None) -> None:
        """
        Initialize the store.

        Args:
            config: Connection string and container name.
            container_client: Externally owned client, mainly for tests.
        """
        self._config = config
        self._shared_client = container_client

    @asynccontextmanager
    async def _container(self) -> AsyncIterator[ContainerClient]:
        """Yield a container client, closing it afterwards unless shared."""
        if self._shared_client is not None:
            yield self._shared_client
            return
        client = ContainerClient.from_connection_string(
            self._config.connection_string,
            container_name=self._config.container,
        )
        async with client:
            yield client

    async def put_blob(self, name: str, data: bytes) -> None:
        """Upload a blob, replacing any existing one."""
        async with self._container() as container:
            try:
                await container.create_container()
                logger.info("Created blob container %s", self._config.container)
            except ResourceExistsError:
                pass
            await container.upload_blob(name, data, overwrite=True)
        logger.info("Uploaded blob %s/%s (%d bytes)", self._config.container, name, len(data))

    async def get_blob(self, name: str) -> bytes:
        """Download a blob."""
        async with self._container() as container:
            try:
                downloader = await container.download_blob(name)
                return await downloader.readall()
            except ResourceNotFoundError as e:
                msg = f"Blob {self._config.container}/{name} does not exist"
                raise SnapshotNotFoundError(msg) from e

    async def list_blobs(self, pattern: str) -> list[str]:
        """List blob names matching a shell-style pattern."""
        prefix = pattern.split("*", 1)[0].split("?", 1)[0] or None
        names: list[str] = []
        async with self._container() as container:
            try:
                async for blob in container.list_blobs(name_starts_with=prefix):
                    if fnmatch.fnmatchcase(blob.name, pattern):
                        names.append(blob.name)
            except ResourceNotFoundError:
                return []
        return names

    async def delete_blob(self, name: str) -> None:
        """Delete a blob if it exists."""
        async with self._container() as container:
            try:
                await container.delete_blob(name)
            except ResourceNotFoundError:
                logger.debug("Blob %s already absent", name)

"""Port for durable blob storage - driven/secondary port."""

from typing import Protocol


class ObjectStore(Protocol):
    """
    Port for named blob storage.

    ``put_blob`` must replace an existing blob of the same name atomically.
    """

    async def put_blob(self, name: str, data: bytes) -> None:
        """Create or overwrite a blob."""
        ...

    async def get_blob(self, name: str) -> bytes:
        """
        Read a blob.

        Raises:
            SnapshotNotFoundError: If the blob does not exist.
        """
        ...

    async def list_blobs(self, pattern: str) -> list[str]:
        """Return blob names matching a shell-style pattern."""
        ...

    async def delete_blob(self, name: str) -> None:
        """Delete a blob; missing blobs are ignored."""
        ...

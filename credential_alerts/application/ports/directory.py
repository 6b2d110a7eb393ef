"""Port for the identity directory - driven/secondary port."""

from typing import Protocol

from ...domain.entities import Application, Credential, Owner


class Directory(Protocol):
    """
    Port for reading applications, credentials and owners.

    Implementations paginate internally and raise ThrottlingError when the
    remote side rate-limits a call, RemoteError for any other failure.
    """

    async def list_applications(self) -> list[Application]:
        """Return every application registration, across all pages."""
        ...

    async def get_application_detail(self, object_id: str) -> list[Credential]:
        """Return secrets and certificates of one application in one call."""
        ...

    async def list_owners(self, object_id: str) -> list[Owner]:
        """Return the owners of one application."""
        ...

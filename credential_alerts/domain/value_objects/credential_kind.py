"""Credential kind value object."""

from enum import StrEnum


class CredentialKind(StrEnum):
    """Kind of credential bound to an Entra ID application."""

    SECRET = "Secret"
    CERTIFICATE = "Certificate"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_graph_collection(cls, collection: str) -> "CredentialKind":
        """Classify by the Graph property the credential was listed under."""
        return cls.CERTIFICATE if collection == "keyCredentials" else cls.SECRET

"""Infrastructure adapters - Implementations of application ports."""

from .email import GraphMailSender, SendGridEmailSender
from .entra_id import GraphDirectory
from .storage import AzureBlobObjectStore, LocalObjectStore

__all__ = [
    "AzureBlobObjectStore",
    "GraphDirectory",
    "GraphMailSender",
    "LocalObjectStore",
    "SendGridEmailSender",
]

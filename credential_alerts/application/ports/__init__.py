"""Application ports - Interfaces for external adapters."""

from .directory import Directory
from .email_sender import EmailSender
from .object_store import ObjectStore

__all__ = [
    "Directory",
    "EmailSender",
    "ObjectStore",
]

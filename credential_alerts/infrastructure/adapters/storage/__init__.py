"""Object store adapters."""

from .azure_blob import AzureBlobConfig, AzureBlobObjectStore
from .local import LocalObjectStore

__all__ = [
    "AzureBlobConfig",
    "AzureBlobObjectStore",
    "LocalObjectStore",
]

"""Entra ID adapters."""

from .directory import GraphDirectory
from .graph_client import GraphClient, GraphClientConfig

__all__ = [
    "GraphClient",
    "GraphClientConfig",
    "GraphDirectory",
]

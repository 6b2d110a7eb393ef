"""API adapter for HTTP endpoints."""

from .app import create_app
from .models import HealthResponse, RunResponse, SnapshotResponse

__all__ = [
    "HealthResponse",
    "RunResponse",
    "SnapshotResponse",
    "create_app",
]

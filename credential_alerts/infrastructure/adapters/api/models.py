"""API response models (no owner addresses exposed)."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"]
    version: str
    timestamp: datetime


class SnapshotResponse(BaseModel):
    """Summary of the persisted snapshot."""

    name: str
    read_at: datetime
    total_credentials: int = Field(description="Records in the snapshot")
    total_applications: int = Field(description="Applications with at least one credential")
    secret_count: int
    certificate_count: int


class NotificationSummaryResponse(BaseModel):
    """Dispatch outcome counts."""

    sent: int = 0
    skipped: int = Field(default=0, description="Alerts without any owner e-mail")
    failed: int = 0
    dry_run: int = 0


class RunResponse(BaseModel):
    """Response from triggering a run."""

    success: bool
    message: str
    collected: bool
    alerts: int = Field(description="Alert events produced by evaluation")
    alert_days: list[int]
    snapshot: SnapshotResponse
    notifications: NotificationSummaryResponse
    dry_run: bool = False


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
    detail: str | None = None

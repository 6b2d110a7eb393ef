"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import FastAPI, HTTPException, status
from fastapi.responses import JSONResponse

from ....application.exceptions import SnapshotNotFoundError
from ....domain.value_objects import CredentialKind
from .models import (
    ErrorResponse,
    HealthResponse,
    NotificationSummaryResponse,
    RunResponse,
    SnapshotResponse,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable, Coroutine

    from ....application.use_cases import RunResult
    from ....domain.entities import Snapshot

    RunFunc = Callable[[], Coroutine[None, None, RunResult]]
    ReadFunc = Callable[[], Coroutine[None, None, Snapshot]]

logger = logging.getLogger(__name__)


def _snapshot_to_response(snapshot: Snapshot) -> SnapshotResponse:
    """Convert a snapshot to its API summary (no owner details)."""
    counts = snapshot.count_by_kind()
    return SnapshotResponse(
        name=snapshot.name,
        read_at=snapshot.generated_at,
        total_credentials=len(snapshot),
        total_applications=snapshot.application_count,
        secret_count=counts[CredentialKind.SECRET],
        certificate_count=counts[CredentialKind.CERTIFICATE],
    )


def _result_to_response(result: RunResult, alert_days: list[int]) -> RunResponse:
    summary = result.summary
    return RunResponse(
        success=result.success,
        message="Run completed successfully" if result.success else "Run completed with errors",
        collected=result.collected,
        alerts=len(result.alerts),
        alert_days=alert_days,
        snapshot=_snapshot_to_response(result.snapshot),
        notifications=NotificationSummaryResponse(
            sent=summary.sent,
            skipped=summary.skipped,
            failed=summary.failed,
            dry_run=summary.dry_run,
        ),
        dry_run=result.dry_run,
    )


def create_app(
    run_func: RunFunc,
    alert_func: RunFunc,
    read_snapshot_func: ReadFunc,
    *,
    alert_days: list[int],
    version: str = "1.0.0",
) -> FastAPI:
    """
    Create FastAPI application.

    Args:
        run_func: Async function running collection and alerting.
        alert_func: Async function running alerting only.
        read_snapshot_func: Async function reading the persisted snapshot.
        alert_days: Configured milestones, echoed in responses.
        version: Application version string.

    Returns:
        Configured FastAPI application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        logger.info("API server starting...")
        yield
        logger.info("API server shutting down...")

    app = FastAPI(
        title="Credential Expiry Alerts API",
        description="Collect Entra ID application credentials into a snapshot and alert owners "
        "when a credential reaches a configured expiry milestone. "
        "**No owner e-mail addresses are exposed through this API.**",
        version=version,
        lifespan=lifespan,
        responses={
            500: {"model": ErrorResponse, "description": "Internal server error"},
        },
    )

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            version=version,
            timestamp=datetime.now(UTC),
        )

    @app.get(
        "/api/v1/snapshot",
        response_model=SnapshotResponse,
        tags=["Reports"],
        summary="Get persisted snapshot summary",
        responses={
            404: {"model": ErrorResponse, "description": "No snapshot written yet"},
        },
    )
    async def get_snapshot() -> SnapshotResponse:
        try:
            snapshot = await read_snapshot_func()
        except SnapshotNotFoundError as e:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No snapshot available. Trigger a run first using POST /api/v1/check",
            ) from e
        return _snapshot_to_response(snapshot)

    @app.post(
        "/api/v1/check",
        response_model=RunResponse,
        tags=["Operations"],
        summary="Collect credentials and send alerts",
    )
    async def trigger_check() -> RunResponse:
        try:
            logger.info("API: Triggering full run...")
            result = await run_func()
        except Exception as e:
            logger.exception("API: Run failed")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Run failed: {e}",
            ) from e
        return _result_to_response(result, alert_days)

    @app.post(
        "/api/v1/alerts",
        response_model=RunResponse,
        tags=["Operations"],
        summary="Send alerts from the persisted snapshot",
        responses={
            404: {"model": ErrorResponse, "description": "No snapshot written yet"},
        },
    )
    async def trigger_alerts() -> RunResponse:
        try:
            logger.info("API: Triggering alerting-only run...")
            result = await alert_func()
        except SnapshotNotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
        except Exception as e:
            logger.exception("API: Alerting run failed")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Alerting run failed: {e}",
            ) from e
        return _result_to_response(result, alert_days)

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc: Exception) -> JSONResponse:  # noqa: ARG001
        """Handle uncaught exceptions."""
        logger.exception("Unhandled exception in API")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "detail": str(exc)},
        )

    return app

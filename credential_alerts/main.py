#!/usr/bin/env python3
"""
Entra ID Credential Expiry Alerts

Composition root and application entry point.
Wires together all layers following hexagonal architecture principles.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from croniter import croniter

from . import __version__
from .application.exceptions import ApplicationError, ConfigurationMissingError
from .application.services import (
    CredentialCollector,
    Notifier,
    RetryingClient,
    SnapshotStore,
)
from .application.use_cases import RunExpiryCheck
from .infrastructure.adapters import (
    AzureBlobObjectStore,
    GraphDirectory,
    GraphMailSender,
    LocalObjectStore,
    SendGridEmailSender,
)
from .infrastructure.config import Settings, load_settings

if TYPE_CHECKING:
    from .application.ports import EmailSender, ObjectStore
    from .application.use_cases import RunResult
    from .domain.entities import Snapshot

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


class ApplicationContainer:
    """
    Dependency injection container.

    Responsible for creating and wiring all application components.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize container with settings."""
        self._settings = settings

    def create_retrying_client(self) -> RetryingClient:
        """Create the throttling-aware retry wrapper."""
        return RetryingClient(self._settings.retry_policy)

    def create_object_store(self) -> ObjectStore:
        """Create the durable object store adapter."""
        if self._settings.storage_backend == "local":
            return LocalObjectStore(Path(self._settings.storage_local_path))
        return AzureBlobObjectStore(self._settings.blob_config)

    def create_email_sender(self) -> EmailSender:
        """Create the e-mail provider adapter."""
        if self._settings.email_backend == "sendgrid":
            return SendGridEmailSender(self._settings.sendgrid_config)
        return GraphMailSender(self._settings.graph_config, self._settings.graph_mail_config)

    def create_snapshot_store(self) -> SnapshotStore:
        """Create the snapshot store."""
        return SnapshotStore(
            self.create_object_store(),
            self._settings.report_name,
            staging_dir=self._settings.staging_dir,
        )

    def create_collector(self) -> CredentialCollector:
        """Create the credential collector."""
        return CredentialCollector(
            GraphDirectory(self._settings.graph_config),
            self.create_retrying_client(),
            report_name=self._settings.report_name,
            email_normalizer=self._settings.email_normalizer,
            max_concurrency=self._settings.max_concurrency,
        )

    def create_notifier(self) -> Notifier:
        """Create the alert notifier."""
        return Notifier(
            self.create_email_sender(),
            self._settings.sender_identity,
            retrying_client=self.create_retrying_client(),
            dry_run=self._settings.dry_run,
        )

    def create_check_use_case(self) -> RunExpiryCheck:
        """Create the main use case with all dependencies."""
        return RunExpiryCheck(
            collector=self.create_collector(),
            store=self.create_snapshot_store(),
            notifier=self.create_notifier(),
            alert_days=self._settings.alert_days,
            dry_run=self._settings.dry_run,
        )


class Application:
    """
    Main application orchestrator.

    Handles run modes (single execution, scheduled, or API) and lifecycle.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize application with settings."""
        self._settings = settings
        self._container = ApplicationContainer(settings)

    async def run_once(self) -> RunResult:
        """Execute a single run in the configured phase."""
        use_case = self._container.create_check_use_case()
        if self._settings.run_phase == "alert":
            return await use_case.execute_alerting_only()
        return await use_case.execute()

    async def run_full(self) -> RunResult:
        """Execute collection and alerting."""
        return await self._container.create_check_use_case().execute()

    async def run_alerting_only(self) -> RunResult:
        """Execute alerting against the persisted snapshot."""
        return await self._container.create_check_use_case().execute_alerting_only()

    async def read_snapshot(self) -> Snapshot:
        """Read the persisted snapshot."""
        return await self._container.create_snapshot_store().read()

    async def run_scheduled(self) -> None:
        """Run in scheduled mode with cron expression."""
        logger.info("Starting scheduled mode with cron: %s", self._settings.cron_schedule)

        # Run immediately on startup
        logger.info("Running initial check on startup...")
        await self._run_guarded()

        cron = croniter(self._settings.cron_schedule, datetime.now(UTC))

        while True:
            next_run = cron.get_next(datetime)
            now = datetime.now(UTC)

            # Handle timezone-naive datetime from croniter
            if next_run.tzinfo is None:
                next_run = next_run.replace(tzinfo=UTC)

            sleep_seconds = (next_run - now).total_seconds()

            if sleep_seconds > 0:
                logger.info("Next check scheduled for %s", next_run.isoformat())
                await asyncio.sleep(sleep_seconds)

            logger.info("Running scheduled check...")
            await self._run_guarded()

    async def _run_guarded(self) -> None:
        """Run once, keeping the scheduler alive when a run aborts."""
        try:
            await self.run_once()
        except Exception:
            logger.exception("Scheduled run aborted")

    async def run_api(self) -> None:
        """Run in API server mode."""
        import uvicorn

        from .infrastructure.adapters.api import create_app

        logger.info(
            "Starting API server on %s:%d",
            self._settings.api_host,
            self._settings.api_port,
        )

        app = create_app(
            run_func=self.run_full,
            alert_func=self.run_alerting_only,
            read_snapshot_func=self.read_snapshot,
            alert_days=list(self._settings.alert_days),
            version=__version__,
        )

        config = uvicorn.Config(
            app,
            host=self._settings.api_host,
            port=self._settings.api_port,
            log_level=self._settings.log_level.lower(),
        )
        await uvicorn.Server(config).serve()

    async def run(self) -> int:
        """
        Run the application based on configured mode.

        Returns:
            Exit code (0 for success, 1 for failure).
        """
        # API mode takes precedence if enabled
        if self._settings.api_enabled:
            await self.run_api()
            return 0

        match self._settings.run_mode.lower():
            case "once":
                logger.info("Running in single-execution mode (phase: %s)", self._settings.run_phase)
                result = await self.run_once()
                return 0 if result.success else 1

            case "scheduled":
                await self.run_scheduled()
                return 0  # Never reached in scheduled mode

            case _:
                logger.error(
                    "Invalid RUN_MODE: %s (use 'once', 'scheduled', or set API_ENABLED=true)",
                    self._settings.run_mode,
                )
                return 1


async def async_main() -> int:
    """Async entry point."""
    try:
        logger.info("Credential Expiry Alerts starting...")

        settings = load_settings()
        logging.getLogger().setLevel(settings.log_level.upper())

        app = Application(settings)
        return await app.run()

    except ConfigurationMissingError as e:
        logger.error("Configuration missing: %s", e)
        return 1
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        return 1
    except ApplicationError:
        logger.exception("Run aborted")
        return 1
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        return 0
    except Exception:
        logger.exception("Unexpected error")
        return 1


def main() -> None:
    """Main entry point."""
    exit_code = asyncio.run(async_main())
    sys.exit(exit_code)


if __name__ == "__main__":
    main()

"""Use case for collecting credentials and alerting on expiry milestones."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from ...domain.entities import AlertEvent, Snapshot
from ...domain.services import ExpiryEvaluator
from ...domain.value_objects import AlertDays
from ..services import CredentialCollector, NotificationSummary, Notifier, SnapshotStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunResult:
    """Result of one expiry check run."""

    snapshot: Snapshot
    alerts: tuple[AlertEvent, ...]
    summary: NotificationSummary
    collected: bool
    dry_run: bool

    @property
    def success(self) -> bool:
        """True when no notification failed."""
        return self.summary.failed == 0


class RunExpiryCheck:
    """
    Orchestrates collect, write, read, evaluate and notify.

    The alerting phase always works on the snapshot read back from the
    store, so an alerting-only rerun behaves exactly like the original run.
    """

    def __init__(
        self,
        collector: CredentialCollector,
        store: SnapshotStore,
        notifier: Notifier,
        alert_days: AlertDays,
        *,
        evaluator: ExpiryEvaluator | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
        dry_run: bool = False,
    ) -> None:
        """
        Initialize the use case.

        Args:
            collector: Produces a fresh snapshot from the directory.
            store: Durable snapshot storage.
            notifier: Dispatches alert e-mails.
            alert_days: Milestones that trigger an alert.
            evaluator: Expiry evaluation service.
            clock: Source of "now" for evaluation.
            dry_run: Reported in the result; the notifier does the logging.
        """
        self._collector = collector
        self._store = store
        self._notifier = notifier
        self._alert_days = alert_days
        self._evaluator = evaluator or ExpiryEvaluator()
        self._clock = clock
        self._dry_run = dry_run

    async def execute(self) -> RunResult:
        """
        Run the full pipeline.

        Raises:
            CollectionFailedError: If the directory cannot be listed.
            SnapshotWriteError: If the snapshot cannot be persisted.
        """
        logger.info("Starting credential expiry check...")
        collected = await self._collector.collect()
        await self._store.write(collected)
        return await self._alert(collected=True)

    async def execute_alerting_only(self) -> RunResult:
        """
        Alert against the last persisted snapshot without collecting.

        Raises:
            SnapshotNotFoundError: If no snapshot was ever written.
        """
        logger.info("Starting alerting-only run against the persisted snapshot...")
        return await self._alert(collected=False)

    async def _alert(self, *, collected: bool) -> RunResult:
        snapshot = await self._store.read()
        now = self._clock()
        alerts = tuple(self._evaluator.evaluate(snapshot, now, self._alert_days))
        logger.info(
            "Evaluated %d records as of %s: %d alerts for milestones %s",
            len(snapshot),
            now.date().isoformat(),
            len(alerts),
            list(self._alert_days),
        )

        summary = await self._notifier.notify_all(alerts)
        return RunResult(
            snapshot=snapshot,
            alerts=alerts,
            summary=summary,
            collected=collected,
            dry_run=self._dry_run,
        )

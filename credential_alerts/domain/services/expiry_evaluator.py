"""Domain service for evaluating credential expiry against milestones."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, date, datetime

from ..entities import AlertEvent, Snapshot
from ..value_objects import AlertDays


def days_left(expiry_date: date, now: datetime) -> int:
    """
    Whole calendar days from ``now`` (taken in UTC) until ``expiry_date``.

    Time of day is discarded on both sides, so a credential expiring
    tomorrow at 00:00 UTC is one day away at any moment today.
    """
    now_utc = now.astimezone(UTC) if now.tzinfo else now.replace(tzinfo=UTC)
    return (expiry_date - now_utc.date()).days


class AlertEvents:
    """
    Lazy, restartable sequence of alert events.

    Every iteration re-evaluates the immutable snapshot, so iterating twice
    yields the same events in the same order.
    """

    def __init__(self, snapshot: Snapshot, now: datetime, alert_days: AlertDays) -> None:
        self._snapshot = snapshot
        self._now = now
        self._alert_days = alert_days

    def __iter__(self) -> Iterator[AlertEvent]:
        for record in self._snapshot.records:
            remaining = days_left(record.expiry_date, self._now)
            if remaining in self._alert_days:
                yield AlertEvent(record=record, days_left=remaining)


class ExpiryEvaluator:
    """Decides which credential records hit a configured alert milestone."""

    def evaluate(self, snapshot: Snapshot, now: datetime, alert_days: AlertDays) -> AlertEvents:
        """
        Evaluate a snapshot as of ``now``.

        Args:
            snapshot: Persisted credential records.
            now: Evaluation instant; naive values are treated as UTC.
            alert_days: Exact days-remaining values that trigger an alert.

        Returns:
            Iterable of AlertEvent in snapshot order.
        """
        return AlertEvents(snapshot, now, alert_days)

"""Owner-addressed e-mail notifications for alert events."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum, auto
from html import escape

from ...domain.entities import AlertEvent
from ..ports import EmailSender
from .report_codec import format_date
from .retrying_client import RetryingClient

logger = logging.getLogger(__name__)


class DispatchStatus(StrEnum):
    """Outcome of dispatching one alert event."""

    SENT = auto()
    SKIPPED = auto()
    FAILED = auto()
    DRY_RUN = auto()

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class NotificationSummary:
    """Counts of dispatch outcomes for a batch of alert events."""

    sent: int = 0
    skipped: int = 0
    failed: int = 0
    dry_run: int = 0

    @property
    def total(self) -> int:
        """Number of events processed."""
        return self.sent + self.skipped + self.failed + self.dry_run

    @classmethod
    def from_statuses(cls, statuses: Iterable[DispatchStatus]) -> NotificationSummary:
        counts = dict.fromkeys(DispatchStatus, 0)
        for status in statuses:
            counts[status] += 1
        return cls(
            sent=counts[DispatchStatus.SENT],
            skipped=counts[DispatchStatus.SKIPPED],
            failed=counts[DispatchStatus.FAILED],
            dry_run=counts[DispatchStatus.DRY_RUN],
        )


@dataclass(frozen=True, slots=True)
class SenderIdentity:
    """Address and display name messages are sent from."""

    address: str
    name: str = "Credential Expiry Alerts"


class Notifier:
    """
    Sends one message per alert event to the credential's owners.

    Owners of the same credential share a message; different credentials
    never do, even within one application.
    """

    def __init__(
        self,
        email_sender: EmailSender,
        sender: SenderIdentity,
        *,
        retrying_client: RetryingClient | None = None,
        dry_run: bool = False,
        max_concurrency: int = 4,
    ) -> None:
        """
        Initialize the notifier.

        Args:
            email_sender: Adapter for the e-mail provider.
            sender: From address and display name.
            retrying_client: Backoff wrapper for throttled sends.
            dry_run: If True, log messages instead of sending them.
            max_concurrency: Upper bound on messages in flight.
        """
        if max_concurrency < 1:
            msg = f"max_concurrency must be at least 1, got {max_concurrency}"
            raise ValueError(msg)
        self._email_sender = email_sender
        self._sender = sender
        self._retrying = retrying_client or RetryingClient()
        self._dry_run = dry_run
        self._max_concurrency = max_concurrency

    async def notify(self, event: AlertEvent) -> DispatchStatus:
        """Dispatch a single event; failures are logged, never raised."""
        record = event.record
        recipients = [e for e in record.owner_emails if e.strip()]
        if not recipients:
            logger.warning(
                "No owner e-mail for %s of %s expiring %s (%d days left), skipping",
                record.kind,
                record.application_name,
                format_date(record.expiry_date),
                event.days_left,
            )
            return DispatchStatus.SKIPPED

        subject = render_subject(event)
        if self._dry_run:
            logger.info("DRY RUN: Would send '%s' to %s", subject, ", ".join(recipients))
            return DispatchStatus.DRY_RUN

        try:
            html_body = render_html_body(event)
            accepted = await self._retrying.execute(
                lambda: self._email_sender.send(
                    self._sender.address,
                    self._sender.name,
                    recipients,
                    subject,
                    html_body,
                ),
                description=f"alert e-mail for {record.application_name}",
            )
        except Exception:
            logger.exception("Error sending alert for %s", record.application_name)
            return DispatchStatus.FAILED

        if not accepted:
            logger.warning("E-mail provider rejected alert for %s", record.application_name)
            return DispatchStatus.FAILED

        logger.info("Alert for %s sent to %s", record.application_name, ", ".join(recipients))
        return DispatchStatus.SENT

    async def notify_all(self, events: Iterable[AlertEvent]) -> NotificationSummary:
        """Dispatch every event; one failure never aborts the others."""
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def bounded(event: AlertEvent) -> DispatchStatus:
            async with semaphore:
                return await self.notify(event)

        statuses = await asyncio.gather(*(bounded(e) for e in events))
        summary = NotificationSummary.from_statuses(statuses)
        logger.info(
            "Notifications: %d sent, %d skipped, %d failed, %d dry-run",
            summary.sent,
            summary.skipped,
            summary.failed,
            summary.dry_run,
        )
        return summary


def render_subject(event: AlertEvent) -> str:
    """Subject line for an alert event."""
    unit = "day" if event.days_left == 1 else "days"
    return f"{event.record.kind} for {event.record.application_name} expires in {event.days_left} {unit}"


def render_html_body(event: AlertEvent) -> str:
    """Self-contained HTML body for an alert event."""
    record = event.record
    color = "#dc3545" if event.days_left <= 7 else "#ffc107"
    app_name = escape(record.application_name)
    owners = escape(record.owner_name_display) or "Unknown"
    unit = "day" if event.days_left == 1 else "days"

    return f"""<!DOCTYPE html>
<html>
<head>
<style>
body {{ font-family: Arial, sans-serif; margin: 20px; }}
.header {{ background-color: {color}; color: white; padding: 15px; border-radius: 5px; }}
table {{ border-collapse: collapse; margin: 15px 0; }}
th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
th {{ background-color: #f2f2f2; }}
.footer {{ margin-top: 20px; font-size: 12px; color: #6c757d; }}
</style>
</head>
<body>
<div class="header"><h1>{record.kind} expires in {event.days_left} {unit}</h1></div>
<p>A {str(record.kind).lower()} of the application <strong>{app_name}</strong> is about to expire.
Please rotate it before the expiry date.</p>
<table>
<tr><th>Application</th><td>{app_name}</td></tr>
<tr><th>Type</th><td>{record.kind}</td></tr>
<tr><th>Expiry date</th><td>{format_date(record.expiry_date)}</td></tr>
<tr><th>Days remaining</th><td>{event.days_left}</td></tr>
<tr><th>Owners</th><td>{owners}</td></tr>
</table>
<div class="footer"><p>Credential Expiry Alerts</p></div>
</body>
</html>"""

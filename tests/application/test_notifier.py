"""Tests for the Notifier."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock

import pytest
from conftest import RecordingEmailSender, make_record, no_sleep

from credential_alerts.application.exceptions import ThrottlingError
from credential_alerts.application.services import (
    DispatchStatus,
    NotificationSummary,
    Notifier,
    RetryingClient,
    SenderIdentity,
)
from credential_alerts.application.services.notifier import render_html_body, render_subject
from credential_alerts.domain.entities import AlertEvent
from credential_alerts.domain.value_objects import CredentialKind, RetryPolicy

SENDER = SenderIdentity(address="alerts@example.com", name="Expiry Bot")


def _notifier(sender, **kwargs) -> Notifier:
    return Notifier(sender, SENDER, retrying_client=RetryingClient(RetryPolicy(), sleep=no_sleep), **kwargs)


def _event(days: int = 7, **kwargs) -> AlertEvent:
    return AlertEvent(record=make_record(days, **kwargs), days_left=days)


class TestNotify:
    """Tests for single-event dispatch."""

    @pytest.mark.asyncio
    async def test_one_message_addressed_to_all_owners(self, email_sender: RecordingEmailSender) -> None:
        status = await _notifier(email_sender).notify(_event(7))

        assert status is DispatchStatus.SENT
        assert len(email_sender.messages) == 1
        message = email_sender.messages[0]
        assert message["to"] == ["a@x.com", "b@x.com"]
        assert message["from_address"] == "alerts@example.com"
        assert message["from_name"] == "Expiry Bot"
        assert message["subject"] == "Secret for Payroll API expires in 7 days"

    @pytest.mark.asyncio
    async def test_no_recipients_is_skipped(self, email_sender: RecordingEmailSender, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            status = await _notifier(email_sender).notify(_event(3, emails=()))

        assert status is DispatchStatus.SKIPPED
        assert email_sender.messages == []
        assert "No owner e-mail" in caplog.text

    @pytest.mark.asyncio
    async def test_rejected_send_counts_as_failed(self) -> None:
        sender = RecordingEmailSender(accept=False)

        assert await _notifier(sender).notify(_event()) is DispatchStatus.FAILED

    @pytest.mark.asyncio
    async def test_raised_error_counts_as_failed(self, email_sender: RecordingEmailSender) -> None:
        email_sender.fail_for.add("a@x.com")

        assert await _notifier(email_sender).notify(_event()) is DispatchStatus.FAILED

    @pytest.mark.asyncio
    async def test_throttled_send_is_retried(self) -> None:
        sender = AsyncMock()
        sender.send.side_effect = [ThrottlingError("429"), True]

        status = await _notifier(sender).notify(_event())

        assert status is DispatchStatus.SENT
        assert sender.send.await_count == 2

    @pytest.mark.asyncio
    async def test_dry_run_sends_nothing(self, email_sender: RecordingEmailSender, caplog) -> None:
        with caplog.at_level(logging.INFO):
            status = await _notifier(email_sender, dry_run=True).notify(_event())

        assert status is DispatchStatus.DRY_RUN
        assert email_sender.messages == []
        assert "DRY RUN" in caplog.text


class TestNotifyAll:
    """Tests for batch dispatch."""

    @pytest.mark.asyncio
    async def test_failure_does_not_abort_batch(self, email_sender: RecordingEmailSender) -> None:
        email_sender.fail_for.add("broken@x.com")
        events = [
            _event(1, name="A"),
            _event(2, name="B", emails=("broken@x.com",)),
            _event(3, name="C", emails=()),
            _event(7, name="D"),
        ]

        summary = await _notifier(email_sender).notify_all(events)

        assert summary == NotificationSummary(sent=2, skipped=1, failed=1)
        assert summary.total == 4
        assert sorted(m["subject"].split(" for ")[1].split(" ")[0] for m in email_sender.messages) == ["A", "D"]

    @pytest.mark.asyncio
    async def test_distinct_credentials_get_distinct_messages(self, email_sender: RecordingEmailSender) -> None:
        """Two credentials of one application with the same owners are never merged."""
        events = [
            _event(7, name="Payroll API", kind=CredentialKind.SECRET),
            _event(7, name="Payroll API", kind=CredentialKind.CERTIFICATE),
        ]

        summary = await _notifier(email_sender).notify_all(events)

        assert summary.sent == 2
        assert len(email_sender.messages) == 2

    @pytest.mark.asyncio
    async def test_empty_batch(self, email_sender: RecordingEmailSender) -> None:
        summary = await _notifier(email_sender).notify_all([])

        assert summary == NotificationSummary()
        assert email_sender.messages == []

    def test_invalid_concurrency(self, email_sender: RecordingEmailSender) -> None:
        with pytest.raises(ValueError, match="max_concurrency"):
            _notifier(email_sender, max_concurrency=0)


class TestRendering:
    """Tests for message rendering."""

    def test_subject_singular_day(self) -> None:
        event = _event(1, name="CRM", kind=CredentialKind.CERTIFICATE)

        assert render_subject(event) == "Certificate for CRM expires in 1 day"

    def test_body_contains_details(self) -> None:
        body = render_html_body(_event(7))

        assert "Payroll API" in body
        assert "2026-03-17" in body
        assert "Alice; Bob" in body
        assert "<td>7</td>" in body

    def test_body_escapes_application_name(self) -> None:
        body = render_html_body(_event(7, name="<script>x</script>"))

        assert "<script>" not in body
        assert "&lt;script&gt;" in body

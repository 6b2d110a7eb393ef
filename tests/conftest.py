"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import fnmatch
from collections.abc import Sequence
from datetime import UTC, date, datetime, timedelta

import pytest

from credential_alerts.application.exceptions import SnapshotNotFoundError
from credential_alerts.domain.entities import (
    Application,
    Credential,
    CredentialRecord,
    Owner,
    Snapshot,
)
from credential_alerts.domain.value_objects import AlertDays, CredentialKind

FIXED_NOW = datetime(2026, 3, 10, 14, 30, tzinfo=UTC)


async def no_sleep(_: float) -> None:
    """Sleep replacement that returns immediately."""


class RecordingSleep:
    """Sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FakeDirectory:
    """In-memory Directory port implementation."""

    def __init__(
        self,
        applications: list[Application],
        credentials: dict[str, list[Credential]] | None = None,
        owners: dict[str, list[Owner]] | None = None,
    ) -> None:
        self.applications = applications
        self.credentials = credentials or {}
        self.owners = owners or {}
        self.detail_errors: dict[str, Exception] = {}
        self.owner_errors: dict[str, Exception] = {}
        self.list_error: Exception | None = None
        self.detail_calls: list[str] = []

    async def list_applications(self) -> list[Application]:
        if self.list_error:
            raise self.list_error
        return list(self.applications)

    async def get_application_detail(self, object_id: str) -> list[Credential]:
        self.detail_calls.append(object_id)
        if object_id in self.detail_errors:
            raise self.detail_errors[object_id]
        return list(self.credentials.get(object_id, []))

    async def list_owners(self, object_id: str) -> list[Owner]:
        if object_id in self.owner_errors:
            raise self.owner_errors[object_id]
        return list(self.owners.get(object_id, []))


class InMemoryObjectStore:
    """In-memory ObjectStore port implementation."""

    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}
        self.fail_puts = False

    async def put_blob(self, name: str, data: bytes) -> None:
        if self.fail_puts:
            raise OSError("storage unavailable")
        self.blobs[name] = data

    async def get_blob(self, name: str) -> bytes:
        try:
            return self.blobs[name]
        except KeyError as e:
            raise SnapshotNotFoundError(name) from e

    async def list_blobs(self, pattern: str) -> list[str]:
        return sorted(n for n in self.blobs if fnmatch.fnmatchcase(n, pattern))

    async def delete_blob(self, name: str) -> None:
        self.blobs.pop(name, None)


class RecordingEmailSender:
    """EmailSender port implementation that records messages."""

    def __init__(self, *, accept: bool = True) -> None:
        self.accept = accept
        self.messages: list[dict] = []
        self.fail_for: set[str] = set()

    async def send(
        self,
        from_address: str,
        from_name: str,
        to_addresses: Sequence[str],
        subject: str,
        html_body: str,
    ) -> bool:
        if any(addr in self.fail_for for addr in to_addresses):
            raise RuntimeError("provider down")
        self.messages.append(
            {
                "from_address": from_address,
                "from_name": from_name,
                "to": list(to_addresses),
                "subject": subject,
                "html": html_body,
            }
        )
        return self.accept


def make_record(
    days_from_now: int,
    *,
    name: str = "Payroll API",
    kind: CredentialKind = CredentialKind.SECRET,
    emails: tuple[str, ...] = ("a@x.com", "b@x.com"),
    owners: tuple[str, ...] = ("Alice", "Bob"),
    today: date | None = None,
) -> CredentialRecord:
    """Build a record expiring ``days_from_now`` days after ``today``."""
    base = today or FIXED_NOW.date()
    return CredentialRecord(
        application_name=name,
        expiry_date=base + timedelta(days=days_from_now),
        kind=kind,
        owner_names=owners,
        owner_emails=emails,
    )


@pytest.fixture
def fixed_now() -> datetime:
    """A fixed evaluation instant in the afternoon (UTC)."""
    return FIXED_NOW


@pytest.fixture
def default_alert_days() -> AlertDays:
    """Default alert milestones."""
    return AlertDays()


@pytest.fixture
def sample_snapshot() -> Snapshot:
    """Snapshot with records on and off the default milestones."""
    return Snapshot(
        name="AppCredentialReport",
        records=(
            make_record(7, name="Payroll API"),
            make_record(8, name="Billing"),
            make_record(30, name="CRM", kind=CredentialKind.CERTIFICATE),
            make_record(-2, name="Legacy"),
        ),
        generated_at=FIXED_NOW,
    )


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    """Empty in-memory object store."""
    return InMemoryObjectStore()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    """E-mail sender that accepts every message."""
    return RecordingEmailSender()

"""Credential entity representing a secret or certificate."""

from dataclasses import dataclass
from datetime import UTC, date, datetime

from ..value_objects import CredentialKind


@dataclass(frozen=True, slots=True)
class Credential:
    """A credential (secret or certificate) belonging to an application."""

    kind: CredentialKind
    display_name: str | None
    start_time: datetime | None
    end_time: datetime
    application_id: str
    key_id: str = ""

    def __post_init__(self) -> None:
        """Normalize timestamps to timezone-aware UTC."""
        object.__setattr__(self, "end_time", _as_utc(self.end_time))
        if self.start_time is not None:
            object.__setattr__(self, "start_time", _as_utc(self.start_time))

    @property
    def expiry_date(self) -> date:
        """Calendar date (UTC) on which the credential expires."""
        return self.end_time.date()


def _as_utc(value: datetime) -> datetime:
    return value.astimezone(UTC) if value.tzinfo else value.replace(tzinfo=UTC)

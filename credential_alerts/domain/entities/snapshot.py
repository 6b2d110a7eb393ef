"""Snapshot aggregate root."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, datetime

from ..value_objects import CredentialKind
from .credential_record import CredentialRecord


@dataclass(frozen=True, slots=True)
class Snapshot:
    """All credential records observed in one collection pass."""

    name: str
    records: tuple[CredentialRecord, ...]
    generated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Freeze the record sequence."""
        object.__setattr__(self, "records", tuple(self.records))

    def __len__(self) -> int:
        return len(self.records)

    @property
    def application_count(self) -> int:
        """Count of distinct applications with at least one credential."""
        return len({r.application_name for r in self.records})

    def count_by_kind(self) -> dict[CredentialKind, int]:
        """Record counts per credential kind."""
        counts = Counter(r.kind for r in self.records)
        return {kind: counts.get(kind, 0) for kind in CredentialKind}

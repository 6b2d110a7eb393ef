"""Denormalized credential record stored in a snapshot."""

from dataclasses import dataclass
from datetime import date

from ..value_objects import CredentialKind

OWNER_SEPARATOR = "; "


@dataclass(frozen=True, slots=True)
class CredentialRecord:
    """One credential of one application, with its owners resolved."""

    application_name: str
    expiry_date: date
    kind: CredentialKind
    owner_names: tuple[str, ...] = ()
    owner_emails: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Drop blank addresses and duplicates, keeping first-seen order."""
        emails = tuple(dict.fromkeys(e.strip() for e in self.owner_emails if e and e.strip()))
        object.__setattr__(self, "owner_emails", emails)
        object.__setattr__(self, "owner_names", tuple(self.owner_names))

    @property
    def owner_name_display(self) -> str:
        """Owner display names joined for humans."""
        return OWNER_SEPARATOR.join(self.owner_names)

    @property
    def has_recipients(self) -> bool:
        """Whether at least one deliverable owner address is known."""
        return bool(self.owner_emails)

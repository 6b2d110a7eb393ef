"""Alert event produced by expiry evaluation."""

from dataclasses import dataclass

from .credential_record import CredentialRecord


@dataclass(frozen=True, slots=True)
class AlertEvent:
    """A credential record that hit one of the configured milestones."""

    record: CredentialRecord
    days_left: int

    @property
    def application_name(self) -> str:
        """Name of the application owning the credential."""
        return self.record.application_name

"""Domain entities - Objects with identity and lifecycle."""

from .alert_event import AlertEvent
from .application import Application
from .credential import Credential
from .credential_record import CredentialRecord
from .owner import Owner
from .snapshot import Snapshot

__all__ = [
    "AlertEvent",
    "Application",
    "Credential",
    "CredentialRecord",
    "Owner",
    "Snapshot",
]

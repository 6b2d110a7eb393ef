"""Domain value objects - Immutable objects defined by their attributes."""

from .alert_days import DEFAULT_ALERT_DAYS, AlertDays
from .credential_kind import CredentialKind
from .retry_policy import RetryPolicy

__all__ = [
    "DEFAULT_ALERT_DAYS",
    "AlertDays",
    "CredentialKind",
    "RetryPolicy",
]

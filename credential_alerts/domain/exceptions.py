"""Domain exceptions."""


class DomainError(Exception):
    """Base exception for domain errors."""


class InvalidAlertDaysError(DomainError, ValueError):
    """Raised when the alert-day set is invalid."""


class InvalidRetryPolicyError(DomainError, ValueError):
    """Raised when retry limits are invalid."""


class ReportFormatError(DomainError, ValueError):
    """Raised when a persisted report cannot be decoded."""

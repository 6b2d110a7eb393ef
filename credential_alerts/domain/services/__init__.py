"""Domain services - Stateless operations on domain objects."""

from .expiry_evaluator import AlertEvents, ExpiryEvaluator, days_left
from .owner_email import EmailNormalizer, keep_address, strip_mailbox_prefix

__all__ = [
    "AlertEvents",
    "EmailNormalizer",
    "ExpiryEvaluator",
    "days_left",
    "keep_address",
    "strip_mailbox_prefix",
]

"""Application services - Collection, persistence and dispatch."""

from .credential_collector import DEFAULT_REPORT_NAME, CredentialCollector
from .item_result import ItemResult
from .notifier import DispatchStatus, NotificationSummary, Notifier, SenderIdentity
from .retrying_client import RetryingClient
from .snapshot_store import SnapshotStore

__all__ = [
    "DEFAULT_REPORT_NAME",
    "CredentialCollector",
    "DispatchStatus",
    "ItemResult",
    "NotificationSummary",
    "Notifier",
    "RetryingClient",
    "SenderIdentity",
    "SnapshotStore",
]

"""Best-effort sync of the diary to a remote blob store, with a local cache fallback."""

from .config import SyncConfig
from .documents import DOCUMENT_VERSION
from .reconciler import PendingSync, PullResult, SyncReconciler, SyncSnapshot, SyncStatus

__all__ = [
    "DOCUMENT_VERSION",
    "PendingSync",
    "PullResult",
    "SyncConfig",
    "SyncReconciler",
    "SyncSnapshot",
    "SyncStatus",
]

"""Job board synchronisation adapters."""

from .notifier import SyncNotifier, WebhookSyncNotifier

__all__ = ["SyncNotifier", "WebhookSyncNotifier"]

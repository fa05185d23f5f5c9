"""Notification sinks: how pipeline output reaches the requester."""

from walletscreen.services.notifications.sink import NotificationSink, safe_send
from walletscreen.services.notifications.telegram import TelegramNotifier

__all__ = ["NotificationSink", "TelegramNotifier", "safe_send"]

"""Notification sink protocol."""

from typing import Protocol, runtime_checkable

import structlog

log = structlog.get_logger(__name__)


@runtime_checkable
class NotificationSink(Protocol):
    """Delivers a formatted message to whoever started the current run."""

    async def send(self, text: str) -> None: ...


async def safe_send(notify: NotificationSink, text: str) -> bool:
    """Send through a sink, logging instead of raising on delivery failure.

    Returns:
        True if the sink accepted the message.
    """
    try:
        await notify.send(text)
    except Exception as e:
        log.error("notification_send_failed", error=str(e), preview=text[:40])
        return False
    return True

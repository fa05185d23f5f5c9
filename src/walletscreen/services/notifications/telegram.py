"""Notification sink that posts to one Telegram chat."""

import structlog

from walletscreen.services.telegram.client import TelegramBotClient

log = structlog.get_logger(__name__)


class TelegramNotifier:
    """Sends pipeline messages to the chat that started the run.

    Attributes:
        chat_id: Destination chat.
    """

    def __init__(self, client: TelegramBotClient, chat_id: int | str) -> None:
        self._client = client
        self.chat_id = chat_id

    async def send(self, text: str) -> None:
        await self._client.send_message(self.chat_id, text)
        log.debug("telegram_notification_sent", chat_id=self.chat_id, length=len(text))

"""Telegram Bot API client.

Thin async wrapper over the HTTP Bot API: long-polling for updates,
sending messages and registering the command menu.
"""

from typing import Any

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from walletscreen.core.exceptions import ExternalServiceError
from walletscreen.services.base import BaseAPIClient

log = structlog.get_logger(__name__)

SERVICE_NAME = "telegram"

BOT_COMMANDS: list[tuple[str, str]] = [
    ("scrape", "Screen a list of wallets"),
    ("configure", "Configure your conditions"),
    ("show_config", "Show your current conditions"),
    ("cancel", "Cancel the current step"),
]


def _is_flood_limited(error: BaseException) -> bool:
    return isinstance(error, ExternalServiceError) and error.status_code == 429


def _is_markdown_error(error: ExternalServiceError) -> bool:
    return error.status_code == 400 and "parse entities" in (error.detail or "")


class TelegramBotClient(BaseAPIClient):
    """Async client for the Telegram Bot API.

    Example:
        client = TelegramBotClient(token="123:ABC")
        updates = await client.get_updates(offset=0, timeout=30)
        await client.send_message(chat_id=42, text="hello")
        await client.close()
    """

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.telegram.org",
        timeout: float = 30.0,
    ) -> None:
        super().__init__(
            service=SERVICE_NAME,
            base_url=f"{api_url}/bot{token}",
            timeout=timeout,
            retry_on_429=False,
        )

    @staticmethod
    def _result(response: httpx.Response) -> Any:
        """Unwrap the ``{"ok": ..., "result": ...}`` envelope."""
        try:
            payload = response.json()
        except ValueError as e:
            raise ExternalServiceError(
                service=SERVICE_NAME, message=f"Malformed response: {e}"
            ) from e
        if not isinstance(payload, dict) or not payload.get("ok"):
            description = payload.get("description") if isinstance(payload, dict) else None
            raise ExternalServiceError(
                service=SERVICE_NAME,
                message=description or "Request not ok",
                detail=description,
            )
        return payload.get("result")

    async def get_updates(self, offset: int | None = None, timeout: int = 30) -> list[dict]:
        """Long-poll for new updates.

        Args:
            offset: Identifier of the first update to return.
            timeout: Seconds the server may hold the request open.

        Returns:
            List of update dicts (possibly empty).
        """
        params: dict[str, Any] = {"timeout": timeout, "allowed_updates": '["message"]'}
        if offset is not None:
            params["offset"] = offset

        response = await self.get(
            "/getUpdates",
            params=params,
            timeout=httpx.Timeout(self.timeout + timeout),
        )
        result = self._result(response)
        return result if isinstance(result, list) else []

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception(_is_flood_limited),
        reraise=True,
    )
    async def send_message(
        self,
        chat_id: int | str,
        text: str,
        parse_mode: str | None = "Markdown",
    ) -> dict:
        """Send a text message to a chat.

        Markdown that Telegram cannot parse (e.g. an unmatched ``_`` in a
        wallet address) is resent as plain text.

        Raises:
            ExternalServiceError: If delivery fails.
        """
        payload: dict[str, Any] = {"chat_id": chat_id, "text": text}
        if parse_mode:
            payload["parse_mode"] = parse_mode

        try:
            response = await self.post("/sendMessage", json=payload)
        except ExternalServiceError as e:
            if parse_mode and _is_markdown_error(e):
                log.warning("telegram_markdown_rejected", chat_id=chat_id)
                return await self.send_message(chat_id, text, parse_mode=None)
            raise

        return self._result(response) or {}

    async def set_my_commands(self, commands: list[tuple[str, str]] = BOT_COMMANDS) -> None:
        """Register the bot command menu."""
        response = await self.post(
            "/setMyCommands",
            json={
                "commands": [
                    {"command": command, "description": description}
                    for command, description in commands
                ]
            },
        )
        self._result(response)
        log.info("telegram_commands_registered", count=len(commands))

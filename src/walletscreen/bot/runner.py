"""Long-polling loop that feeds Telegram updates to the dispatcher.

Runs until stopped:
- Fetches updates with getUpdates, acknowledging each by advancing the offset
- Hands updates to the dispatcher one at a time
- A failing update is logged and skipped; storage failures stop the loop
- Transport errors back off exponentially (capped at 60 seconds)

Example:
    runner = BotRunner(client, dispatcher)
    task = asyncio.create_task(runner.run())
    ...
    runner.request_stop()
"""

import asyncio

import structlog

from walletscreen.bot.dispatcher import BotDispatcher
from walletscreen.core.exceptions import ExternalServiceError, StorageError
from walletscreen.services.telegram.client import TelegramBotClient

log = structlog.get_logger(__name__)

MAX_BACKOFF_SECONDS = 60


class BotRunner:
    """Polls Telegram for updates and dispatches them.

    Attributes:
        running: Loop running state.
        poll_timeout: Long-poll timeout passed to getUpdates.
    """

    def __init__(
        self,
        client: TelegramBotClient,
        dispatcher: BotDispatcher,
        poll_timeout: int = 30,
    ) -> None:
        self._client = client
        self._dispatcher = dispatcher
        self.poll_timeout = poll_timeout
        self.running = False
        self._offset: int | None = None
        self._poll_task: asyncio.Task | None = None

    async def _poll(self) -> list[dict]:
        self._poll_task = asyncio.create_task(
            self._client.get_updates(offset=self._offset, timeout=self.poll_timeout)
        )
        try:
            return await self._poll_task
        finally:
            self._poll_task = None

    async def run(self) -> None:
        """Run the poll loop until ``request_stop()`` is called.

        Raises:
            StorageError: If a wizard cannot persist criteria.
        """
        log.info("bot_runner_starting")
        self.running = True
        consecutive_errors = 0

        while self.running:
            try:
                updates = await self._poll()
            except asyncio.CancelledError:
                if self.running:
                    raise
                break
            except ExternalServiceError as e:
                consecutive_errors += 1
                backoff = min(2**consecutive_errors, MAX_BACKOFF_SECONDS)
                log.warning(
                    "telegram_poll_failed",
                    error=str(e),
                    consecutive_errors=consecutive_errors,
                    backoff_seconds=backoff,
                )
                await asyncio.sleep(backoff)
                continue

            consecutive_errors = 0
            for update in updates:
                update_id = update.get("update_id")
                if isinstance(update_id, int):
                    self._offset = update_id + 1
                try:
                    await self._dispatcher.handle_update(update)
                except StorageError:
                    log.critical("condition_store_unwritable", update_id=update_id)
                    self.running = False
                    raise
                except Exception as e:
                    log.exception("update_handler_error", update_id=update_id, error=str(e))

        log.info("bot_runner_stopped")

    def request_stop(self) -> None:
        """Stop the loop, interrupting an in-flight long poll (signal-safe)."""
        if not self.running:
            return
        log.info("bot_runner_stopping")
        self.running = False
        if self._poll_task is not None:
            self._poll_task.cancel()

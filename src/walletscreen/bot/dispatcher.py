"""Routes Telegram messages to commands, the wizard and the qualification engine."""

from dataclasses import dataclass
from typing import Any

import structlog

from walletscreen.bot.wizard import ConfigurationWizard
from walletscreen.constants import messages
from walletscreen.core.exceptions import StorageError
from walletscreen.core.qualification.batching import parse_submission
from walletscreen.core.qualification.engine import QualificationEngine
from walletscreen.data.condition_store import ConditionStore
from walletscreen.services.notifications.telegram import TelegramNotifier
from walletscreen.services.telegram.client import TelegramBotClient

log = structlog.get_logger(__name__)


@dataclass
class ChatSession:
    """Per user-and-chat conversation state. Lives only in memory."""

    wizard: ConfigurationWizard | None = None
    awaiting_wallets: bool = False

    def reset(self) -> None:
        self.wizard = None
        self.awaiting_wallets = False

    @property
    def is_idle(self) -> bool:
        return self.wizard is None and not self.awaiting_wallets


def parse_command(text: str) -> str | None:
    """Return the command name of ``/cmd@botname args``, or None for plain text."""
    if not text.startswith("/"):
        return None
    head = text.split(maxsplit=1)[0]
    return head[1:].split("@", 1)[0].lower()


class BotDispatcher:
    """Handles one Telegram update at a time.

    Attributes:
        sessions: Conversation state keyed by (chat_id, user_id).
    """

    def __init__(
        self,
        client: TelegramBotClient,
        store: ConditionStore,
        engine: QualificationEngine,
    ) -> None:
        self._client = client
        self._store = store
        self._engine = engine
        self.sessions: dict[tuple[int | str, str], ChatSession] = {}
        self._commands = {
            "start": self._cmd_help,
            "help": self._cmd_help,
            "scrape": self._cmd_scrape,
            "configure": self._cmd_configure,
            "show_config": self._cmd_show_config,
            "cancel": self._cmd_cancel,
        }

    async def handle_update(self, update: dict[str, Any]) -> None:
        """Process one update from getUpdates.

        Raises:
            StorageError: If the wizard cannot persist completed criteria.
        """
        message = update.get("message") or {}
        text = message.get("text")
        sender = message.get("from") or {}
        chat = message.get("chat") or {}
        if not text or "id" not in sender or "id" not in chat:
            return

        user_id = str(sender["id"])
        chat_id = chat["id"]
        session = self.sessions.setdefault((chat_id, user_id), ChatSession())

        try:
            command = parse_command(text)
            if command is not None:
                handler = self._commands.get(command)
                if handler is None:
                    await self._reply(chat_id, messages.UNKNOWN_INPUT)
                else:
                    log.info("command_received", command=command, user_id=user_id)
                    await handler(chat_id, user_id, session)
            elif session.wizard is not None:
                await self._continue_wizard(chat_id, session, session.wizard, text)
            elif session.awaiting_wallets:
                await self._accept_submission(chat_id, user_id, session, text)
            else:
                await self._reply(chat_id, messages.UNKNOWN_INPUT)
        finally:
            if session.is_idle:
                self.sessions.pop((chat_id, user_id), None)

    async def _reply(self, chat_id: int | str, text: str) -> None:
        await self._client.send_message(chat_id, text)

    async def _cmd_help(self, chat_id: int | str, user_id: str, session: ChatSession) -> None:
        session.reset()
        await self._reply(chat_id, messages.HELP)

    async def _cmd_configure(
        self, chat_id: int | str, user_id: str, session: ChatSession
    ) -> None:
        session.reset()
        session.wizard = ConfigurationWizard(user_id, self._store)
        await self._reply(chat_id, session.wizard.start())

    async def _cmd_scrape(self, chat_id: int | str, user_id: str, session: ChatSession) -> None:
        session.reset()
        if self._store.get(user_id) is None:
            await self._reply(chat_id, messages.CONFIGURE_FIRST)
            return
        session.awaiting_wallets = True
        await self._reply(chat_id, messages.ASK_WALLETS)

    async def _cmd_show_config(
        self, chat_id: int | str, user_id: str, session: ChatSession
    ) -> None:
        criteria = self._store.get(user_id)
        if criteria is None:
            await self._reply(chat_id, messages.NO_CONFIGURATION)
        else:
            await self._reply(
                chat_id, f"{messages.CURRENT_CONFIG_HEADER}\n\n{criteria.summary()}"
            )

    async def _cmd_cancel(self, chat_id: int | str, user_id: str, session: ChatSession) -> None:
        if session.is_idle:
            await self._reply(chat_id, messages.NOTHING_TO_CANCEL)
            return
        session.reset()
        await self._reply(chat_id, messages.CANCELLED)

    async def _continue_wizard(
        self,
        chat_id: int | str,
        session: ChatSession,
        wizard: ConfigurationWizard,
        text: str,
    ) -> None:
        try:
            reply = wizard.handle(text)
        except StorageError:
            session.reset()
            await self._reply(chat_id, messages.STORAGE_FAILURE)
            raise

        if reply.finished:
            session.wizard = None
        await self._reply(chat_id, reply.text)

    async def _accept_submission(
        self, chat_id: int | str, user_id: str, session: ChatSession, text: str
    ) -> None:
        addresses = parse_submission(text)
        if not addresses:
            await self._reply(chat_id, messages.NO_WALLETS_IN_MESSAGE)
            return

        session.awaiting_wallets = False
        criteria = self._store.get(user_id)
        if criteria is None:
            await self._reply(chat_id, messages.CONFIGURE_FIRST)
            return

        log.info("submission_accepted", user_id=user_id, wallet_count=len(addresses))
        await self._reply(chat_id, messages.SUBMISSION_ACCEPTED)
        self._engine.start(addresses, criteria, TelegramNotifier(self._client, chat_id))

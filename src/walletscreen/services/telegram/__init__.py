"""Telegram Bot API client."""

from walletscreen.services.telegram.client import BOT_COMMANDS, TelegramBotClient

__all__ = ["BOT_COMMANDS", "TelegramBotClient"]

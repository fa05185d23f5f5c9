"""WalletScreen - Main application entry point."""

import asyncio
import contextlib
import signal
import sys

import structlog
from pydantic import ValidationError

from walletscreen.bot.dispatcher import BotDispatcher
from walletscreen.bot.runner import BotRunner
from walletscreen.config import Settings, get_settings
from walletscreen.config.logging import configure_logging
from walletscreen.core.exceptions import ConfigurationError, ExternalServiceError, StorageError
from walletscreen.core.qualification.engine import QualificationEngine
from walletscreen.data.condition_store import ConditionStore
from walletscreen.services.analysis.client import AnalysisClient
from walletscreen.services.analysis.runner import BatchJobRunner
from walletscreen.services.telegram.client import TelegramBotClient

log = structlog.get_logger()


def check_settings(settings: Settings) -> None:
    """Reject settings the bot cannot run with.

    Raises:
        ConfigurationError: If the analysis API key is missing.
    """
    if not settings.analysis_api_key.get_secret_value():
        raise ConfigurationError("Missing required env var: ANALYSIS_API_KEY")


async def run_bot(settings: Settings) -> None:
    """Wire the components together and poll Telegram until stopped.

    On shutdown: cancel running qualifications and close HTTP clients.

    Raises:
        StorageError: If the criteria file cannot be read or written.
    """
    store = ConditionStore(settings.conditions_file)
    store.load()

    telegram = TelegramBotClient(
        token=settings.telegram_bot_token.get_secret_value(),
        api_url=settings.telegram_api_url,
        timeout=settings.http_timeout_seconds,
    )
    analysis = AnalysisClient(
        base_url=settings.analysis_api_url,
        api_key=settings.analysis_api_key.get_secret_value(),
        timeout=settings.http_timeout_seconds,
    )
    engine = QualificationEngine(
        BatchJobRunner(
            analysis,
            poll_interval_seconds=settings.poll_interval_seconds,
            max_poll_attempts=settings.max_poll_attempts,
        ),
        batch_size=settings.batch_size,
        progress_every=settings.progress_every_batches,
        apply_balance_filter=settings.apply_balance_filter,
    )
    runner = BotRunner(
        telegram,
        BotDispatcher(telegram, store, engine),
        poll_timeout=settings.telegram_poll_timeout,
    )

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not available on Windows event loops
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, runner.request_stop)

    try:
        try:
            await telegram.set_my_commands()
        except ExternalServiceError as e:
            log.warning("telegram_commands_not_registered", error=str(e))

        log.info("bot_started", app=settings.app_name, users=len(store))
        await runner.run()
    finally:
        await engine.shutdown()
        await telegram.close()
        await analysis.close()
        log.info("shutdown_complete")


def main() -> None:
    """Run the bot."""
    try:
        settings = get_settings()
        check_settings(settings)
    except (ValidationError, ConfigurationError) as e:
        sys.exit(f"Invalid configuration:\n{e}")

    configure_logging(settings)

    try:
        asyncio.run(run_bot(settings))
    except StorageError as e:
        log.critical("storage_failure", error=str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        log.info("interrupted")


if __name__ == "__main__":
    main()

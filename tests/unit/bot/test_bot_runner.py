"""Tests for the Telegram long-polling loop."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from walletscreen.bot.runner import BotRunner
from walletscreen.core.exceptions import ExternalServiceError, StorageError


@pytest.fixture
def dispatcher() -> MagicMock:
    dispatcher = MagicMock()
    dispatcher.handle_update = AsyncMock()
    return dispatcher


@pytest.fixture
def runner(mock_telegram_client: MagicMock, dispatcher: MagicMock) -> BotRunner:
    return BotRunner(mock_telegram_client, dispatcher, poll_timeout=5)


def _polls_then_stop(runner: BotRunner, *results):
    """get_updates side effect: yield each result, then stop the runner."""
    queue = list(results)

    async def _get_updates(offset=None, timeout=30):
        if not queue:
            runner.request_stop()
            return []
        result = queue.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    return _get_updates


class TestBotRunner:
    """Tests for BotRunner.run."""

    async def test_dispatches_updates_and_advances_offset(
        self, runner: BotRunner, mock_telegram_client: MagicMock, dispatcher: MagicMock
    ) -> None:
        """
        Given: Telegram returns two updates
        When: The loop runs
        Then: Both are dispatched and the next poll acknowledges them
        """
        updates = [{"update_id": 10}, {"update_id": 11}]
        mock_telegram_client.get_updates.side_effect = _polls_then_stop(runner, updates)

        await runner.run()

        assert dispatcher.handle_update.await_count == 2
        last_call = mock_telegram_client.get_updates.await_args_list[-1]
        assert last_call.kwargs == {"offset": 12, "timeout": 5}
        assert runner.running is False

    async def test_handler_error_does_not_stop_loop(
        self, runner: BotRunner, mock_telegram_client: MagicMock, dispatcher: MagicMock
    ) -> None:
        dispatcher.handle_update.side_effect = [RuntimeError("bad update"), None]
        mock_telegram_client.get_updates.side_effect = _polls_then_stop(
            runner, [{"update_id": 1}, {"update_id": 2}]
        )

        await runner.run()

        assert dispatcher.handle_update.await_count == 2

    async def test_storage_error_stops_loop(
        self, runner: BotRunner, mock_telegram_client: MagicMock, dispatcher: MagicMock
    ) -> None:
        dispatcher.handle_update.side_effect = StorageError("disk full")
        mock_telegram_client.get_updates.side_effect = _polls_then_stop(
            runner, [{"update_id": 1}]
        )

        with pytest.raises(StorageError):
            await runner.run()

        assert runner.running is False

    async def test_poll_failure_backs_off(
        self, runner: BotRunner, mock_telegram_client: MagicMock, dispatcher: MagicMock
    ) -> None:
        """
        Given: Two consecutive poll failures
        When: The loop runs
        Then: It sleeps 2s then 4s and keeps polling
        """
        error = ExternalServiceError(service="telegram", message="Bad Gateway")
        mock_telegram_client.get_updates.side_effect = _polls_then_stop(
            runner, error, error, [{"update_id": 3}]
        )

        with patch("walletscreen.bot.runner.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await runner.run()

        assert [c.args[0] for c in sleep.await_args_list] == [2, 4]
        dispatcher.handle_update.assert_awaited_once_with({"update_id": 3})

    async def test_stop_interrupts_long_poll(
        self, runner: BotRunner, mock_telegram_client: MagicMock
    ) -> None:
        blocker = asyncio.Event()

        async def hang(offset=None, timeout=30):
            await blocker.wait()
            return []

        mock_telegram_client.get_updates.side_effect = hang
        task = asyncio.create_task(runner.run())
        await asyncio.sleep(0.01)

        runner.request_stop()
        await asyncio.wait_for(task, timeout=1)

        assert task.done()
        assert runner.running is False

    def test_stop_when_not_running_is_noop(self, runner: BotRunner) -> None:
        runner.request_stop()

        assert runner.running is False

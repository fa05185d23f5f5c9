"""Shared pytest fixtures for WalletScreen tests.

This module provides fixtures for:
- Environment configuration (dummy tokens, no real .env)
- Filter criteria and wallet record factories
- A recording notification sink
- Mocked external API clients

Usage:
    async def test_something(criteria, notifier, wallet_record_factory):
        record = wallet_record_factory()
        ...
"""

import os
from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from tests.factories.wallet import WalletRecordFactory
from walletscreen.data.condition_store import ConditionStore
from walletscreen.models.criteria import FilterCriteria

# =============================================================================
# Environment Configuration
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> Generator[None, None, None]:
    """Set up test environment variables.

    Loads .env file first, then sets defaults for any missing variables.
    """
    from dotenv import load_dotenv

    original_env = os.environ.copy()

    load_dotenv()

    os.environ.setdefault("TELEGRAM_BOT_TOKEN", "123456:test-token")
    os.environ.setdefault("ANALYSIS_API_KEY", "test-api-key")

    yield

    os.environ.clear()
    os.environ.update(original_env)


# =============================================================================
# Domain Fixtures
# =============================================================================


@pytest.fixture
def criteria() -> FilterCriteria:
    """Criteria used throughout the docs: 10 min, 0 SOL, 0 SOL, 50%, 7 days."""
    return FilterCriteria(
        avg_trading_time_minutes=10,
        net_pl_min_sol=0,
        balance_min_sol=0,
        win_rate_min_percent=50,
        last_trade_max_days_ago=7,
    )


@pytest.fixture
def wallet_record_factory() -> type[WalletRecordFactory]:
    """Provide factory for raw analysis API wallet records."""
    return WalletRecordFactory


@pytest.fixture
def condition_store(tmp_path: Path) -> ConditionStore:
    """Loaded ConditionStore backed by a temp file."""
    store = ConditionStore(tmp_path / "conditions.json")
    store.load()
    return store


@pytest.fixture
def frozen_time() -> datetime:
    """Provide a fixed datetime for deterministic tests."""
    return datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def valid_solana_address() -> str:
    """Provide a valid Solana wallet address format."""
    return "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"


# =============================================================================
# Notification Sink
# =============================================================================


class RecordingNotifier:
    """Notification sink that keeps every message it was sent."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    async def send(self, text: str) -> None:
        self.messages.append(text)


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Provide a recording notification sink."""
    return RecordingNotifier()


# =============================================================================
# Mock External APIs
# =============================================================================


@pytest.fixture
def mock_analysis_client() -> MagicMock:
    """Mock batch analysis API client.

    Submits return task "task-1"; configure ``get_batch_status`` per test.
    """
    mock = MagicMock()
    mock.submit_batch = AsyncMock(return_value="task-1")
    mock.get_batch_status = AsyncMock()
    mock.close = AsyncMock()
    return mock


@pytest.fixture
def mock_telegram_client() -> MagicMock:
    """Mock Telegram Bot API client."""
    mock = MagicMock()
    mock.send_message = AsyncMock(return_value={})
    mock.get_updates = AsyncMock(return_value=[])
    mock.set_my_commands = AsyncMock()
    mock.close = AsyncMock()
    return mock

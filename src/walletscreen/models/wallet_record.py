"""Typed view over a wallet record returned by the batch analysis API.

Records arrive as untrusted dicts. ``WalletMetrics.from_record`` returns
None instead of raising when the record does not match the wire contract,
so a malformed record is simply not reported.
"""

import math
from datetime import UTC, datetime
from typing import Any

import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator

from walletscreen.constants.screening import SECONDS_PER_DAY, SECONDS_PER_MINUTE

log = structlog.get_logger(__name__)


class GeneralPerformance(BaseModel):
    """``summary.general_performance`` block."""

    last_trade_timestamp: datetime
    net_sol: float = Field(allow_inf_nan=False)
    tokens_traded: int | float | None = None
    current_balance_sol: float | None = None

    @field_validator("last_trade_timestamp", mode="before")
    @classmethod
    def reject_empty_timestamp(cls, v: Any) -> Any:
        """Treat empty or zero timestamps as missing."""
        if not v:
            raise ValueError("last_trade_timestamp is empty")
        return v

    @field_validator("tokens_traded", "current_balance_sol", mode="before")
    @classmethod
    def unreadable_to_none(cls, v: Any) -> Any:
        """Optional figures that are not a finite number count as not reported."""
        if isinstance(v, bool) or not isinstance(v, int | float | str):
            return None
        try:
            number = float(v)
        except (ValueError, OverflowError):
            return None
        if not math.isfinite(number):
            return None
        return number if isinstance(v, str) else v

    @field_validator("last_trade_timestamp")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v


class ClosedTradesOverview(BaseModel):
    """``summary.closed_trades_overview`` block."""

    win_rate_percent: float = Field(allow_inf_nan=False)


class Deltas(BaseModel):
    """``summary.deltas`` block. Deltas are in seconds."""

    overall_mean_delta: float = Field(allow_inf_nan=False)


class WalletSummary(BaseModel):
    """``summary`` block."""

    general_performance: GeneralPerformance
    closed_trades_overview: ClosedTradesOverview
    deltas: Deltas


class WalletMetrics(BaseModel):
    """Validated metrics of one analysed wallet.

    Attributes:
        wallet_address: Analysed wallet.
        summary: Nested performance blocks.
    """

    wallet_address: str = ""
    summary: WalletSummary

    @field_validator("wallet_address", mode="before")
    @classmethod
    def address_or_empty(cls, v: Any) -> Any:
        """The address is only displayed; anything but a string becomes empty."""
        return v if isinstance(v, str) else ""

    @classmethod
    def from_record(cls, record: Any) -> "WalletMetrics | None":
        """Validate a raw record, returning None if required fields are missing."""
        try:
            return cls.model_validate(record)
        except ValidationError as e:
            wallet = record.get("wallet_address", "") if isinstance(record, dict) else ""
            log.debug(
                "wallet_record_incomplete",
                wallet_address=str(wallet)[:8] + "...",
                errors=e.error_count(),
            )
            return None

    @property
    def last_trade_at(self) -> datetime:
        return self.summary.general_performance.last_trade_timestamp

    @property
    def net_pl_sol(self) -> float:
        return self.summary.general_performance.net_sol

    @property
    def win_rate_percent(self) -> float:
        return self.summary.closed_trades_overview.win_rate_percent

    @property
    def avg_trading_time_minutes(self) -> float:
        return self.summary.deltas.overall_mean_delta / SECONDS_PER_MINUTE

    @property
    def tokens_traded(self) -> int | float | None:
        return self.summary.general_performance.tokens_traded

    @property
    def current_balance_sol(self) -> float | None:
        return self.summary.general_performance.current_balance_sol

    def days_since_last_trade(self, now: datetime | None = None) -> float:
        """Fractional days between the last trade and ``now`` (UTC)."""
        now = now or datetime.now(UTC)
        return (now - self.last_trade_at).total_seconds() / SECONDS_PER_DAY

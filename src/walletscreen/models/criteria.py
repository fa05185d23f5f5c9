"""Per-user wallet filter criteria.

The JSON aliases are the keys the criteria file has always used, so
existing ``conditions.json`` files keep loading.
"""

from pydantic import BaseModel, ConfigDict, Field

from walletscreen.constants.messages import CRITERIA_SUMMARY_TEMPLATE


def format_number(value: float) -> str:
    """Render a number without a trailing ``.0`` for whole values."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


class FilterCriteria(BaseModel):
    """Thresholds a wallet must meet to be reported.

    Attributes:
        avg_trading_time_minutes: Minimum mean trade duration in minutes.
        net_pl_min_sol: Minimum net profit in SOL.
        balance_min_sol: Minimum current balance in SOL (only applied when
            the balance filter is enabled).
        win_rate_min_percent: Minimum win rate, 0-100.
        last_trade_max_days_ago: Maximum age of the last trade in days.

    Example:
        criteria = FilterCriteria(
            avg_trading_time_minutes=10,
            net_pl_min_sol=0,
            balance_min_sol=0,
            win_rate_min_percent=50,
            last_trade_max_days_ago=7,
        )
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    avg_trading_time_minutes: float = Field(
        alias="avgTradingTime", ge=0, allow_inf_nan=False
    )
    net_pl_min_sol: float = Field(alias="netPL", allow_inf_nan=False)
    balance_min_sol: float = Field(alias="balanceActual", allow_inf_nan=False)
    win_rate_min_percent: float = Field(
        alias="winRate", ge=0, le=100, allow_inf_nan=False
    )
    last_trade_max_days_ago: int = Field(alias="lastTradeDays", ge=0)

    def to_storage(self) -> dict[str, float | int]:
        """Serialize using the on-disk key names."""
        return self.model_dump(by_alias=True)

    def summary(self) -> str:
        """Human-readable multi-line summary of the criteria."""
        return CRITERIA_SUMMARY_TEMPLATE.format(
            avg_time=format_number(self.avg_trading_time_minutes),
            net_pl=format_number(self.net_pl_min_sol),
            balance=format_number(self.balance_min_sol),
            win_rate=format_number(self.win_rate_min_percent),
            last_trade_days=self.last_trade_max_days_ago,
        )

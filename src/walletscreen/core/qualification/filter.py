"""Wallet qualification against user filter criteria."""

from datetime import UTC, datetime
from typing import Any

import structlog

from walletscreen.models.criteria import FilterCriteria
from walletscreen.models.wallet_record import WalletMetrics

log = structlog.get_logger(__name__)


def meets_criteria(
    metrics: WalletMetrics,
    criteria: FilterCriteria,
    now: datetime,
    apply_balance_filter: bool = False,
) -> bool:
    """Check validated wallet metrics against criteria.

    All thresholds are inclusive. The balance minimum is only enforced when
    ``apply_balance_filter`` is set; a wallet without a reported balance then
    fails.
    """
    checks = (
        metrics.days_since_last_trade(now) <= criteria.last_trade_max_days_ago
        and metrics.win_rate_percent >= criteria.win_rate_min_percent
        and metrics.net_pl_sol >= criteria.net_pl_min_sol
        and metrics.avg_trading_time_minutes >= criteria.avg_trading_time_minutes
    )
    if checks and apply_balance_filter:
        balance = metrics.current_balance_sol
        checks = balance is not None and balance >= criteria.balance_min_sol
    return checks


def qualifies(
    record: Any,
    criteria: FilterCriteria,
    now: datetime | None = None,
    apply_balance_filter: bool = False,
) -> bool:
    """Return True if a raw wallet record meets the criteria.

    Records missing any required field are rejected without error.

    Example:
        if qualifies(record, criteria):
            report.append(record)
    """
    metrics = WalletMetrics.from_record(record)
    if metrics is None:
        return False

    now = now or datetime.now(UTC)
    is_valid = meets_criteria(metrics, criteria, now, apply_balance_filter)

    log.debug(
        "wallet_evaluated",
        wallet_address=metrics.wallet_address[:8] + "...",
        valid=is_valid,
        days_ago=round(metrics.days_since_last_trade(now), 2),
        win_rate=metrics.win_rate_percent,
        net_pl=metrics.net_pl_sol,
        avg_trading_time=round(metrics.avg_trading_time_minutes, 2),
    )
    return is_valid


def filter_records(
    records: list[Any],
    criteria: FilterCriteria,
    now: datetime | None = None,
    apply_balance_filter: bool = False,
) -> list[Any]:
    """Keep the qualifying records, in their original order."""
    now = now or datetime.now(UTC)
    return [r for r in records if qualifies(r, criteria, now, apply_balance_filter)]

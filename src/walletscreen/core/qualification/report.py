"""Formatting of progress and result messages."""

from typing import Any

from walletscreen.constants.messages import (
    NO_QUALIFYING_WALLETS,
    PROGRESS_TEMPLATE,
    RESULTS_HEADER,
)
from walletscreen.constants.screening import TELEGRAM_MAX_MESSAGE_LENGTH
from walletscreen.models.criteria import format_number
from walletscreen.models.wallet_record import WalletMetrics


def progress_percent(processed: int, total: int) -> int:
    """Percentage of batches processed, rounded half up like the bot always did."""
    if total <= 0:
        return 100
    return int(100 * processed / total + 0.5)


def progress_message(processed: int, total: int) -> str:
    return PROGRESS_TEMPLATE.format(percent=progress_percent(processed, total))


def format_wallet(record: Any) -> str:
    """Render one qualifying wallet as a Markdown block."""
    metrics = WalletMetrics.from_record(record)
    if metrics is None:
        # Only qualified records reach here, which always validate
        raise ValueError("record does not match the wallet metrics contract")

    tokens = metrics.tokens_traded
    return (
        f"💼 *Wallet:* `{metrics.wallet_address}`\n"
        f"📊 *Tokens traded:* {format_number(tokens) if tokens is not None else 'n/a'}\n"
        f"💰 *Net profit (SOL):* {metrics.net_pl_sol:.2f}\n"
        f"🏆 *Win rate:* {format_number(metrics.win_rate_percent)}%\n"
        f"⏱️ *Avg trading time:* {metrics.avg_trading_time_minutes:.2f} minutes\n"
        f"📅 *Last trade:* {metrics.last_trade_at.isoformat()}"
    )


def format_report(
    records: list[Any], max_length: int = TELEGRAM_MAX_MESSAGE_LENGTH
) -> list[str]:
    """Build the final report as one or more messages.

    A single message holds every wallet unless that would exceed
    ``max_length``; the report is then split between wallet blocks.
    """
    if not records:
        return [NO_QUALIFYING_WALLETS]

    messages: list[str] = []
    current = RESULTS_HEADER
    for block in (format_wallet(r) for r in records):
        candidate = f"{current}\n\n{block}"
        if len(candidate) > max_length and current != RESULTS_HEADER:
            messages.append(current)
            current = block
        else:
            current = candidate
    messages.append(current)
    return messages

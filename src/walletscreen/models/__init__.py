"""Pydantic models for screening criteria and analysis results."""

from walletscreen.models.criteria import FilterCriteria
from walletscreen.models.wallet_record import (
    ClosedTradesOverview,
    Deltas,
    GeneralPerformance,
    WalletMetrics,
    WalletSummary,
)

__all__ = [
    "ClosedTradesOverview",
    "Deltas",
    "FilterCriteria",
    "GeneralPerformance",
    "WalletMetrics",
    "WalletSummary",
]

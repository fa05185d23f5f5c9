"""Wallet qualification pipeline."""

from walletscreen.core.qualification.batching import parse_submission, partition_batches
from walletscreen.core.qualification.engine import QualificationEngine
from walletscreen.core.qualification.filter import filter_records, meets_criteria, qualifies
from walletscreen.core.qualification.report import (
    format_report,
    format_wallet,
    progress_message,
    progress_percent,
)

__all__ = [
    "QualificationEngine",
    "filter_records",
    "format_report",
    "format_wallet",
    "meets_criteria",
    "parse_submission",
    "partition_batches",
    "progress_message",
    "progress_percent",
    "qualifies",
]

"""Batch analysis API client and per-batch job runner."""

from walletscreen.services.analysis.client import AnalysisClient
from walletscreen.services.analysis.models import BatchStatus, BatchSubmission
from walletscreen.services.analysis.runner import (
    BatchErrorKind,
    BatchJobRunner,
    classify_batch_error,
)

__all__ = [
    "AnalysisClient",
    "BatchErrorKind",
    "BatchJobRunner",
    "BatchStatus",
    "BatchSubmission",
    "classify_batch_error",
]

"""Submit one batch of wallets and wait for the analysis job to finish.

Every failure is absorbed here: the caller always gets a (possibly empty)
list of raw wallet records, and the requester is told about failures that
concern them (rate limits and unexpected errors).
"""

import asyncio
from enum import Enum
from typing import Any

import structlog

from walletscreen.constants.messages import GENERIC_FAILURE, RATE_LIMIT_ADVISORY
from walletscreen.constants.screening import (
    ADDRESS_ERROR_MARKERS,
    POLL_INTERVAL_SECONDS,
    RATE_LIMIT_MARKERS,
    STATUS_COMPLETED,
    STATUS_ERROR,
    STATUS_PROCESSING,
)
from walletscreen.core.exceptions import ExternalServiceError
from walletscreen.services.analysis.client import AnalysisClient
from walletscreen.services.notifications.sink import NotificationSink, safe_send

log = structlog.get_logger(__name__)


class BatchErrorKind(Enum):
    """How a failed batch is handled."""

    ADDRESS_VALIDATION = "address_validation"  # Skip batch, log only
    RATE_LIMIT = "rate_limit"  # Skip batch, advise requester
    GENERIC = "generic"


def classify_batch_error(
    message: str | None, status_code: int | None = None
) -> BatchErrorKind:
    """Classify an error reported by the analysis service.

    Args:
        message: Job ``error`` text or the error payload's ``detail``.
        status_code: HTTP status, when the error came from a response.

    Returns:
        The error kind.

    Example:
        >>> classify_batch_error("Daily rate limit exceeded")
        <BatchErrorKind.RATE_LIMIT: 'rate_limit'>
    """
    if status_code == 429:
        return BatchErrorKind.RATE_LIMIT

    text = (message or "").lower()
    if any(marker in text for marker in RATE_LIMIT_MARKERS):
        return BatchErrorKind.RATE_LIMIT
    if any(marker in text for marker in ADDRESS_ERROR_MARKERS):
        return BatchErrorKind.ADDRESS_VALIDATION
    return BatchErrorKind.GENERIC


class BatchJobRunner:
    """Runs one analysis job per batch of wallet addresses.

    Attributes:
        poll_interval_seconds: Sleep between status polls.
        max_poll_attempts: Polls before giving up; None waits indefinitely.

    Example:
        runner = BatchJobRunner(client)
        records = await runner.submit_and_await(batch, notifier)
    """

    def __init__(
        self,
        client: AnalysisClient,
        poll_interval_seconds: float = POLL_INTERVAL_SECONDS,
        max_poll_attempts: int | None = None,
    ) -> None:
        self._client = client
        self.poll_interval_seconds = poll_interval_seconds
        self.max_poll_attempts = max_poll_attempts

    async def submit_and_await(
        self, batch: list[str], notify: NotificationSink
    ) -> list[Any]:
        """Submit a batch and poll it to a terminal state.

        Args:
            batch: Wallet addresses (one batch).
            notify: Sink for requester-facing advisories.

        Returns:
            Raw wallet records on success, otherwise an empty list.
        """
        batch_log = log.bind(
            batch_size=len(batch),
            first_wallet=batch[0][:8] + "..." if batch else "",
        )

        try:
            task_id = await self._client.submit_batch(batch)
            return await self._await_results(task_id, notify)

        except ExternalServiceError as e:
            kind = (
                classify_batch_error(e.detail, e.status_code)
                if e.detail is not None or e.status_code == 429
                else BatchErrorKind.GENERIC
            )
            batch_log.error(
                "batch_request_failed",
                error=str(e),
                status_code=e.status_code,
                kind=kind.value,
            )
            await self._report(kind, notify, notify_generic=True)
            return []

        except Exception as e:
            batch_log.exception("batch_unexpected_error", error=str(e))
            await safe_send(notify, GENERIC_FAILURE)
            return []

    async def _await_results(self, task_id: str, notify: NotificationSink) -> list[Any]:
        attempts = 0
        while True:
            status = await self._client.get_batch_status(task_id)
            attempts += 1

            if status.status == STATUS_PROCESSING:
                if self.max_poll_attempts is not None and attempts >= self.max_poll_attempts:
                    log.error("batch_poll_timeout", task_id=task_id, attempts=attempts)
                    await safe_send(notify, GENERIC_FAILURE)
                    return []
                await asyncio.sleep(self.poll_interval_seconds)
                continue

            if status.status == STATUS_COMPLETED:
                log.info(
                    "batch_completed",
                    task_id=task_id,
                    result_count=len(status.results),
                    polls=attempts,
                )
                return status.results

            if status.status == STATUS_ERROR:
                kind = classify_batch_error(status.error)
                log.error(
                    "batch_job_error", task_id=task_id, error=status.error, kind=kind.value
                )
                await self._report(kind, notify, notify_generic=False)
                return []

            raise ExternalServiceError(
                service="analysis", message=f"Unknown job status: {status.status}"
            )

    async def _report(
        self, kind: BatchErrorKind, notify: NotificationSink, notify_generic: bool
    ) -> None:
        if kind is BatchErrorKind.RATE_LIMIT:
            await safe_send(notify, RATE_LIMIT_ADVISORY)
        elif kind is BatchErrorKind.GENERIC and notify_generic:
            await safe_send(notify, GENERIC_FAILURE)

"""Qualification engine: screen a whole submission, batch by batch.

A run is started from a chat handler and continues as a detached asyncio
task after the handler has replied. All further output goes through the
run's notification sink: progress after every ``progress_every`` batches
and after the last one, then either the report or a "no wallets" message.
"""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import structlog

from walletscreen.constants.messages import GENERIC_FAILURE
from walletscreen.constants.screening import BATCH_SIZE, PROGRESS_EVERY_BATCHES
from walletscreen.core.qualification.batching import partition_batches
from walletscreen.core.qualification.filter import filter_records
from walletscreen.core.qualification.report import format_report, progress_message
from walletscreen.models.criteria import FilterCriteria
from walletscreen.services.analysis.runner import BatchJobRunner
from walletscreen.services.notifications.sink import NotificationSink, safe_send

log = structlog.get_logger(__name__)


class QualificationEngine:
    """Drives the batch runner over a submission and filters the results.

    Batches run strictly one after another, so results keep submission
    order and the analysis service sees one job at a time.

    Attributes:
        batch_size: Addresses per analysis job.
        progress_every: Batches between progress messages.
        apply_balance_filter: Enforce the balance minimum as well.

    Example:
        engine = QualificationEngine(runner)
        task = engine.start(addresses, criteria, notifier)
    """

    def __init__(
        self,
        runner: BatchJobRunner,
        batch_size: int = BATCH_SIZE,
        progress_every: int = PROGRESS_EVERY_BATCHES,
        apply_balance_filter: bool = False,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._runner = runner
        self.batch_size = batch_size
        self.progress_every = progress_every
        self.apply_balance_filter = apply_balance_filter
        self._clock = clock or (lambda: datetime.now(UTC))
        self._tasks: set[asyncio.Task] = set()

    async def qualify(
        self,
        addresses: list[str],
        criteria: FilterCriteria,
        notify: NotificationSink,
    ) -> list[Any]:
        """Screen every address and report the qualifying wallets.

        Args:
            addresses: Wallet addresses in submission order.
            criteria: The requester's thresholds.
            notify: Where progress and results are sent.

        Returns:
            Qualifying raw records in submission order.
        """
        batches = partition_batches(addresses, self.batch_size)
        total = len(batches)
        run_log = log.bind(wallet_count=len(addresses), batch_count=total)
        run_log.info("qualification_started")

        results: list[Any] = []
        for index, batch in enumerate(batches, start=1):
            records = await self._runner.submit_and_await(batch, notify)

            if records:
                accepted = filter_records(
                    records,
                    criteria,
                    now=self._clock(),
                    apply_balance_filter=self.apply_balance_filter,
                )
                results.extend(accepted)
                run_log.info(
                    "batch_filtered",
                    batch=index,
                    returned=len(records),
                    qualified=len(accepted),
                )
            else:
                run_log.info("batch_no_results", batch=index)

            if index % self.progress_every == 0 or index == total:
                await safe_send(notify, progress_message(index, total))

        for message in format_report(results):
            await safe_send(notify, message)

        run_log.info("qualification_finished", qualified=len(results))
        return results

    async def _run_detached(
        self,
        addresses: list[str],
        criteria: FilterCriteria,
        notify: NotificationSink,
    ) -> list[Any]:
        try:
            return await self.qualify(addresses, criteria, notify)
        except Exception as e:
            log.exception("qualification_crashed", error=str(e))
            await safe_send(notify, GENERIC_FAILURE)
            return []

    def start(
        self,
        addresses: list[str],
        criteria: FilterCriteria,
        notify: NotificationSink,
    ) -> asyncio.Task:
        """Start a qualification run in the background and return its task.

        The engine keeps a reference to the task until it finishes.
        """
        task = asyncio.create_task(self._run_detached(addresses, criteria, notify))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        log.info("qualification_scheduled", wallet_count=len(addresses))
        return task

    @property
    def active_runs(self) -> int:
        return len(self._tasks)

    async def shutdown(self) -> None:
        """Cancel outstanding runs and wait for them to unwind."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            log.info("qualification_runs_cancelled", count=len(tasks))

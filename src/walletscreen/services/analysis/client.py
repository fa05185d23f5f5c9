"""Batch analysis API client.

The service analyses wallets asynchronously: a batch is submitted, which
returns a task id, and the task is polled until it completes or fails.
"""

import structlog
from pydantic import ValidationError

from walletscreen.constants.screening import BATCH_STATUS_PATH, SUBMIT_BATCH_PATH
from walletscreen.core.exceptions import ExternalServiceError
from walletscreen.services.analysis.models import BatchStatus, BatchSubmission
from walletscreen.services.base import BaseAPIClient

log = structlog.get_logger(__name__)

SERVICE_NAME = "analysis"


class AnalysisClient(BaseAPIClient):
    """Async client for the batch analysis API.

    429 responses are not retried: the service uses them for its daily
    quota, which retrying within seconds cannot recover. Submissions are
    only retried when the connection itself failed.

    Example:
        client = AnalysisClient(base_url="https://api.dedge.pro", api_key="...")
        task_id = await client.submit_batch(["9xQe...", "7xKX..."])
        status = await client.get_batch_status(task_id)
        await client.close()
    """

    def __init__(self, base_url: str, api_key: str, timeout: float = 30.0) -> None:
        super().__init__(
            service=SERVICE_NAME,
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json", "X-API-Key": api_key},
            retry_on_429=False,
        )
        log.info("analysis_client_initialized", base_url=base_url)

    async def submit_batch(self, addresses: list[str]) -> str:
        """Submit a batch of wallet addresses for analysis.

        Args:
            addresses: Wallet addresses to analyse.

        Returns:
            The task id to poll.

        Raises:
            ExternalServiceError: On HTTP failure or a malformed response.
        """
        # Every accepted submission creates a job and spends quota
        response = await self.post(
            SUBMIT_BATCH_PATH, json={"wallet_addresses": addresses}, resend=False
        )
        try:
            submission = BatchSubmission.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ExternalServiceError(
                service=SERVICE_NAME, message=f"Malformed submit response: {e}"
            ) from e

        log.info("batch_submitted", task_id=submission.task_id, wallet_count=len(addresses))
        return submission.task_id

    async def get_batch_status(self, task_id: str) -> BatchStatus:
        """Fetch the current status of a submitted batch.

        Raises:
            ExternalServiceError: On HTTP failure or a malformed response.
        """
        response = await self.get(BATCH_STATUS_PATH.format(task_id=task_id))
        try:
            status = BatchStatus.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ExternalServiceError(
                service=SERVICE_NAME, message=f"Malformed status response: {e}"
            ) from e

        log.debug("batch_status_polled", task_id=task_id, status=status.status)
        return status

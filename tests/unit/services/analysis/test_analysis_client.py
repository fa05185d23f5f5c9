"""Tests for the batch analysis API client."""

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest
import respx
from httpx import Response

from walletscreen.core.exceptions import ExternalServiceError
from walletscreen.services.analysis.client import AnalysisClient

BASE_URL = "https://api.dedge.pro"


@pytest.fixture
async def client():
    client = AnalysisClient(base_url=BASE_URL, api_key="secret-key")
    yield client
    await client.close()


class TestSubmitBatch:
    """Tests for submit_batch."""

    @respx.mock
    async def test_submit_returns_task_id(self, client: AnalysisClient) -> None:
        """
        Given: The API accepts the batch
        When: submit_batch is called
        Then: The task id is returned and the request is authenticated
        """
        route = respx.post(f"{BASE_URL}/process_wallet_batch").mock(
            return_value=Response(200, json={"task_id": "abc-123"})
        )

        task_id = await client.submit_batch(["wallet1", "wallet2"])

        assert task_id == "abc-123"
        request = route.calls.last.request
        assert request.headers["X-API-Key"] == "secret-key"
        assert json.loads(request.content) == {"wallet_addresses": ["wallet1", "wallet2"]}

    @respx.mock
    async def test_numeric_task_id_coerced(self, client: AnalysisClient) -> None:
        respx.post(f"{BASE_URL}/process_wallet_batch").mock(
            return_value=Response(200, json={"task_id": 17})
        )

        assert await client.submit_batch(["w"]) == "17"

    @respx.mock
    async def test_missing_task_id_raises(self, client: AnalysisClient) -> None:
        respx.post(f"{BASE_URL}/process_wallet_batch").mock(
            return_value=Response(200, json={"queued": True})
        )

        with pytest.raises(ExternalServiceError, match="Malformed submit response"):
            await client.submit_batch(["w"])

    @respx.mock
    async def test_rate_limit_not_retried(self, client: AnalysisClient) -> None:
        """
        Given: The API answers 429 (daily quota)
        When: submit_batch is called
        Then: ExternalServiceError is raised after a single request
        """
        route = respx.post(f"{BASE_URL}/process_wallet_batch").mock(
            return_value=Response(429, json={"detail": "Daily rate limit exceeded"})
        )

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.submit_batch(["w"])

        assert exc_info.value.status_code == 429
        assert exc_info.value.detail == "Daily rate limit exceeded"
        assert route.call_count == 1

    @respx.mock
    async def test_read_timeout_not_resubmitted(self, client: AnalysisClient) -> None:
        """
        Given: The submit request times out after it was sent
        When: submit_batch is called
        Then: It fails after one POST instead of creating a second job
        """
        route = respx.post(f"{BASE_URL}/process_wallet_batch").mock(
            side_effect=[httpx.ReadTimeout("timed out"), Response(200, json={"task_id": "a"})]
        )

        with pytest.raises(ExternalServiceError):
            await client.submit_batch(["w"])

        assert route.call_count == 1

    @respx.mock
    async def test_server_error_not_resubmitted(self, client: AnalysisClient) -> None:
        route = respx.post(f"{BASE_URL}/process_wallet_batch").mock(
            side_effect=[Response(502), Response(200, json={"task_id": "t"})]
        )

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.submit_batch(["w"])

        assert exc_info.value.status_code == 502
        assert route.call_count == 1

    @respx.mock
    async def test_connection_failure_retried(self, client: AnalysisClient) -> None:
        route = respx.post(f"{BASE_URL}/process_wallet_batch").mock(
            side_effect=[httpx.ConnectError("refused"), Response(200, json={"task_id": "t"})]
        )

        with patch("walletscreen.services.base.asyncio.sleep", new_callable=AsyncMock):
            assert await client.submit_batch(["w"]) == "t"

        assert route.call_count == 2


class TestGetBatchStatus:
    """Tests for get_batch_status."""

    @respx.mock
    async def test_read_timeout_retried(self, client: AnalysisClient) -> None:
        route = respx.get(f"{BASE_URL}/batch_status/abc").mock(
            side_effect=[
                httpx.ReadTimeout("timed out"),
                Response(200, json={"status": "processing"}),
            ]
        )

        with patch("walletscreen.services.base.asyncio.sleep", new_callable=AsyncMock):
            status = await client.get_batch_status("abc")

        assert status.status == "processing"
        assert route.call_count == 2

    @respx.mock
    async def test_processing(self, client: AnalysisClient) -> None:
        respx.get(f"{BASE_URL}/batch_status/abc").mock(
            return_value=Response(200, json={"status": "processing"})
        )

        status = await client.get_batch_status("abc")

        assert status.status == "processing"
        assert status.results == []
        assert not status.is_terminal

    @respx.mock
    async def test_completed_with_results(self, client: AnalysisClient) -> None:
        records = [{"wallet_address": "w1"}, {"wallet_address": "w2"}]
        respx.get(f"{BASE_URL}/batch_status/abc").mock(
            return_value=Response(200, json={"status": "completed", "results": records})
        )

        status = await client.get_batch_status("abc")

        assert status.status == "completed"
        assert status.results == records
        assert status.is_terminal

    @respx.mock
    async def test_error_status(self, client: AnalysisClient) -> None:
        respx.get(f"{BASE_URL}/batch_status/abc").mock(
            return_value=Response(
                200, json={"status": "error", "error": "Invalid wallet address", "results": None}
            )
        )

        status = await client.get_batch_status("abc")

        assert status.status == "error"
        assert status.error == "Invalid wallet address"
        assert status.results == []

    @respx.mock
    async def test_unknown_status_is_malformed(self, client: AnalysisClient) -> None:
        respx.get(f"{BASE_URL}/batch_status/abc").mock(
            return_value=Response(200, json={"status": "queued"})
        )

        with pytest.raises(ExternalServiceError, match="Malformed status response"):
            await client.get_batch_status("abc")

    @respx.mock
    async def test_non_json_body_is_malformed(self, client: AnalysisClient) -> None:
        respx.get(f"{BASE_URL}/batch_status/abc").mock(
            return_value=Response(200, text="<html>oops</html>")
        )

        with pytest.raises(ExternalServiceError):
            await client.get_batch_status("abc")

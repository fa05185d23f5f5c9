"""Base API client with retry logic.

This module provides BaseAPIClient, the shared httpx wrapper used by the
batch analysis client and the Telegram Bot API client.
"""

import asyncio
from typing import Any

import httpx
import structlog

from walletscreen.core.exceptions import ExternalServiceError

log = structlog.get_logger(__name__)

# Failures where the request never reached the server
_UNSENT_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout)


def extract_error_detail(response: httpx.Response) -> str | None:
    """Return the ``detail`` field of an error payload, if there is one.

    Args:
        response: The failed response.

    Returns:
        The detail as a string, or None when the body isn't JSON or has no detail.
    """
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    detail = payload.get("detail") or payload.get("description") or payload.get("error")
    if detail is None:
        return None
    return detail if isinstance(detail, str) else str(detail)


class BaseAPIClient:
    """Base API client with retry support.

    Provides HTTP requests with:
    - Lazy client initialization (created on first request)
    - Automatic retry with exponential backoff on 5xx and connection errors
    - Error payload ``detail`` surfaced on ExternalServiceError
    - Proper resource cleanup

    Attributes:
        service: Short service name used in logs and errors.
        base_url: Base URL for all requests.
        timeout: Request timeout in seconds.
        headers: Default headers for all requests.
        retry_on_429: Whether 429 responses are retried like 5xx.

    Example:
        client = BaseAPIClient(
            service="example",
            base_url="https://api.example.com",
            headers={"Authorization": "Bearer token"},
        )
        response = await client.get("/endpoint")
        await client.close()
    """

    def __init__(
        self,
        service: str,
        base_url: str,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        max_retries: int = 3,
        retry_on_429: bool = True,
    ) -> None:
        """Initialize BaseAPIClient.

        Args:
            service: Short service name used in logs and errors.
            base_url: Base URL for all requests.
            timeout: Request timeout in seconds (default: 30).
            headers: Default headers for all requests.
            max_retries: Attempts per request (default: 3).
            retry_on_429: Retry 429 responses (default: True).
        """
        self.service = service
        self.base_url = base_url
        self.timeout = timeout
        self.headers = headers or {}
        self.max_retries = max_retries
        self.retry_on_429 = retry_on_429
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the httpx client (lazy initialization)."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
            )
            log.debug("httpx_client_created", service=self.service)
        return self._client

    async def close(self) -> None:
        """Close the httpx client and release resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            log.debug("httpx_client_closed", service=self.service)

    def _is_retryable(self, status_code: int) -> bool:
        if status_code == 429:
            return self.retry_on_429
        return status_code >= 500

    async def _request(
        self, method: str, path: str, *, resend: bool = True, **kwargs: Any
    ) -> httpx.Response:
        """Make an HTTP request with retry.

        Args:
            method: HTTP method (GET, POST).
            path: Request path (appended to base_url).
            resend: Retry after failures where the server may already have
                acted on the request (read timeouts, 5xx). When False, only
                connection failures are retried. Use False for requests
                that are not idempotent.
            **kwargs: Additional arguments passed to httpx.request.

        Returns:
            httpx.Response on success.

        Raises:
            ExternalServiceError: On a non-retryable status or once all
                retries are exhausted.
        """
        client = await self._get_client()
        last_error: Exception | None = None
        last_detail: str | None = None
        last_status: int | None = None

        for attempt in range(self.max_retries):
            try:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                return response

            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                detail = extract_error_detail(e.response)

                if not resend or not self._is_retryable(status_code):
                    log.warning(
                        "request_client_error",
                        service=self.service,
                        method=method,
                        status_code=status_code,
                        detail=detail,
                    )
                    raise ExternalServiceError(
                        service=self.service,
                        message=detail or str(e),
                        status_code=status_code,
                        detail=detail,
                    ) from e

                last_error, last_detail, last_status = e, detail, status_code
                log.warning(
                    "request_server_error",
                    service=self.service,
                    method=method,
                    status_code=status_code,
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                )

            except httpx.RequestError as e:
                if not resend and not isinstance(e, _UNSENT_ERRORS):
                    log.warning(
                        "request_not_resent",
                        service=self.service,
                        method=method,
                        error=str(e) or type(e).__name__,
                    )
                    raise ExternalServiceError(
                        service=self.service,
                        message=f"Request may have been received, not resent: {e!r}",
                    ) from e

                last_error = e
                log.warning(
                    "request_connection_error",
                    service=self.service,
                    method=method,
                    error=str(e) or type(e).__name__,
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                )

            # Exponential backoff: 1s, 2s, 4s (capped)
            if attempt < self.max_retries - 1:
                await asyncio.sleep(min(2**attempt, 4))

        log.error(
            "request_max_retries_exceeded",
            service=self.service,
            method=method,
            max_retries=self.max_retries,
        )
        raise ExternalServiceError(
            service=self.service,
            message=f"Max retries ({self.max_retries}) exceeded: {last_error}",
            status_code=last_status,
            detail=last_detail,
        )

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a GET request."""
        return await self._request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a POST request."""
        return await self._request("POST", path, **kwargs)

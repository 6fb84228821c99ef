"""
Async REST transport for the Discord HTTP API.

Handles bot authentication, automatic retry with exponential backoff, and
error response parsing into typed exceptions, using the httpx async client.
"""

import asyncio
import random
import time
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from typing import Any

import httpx

from starboards.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    StarboardError,
    ValidationError,
)
from starboards.logging import log_http_request, log_http_response

DEFAULT_API_BASE_URL = "https://discord.com/api/v10"


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class RESTTransport:
    """
    Async REST transport with bot authentication and retry logic.

    Handles:
    - ``Authorization: Bot <token>`` on every request
    - Exponential backoff with jitter for retries
    - Retry-After header respect for rate limiting
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the REST transport.

        Args:
            token: Bot token
            base_url: Base URL for API requests
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            transport: Custom httpx transport (e.g. ``httpx.MockTransport`` in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Authorization": f"Bot {token}", "Accept": "application/json"},
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "RESTTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """
        Make a GET request with automatic retry.

        Args:
            path: API path (e.g., "/channels/123")
            params: Query parameters

        Returns:
            Parsed JSON response

        Raises:
            StarboardError: On API errors
        """
        async def make_request() -> httpx.Response:
            log_http_request("GET", f"{self.base_url}{path}", dict(self._client.headers), params)
            return await self._client.get(path, params=params)

        return await self._execute_with_retry(make_request)

    async def _execute_with_retry(
        self, request_fn: Callable[[], Coroutine[Any, Any, httpx.Response]]
    ) -> Any:
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                started = time.monotonic()
                response = await request_fn()
                log_http_response(
                    response.status_code,
                    str(response.request.url),
                    (time.monotonic() - started) * 1000,
                )

                if response.status_code < 400:
                    return response.json()

                error = self._parse_error_response(response)

                if not self._should_retry(response.status_code, attempt):
                    raise error

                last_error = error

                retry_after = response.headers.get("Retry-After")
                wait_time = self._get_backoff_time(attempt, retry_after)
                await asyncio.sleep(wait_time)

            except httpx.RequestError as e:
                # Network errors are retryable
                if attempt >= self.retry_config.max_retries:
                    raise ServerError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                wait_time = self._get_backoff_time(attempt, None)
                await asyncio.sleep(wait_time)

        if last_error:
            if isinstance(last_error, StarboardError):
                raise last_error
            raise ServerError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        if attempt >= self.retry_config.max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(self, attempt: int, retry_after: str | None) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting the Retry-After
        header if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass  # Fall through to exponential backoff

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)

    def _parse_error_response(self, response: httpx.Response) -> StarboardError:
        """
        Parse a Discord error response (``{"code": int, "message": str}``)
        into a typed exception.
        """
        try:
            data = response.json()
        except Exception:
            data = {}
        if not isinstance(data, dict):
            data = {}

        code = str(data.get("code", "UNKNOWN_ERROR"))
        message = data.get("message", f"HTTP {response.status_code}")

        status_code = response.status_code

        if status_code == 401:
            return AuthenticationError(code, message)
        elif status_code == 403:
            return AuthorizationError(code, message)
        elif status_code == 404:
            return NotFoundError(code, message)
        elif status_code == 429:
            retry_after_str = response.headers.get("Retry-After") or str(data.get("retry_after", 60))
            try:
                retry_after = float(retry_after_str)
            except ValueError:
                retry_after = 60.0
            return RateLimitedError(code, message, retry_after)
        elif status_code >= 500:
            return ServerError(code, message)
        else:
            return ValidationError(code, message)


__all__ = ["DEFAULT_API_BASE_URL", "RESTTransport", "RetryConfig"]

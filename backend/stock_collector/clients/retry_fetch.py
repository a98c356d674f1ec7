"""
RetryableCaller — bounded-retry wrapper around a single HTTP request.

Attempt 1 fires immediately; every further attempt waits a FIXED delay
first (no exponential backoff).  Transport errors and non-2xx responses
count as failed attempts.  When the budget is spent the caller gets a
RetryExhaustedError and must treat the endpoint as unreachable for this
request.

The attempt counter lives in the call frame, so concurrent or
consecutive calls never share retry state.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

import httpx

from stock_collector.core.errors import RetryExhaustedError
from stock_collector.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_ATTEMPTS = 3
DEFAULT_DELAY_SECONDS = 8.0
DEFAULT_TIMEOUT_SECONDS = 8.0


@dataclass
class RequestSpec:
    """Everything needed to (re)issue one HTTP request."""

    url: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    data: dict[str, Any] | None = None
    auth: tuple[str, str] | None = None


class RetryableCaller:
    """
    Issues a RequestSpec up to `attempts` times.

    Usage::

        caller = RetryableCaller(httpx.AsyncClient())
        response = await caller.call(RequestSpec(url=url), "get_supplier_info")
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        attempts: int = DEFAULT_ATTEMPTS,
        delay: float = DEFAULT_DELAY_SECONDS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self.attempts = attempts
        self.delay = delay
        self.timeout = timeout
        self._sleep = sleep

    async def call(
        self,
        request: RequestSpec,
        function_name: str,
        *,
        attempts: int | None = None,
        delay: float | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """Return the first successful response or raise RetryExhaustedError."""
        max_attempts = self.attempts if attempts is None else attempts
        wait_seconds = self.delay if delay is None else delay
        per_attempt_timeout = self.timeout if timeout is None else timeout

        last_error: httpx.HTTPError | None = None
        status_code: int | None = None

        for attempt in range(1, max_attempts + 1):
            if attempt > 1:
                await self._sleep(wait_seconds)

            try:
                response = await self._client.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    data=request.data,
                    auth=request.auth,
                    timeout=per_attempt_timeout,
                )
                response.raise_for_status()
                return response

            except httpx.HTTPStatusError as exc:
                last_error = exc
                status_code = exc.response.status_code
                logger.warning(
                    "Request failed",
                    function=function_name,
                    attempt=attempt,
                    max_attempts=max_attempts,
                    status_code=status_code,
                    url=request.url,
                )

            except httpx.HTTPError as exc:
                last_error = exc
                status_code = None
                logger.warning(
                    "Request failed",
                    function=function_name,
                    attempt=attempt,
                    max_attempts=max_attempts,
                    error=repr(exc),
                    url=request.url,
                )

        logger.error(
            "Request finally failed",
            function=function_name,
            attempts=max_attempts,
            status_code=status_code,
            error=repr(last_error),
            url=request.url,
        )
        raise RetryExhaustedError(
            f"Request finally failed after attempt {max_attempts} in function: {function_name}",
            attempts=max_attempts,
            last_error=last_error,
            status_code=status_code,
            details={"url": request.url},
        )

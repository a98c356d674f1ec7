"""
tests/test_retry_fetch.py
=========================
Bounded retry behaviour of RetryableCaller against httpx.MockTransport.
"""

from __future__ import annotations

import httpx
import pytest
from structlog.testing import capture_logs

from stock_collector.clients.retry_fetch import RequestSpec, RetryableCaller
from stock_collector.core.errors import RetryExhaustedError

URL = "https://masterdata.example.com/suppliers/123456"


class SleepRecorder:
    """Replaces asyncio.sleep; records delays and the attempt they preceded."""

    def __init__(self, attempts: list[int]) -> None:
        self._attempts = attempts
        self.delays: list[float] = []
        self.before_attempt: list[int] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        self.before_attempt.append(len(self._attempts) + 1)


def make_caller(handler, attempts: list[int], **kwargs) -> tuple[RetryableCaller, SleepRecorder]:
    def counting_handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        return handler(request)

    sleep = SleepRecorder(attempts)
    client = httpx.AsyncClient(transport=httpx.MockTransport(counting_handler))
    return RetryableCaller(client, sleep=sleep, **kwargs), sleep


class TestRetryableCaller:
    @pytest.mark.asyncio
    async def test_first_success_returns_without_sleeping(self) -> None:
        attempts: list[int] = []
        caller, sleep = make_caller(lambda request: httpx.Response(200, json={"name": "ACME"}), attempts)

        response = await caller.call(RequestSpec(url=URL), "get_supplier_info")

        assert response.json() == {"name": "ACME"}
        assert len(attempts) == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_always_failing_request_is_tried_three_times(self) -> None:
        attempts: list[int] = []
        caller, sleep = make_caller(lambda request: httpx.Response(503), attempts, delay=8.0)

        with capture_logs() as logs:
            with pytest.raises(RetryExhaustedError) as exc_info:
                await caller.call(RequestSpec(url=URL), "get_supplier_info")

        assert len(attempts) == 3
        # No delay before attempt 1; one before each of attempts 2 and 3
        assert sleep.before_attempt == [2, 3]
        assert sleep.delays == [8.0, 8.0]

        errors = [entry for entry in logs if entry["log_level"] == "error"]
        warnings = [entry for entry in logs if entry["log_level"] == "warning"]
        assert len(errors) == 1
        assert errors[0]["event"] == "Request finally failed"
        assert errors[0]["function"] == "get_supplier_info"
        assert [entry["attempt"] for entry in warnings] == [1, 2, 3]

        assert exc_info.value.attempts == 3
        assert exc_info.value.status_code == 503
        assert "get_supplier_info" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_errors_are_retried(self) -> None:
        attempts: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if len(attempts) < 3:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json={"access_token": "abc"})

        caller, sleep = make_caller(handler, attempts)

        response = await caller.call(RequestSpec(url=URL, method="POST"), "get_auth_token")

        assert response.status_code == 200
        assert len(attempts) == 3
        assert len(sleep.delays) == 2

    @pytest.mark.asyncio
    async def test_transport_error_exhaustion_keeps_last_error(self) -> None:
        attempts: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        caller, _ = make_caller(handler, attempts)

        with pytest.raises(RetryExhaustedError) as exc_info:
            await caller.call(RequestSpec(url=URL), "get_supplier_info")

        assert isinstance(exc_info.value.last_error, httpx.ReadTimeout)
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_per_call_attempt_override(self) -> None:
        attempts: list[int] = []
        caller, _ = make_caller(lambda request: httpx.Response(500), attempts)

        with pytest.raises(RetryExhaustedError):
            await caller.call(RequestSpec(url=URL), "get_supplier_info", attempts=5, delay=0)

        assert len(attempts) == 5

    @pytest.mark.asyncio
    async def test_zero_attempt_override_is_not_replaced_by_default(self) -> None:
        attempts: list[int] = []
        caller, sleep = make_caller(lambda request: httpx.Response(200), attempts)

        with pytest.raises(RetryExhaustedError) as exc_info:
            await caller.call(RequestSpec(url=URL), "get_supplier_info", attempts=0)

        assert attempts == []
        assert sleep.delays == []
        assert exc_info.value.attempts == 0

    @pytest.mark.asyncio
    async def test_consecutive_calls_do_not_share_attempt_budget(self) -> None:
        attempts: list[int] = []
        caller, _ = make_caller(lambda request: httpx.Response(500), attempts)

        for _ in range(2):
            with pytest.raises(RetryExhaustedError):
                await caller.call(RequestSpec(url=URL), "get_supplier_info")

        assert len(attempts) == 6

    @pytest.mark.asyncio
    async def test_request_spec_is_sent_as_given(self) -> None:
        attempts: list[int] = []
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        caller, _ = make_caller(handler, attempts)
        await caller.call(
            RequestSpec(
                url="https://auth.example.com/token",
                method="POST",
                data={"grant_type": "client_credentials"},
                auth=("client", "secret"),
            ),
            "get_auth_token",
        )

        request = seen[0]
        assert request.method == "POST"
        assert request.content == b"grant_type=client_credentials"
        assert request.headers["Authorization"].startswith("Basic ")

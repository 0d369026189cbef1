"""Tests for the repository retry policy."""

from unittest.mock import AsyncMock, call

import pytest
from sqlalchemy.exc import (
    DBAPIError,
    DisconnectionError,
    IntegrityError,
    OperationalError,
    ProgrammingError,
    TimeoutError as PoolTimeoutError,
)

from library_api.exceptions import NotFoundError
from library_api.repositories.retry import RetryPolicy, is_transient, retryable


def operational_error():
    return OperationalError(
        "SELECT 1", params=None, orig=Exception("Connection refused")
    )


class TestIsTransient:
    @pytest.mark.parametrize(
        "error",
        [
            operational_error(),
            DisconnectionError("connection lost"),
            PoolTimeoutError("pool exhausted"),
            TimeoutError(),
            ConnectionResetError(),
        ],
    )
    def test_connectivity_failures_are_transient(self, error):
        assert is_transient(error)

    @pytest.mark.parametrize(
        "error",
        [
            IntegrityError("INSERT", params=None, orig=Exception("unique")),
            ProgrammingError("SELEC", params=None, orig=Exception("syntax")),
            ValueError("bad value"),
            NotFoundError("Author not found."),
        ],
    )
    def test_other_failures_are_not_transient(self, error):
        assert not is_transient(error)

    def test_invalidated_connection_is_transient(self):
        error = DBAPIError(
            "SELECT 1",
            params=None,
            orig=Exception("server closed the connection"),
            connection_invalidated=True,
        )

        assert is_transient(error)


class TestRetryPolicy:
    def test_backoff_doubles_per_attempt(self):
        policy = RetryPolicy(base_delay=1.0)

        assert [policy.delay_for(n) for n in (1, 2, 3)] == [2.0, 4.0, 8.0]

    @pytest.mark.asyncio
    async def test_returns_first_success_without_sleeping(self, no_wait_policy):
        action = AsyncMock(return_value="ok")

        assert await no_wait_policy.execute(action, 1, key="v") == "ok"
        action.assert_awaited_once_with(1, key="v")
        no_wait_policy.sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_transient_failure_is_retried(self, no_wait_policy):
        action = AsyncMock(side_effect=[operational_error(), "ok"])

        assert await no_wait_policy.execute(action) == "ok"
        assert action.await_count == 2
        no_wait_policy.sleep.assert_awaited_once_with(2.0)

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self, no_wait_policy):
        action = AsyncMock(side_effect=operational_error())

        with pytest.raises(OperationalError):
            await no_wait_policy.execute(action)

        # One initial attempt plus three retries
        assert action.await_count == 4
        assert no_wait_policy.sleep.await_args_list == [
            call(2.0),
            call(4.0),
            call(8.0),
        ]

    @pytest.mark.asyncio
    async def test_integrity_error_is_not_retried(self, no_wait_policy):
        action = AsyncMock(
            side_effect=IntegrityError(
                "INSERT", params=None, orig=Exception("unique")
            )
        )

        with pytest.raises(IntegrityError):
            await no_wait_policy.execute(action)

        action.assert_awaited_once()
        no_wait_policy.sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_application_errors_are_not_retried(self, no_wait_policy):
        action = AsyncMock(side_effect=NotFoundError("Book not found."))

        with pytest.raises(NotFoundError):
            await no_wait_policy.execute(action)

        action.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_zero_retries_fails_immediately(self):
        policy = RetryPolicy(max_retries=0, sleep=AsyncMock())
        action = AsyncMock(side_effect=operational_error())

        with pytest.raises(OperationalError):
            await policy.execute(action)

        action.assert_awaited_once()
        policy.sleep.assert_not_awaited()

    def test_from_settings(self):
        class FakeSettings:
            DB_RETRY_ATTEMPTS = 5
            DB_RETRY_BASE_DELAY = 0.5

        policy = RetryPolicy.from_settings(FakeSettings)

        assert policy.max_retries == 5
        assert policy.base_delay == 0.5


class TestRetryableDecorator:
    @pytest.mark.asyncio
    async def test_method_runs_through_instance_policy(self, no_wait_policy):
        class Repository:
            retry_policy = no_wait_policy
            calls = 0

            @retryable
            async def fetch(self, value):
                self.calls += 1
                if self.calls == 1:
                    raise operational_error()
                return value * 2

        repo = Repository()

        assert await repo.fetch(21) == 42
        assert repo.calls == 2
        assert Repository.fetch.__name__ == "fetch"

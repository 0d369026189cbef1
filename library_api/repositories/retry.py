"""
Bounded retry for repository calls.

Every public repository method is wrapped with `retryable`, which runs it
through the repository's `RetryPolicy`. Only transient connectivity
failures are retried; constraint violations, programming errors and
application exceptions propagate on the first attempt.

Example:
    ```python
    class AuthorRepository(BaseRepository[Author]):
        @retryable
        async def get_all(self) -> list[AuthorRead]:
            ...
    ```
"""

import asyncio
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Awaitable, Callable, ParamSpec, TypeVar

from sqlalchemy.exc import (
    DBAPIError,
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    TimeoutError as PoolTimeoutError,
)

from library_api.logging import logger

P = ParamSpec("P")
R = TypeVar("R")

TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    OperationalError,
    InterfaceError,
    DisconnectionError,
    PoolTimeoutError,
    TimeoutError,
    ConnectionError,
)


def is_transient(ex: BaseException) -> bool:
    """
    Tell whether a failure is worth retrying.

    Args:
        ex: The exception raised by a repository call.

    Returns:
        True for connectivity failures, False for everything else.
    """
    if isinstance(ex, IntegrityError):
        return False
    if isinstance(ex, TRANSIENT_ERRORS):
        return True
    if isinstance(ex, DBAPIError):
        return bool(ex.connection_invalidated)
    return False


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff policy.

    Attempt ``n`` (1-based) of a retry waits ``base_delay * 2 ** n``
    seconds, so the defaults wait 2, 4 and 8 seconds before giving up.

    Attributes:
        max_retries: Additional attempts after the first one.
        base_delay: Multiplier of the backoff, in seconds.
        sleep: Awaitable used to wait between attempts.
    """

    max_retries: int = 3
    base_delay: float = 1.0
    sleep: Callable[[float], Awaitable[Any]] = field(
        default=asyncio.sleep, compare=False
    )

    @classmethod
    def from_settings(cls, settings: Any) -> "RetryPolicy":
        return cls(
            max_retries=settings.DB_RETRY_ATTEMPTS,
            base_delay=settings.DB_RETRY_BASE_DELAY,
        )

    def delay_for(self, attempt: int) -> float:
        return self.base_delay * (2**attempt)

    async def execute(
        self,
        action: Callable[P, Awaitable[R]],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> R:
        """
        Run `action`, retrying transient failures.

        Raises:
            Exception: The last failure once retries are exhausted, or the
                first non-transient failure.
        """
        attempt = 0
        while True:
            try:
                return await action(*args, **kwargs)
            except Exception as ex:
                if attempt >= self.max_retries or not is_transient(ex):
                    raise

                attempt += 1
                delay = self.delay_for(attempt)
                logger.warning(
                    f"Transient database error in {getattr(action, '__qualname__', action)}: "
                    f"{ex}. Retrying in {delay}s (attempt {attempt}/{self.max_retries})"
                )
                await self.sleep(delay)


def retryable(
    func: Callable[..., Awaitable[R]],
) -> Callable[..., Awaitable[R]]:
    """
    Decorator running a repository method through ``self.retry_policy``.
    """

    @wraps(func)
    async def wrapper(self: Any, *args: Any, **kwargs: Any) -> R:
        return await self.retry_policy.execute(func, self, *args, **kwargs)

    return wrapper

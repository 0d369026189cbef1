"""
Base repository shared by the entity repositories.

The Repository pattern separates data access logic from business logic.
Repositories of one unit of work share its session, so every statement
they issue takes part in the same transaction, and run each public
method through a `RetryPolicy`.

Example:
    ```python
    from library_api.repositories.base import BaseRepository
    from library_api.repositories.retry import retryable


    class CategoryRepository(BaseRepository[Category]):
        def __init__(self, session: AsyncSession, retry_policy: RetryPolicy):
            super().__init__(session, Category, retry_policy)

        @retryable
        async def get_by_name(self, name: str) -> CategoryRead | None:
            ...
    ```
"""

from typing import Any, Generic, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.expression import Executable
from sqlmodel.ext.asyncio.session import AsyncSession

from library_api.logging import logger
from library_api.repositories.retry import RetryPolicy

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base repository holding the session, the managed table model and the
    retry policy.

    Type Parameters:
        T: The SQLModel table type this repository writes.

    Attributes:
        session: The unit of work's session.
        model: The SQLModel class this repository manages.
        retry_policy: Policy applied by `retryable` methods.
    """

    def __init__(
        self,
        session: AsyncSession,
        model: Type[T],
        retry_policy: RetryPolicy | None = None,
    ):
        self.session = session
        self.model = model
        self.retry_policy = retry_policy or RetryPolicy()

    async def _rows(self, stmt: Any) -> list[Any]:
        """
        Execute a select, refreshing identities already in the session.

        Returns:
            All result rows.
        """
        try:
            result = await self.session.exec(
                stmt.execution_options(populate_existing=True)
            )
            return list(result.all())
        except SQLAlchemyError as e:
            logger.error(f"Error querying {self.model.__name__}: {e}")
            raise

    async def _execute(self, stmt: Executable) -> None:
        """Execute an UPDATE or DELETE statement."""
        try:
            await self.session.exec(stmt)  # type: ignore[call-overload]
        except SQLAlchemyError as e:
            logger.error(f"Error writing {self.model.__name__}: {e}")
            raise

    async def _insert(self, entity: T) -> T:
        """
        Insert a row and populate generated fields.

        Args:
            entity: The table model instance to insert.

        Returns:
            The same instance with its primary key set.
        """
        try:
            self.session.add(entity)
            await self.session.flush()
            return entity
        except SQLAlchemyError as e:
            # Drop the pending instance so a retry does not flush it twice
            if entity in self.session:
                self.session.expunge(entity)
            logger.error(f"Error creating {self.model.__name__}: {e}")
            raise

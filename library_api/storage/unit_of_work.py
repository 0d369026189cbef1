"""
Unit of Work binding the four repositories to one session.

A `UnitOfWork` owns a single `AsyncSession` (and therefore a single
connection while a transaction is open). All repositories it exposes
share that session, so statements issued between `begin_transaction()`
and `commit()`/`rollback()` form one atomic unit.

Example:
    ```python
    async with UnitOfWork(async_session, retry_policy) as uow:
        async with uow.transaction():
            author = await uow.authors.add(Author(name="Ada"))
    ```
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from sqlalchemy.ext.asyncio import AsyncSessionTransaction
from sqlmodel.ext.asyncio.session import AsyncSession

from library_api.exceptions import TransactionError
from library_api.logging import logger
from library_api.repositories.author_repository import AuthorRepository
from library_api.repositories.book_category_repository import (
    BookCategoryRepository,
)
from library_api.repositories.book_repository import BookRepository
from library_api.repositories.category_repository import CategoryRepository
from library_api.repositories.retry import RetryPolicy


class UnitOfWork:
    """
    Scope binding repository operations to one atomic transaction.

    Attributes:
        authors: Author repository bound to the shared session.
        books: Book repository bound to the shared session.
        categories: Category repository bound to the shared session.
        book_categories: BookCategory link repository bound to the shared session.
    """

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        retry_policy: RetryPolicy | None = None,
    ):
        """
        Args:
            session_factory: Returns a new `AsyncSession`.
            retry_policy: Policy applied to every repository call.
        """
        self.retry_policy = retry_policy or RetryPolicy()
        self._session: AsyncSession | None = session_factory()
        self._transaction: AsyncSessionTransaction | None = None

        self.authors = AuthorRepository(self._session, self.retry_policy)
        self.books = BookRepository(self._session, self.retry_policy)
        self.categories = CategoryRepository(self._session, self.retry_policy)
        self.book_categories = BookCategoryRepository(
            self._session, self.retry_policy
        )

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise TransactionError("Unit of work has been disposed.")
        return self._session

    @property
    def in_transaction(self) -> bool:
        return self._transaction is not None

    async def begin_transaction(self) -> None:
        """
        Open a transaction on the shared session.

        Raises:
            TransactionError: If a transaction is already open or the unit
                of work has been disposed.
        """
        if self._transaction is not None:
            raise TransactionError("A transaction is already in progress.")

        session = self.session
        if session.in_transaction():
            # Close the implicit transaction started by earlier reads
            await session.commit()

        self._transaction = await session.begin()
        logger.debug("Transaction started")

    async def commit(self) -> None:
        """
        Commit the open transaction.

        On failure the transaction is rolled back and the error re-raised.

        Raises:
            TransactionError: If no transaction is open.
        """
        if self._transaction is None:
            raise TransactionError("No transaction in progress.")

        transaction, self._transaction = self._transaction, None
        try:
            await transaction.commit()
            logger.debug("Transaction committed")
        except Exception:
            logger.error("Commit failed, rolling back", exc_info=True)
            await self.session.rollback()
            raise

    async def rollback(self) -> None:
        """Roll back the open transaction; does nothing when none is open."""
        if self._transaction is None:
            return

        self._transaction = None
        await self.session.rollback()
        logger.debug("Transaction rolled back")

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["UnitOfWork"]:
        """
        Scoped transaction.

        Commits on normal exit unless the block already committed or rolled
        back; rolls back and re-raises on any exception.
        """
        await self.begin_transaction()
        try:
            yield self
        except BaseException:
            await self.rollback()
            raise
        if self._transaction is not None:
            await self.commit()

    async def dispose(self) -> None:
        """Release the transaction (rolled back) and the session; idempotent."""
        if self._session is None:
            return

        session = self._session
        try:
            await self.rollback()
        finally:
            self._session = None
            await session.close()

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.dispose()

"""
Repository for Author rows.

Reads return `AuthorRead` models with the author's books attached, built
from a single author/book outer join.

Example:
    ```python
    async with UnitOfWork(async_session) as uow:
        authors = await uow.authors.get_all()
        ada = await uow.authors.get_by_id(1)
    ```
"""

from typing import Any

from sqlalchemy import delete, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from library_api.models.author import Author
from library_api.models.book import Book
from library_api.repositories.base import BaseRepository
from library_api.repositories.folding import fold_rows
from library_api.repositories.retry import RetryPolicy, retryable
from library_api.schemas.author import AuthorRead, BookSummary


class AuthorRepository(BaseRepository[Author]):
    """Repository for Author entity operations."""

    def __init__(
        self, session: AsyncSession, retry_policy: RetryPolicy | None = None
    ):
        super().__init__(session, Author, retry_policy)

    @staticmethod
    def _select() -> Any:
        return (
            select(Author, Book)
            .select_from(Author)
            .outerjoin(Book, Book.author_id == Author.id)  # type: ignore[arg-type]
            .order_by(Author.id, Book.id)  # type: ignore[arg-type]
        )

    @staticmethod
    def _fold(rows: list[Any]) -> list[AuthorRead]:
        def attach(parent: AuthorRead, row: Any) -> None:
            book = row[1]
            if book is not None:
                parent.books.append(
                    BookSummary(
                        id=book.id, title=book.title, author_id=book.author_id
                    )
                )

        return fold_rows(
            rows,
            key=lambda row: row[0].id,
            make_parent=lambda row: AuthorRead(id=row[0].id, name=row[0].name),
            attach=attach,
        )

    async def _fetch_one(self, id: int) -> AuthorRead | None:
        rows = await self._rows(self._select().where(Author.id == id))
        authors = self._fold(rows)
        return authors[0] if authors else None

    @retryable
    async def get_all(self) -> list[AuthorRead]:
        return self._fold(await self._rows(self._select()))

    @retryable
    async def get_by_id(self, id: int) -> AuthorRead | None:
        """
        Get an author and its books.

        Args:
            id: Primary key value.

        Returns:
            The author if found, None otherwise.
        """
        return await self._fetch_one(id)

    @retryable
    async def add(self, entity: Author) -> AuthorRead:
        author = await self._insert(entity)
        return AuthorRead(id=author.id, name=author.name)

    @retryable
    async def update(self, entity: Author) -> AuthorRead | None:
        """
        Update the name of an author.

        Returns:
            The refreshed author, or None if no row has this id.
        """
        await self._execute(
            update(Author).where(Author.id == entity.id).values(name=entity.name)
        )
        return await self._fetch_one(entity.id)

    @retryable
    async def delete(self, id: int) -> None:
        await self._execute(delete(Author).where(Author.id == id))

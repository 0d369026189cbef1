"""
Repository for Category rows.

Reads return `CategoryRead` models with the linked books attached.
"""

from typing import Any

from sqlalchemy import delete, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from library_api.models.book import Book
from library_api.models.book_category import BookCategory
from library_api.models.category import Category
from library_api.repositories.base import BaseRepository
from library_api.repositories.folding import fold_rows
from library_api.repositories.retry import RetryPolicy, retryable
from library_api.schemas.author import BookSummary
from library_api.schemas.category import CategoryRead


class CategoryRepository(BaseRepository[Category]):
    """Repository for Category entity operations."""

    def __init__(
        self, session: AsyncSession, retry_policy: RetryPolicy | None = None
    ):
        super().__init__(session, Category, retry_policy)

    @staticmethod
    def _select() -> Any:
        return (
            select(Category, Book)
            .select_from(Category)
            .outerjoin(BookCategory, BookCategory.category_id == Category.id)  # type: ignore[arg-type]
            .outerjoin(Book, Book.id == BookCategory.book_id)  # type: ignore[arg-type]
            .order_by(Category.id, Book.id)  # type: ignore[arg-type]
        )

    @staticmethod
    def _fold(rows: list[Any]) -> list[CategoryRead]:
        def attach(parent: CategoryRead, row: Any) -> None:
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
            make_parent=lambda row: CategoryRead(
                id=row[0].id, name=row[0].name
            ),
            attach=attach,
        )

    async def _fetch_first(self, criterion: Any) -> CategoryRead | None:
        categories = self._fold(
            await self._rows(self._select().where(criterion))
        )
        return categories[0] if categories else None

    @retryable
    async def get_all(self) -> list[CategoryRead]:
        return self._fold(await self._rows(self._select()))

    @retryable
    async def get_by_id(self, id: int) -> CategoryRead | None:
        return await self._fetch_first(Category.id == id)

    @retryable
    async def get_by_name(self, name: str) -> CategoryRead | None:
        """
        Get a category by exact, case-sensitive name match.

        Args:
            name: Category name to look up.

        Returns:
            The category if found, None otherwise.
        """
        return await self._fetch_first(Category.name == name)

    @retryable
    async def add(self, entity: Category) -> CategoryRead:
        category = await self._insert(entity)
        return CategoryRead(id=category.id, name=category.name)

    @retryable
    async def update(self, entity: Category) -> CategoryRead | None:
        await self._execute(
            update(Category)
            .where(Category.id == entity.id)
            .values(name=entity.name)
        )
        return await self._fetch_first(Category.id == entity.id)

    @retryable
    async def delete(self, id: int) -> None:
        await self._execute(delete(Category).where(Category.id == id))

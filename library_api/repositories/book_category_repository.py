"""
Repository managing BookCategory join rows.

There is no generic CRUD here: links are listed per book, added one by
one and removed in bulk per book or per category.
"""

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from library_api.models.book_category import BookCategory
from library_api.repositories.base import BaseRepository
from library_api.repositories.retry import RetryPolicy, retryable


class BookCategoryRepository(BaseRepository[BookCategory]):
    def __init__(
        self, session: AsyncSession, retry_policy: RetryPolicy | None = None
    ):
        super().__init__(session, BookCategory, retry_policy)

    @retryable
    async def get_by_book_id(self, book_id: int) -> list[BookCategory]:
        return await self._rows(
            select(BookCategory)
            .where(BookCategory.book_id == book_id)
            .order_by(BookCategory.category_id)  # type: ignore[arg-type]
        )

    @retryable
    async def add(self, link: BookCategory) -> BookCategory:
        return await self._insert(link)

    @retryable
    async def delete_by_book_id(self, book_id: int) -> None:
        await self._execute(
            delete(BookCategory).where(BookCategory.book_id == book_id)
        )

    @retryable
    async def delete_by_category_id(self, category_id: int) -> None:
        await self._execute(
            delete(BookCategory).where(BookCategory.category_id == category_id)
        )

"""
Repository for Book rows.

Reads return `BookRead` models with the author and the categories of each
book attached, built from one book/author/category join.
"""

from typing import Any

from sqlalchemy import delete, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from library_api.models.author import Author
from library_api.models.book import Book
from library_api.models.book_category import BookCategory
from library_api.models.category import Category
from library_api.repositories.base import BaseRepository
from library_api.repositories.folding import fold_rows
from library_api.repositories.retry import RetryPolicy, retryable
from library_api.schemas.author import AuthorRef
from library_api.schemas.book import BookRead
from library_api.schemas.category import CategoryRef


class BookRepository(BaseRepository[Book]):
    """
    Repository for Book entity operations.

    Category links are managed by `BookCategoryRepository`; this repository
    only writes the book row itself.
    """

    def __init__(
        self, session: AsyncSession, retry_policy: RetryPolicy | None = None
    ):
        super().__init__(session, Book, retry_policy)

    @staticmethod
    def _select() -> Any:
        return (
            select(Book, Author, Category)
            .select_from(Book)
            .join(Author, Author.id == Book.author_id)  # type: ignore[arg-type]
            .outerjoin(BookCategory, BookCategory.book_id == Book.id)  # type: ignore[arg-type]
            .outerjoin(Category, Category.id == BookCategory.category_id)  # type: ignore[arg-type]
            .order_by(Book.id, Category.id)  # type: ignore[arg-type]
        )

    @staticmethod
    def _fold(rows: list[Any]) -> list[BookRead]:
        def make_parent(row: Any) -> BookRead:
            book, author, _ = row
            return BookRead(
                id=book.id,
                title=book.title,
                author_id=book.author_id,
                image_path=book.image_path,
                author=AuthorRef(id=author.id, name=author.name),
            )

        def attach(parent: BookRead, row: Any) -> None:
            category = row[2]
            if category is not None:
                parent.categories.append(
                    CategoryRef(id=category.id, name=category.name)
                )

        return fold_rows(
            rows,
            key=lambda row: row[0].id,
            make_parent=make_parent,
            attach=attach,
        )

    async def _fetch_one(self, id: int) -> BookRead | None:
        rows = await self._rows(self._select().where(Book.id == id))
        books = self._fold(rows)
        return books[0] if books else None

    @retryable
    async def get_all(self) -> list[BookRead]:
        return self._fold(await self._rows(self._select()))

    @retryable
    async def get_by_id(self, id: int) -> BookRead | None:
        return await self._fetch_one(id)

    @retryable
    async def add(self, entity: Book) -> BookRead:
        """
        Insert a book.

        Returns:
            The stored book with its generated id and author; categories
            are empty until links are added.
        """
        book = await self._insert(entity)
        created = await self._fetch_one(book.id)
        if created is None:
            raise LookupError(f"Book {book.id} vanished after insert")
        return created

    @retryable
    async def update(self, entity: Book) -> BookRead | None:
        await self._execute(
            update(Book)
            .where(Book.id == entity.id)
            .values(title=entity.title, author_id=entity.author_id)
        )
        return await self._fetch_one(entity.id)

    @retryable
    async def update_image_path(self, book_id: int, image_path: str) -> None:
        await self._execute(
            update(Book).where(Book.id == book_id).values(image_path=image_path)
        )

    @retryable
    async def delete(self, id: int) -> None:
        await self._execute(delete(Book).where(Book.id == id))

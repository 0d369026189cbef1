"""
Book use cases.

Writes follow the same sequence inside one transaction: check the author,
check every category in the order given, write the book row, then replace
its category links. The first failed check rolls back and is returned as
a `ServiceResult` failure; any exception rolls back and propagates.
"""

from library_api.logging import logger
from library_api.models.book import Book
from library_api.models.book_category import BookCategory
from library_api.schemas.book import BookRead
from library_api.services.base import BaseService, ErrorKind, ServiceResult
from library_api.storage.images import ImageStorage
from library_api.storage.unit_of_work import UnitOfWork

BOOK_NOT_FOUND = "Book not found."
AUTHOR_NOT_FOUND = "Author not found."


class BookService(BaseService):
    """
    Book use cases.

    Attributes:
        image_storage: Where uploaded cover images are written.
    """

    def __init__(self, uow: UnitOfWork, image_storage: ImageStorage):
        super().__init__(uow)
        self.image_storage = image_storage

    async def get_all(self) -> list[BookRead]:
        return await self.uow.books.get_all()

    async def get_by_id(self, id: int) -> BookRead | None:
        return await self.uow.books.get_by_id(id)

    async def _check_references(
        self, author_id: int, category_ids: list[int]
    ) -> ServiceResult[None]:
        if await self.uow.authors.get_by_id(author_id) is None:
            return ServiceResult.failure(
                ErrorKind.INVALID_REFERENCE, AUTHOR_NOT_FOUND
            )

        # Checked in the order given; the first unknown id stops the check
        for category_id in category_ids:
            if await self.uow.categories.get_by_id(category_id) is None:
                return ServiceResult.failure(
                    ErrorKind.INVALID_REFERENCE,
                    f"Category with ID {category_id} not found.",
                )

        return ServiceResult.success()

    async def _link_categories(
        self, book_id: int, category_ids: list[int]
    ) -> None:
        # One link per distinct id, first occurrence wins
        for category_id in dict.fromkeys(category_ids):
            await self.uow.book_categories.add(
                BookCategory(book_id=book_id, category_id=category_id)
            )

    async def add(
        self, title: str, author_id: int, category_ids: list[int]
    ) -> ServiceResult[BookRead]:
        """
        Create a book linked to existing categories.

        Args:
            title: Book title.
            author_id: Id of an existing author.
            category_ids: Ids of existing categories.

        Returns:
            The created book with author and categories attached, or an
            INVALID_REFERENCE failure naming the missing author or category.
        """
        async with self.uow.transaction():
            check = await self._check_references(author_id, category_ids)
            if not check.ok:
                await self.uow.rollback()
                logger.warning(f"Book not created: {check.error}")
                return ServiceResult.failure(check.kind, check.error)

            book = await self.uow.books.add(
                Book(title=title, author_id=author_id)
            )
            await self._link_categories(book.id, category_ids)
            created = await self.uow.books.get_by_id(book.id)

        logger.info(f"Created book {book.id}")
        return ServiceResult.success(created)

    async def update(
        self, id: int, title: str, author_id: int, category_ids: list[int]
    ) -> ServiceResult[BookRead]:
        """
        Replace the title, author and categories of a book.

        Category links are deleted and re-inserted rather than diffed.

        Returns:
            The updated book, a NOT_FOUND failure if the book does not
            exist, or an INVALID_REFERENCE failure.
        """
        async with self.uow.transaction():
            if await self.uow.books.get_by_id(id) is None:
                await self.uow.rollback()
                return ServiceResult.failure(ErrorKind.NOT_FOUND, BOOK_NOT_FOUND)

            check = await self._check_references(author_id, category_ids)
            if not check.ok:
                await self.uow.rollback()
                logger.warning(f"Book {id} not updated: {check.error}")
                return ServiceResult.failure(check.kind, check.error)

            await self.uow.books.update(
                Book(id=id, title=title, author_id=author_id)
            )
            await self.uow.book_categories.delete_by_book_id(id)
            await self._link_categories(id, category_ids)
            updated = await self.uow.books.get_by_id(id)

        logger.info(f"Updated book {id}")
        return ServiceResult.success(updated)

    async def delete(self, id: int) -> ServiceResult[None]:
        async with self.uow.transaction():
            if await self.uow.books.get_by_id(id) is None:
                await self.uow.rollback()
                return ServiceResult.failure(ErrorKind.NOT_FOUND, BOOK_NOT_FOUND)

            await self.uow.book_categories.delete_by_book_id(id)
            await self.uow.books.delete(id)

        logger.info(f"Deleted book {id}")
        return ServiceResult.success()

    async def upload_image(
        self, book_id: int, filename: str | None, content: bytes
    ) -> ServiceResult[str]:
        """
        Store a cover image and record its path on the book.

        Returns:
            The relative image path (e.g. "/1.jpg"), or a NOT_FOUND failure.
        """
        async with self.uow.transaction():
            if await self.uow.books.get_by_id(book_id) is None:
                await self.uow.rollback()
                return ServiceResult.failure(ErrorKind.NOT_FOUND, BOOK_NOT_FOUND)

            image_path = await self.image_storage.save(
                book_id, filename, content
            )
            await self.uow.books.update_image_path(book_id, image_path)

        return ServiceResult.success(image_path)

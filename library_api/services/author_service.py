"""
Author use cases.

Deleting an author removes its books and their category links first, all
inside one transaction.
"""

from library_api.logging import logger
from library_api.models.author import Author
from library_api.schemas.author import AuthorRead
from library_api.services.base import BaseService, ErrorKind, ServiceResult

AUTHOR_NOT_FOUND = "Author not found."


class AuthorService(BaseService):
    async def get_all(self) -> list[AuthorRead]:
        return await self.uow.authors.get_all()

    async def get_by_id(self, id: int) -> AuthorRead | None:
        return await self.uow.authors.get_by_id(id)

    async def add(self, name: str) -> ServiceResult[AuthorRead]:
        async with self.uow.transaction():
            author = await self.uow.authors.add(Author(name=name))

        logger.info(f"Created author {author.id}")
        return ServiceResult.success(author)

    async def update(self, id: int, name: str) -> ServiceResult[AuthorRead]:
        """
        Rename an author.

        Returns:
            The updated author, or a NOT_FOUND failure.
        """
        async with self.uow.transaction():
            if await self.uow.authors.get_by_id(id) is None:
                await self.uow.rollback()
                return ServiceResult.failure(ErrorKind.NOT_FOUND, AUTHOR_NOT_FOUND)

            author = await self.uow.authors.update(Author(id=id, name=name))

        logger.info(f"Updated author {id}")
        return ServiceResult.success(author)

    async def delete(self, id: int) -> ServiceResult[None]:
        """
        Delete an author with its books and their category links.

        A missing author rolls back and yields a NOT_FOUND failure without
        writing anything, so repeated deletes are harmless.
        """
        async with self.uow.transaction():
            author = await self.uow.authors.get_by_id(id)
            if author is None:
                await self.uow.rollback()
                return ServiceResult.failure(ErrorKind.NOT_FOUND, AUTHOR_NOT_FOUND)

            for book in author.books:
                await self.uow.book_categories.delete_by_book_id(book.id)
                await self.uow.books.delete(book.id)
            await self.uow.authors.delete(id)

        logger.info(f"Deleted author {id} and {len(author.books)} book(s)")
        return ServiceResult.success()

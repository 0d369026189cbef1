"""
Category use cases.

Name uniqueness is checked before every write; the unique index on
``category.name`` catches the race between two concurrent writers, and
that violation is reported as the same conflict.
"""

from sqlalchemy.exc import IntegrityError

from library_api.logging import logger
from library_api.models.category import Category
from library_api.schemas.category import CategoryRead
from library_api.services.base import BaseService, ErrorKind, ServiceResult

CATEGORY_NOT_FOUND = "Category not found."
CATEGORY_EXISTS = "Category already exists."


class CategoryService(BaseService):
    async def get_all(self) -> list[CategoryRead]:
        return await self.uow.categories.get_all()

    async def get_by_id(self, id: int) -> CategoryRead | None:
        return await self.uow.categories.get_by_id(id)

    async def add(self, name: str) -> ServiceResult[CategoryRead]:
        try:
            async with self.uow.transaction():
                if await self.uow.categories.get_by_name(name) is not None:
                    await self.uow.rollback()
                    return ServiceResult.failure(
                        ErrorKind.CONFLICT, CATEGORY_EXISTS
                    )

                category = await self.uow.categories.add(Category(name=name))
        except IntegrityError as ex:
            logger.warning(f"Category name '{name}' taken concurrently: {ex}")
            return ServiceResult.failure(ErrorKind.CONFLICT, CATEGORY_EXISTS)

        logger.info(f"Created category {category.id}")
        return ServiceResult.success(category)

    async def update(self, id: int, name: str) -> ServiceResult[CategoryRead]:
        """
        Rename a category.

        Keeping the current name is allowed; taking the name of another
        category is a conflict.
        """
        try:
            async with self.uow.transaction():
                if await self.uow.categories.get_by_id(id) is None:
                    await self.uow.rollback()
                    return ServiceResult.failure(
                        ErrorKind.NOT_FOUND, CATEGORY_NOT_FOUND
                    )

                existing = await self.uow.categories.get_by_name(name)
                if existing is not None and existing.id != id:
                    await self.uow.rollback()
                    return ServiceResult.failure(
                        ErrorKind.CONFLICT, CATEGORY_EXISTS
                    )

                category = await self.uow.categories.update(
                    Category(id=id, name=name)
                )
        except IntegrityError as ex:
            logger.warning(f"Category name '{name}' taken concurrently: {ex}")
            return ServiceResult.failure(ErrorKind.CONFLICT, CATEGORY_EXISTS)

        logger.info(f"Updated category {id}")
        return ServiceResult.success(category)

    async def delete(self, id: int) -> ServiceResult[None]:
        """Delete a category and its book links; books themselves stay."""
        async with self.uow.transaction():
            if await self.uow.categories.get_by_id(id) is None:
                await self.uow.rollback()
                return ServiceResult.failure(
                    ErrorKind.NOT_FOUND, CATEGORY_NOT_FOUND
                )

            await self.uow.book_categories.delete_by_category_id(id)
            await self.uow.categories.delete(id)

        logger.info(f"Deleted category {id}")
        return ServiceResult.success()

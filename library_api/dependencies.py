"""
Dependency injection configuration for FastAPI.

One `UnitOfWork` is created per request and disposed when the request
ends; services are built on top of it. Shared configuration objects
(retry policy, image storage) are created once by `application()` and
read from ``app.state``.

Example:
    ```python
    from library_api.dependencies import BookServiceDep, EntityIdDep

    @router.get("/{id}")
    async def get_book(book_id: EntityIdDep, service: BookServiceDep):
        ...
    ```
"""

from typing import Annotated, AsyncIterator, Awaitable, Callable, TypeVar

from fastapi import Depends, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from library_api.constants import INT32_MAX
from library_api.exceptions import ValidationError
from library_api.repositories.retry import RetryPolicy
from library_api.schemas.request import RequestDto
from library_api.services.author_service import AuthorService
from library_api.services.book_service import BookService
from library_api.services.category_service import CategoryService
from library_api.storage.db import async_session
from library_api.storage.images import ImageStorage
from library_api.storage.unit_of_work import UnitOfWork
from library_api.utils.request_body import read_dto

DtoT = TypeVar("DtoT", bound=RequestDto)

# ============================================================================
# Configuration Dependencies
# ============================================================================


def get_session_factory() -> Callable[[], AsyncSession]:
    """
    Session factory units of work are opened with.

    Can be overridden in tests using app.dependency_overrides.
    """
    return async_session


def get_retry_policy(request: Request) -> RetryPolicy:
    return request.app.state.retry_policy


def get_image_storage(request: Request) -> ImageStorage:
    return request.app.state.image_storage


RetryPolicyDep = Annotated[RetryPolicy, Depends(get_retry_policy)]
ImageStorageDep = Annotated[ImageStorage, Depends(get_image_storage)]


# ============================================================================
# Unit of Work and Service Dependencies
# ============================================================================


async def get_unit_of_work(
    session_factory: Annotated[
        Callable[[], AsyncSession], Depends(get_session_factory)
    ],
    retry_policy: RetryPolicyDep,
) -> AsyncIterator[UnitOfWork]:
    """
    Yield a unit of work scoped to the current request.

    The session is closed (and any open transaction rolled back) when the
    request finishes.
    """
    async with UnitOfWork(session_factory, retry_policy) as uow:
        yield uow


UnitOfWorkDep = Annotated[UnitOfWork, Depends(get_unit_of_work)]


def get_author_service(uow: UnitOfWorkDep) -> AuthorService:
    return AuthorService(uow)


def get_book_service(
    uow: UnitOfWorkDep, image_storage: ImageStorageDep
) -> BookService:
    return BookService(uow, image_storage)


def get_category_service(uow: UnitOfWorkDep) -> CategoryService:
    return CategoryService(uow)


AuthorServiceDep = Annotated[AuthorService, Depends(get_author_service)]
BookServiceDep = Annotated[BookService, Depends(get_book_service)]
CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]


# ============================================================================
# Request Parsing Dependencies
# ============================================================================


def parse_entity_id(id: str) -> int:
    """
    Parse the ``{id}`` path segment.

    Raises:
        ValidationError: If the id is not a positive 32-bit integer.
    """
    if not (id.isascii() and id.isdigit()) or not 0 < int(id) <= INT32_MAX:
        raise ValidationError("Invalid ID format.")
    return int(id)


EntityIdDep = Annotated[int, Depends(parse_entity_id)]


def json_body(dto_type: type[DtoT]) -> Callable[[Request], Awaitable[DtoT]]:
    """
    Build a dependency reading a strict JSON body into `dto_type`.

    Example:
        ```python
        data: Annotated[BookDto, Depends(json_body(BookDto))]
        ```
    """

    async def dependency(request: Request) -> DtoT:
        return await read_dto(request, dto_type)

    return dependency

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from library_api.dependencies import AuthorServiceDep, EntityIdDep, json_body
from library_api.exceptions import NotFoundError
from library_api.logging import logger
from library_api.schemas.author import AuthorRead
from library_api.schemas.request import AuthorDto
from library_api.schemas.response import DataResponse, MessageResponse

router = APIRouter(prefix="/authors", tags=["authors"])

AuthorBody = Annotated[AuthorDto, Depends(json_body(AuthorDto))]


@router.get(
    "",
    response_model=DataResponse[list[AuthorRead]],
    summary="Get all authors",
)
async def get_authors(
    service: AuthorServiceDep,
) -> DataResponse[list[AuthorRead]]:
    authors = await service.get_all()
    logger.info(f"Retrieved {len(authors)} authors")
    return DataResponse(message="Authors retrieved successfully.", data=authors)


@router.get(
    "/{id}",
    response_model=DataResponse[AuthorRead],
    summary="Get an author with its books",
)
async def get_author(
    author_id: EntityIdDep, service: AuthorServiceDep
) -> DataResponse[AuthorRead]:
    author = await service.get_by_id(author_id)
    if author is None:
        raise NotFoundError(f"Author with ID {author_id} not found.")

    return DataResponse(message="Author retrieved successfully.", data=author)


@router.post(
    "",
    response_model=DataResponse[AuthorRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new author",
)
async def create_author(
    data: AuthorBody, service: AuthorServiceDep, response: Response
) -> DataResponse[AuthorRead]:
    """
    Create a new author.

    Example:
        POST /authors
        {
            "name": "Ada Lovelace"
        }
    """
    author = (await service.add(data.name)).unwrap()
    response.headers["Location"] = f"/authors/{author.id}"
    return DataResponse(message="Author created successfully.", data=author)


@router.put(
    "/{id}",
    response_model=DataResponse[AuthorRead],
    summary="Rename an author",
)
async def update_author(
    author_id: EntityIdDep, data: AuthorBody, service: AuthorServiceDep
) -> DataResponse[AuthorRead]:
    author = (await service.update(author_id, data.name)).unwrap()
    return DataResponse(message="Author updated successfully.", data=author)


@router.delete(
    "/{id}",
    response_model=MessageResponse,
    summary="Delete an author with its books",
)
async def delete_author(
    author_id: EntityIdDep, service: AuthorServiceDep
) -> MessageResponse:
    if await service.get_by_id(author_id) is None:
        raise NotFoundError(f"Author with ID {author_id} not found.")

    (await service.delete(author_id)).unwrap()
    return MessageResponse(message="Author deleted successfully.")

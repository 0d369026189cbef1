from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from starlette.datastructures import UploadFile

from library_api.constants import MAX_IMAGE_SIZE_BYTES
from library_api.dependencies import BookServiceDep, EntityIdDep, json_body
from library_api.exceptions import NotFoundError, ValidationError
from library_api.logging import logger
from library_api.schemas.book import BookRead
from library_api.schemas.request import BookDto
from library_api.schemas.response import (
    DataResponse,
    FileUploadResponse,
    MessageResponse,
)

router = APIRouter(prefix="/books", tags=["books"])

BookBody = Annotated[BookDto, Depends(json_body(BookDto))]


@router.get(
    "",
    response_model=DataResponse[list[BookRead]],
    summary="Get all books",
)
async def get_books(service: BookServiceDep) -> DataResponse[list[BookRead]]:
    books = await service.get_all()
    logger.info(f"Retrieved {len(books)} books")
    return DataResponse(message="Books retrieved successfully.", data=books)


@router.get(
    "/{id}",
    response_model=DataResponse[BookRead],
    summary="Get a book with its author and categories",
)
async def get_book(
    book_id: EntityIdDep, service: BookServiceDep
) -> DataResponse[BookRead]:
    book = await service.get_by_id(book_id)
    if book is None:
        raise NotFoundError(f"Book with ID {book_id} not found.")

    return DataResponse(message="Book retrieved successfully.", data=book)


@router.post(
    "",
    response_model=DataResponse[BookRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
)
async def create_book(
    data: BookBody, service: BookServiceDep, response: Response
) -> DataResponse[BookRead]:
    """
    Create a book linked to an existing author and categories.

    Raises:
        ValidationError: 400 if the author or a category does not exist.

    Example:
        POST /books
        {
            "title": "Notes",
            "authorId": 1,
            "categoryIds": [1, 2]
        }
    """
    book = (
        await service.add(data.title, data.author_id, data.category_ids)
    ).unwrap()
    response.headers["Location"] = f"/books/{book.id}"
    return DataResponse(message="Book created successfully.", data=book)


@router.put(
    "/{id}",
    response_model=DataResponse[BookRead],
    summary="Replace a book and its categories",
)
async def update_book(
    book_id: EntityIdDep, data: BookBody, service: BookServiceDep
) -> DataResponse[BookRead]:
    """
    Replace the title, author and categories of a book.

    Raises:
        NotFoundError: 404 if the book does not exist.
        ValidationError: 400 if the author or a category does not exist.
    """
    book = (
        await service.update(
            book_id, data.title, data.author_id, data.category_ids
        )
    ).unwrap()
    return DataResponse(message="Book updated successfully.", data=book)


@router.delete(
    "/{id}",
    response_model=MessageResponse,
    summary="Delete a book",
)
async def delete_book(
    book_id: EntityIdDep, service: BookServiceDep
) -> MessageResponse:
    if await service.get_by_id(book_id) is None:
        raise NotFoundError(f"Book with ID {book_id} not found.")

    (await service.delete(book_id)).unwrap()
    return MessageResponse(message="Book deleted successfully.")


@router.post(
    "/{id}/uploadImage",
    response_model=FileUploadResponse,
    summary="Upload the cover image of a book",
    openapi_extra={
        "requestBody": {
            "content": {
                "multipart/form-data": {
                    "schema": {
                        "type": "object",
                        "properties": {
                            "FileUpload": {"type": "string", "format": "binary"}
                        },
                    }
                }
            }
        }
    },
)
async def upload_book_image(
    book_id: EntityIdDep, service: BookServiceDep, request: Request
) -> FileUploadResponse:
    """
    Upload a cover image of at most 2 MB.

    The first file of the multipart form is used, whatever its field name.

    Raises:
        NotFoundError: 404 if the book does not exist.
        ValidationError: 400 if no file was sent, it is too large or it is
            not an accepted image type.
    """
    if await service.get_by_id(book_id) is None:
        raise NotFoundError(f"Book with ID {book_id} not found.")

    async with request.form() as form:
        file = next(
            (
                value
                for _, value in form.multi_items()
                if isinstance(value, UploadFile)
            ),
            None,
        )
        if file is None or file.size == 0:
            raise ValidationError("No file uploaded")
        if file.size is not None and file.size > MAX_IMAGE_SIZE_BYTES:
            raise ValidationError("File size exceeds 2 MB")

        content = await file.read(MAX_IMAGE_SIZE_BYTES + 1)
        filename = file.filename

    if not content:
        raise ValidationError("No file uploaded")
    if len(content) > MAX_IMAGE_SIZE_BYTES:
        raise ValidationError("File size exceeds 2 MB")

    image_path = (
        await service.upload_image(book_id, filename, content)
    ).unwrap()
    logger.info(f"Uploaded image for book {book_id} ({len(content)} bytes)")
    return FileUploadResponse(file_path=image_path)

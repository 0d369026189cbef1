from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from library_api.dependencies import CategoryServiceDep, EntityIdDep, json_body
from library_api.exceptions import NotFoundError
from library_api.logging import logger
from library_api.schemas.category import CategoryRead
from library_api.schemas.request import CategoryDto
from library_api.schemas.response import DataResponse, MessageResponse

router = APIRouter(prefix="/categories", tags=["categories"])

CategoryBody = Annotated[CategoryDto, Depends(json_body(CategoryDto))]


@router.get(
    "",
    response_model=DataResponse[list[CategoryRead]],
    summary="Get all categories",
)
async def get_categories(
    service: CategoryServiceDep,
) -> DataResponse[list[CategoryRead]]:
    categories = await service.get_all()
    logger.info(f"Retrieved {len(categories)} categories")
    return DataResponse(
        message="Categories retrieved successfully.", data=categories
    )


@router.get(
    "/{id}",
    response_model=DataResponse[CategoryRead],
    summary="Get a category with its books",
)
async def get_category(
    category_id: EntityIdDep, service: CategoryServiceDep
) -> DataResponse[CategoryRead]:
    category = await service.get_by_id(category_id)
    if category is None:
        raise NotFoundError(f"Category with ID {category_id} not found.")

    return DataResponse(
        message="Category retrieved successfully.", data=category
    )


@router.post(
    "",
    response_model=DataResponse[CategoryRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new category",
)
async def create_category(
    data: CategoryBody, service: CategoryServiceDep, response: Response
) -> DataResponse[CategoryRead]:
    """
    Create a new category.

    Raises:
        ValidationError: 400 if a category with the same name exists.
    """
    category = (await service.add(data.name)).unwrap()
    response.headers["Location"] = f"/categories/{category.id}"
    return DataResponse(message="Category created successfully.", data=category)


@router.put(
    "/{id}",
    response_model=DataResponse[CategoryRead],
    summary="Rename a category",
)
async def update_category(
    category_id: EntityIdDep, data: CategoryBody, service: CategoryServiceDep
) -> DataResponse[CategoryRead]:
    category = (await service.update(category_id, data.name)).unwrap()
    return DataResponse(message="Category updated successfully.", data=category)


@router.delete(
    "/{id}",
    response_model=MessageResponse,
    summary="Delete a category and its book links",
)
async def delete_category(
    category_id: EntityIdDep, service: CategoryServiceDep
) -> MessageResponse:
    if await service.get_by_id(category_id) is None:
        raise NotFoundError(f"Category with ID {category_id} not found.")

    (await service.delete(category_id)).unwrap()
    return MessageResponse(message="Category deleted successfully.")

"""
Response envelopes.

Successful responses are wrapped as ``{"Message": ..., "Data": ...}``;
errors carry ``Message`` and, for field validation, ``Errors``.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class MessageResponse(BaseModel):  # type: ignore[misc]
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., alias="Message")


class DataResponse(MessageResponse, Generic[T]):
    data: T = Field(..., alias="Data")


class ValidationErrorItem(BaseModel):  # type: ignore[misc]
    model_config = ConfigDict(populate_by_name=True)

    property_name: str = Field(..., alias="PropertyName")
    error_message: str = Field(..., alias="ErrorMessage")


class ValidationErrorResponse(MessageResponse):
    errors: list[ValidationErrorItem] = Field(..., alias="Errors")


class FileUploadResponse(BaseModel):  # type: ignore[misc]
    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(..., alias="FilePath")

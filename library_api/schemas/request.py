"""
Request bodies accepted by the HTTP handlers.

Each DTO declares its JSON field set through camelCase aliases. Bodies are
matched against that set case-insensitively before validation, so field
validators only ever see well-formed payloads.

A field validator reports every rule its value breaks, not just the first
one. The messages travel in the error context under ``messages`` and are
expanded into separate items by `library_api.utils.request_body`.
"""

import re
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from library_api.constants import (
    INT32_MAX,
    INT32_MIN,
    NAME_MAX_LENGTH,
    NAME_PATTERN,
    TITLE_MAX_LENGTH,
)
from library_api.exceptions import ValidationError

_name_pattern = re.compile(NAME_PATTERN)


def _is_out_of_range(value: Any) -> bool:
    if isinstance(value, list):
        return any(_is_out_of_range(item) for item in value)
    if isinstance(value, int) and not isinstance(value, bool):
        return not INT32_MIN <= value <= INT32_MAX
    return False


def _raise_failures(error_type: str, messages: list[str]) -> None:
    if messages:
        raise PydanticCustomError(
            error_type, " ".join(messages), {"messages": messages}
        )


class RequestDto(BaseModel):  # type: ignore[misc]
    """Base class of request bodies with an exact, case-insensitive field set."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        strict=True,
        extra="forbid",
    )

    @classmethod
    def json_fields(cls) -> dict[str, str]:
        """Lower-cased JSON key -> alias for every declared field."""
        aliases = (field.alias or name for name, field in cls.model_fields.items())
        return {alias.lower(): alias for alias in aliases}

    @classmethod
    def normalize_keys(cls, payload: Any) -> dict[str, Any]:
        """
        Re-key a decoded JSON object onto the declared aliases.

        Raises:
            ValidationError: If the payload is not an object, its key set,
                compared case-insensitively, differs from the declared fields,
                or an integer does not fit in 32 bits.
        """
        if not isinstance(payload, dict):
            raise ValidationError("Invalid request structure.")

        expected = cls.json_fields()
        received = [key.lower() for key in payload]
        if len(received) != len(expected) or set(received) != set(expected):
            raise ValidationError("Invalid request structure.")
        if any(_is_out_of_range(value) for value in payload.values()):
            raise ValidationError("Invalid request structure.")

        return {expected[key.lower()]: value for key, value in payload.items()}

    @classmethod
    def from_payload(cls, payload: Any) -> Self:
        """Check the key set, then run field validation."""
        return cls.model_validate(cls.normalize_keys(payload))


def _check_name(value: str | None, subject: str) -> str:
    if value is None or value == "":
        raise PydanticCustomError("required", f"{subject} name is required.")

    failures = []
    if len(value) > NAME_MAX_LENGTH:
        failures.append(
            f"{subject} name must be between 1 and {NAME_MAX_LENGTH} characters."
        )
    if not value.strip():
        failures.append(f"{subject} name must not be just whitespace.")
    if not _name_pattern.match(value):
        failures.append(
            f"{subject} name must contain only alphabetic characters and single spaces between words."
        )
    _raise_failures("name", failures)
    return value


class AuthorDto(RequestDto):
    name: str | None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str:
        return _check_name(value, "Author")


class CategoryDto(RequestDto):
    name: str | None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str:
        return _check_name(value, "Category")


class BookDto(RequestDto):
    title: str | None
    author_id: int
    category_ids: list[int] | None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str | None) -> str:
        if value is None or value == "":
            raise PydanticCustomError("required", "Book title is required.")

        trimmed = value.strip()
        failures = []
        if len(value) > TITLE_MAX_LENGTH:
            failures.append(
                f"Book title must be between 1 and {TITLE_MAX_LENGTH} characters."
            )
        if not trimmed:
            failures.append("Book title must not be just whitespace.")
        if ";" in value:
            failures.append("Book title must not contain semicolons.")
        if "  " in trimmed:
            failures.append("Book title must not contain consecutive spaces.")
        _raise_failures("title", failures)
        return trimmed

    @field_validator("author_id")
    @classmethod
    def validate_author_id(cls, value: int) -> int:
        if value <= 0:
            raise PydanticCustomError(
                "positive", "Author ID must be a positive integer."
            )
        return value

    @field_validator("category_ids")
    @classmethod
    def validate_category_ids(cls, value: list[int] | None) -> list[int]:
        if not value:
            raise PydanticCustomError(
                "required", "At least one category ID is required."
            )
        if any(category_id <= 0 for category_id in value):
            raise PydanticCustomError(
                "positive", "Category ID must be a positive integer."
            )
        return value

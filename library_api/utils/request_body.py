"""
Strict JSON request body parsing.

Bodies are decoded by hand rather than through FastAPI's model binding so
that the field set can be compared case-insensitively and validation
failures can be reported as ``{PropertyName, ErrorMessage}`` items.
"""

import json
from typing import Any, TypeVar

from pydantic import ValidationError as PydanticValidationError
from starlette.requests import Request

from library_api.exceptions import RequestValidationFailed, ValidationError
from library_api.schemas.request import RequestDto

DtoT = TypeVar("DtoT", bound=RequestDto)


def property_name(loc: tuple[int | str, ...]) -> str:
    """
    Render a pydantic error location as a property path.

    Example:
        >>> property_name(("categoryIds", 0))
        'CategoryIds[0]'
    """
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            name = part[:1].upper() + part[1:]
            path += f".{name}" if path else name
    return path


def validation_errors(ex: PydanticValidationError) -> list[dict[str, Any]]:
    """One item per broken rule, in field order."""
    items = []
    for error in ex.errors():
        messages = error.get("ctx", {}).get("messages") or [error["msg"]]
        items.extend(
            {
                "PropertyName": property_name(error["loc"]),
                "ErrorMessage": message,
            }
            for message in messages
        )
    return items


def decode_body(raw: bytes) -> Any:
    """
    Decode a raw request body.

    Raises:
        ValidationError: For an empty body, invalid JSON or a JSON null.
    """
    if not raw.strip():
        raise ValidationError("Request body cannot be null.")
    try:
        payload = json.loads(raw)
    except ValueError:
        raise ValidationError("Invalid request structure.")
    if payload is None:
        raise ValidationError("Invalid request body.")
    return payload


def parse_dto(payload: Any, dto_type: type[DtoT]) -> DtoT:
    """
    Build a DTO from a decoded payload.

    Raises:
        ValidationError: If the field set differs from the DTO's.
        RequestValidationFailed: If a field violates its rules.
    """
    try:
        return dto_type.from_payload(payload)
    except PydanticValidationError as ex:
        raise RequestValidationFailed(validation_errors(ex))


async def read_dto(request: Request, dto_type: type[DtoT]) -> DtoT:
    return parse_dto(decode_body(await request.body()), dto_type)

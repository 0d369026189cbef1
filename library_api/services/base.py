"""
Building blocks shared by the domain services.

Services report expected failures (missing entities, name conflicts) as a
`ServiceResult` instead of raising, and keep exceptions for
infrastructure and programming errors. Results unpack like a pair:

    ```python
    book, error = await book_service.add(dto)
    if error:
        ...
    ```
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, Iterator, TypeVar

from library_api.exceptions import NotFoundError, ValidationError
from library_api.storage.unit_of_work import UnitOfWork

T = TypeVar("T")


class ErrorKind(StrEnum):
    NOT_FOUND = "not_found"
    INVALID_REFERENCE = "invalid_reference"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """
    Outcome of a service operation.

    Attributes:
        value: Result of a successful operation.
        error: Failure reason shown to the caller, None on success.
        kind: Category of the failure, None on success.
    """

    value: T | None = None
    error: str | None = None
    kind: ErrorKind | None = None

    @classmethod
    def success(cls, value: T | None = None) -> "ServiceResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, error: str) -> "ServiceResult[T]":
        return cls(error=error, kind=kind)

    @property
    def ok(self) -> bool:
        return self.error is None

    def __iter__(self) -> Iterator[T | str | None]:
        yield self.value
        yield self.error

    def unwrap(self) -> T:
        """
        Return the value or raise the matching application exception.

        Missing primary entities map to 404; bad references and conflicts
        map to 400.

        Raises:
            NotFoundError: For NOT_FOUND failures.
            ValidationError: For every other failure.
        """
        if self.ok:
            return self.value  # type: ignore[return-value]
        if self.kind is ErrorKind.NOT_FOUND:
            raise NotFoundError(self.error or "")
        raise ValidationError(self.error or "")


class BaseService:
    """
    Base class of the domain services.

    Attributes:
        uow: Unit of work the service reads and writes through.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

from pydantic import Field

from library_api.schemas.author import BookSummary
from library_api.schemas.base import CamelModel


class CategoryRef(CamelModel):
    id: int
    name: str


class CategoryRead(CamelModel):
    """Category with the books linked to it."""

    id: int
    name: str
    books: list[BookSummary] = Field(default_factory=list)

from pydantic import Field

from library_api.schemas.base import CamelModel


class AuthorRef(CamelModel):
    id: int
    name: str


class BookSummary(CamelModel):
    id: int
    title: str
    author_id: int


class AuthorRead(CamelModel):
    """Author with the books it owns."""

    id: int
    name: str
    books: list[BookSummary] = Field(default_factory=list)

from pydantic import Field

from library_api.schemas.author import AuthorRef
from library_api.schemas.base import CamelModel
from library_api.schemas.category import CategoryRef


class BookRead(CamelModel):
    """Book with its author and categories attached."""

    id: int
    title: str
    author_id: int
    image_path: str | None = None
    author: AuthorRef | None = None
    categories: list[CategoryRef] = Field(default_factory=list)

    @property
    def category_ids(self) -> list[int]:
        return [category.id for category in self.categories]

from sqlmodel import Field

from library_api.constants import IMAGE_PATH_MAX_LENGTH, TITLE_MAX_LENGTH
from library_api.models.base import BaseModel


class Book(BaseModel, table=True):
    """
    SQLModel representing a book row.

    Attributes:
        id: Primary key identifier for the book
        title: Title of the book
        author_id: Owning author, must exist when the book is written
        image_path: Relative path of the uploaded cover image, if any
    """

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(max_length=TITLE_MAX_LENGTH)
    author_id: int = Field(foreign_key="author.id", index=True)
    image_path: str | None = Field(
        default=None, max_length=IMAGE_PATH_MAX_LENGTH
    )

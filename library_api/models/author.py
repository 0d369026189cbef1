from sqlmodel import Field

from library_api.constants import NAME_MAX_LENGTH
from library_api.models.base import BaseModel


class Author(BaseModel, table=True):
    """
    SQLModel representing an author row.

    Use AuthorRepository for all database operations.

    Attributes:
        id: Primary key identifier for the author
        name: Name of the author
    """

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=NAME_MAX_LENGTH)

from sqlmodel import Field

from library_api.constants import NAME_MAX_LENGTH
from library_api.models.base import BaseModel


class Category(BaseModel, table=True):
    """
    SQLModel representing a category row.

    Attributes:
        id: Primary key identifier for the category
        name: Unique category name (exact, case-sensitive match)
    """

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=NAME_MAX_LENGTH, unique=True)

from sqlmodel import Field

from library_api.models.base import BaseModel


class BookCategory(BaseModel, table=True):
    """
    Join row linking a book to one of its categories.

    The pair (book_id, category_id) is the primary key; the row has no
    identity of its own.
    """

    __tablename__ = "book_category"  # type: ignore[assignment]

    book_id: int = Field(foreign_key="book.id", primary_key=True)
    category_id: int = Field(
        foreign_key="category.id", primary_key=True, index=True
    )

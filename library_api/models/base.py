"""
Base model for all database tables.

Combines SQLModel with SQLAlchemy's AsyncAttrs mixin so lazily loaded
attributes can be awaited through `awaitable_attrs` instead of raising
MissingGreenlet inside async code.
"""

from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlmodel import SQLModel


class BaseModel(SQLModel, AsyncAttrs):  # type: ignore[misc]
    """
    Base class of every table model.

    Table models are plain rows: associations are hydrated by the
    repositories into read schemas rather than through ORM relationships.
    """

    pass

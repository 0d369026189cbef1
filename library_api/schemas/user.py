from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class UserModel(BaseModel):  # type: ignore[misc]
    """
    Caller identity built from the claims of a bearer token.

    Implements the attributes Starlette expects from ``request.user``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = Field(default=None, alias="sub")
    username: str | None = Field(default=None, alias="preferred_username")
    audience: str | list[str] | None = Field(default=None, alias="aud")
    expired_in: float | None = Field(default=None, alias="exp")
    claims: dict[str, Any] = Field(default_factory=dict, exclude=True)

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "UserModel":
        return cls.model_validate({**claims, "claims": claims})

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def display_name(self) -> str:
        return self.username or self.id or ""

    @property
    def identity(self) -> str:
        return self.id or ""

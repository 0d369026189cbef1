from typing import Any

from fastapi.security.utils import get_authorization_scheme_param
from jwcrypto.common import base64url_decode, json_decode
from starlette.authentication import AuthCredentials, AuthenticationBackend
from starlette.authentication import AuthenticationError as StarletteAuthError
from starlette.requests import HTTPConnection
from starlette.responses import JSONResponse

from library_api.logging import logger
from library_api.schemas.user import UserModel
from library_api.settings import app_settings


class AuthenticationError(StarletteAuthError):
    """
    Authentication failure raised by `AuthBackend`.

    Attributes:
        reason: A machine-readable error code (e.g. 'invalid_audience')
        detail: Message returned to the client
    """

    def __init__(self, reason: str, detail: str) -> None:
        self.reason = reason
        self.detail = detail
        super().__init__(f"{reason}: {detail}")


def read_token_claims(token: str) -> dict[str, Any]:
    """
    Decode the claims of a compact JWS/JWT without checking its signature.

    Args:
        token: ``header.payload.signature`` in base64url.

    Returns:
        The payload claims.

    Raises:
        ValueError: If the token is not a well-formed compact token.
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise ValueError("Token must have three segments")

    header = json_decode(base64url_decode(parts[0]))
    if not isinstance(header, dict) or "alg" not in header:
        raise ValueError("Token header has no algorithm")

    claims = json_decode(base64url_decode(parts[1]))
    if not isinstance(claims, dict):
        raise ValueError("Token payload is not a JSON object")
    return claims


def audience_matches(claim: Any, expected: str) -> bool:
    """The ``aud`` claim may be a single value or a list of values."""
    if isinstance(claim, str):
        return claim == expected
    if isinstance(claim, list):
        return expected in claim
    return False


class AuthBackend(AuthenticationBackend):  # type: ignore[misc]
    """
    Bearer token authentication backend.

    Accepts a request when its ``Authorization: Bearer <token>`` header
    carries a decodable token whose ``aud`` claim equals the configured
    audience. Paths matching ``EXCLUDED_PATHS`` are not authenticated.

    Raises:
        AuthenticationError: With reason
            - 'missing_token' when the header is absent or not Bearer
            - 'token_decode_error' when the token cannot be decoded
            - 'invalid_audience' when the audience does not match
    """

    def __init__(
        self, audience: str | None = None, excluded_paths: Any = None
    ) -> None:
        self.audience = audience or app_settings.AUTH_AUDIENCE
        self.excluded_paths = excluded_paths or app_settings.EXCLUDED_PATHS

    async def authenticate(
        self, conn: HTTPConnection
    ) -> tuple[AuthCredentials, UserModel] | None:
        if self.excluded_paths.match(conn.url.path):
            return None

        scheme, token = get_authorization_scheme_param(
            conn.headers.get("authorization")
        )
        if scheme.lower() != "bearer" or not token:
            raise AuthenticationError(
                "missing_token", "Missing or invalid Authorization header"
            )

        try:
            claims = read_token_claims(token)
            user = UserModel.from_claims(claims)
        except ValueError as ex:
            logger.error(f"Error occurred while decode auth token: {ex}")
            raise AuthenticationError("token_decode_error", "Invalid token")

        if not audience_matches(claims.get("aud"), self.audience):
            logger.warning(f"Token audience {claims.get('aud')!r} rejected")
            raise AuthenticationError("invalid_audience", "Invalid audience")

        return AuthCredentials(["authenticated"]), user


def on_auth_error(conn: HTTPConnection, exc: Exception) -> JSONResponse:
    """Render authentication failures as 401 ``{Message}``."""
    detail = getattr(exc, "detail", str(exc))
    return JSONResponse(status_code=401, content={"Message": detail})

"""Authentication dependencies for FastAPI endpoints."""

from uuid import UUID

from fastapi import Header, HTTPException, status

from app.auth.jwt import decode_token


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "error": {
                "code": "UNAUTHORIZED",
                "message": message,
            }
        },
    )


async def get_current_user_id(
    x_auth_token: str | None = Header(default=None, alias="x-auth-token"),
    authorization: str | None = Header(default=None),
) -> UUID:
    """
    Resolve the acting user's id from the request token.

    Accepts the token in ``x-auth-token`` or as an ``Authorization: Bearer``
    header. The ``sub`` claim is trusted as the owner id; the user record is
    not loaded.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    token = x_auth_token
    if not token and authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer":
            token = credentials.strip()

    if not token:
        raise _unauthorized("No token, authorization denied")

    payload = decode_token(token)
    if not payload or payload.get("type") != "access":
        raise _unauthorized("Token is not valid")

    try:
        return UUID(str(payload.get("sub")))
    except ValueError:
        raise _unauthorized("Token is not valid") from None

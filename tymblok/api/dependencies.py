"""FastAPI dependencies for caller identity."""

from fastapi import Header, HTTPException, status


def get_current_user_id(x_user_id: str = Header(default="", alias="X-User-Id")) -> str:
    """Return the caller's user id.

    Token validation happens upstream (API gateway); this service only needs the
    resolved id forwarded in `X-User-Id`.

    Raises:
        HTTPException: If the header is missing or blank
    """
    user_id = x_user_id.strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user_id

"""Shared dependencies for API endpoints."""
from typing import Optional

from fastapi import Header

from app.exceptions import AuthenticationError


async def get_current_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> str:
    """Opaque user id set by the identity provider in front of the API.

    Args:
        x_user_id: User id from X-User-Id header

    Raises:
        AuthenticationError: header missing or blank (mapped to 401)

    Returns:
        str: The user id
    """
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationError("로그인이 필요합니다.")
    return x_user_id.strip()

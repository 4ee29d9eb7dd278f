"""
Authentication dependency for FastAPI routes.

Session management lives elsewhere; the pipeline only needs the id of the
user a request acts for.
"""

import logging

from fastapi import Header, HTTPException
from pydantic import BaseModel

from recipe_intake.db.client import get_service_client

logger = logging.getLogger(__name__)


class AuthenticatedUser(BaseModel):
    """Authenticated user info from a Supabase JWT."""

    id: str
    email: str | None = None


def get_current_user(authorization: str = Header(None)) -> AuthenticatedUser:
    """
    Validate a Supabase JWT and extract user info.

    Expects Authorization header: "Bearer <access_token>"
    """
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization format")

    access_token = authorization[7:]

    try:
        client = get_service_client()
        user_response = client.auth.get_user(access_token)
    except Exception as e:
        logger.warning(f"Auth validation failed: {e}")
        raise HTTPException(status_code=401, detail="Invalid or expired token") from e

    if not user_response or not user_response.user:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user = user_response.user
    return AuthenticatedUser(id=user.id, email=user.email)

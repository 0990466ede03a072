"""
JWT authentication utilities for the web API.

Security measures implemented:
- HS256 signing algorithm with 256-bit secret
- Session token expiration (24 hours)
- Impersonation token expiration (8 hours), bound to the admin who set it
- HttpOnly, SameSite=Lax, Path=/ cookies
"""

import os
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import HTTPException, Request, Response

from core.access import Identity, effective_identity
from core.database import get_connection
from core.queries.users import is_admin

JWT_SECRET = os.environ.get("JWT_SECRET")
JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_HOURS = 24

SESSION_COOKIE = "session"
IMPERSONATE_COOKIE = "impersonate"
IMPERSONATE_MAX_AGE = 60 * 60 * 8  # 8 hours

# "typ" claim values; each cookie only accepts its own kind of token
SESSION_TOKEN = "session"
IMPERSONATE_TOKEN = "impersonate"


def _secret() -> str:
    if not JWT_SECRET:
        raise ValueError("JWT_SECRET environment variable not set")
    return JWT_SECRET


def create_jwt(user_id: int) -> str:
    """
    Create a signed session JWT for an authenticated user.

    Args:
        user_id: The user's database ID

    Returns:
        Signed JWT token string
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "typ": SESSION_TOKEN,
        "iat": now,
        "exp": now + timedelta(hours=JWT_EXPIRATION_HOURS),
    }
    return jwt.encode(payload, _secret(), algorithm=JWT_ALGORITHM)


def verify_jwt(token: str) -> dict | None:
    """
    Verify and decode a JWT token.

    Returns:
        Decoded payload dict if valid, None if invalid
    """
    try:
        return jwt.decode(token, _secret(), algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        return None


async def get_current_user(request: Request) -> dict:
    """
    FastAPI dependency to get the current authenticated user.

    Extracts the session cookie and validates the JWT.

    Raises:
        HTTPException: 401 if not authenticated or invalid token
    """
    token = request.cookies.get(SESSION_COOKIE)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = verify_jwt(token)
    if not payload or payload.get("typ") != SESSION_TOKEN:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return payload


async def require_admin(request: Request) -> dict:
    """
    FastAPI dependency that only lets admins through.

    Checks the real (not impersonated) user.

    Raises:
        HTTPException: 401 if not authenticated, 403 if not an admin
    """
    payload = await get_current_user(request)
    user_id = int(payload["sub"])

    async with get_connection() as conn:
        if not await is_admin(conn, user_id):
            raise HTTPException(status_code=403, detail="Admin access required")

    return {"user_id": user_id}


# --- Impersonation ---


def create_impersonation_token(admin_id: int, target_user_id: int) -> str:
    """Sign an impersonation grant for ``admin_id`` acting as ``target_user_id``."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(admin_id),
        "act_as": str(target_user_id),
        "typ": IMPERSONATE_TOKEN,
        "iat": now,
        "exp": now + timedelta(seconds=IMPERSONATE_MAX_AGE),
    }
    return jwt.encode(payload, _secret(), algorithm=JWT_ALGORITHM)


def set_impersonation_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=IMPERSONATE_COOKIE,
        value=token,
        path="/",
        httponly=True,
        samesite="lax",
        max_age=IMPERSONATE_MAX_AGE,
    )


def clear_impersonation_cookie(response: Response) -> None:
    """Drop the impersonation cookie, restoring the admin's own identity."""
    response.delete_cookie(
        key=IMPERSONATE_COOKIE,
        path="/",
        httponly=True,
        samesite="lax",
    )


def read_impersonation(request: Request, user_id: int) -> int | None:
    """
    User id the request asks to act as, if the cookie is valid.

    The grant must be signed by us, unexpired, an impersonation token,
    and issued to ``user_id``.
    """
    token = request.cookies.get(IMPERSONATE_COOKIE)
    if not token:
        return None

    payload = verify_jwt(token)
    if not payload or payload.get("typ") != IMPERSONATE_TOKEN:
        return None
    if payload.get("sub") != str(user_id):
        return None

    try:
        return int(payload["act_as"])
    except (KeyError, ValueError):
        return None


async def get_effective_identity(request: Request) -> Identity:
    """
    FastAPI dependency: who is acting for this request.

    Raises:
        HTTPException: 401 if not authenticated or the user no longer exists
    """
    payload = await get_current_user(request)
    user_id = int(payload["sub"])
    impersonate_user_id = read_impersonation(request, user_id)

    async with get_connection() as conn:
        identity = await effective_identity(conn, user_id, impersonate_user_id)

    if identity is None:
        raise HTTPException(status_code=401, detail="User not found")
    return identity

"""
Admin panel API routes.

All endpoints require admin authentication (the real user, not an
impersonated one).

Endpoints:
- POST /api/admin/impersonate - Start acting as another user
- POST /api/admin/impersonate/stop - Stop impersonating
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

from core.database import get_connection
from core.queries.users import get_user_by_id
from web_api.auth import (
    clear_impersonation_cookie,
    create_impersonation_token,
    require_admin,
    set_impersonation_cookie,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


class ImpersonateRequest(BaseModel):
    """Request body for starting impersonation."""

    user_id: int


@router.post("/impersonate")
async def start_impersonation(
    request: ImpersonateRequest,
    response: Response,
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    """
    Act as another user for the next eight hours.

    Sets a signed, HTTP-only cookie scoped to the whole site.
    """
    async with get_connection() as conn:
        target = await get_user_by_id(conn, request.user_id)

    if not target:
        raise HTTPException(status_code=404, detail="User not found")

    token = create_impersonation_token(admin["user_id"], request.user_id)
    set_impersonation_cookie(response, token)
    logger.info(f"Admin {admin['user_id']} impersonating user {request.user_id}")

    return {"status": "impersonating", "user_id": request.user_id}


@router.post("/impersonate/stop")
async def stop_impersonation(
    response: Response,
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    """Clear the impersonation cookie, restoring the admin's own identity."""
    clear_impersonation_cookie(response)
    return {"status": "stopped", "user_id": admin["user_id"]}

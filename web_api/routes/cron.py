"""
Cron-triggered maintenance routes.

Endpoints:
- POST /api/cron/archive-challenges - Archive challenges whose end time has passed

When CRON_SECRET is set, callers must send "Authorization: Bearer <CRON_SECRET>".
"""

import hmac
from typing import Any

from fastapi import APIRouter, Header, HTTPException

from core.archival import archive_ended_challenges
from core.config import get_cron_secret

router = APIRouter(prefix="/api/cron", tags=["cron"])


@router.post("/archive-challenges")
async def archive_challenges(
    authorization: str | None = Header(None),
) -> dict[str, Any]:
    """Run the archival sweep now. Safe to call repeatedly."""
    secret = get_cron_secret()
    if secret and not hmac.compare_digest(authorization or "", f"Bearer {secret}"):
        raise HTTPException(401, "Unauthorized")

    archived_count = await archive_ended_challenges()
    return {"archived_count": archived_count}

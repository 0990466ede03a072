"""
Challenge archive routes.

Endpoints:
- GET /api/challenges/{challenge_id}/archive - Participant view of an archived challenge
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from core.access import Identity
from core.blocks import (
    ChallengeNotArchived,
    ChallengeNotFound,
    MalformedDocument,
    PersistenceAdapter,
    UnknownBlockType,
)
from core.challenges import get_archive_view
from web_api.auth import get_effective_identity
from web_api.routes.blocks import get_persistence

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/challenges", tags=["challenges"])


@router.get("/{challenge_id}/archive")
async def get_challenge_archive(
    challenge_id: int,
    identity: Identity = Depends(get_effective_identity),
    persistence: PersistenceAdapter = Depends(get_persistence),
) -> dict[str, Any]:
    """
    Get the archived view of a challenge.

    Participants get structure and their own submissions; creator content
    is only included for the owner or an admin.
    """
    try:
        view = await get_archive_view(challenge_id, identity, persistence)
    except (ChallengeNotFound, ChallengeNotArchived):
        raise HTTPException(404, "Challenge not found or not archived")
    except (MalformedDocument, UnknownBlockType) as e:
        logger.error(f"Archive for challenge {challenge_id} failed to load: {e}")
        raise HTTPException(500, "Stored challenge content is corrupt")

    return view.to_dict()

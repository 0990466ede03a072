"""Challenge-related database queries."""

from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncConnection

from ..enums import ChallengeStatus
from ..tables import challenges


async def get_challenge(
    conn: AsyncConnection,
    challenge_id: int,
) -> dict[str, Any] | None:
    """Get a challenge row by id."""
    result = await conn.execute(
        select(challenges).where(challenges.c.challenge_id == challenge_id)
    )
    row = result.mappings().first()
    return dict(row) if row else None


async def archive_ended_challenges(
    conn: AsyncConnection,
    now: datetime,
) -> list[int]:
    """
    Flip every scheduled/active challenge whose end_at has passed to archived.

    Already-archived challenges are never touched, so running this twice
    archives nothing the second time.

    Returns:
        IDs of the challenges archived by this call
    """
    result = await conn.execute(
        update(challenges)
        .where(
            challenges.c.status.in_(
                [ChallengeStatus.scheduled, ChallengeStatus.active]
            )
        )
        .where(challenges.c.end_at.isnot(None))
        .where(challenges.c.end_at <= now)
        .values(status=ChallengeStatus.archived, archived_at=now, updated_at=now)
        .returning(challenges.c.challenge_id)
    )
    return [row.challenge_id for row in result]

"""Participant submission queries."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncConnection

from ..tables import submission_comments, submissions, users


async def get_participant_submissions(
    conn: AsyncConnection,
    challenge_id: int,
    user_id: int,
) -> list[dict[str, Any]]:
    """
    Get one participant's submissions for a challenge, newest first.

    Each submission carries its comments (oldest first) with the
    commenter's display name.
    """
    result = await conn.execute(
        select(
            submissions.c.submission_id,
            submissions.c.block_id,
            submissions.c.user_id,
            submissions.c.content,
            submissions.c.media_url,
            submissions.c.created_at,
        )
        .where(submissions.c.challenge_id == challenge_id)
        .where(submissions.c.user_id == user_id)
        .order_by(submissions.c.created_at.desc())
    )
    rows = [
        {
            "id": row["submission_id"],
            "block_id": row["block_id"],
            "user_id": row["user_id"],
            "content": row["content"],
            "media_url": row["media_url"],
            "created_at": row["created_at"].isoformat() if row["created_at"] else None,
            "comments": [],
        }
        for row in result.mappings()
    ]
    if not rows:
        return rows

    comments_result = await conn.execute(
        select(
            submission_comments.c.comment_id,
            submission_comments.c.submission_id,
            submission_comments.c.content,
            submission_comments.c.created_at,
            users.c.display_name,
        )
        .outerjoin(users, submission_comments.c.author_id == users.c.user_id)
        .where(submission_comments.c.submission_id.in_([r["id"] for r in rows]))
        .order_by(submission_comments.c.created_at)
    )
    by_submission = {r["id"]: r for r in rows}
    for comment in comments_result.mappings():
        by_submission[comment["submission_id"]]["comments"].append(
            {
                "id": comment["comment_id"],
                "content": comment["content"],
                "created_at": comment["created_at"].isoformat()
                if comment["created_at"]
                else None,
                "author_display_name": comment["display_name"] or "Participant",
            }
        )
    return rows

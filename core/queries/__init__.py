"""Query layer for database operations using SQLAlchemy Core."""

from .blocks import get_challenge_blocks, replace_challenge_blocks
from .challenges import archive_ended_challenges, get_challenge
from .submissions import get_participant_submissions
from .users import get_user_by_id, is_admin

__all__ = [
    # Users
    "get_user_by_id",
    "is_admin",
    # Challenges
    "get_challenge",
    "archive_ended_challenges",
    # Blocks
    "get_challenge_blocks",
    "replace_challenge_blocks",
    # Submissions
    "get_participant_submissions",
]

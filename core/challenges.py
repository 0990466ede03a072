"""
Challenge-level operations built on the block model.

get_archive_view is the participant-facing archive read: it checks the
challenge exists and is archived, then hands the document and the
requester's submissions to the projector.
"""

import logging

from .access import Identity, is_owner_or_admin
from .blocks.archive import ArchivedView, project
from .blocks.errors import ChallengeNotArchived, ChallengeNotFound
from .blocks.persistence import DatabasePersistenceAdapter, PersistenceAdapter
from .enums import ChallengeStatus

logger = logging.getLogger(__name__)


async def get_archive_view(
    challenge_id: int,
    identity: Identity,
    persistence: PersistenceAdapter | None = None,
) -> ArchivedView:
    """
    Get the archived view of a challenge for the acting user.

    Raises:
        ChallengeNotFound: No such challenge
        ChallengeNotArchived: Challenge has not been archived yet
        MalformedDocument, UnknownBlockType: Stored document is corrupt
    """
    persistence = persistence or DatabasePersistenceAdapter()

    challenge = await persistence.load_challenge(challenge_id)
    if not challenge:
        raise ChallengeNotFound(challenge_id)
    if challenge["status"] != ChallengeStatus.archived:
        raise ChallengeNotArchived(challenge_id)

    document = await persistence.load_document(challenge_id)
    submissions = await persistence.load_submissions(challenge_id, identity.user_id)

    return project(
        document,
        submissions,
        is_owner_or_admin(identity, challenge["owner_id"]),
        participant_id=identity.user_id,
        title=challenge["title"],
    )

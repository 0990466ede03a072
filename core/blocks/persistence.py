"""
Persistence boundary for content documents.

PersistenceAdapter is the narrow interface the editing host and the archive
read path depend on. DatabasePersistenceAdapter implements it on top of the
SQLAlchemy query layer; each call is one request/response with no retry.
"""

from datetime import datetime, timezone
from typing import Any, Protocol

from ..database import get_connection, get_transaction
from ..enums import ChallengeStatus
from ..queries.blocks import get_challenge_blocks, replace_challenge_blocks
from ..queries.challenges import get_challenge
from ..queries.submissions import get_participant_submissions
from .document import ContentDocument
from .errors import ChallengeNotFound
from .registry import BlockTypeRegistry


class PersistenceAdapter(Protocol):
    async def load_challenge(self, challenge_id: int) -> dict[str, Any] | None: ...

    async def load_document(self, challenge_id: int) -> ContentDocument: ...

    async def save_document(
        self, challenge_id: int, document: ContentDocument
    ) -> None: ...

    async def load_submissions(
        self, challenge_id: int, participant_id: int
    ) -> list[dict[str, Any]]: ...


class DatabasePersistenceAdapter:
    """PersistenceAdapter backed by PostgreSQL."""

    def __init__(
        self,
        registry: BlockTypeRegistry | None = None,
        unknown_type_policy: str | None = None,
    ):
        self.registry = registry
        self.unknown_type_policy = unknown_type_policy

    async def load_challenge(self, challenge_id: int) -> dict[str, Any] | None:
        async with get_connection() as conn:
            return await get_challenge(conn, challenge_id)

    async def load_document(self, challenge_id: int) -> ContentDocument:
        """
        Load and validate a challenge's document.

        Raises:
            ChallengeNotFound: No such challenge
            MalformedDocument, UnknownBlockType: Stored blocks are corrupt
        """
        async with get_connection() as conn:
            challenge = await get_challenge(conn, challenge_id)
            if not challenge:
                raise ChallengeNotFound(challenge_id)
            blocks = await get_challenge_blocks(conn, challenge_id)

        return ContentDocument.load(
            blocks,
            challenge_id=challenge_id,
            owner_id=challenge["owner_id"],
            registry=self.registry,
            unknown_type_policy=self.unknown_type_policy,
            updated_at=challenge.get("content_updated_at"),
            archived=challenge["status"] == ChallengeStatus.archived,
        )

    async def save_document(self, challenge_id: int, document: ContentDocument) -> None:
        async with get_transaction() as conn:
            await replace_challenge_blocks(
                conn,
                challenge_id,
                document.to_dicts(),
                document.updated_at or datetime.now(timezone.utc),
            )

    async def load_submissions(
        self, challenge_id: int, participant_id: int
    ) -> list[dict[str, Any]]:
        async with get_connection() as conn:
            return await get_participant_submissions(conn, challenge_id, participant_id)

"""Fixtures for block model tests: an in-memory persistence adapter."""

import pytest

from core.access import Identity
from core.blocks.document import ContentDocument
from core.blocks.errors import ChallengeNotFound
from core.enums import ChallengeStatus, UserRole

OWNER_ID = 10
PARTICIPANT_ID = 20
ADMIN_ID = 99


class InMemoryPersistence:
    """PersistenceAdapter keeping one stored block list per challenge."""

    def __init__(self):
        self.challenges: dict[int, dict] = {}
        self.stored_blocks: dict[int, list[dict]] = {}
        self.submissions: list[dict] = []
        self.saves = 0
        self.fail_next_save: Exception | None = None
        self.unknown_type_policy = "fail"

    def add_challenge(self, challenge_id, owner_id, blocks, **fields):
        self.challenges[challenge_id] = {
            "challenge_id": challenge_id,
            "owner_id": owner_id,
            "title": fields.pop("title", f"Challenge {challenge_id}"),
            "status": fields.pop("status", "active"),
            **fields,
        }
        self.stored_blocks[challenge_id] = [dict(b) for b in blocks]

    async def load_challenge(self, challenge_id):
        return self.challenges.get(challenge_id)

    async def load_document(self, challenge_id):
        challenge = self.challenges.get(challenge_id)
        if challenge is None:
            raise ChallengeNotFound(challenge_id)
        return ContentDocument.load(
            self.stored_blocks[challenge_id],
            challenge_id=challenge_id,
            owner_id=challenge["owner_id"],
            unknown_type_policy=self.unknown_type_policy,
            archived=challenge["status"] == ChallengeStatus.archived,
        )

    async def save_document(self, challenge_id, document):
        if self.fail_next_save is not None:
            error, self.fail_next_save = self.fail_next_save, None
            raise error
        self.stored_blocks[challenge_id] = document.to_dicts()
        self.saves += 1

    async def load_submissions(self, challenge_id, participant_id):
        return [
            s
            for s in self.submissions
            if s["challenge_id"] == challenge_id and s["user_id"] == participant_id
        ]


@pytest.fixture
def persistence():
    store = InMemoryPersistence()
    store.add_challenge(
        1,
        OWNER_ID,
        [
            {"id": "intro", "type": "rich_text", "content": {"html": "<p>Hi</p>"}, "order": 0},
            {"id": "clip", "type": "video", "content": {"url": "a.mp4", "title": "Warm-up"}, "order": 1},
            {"id": "task", "type": "submission", "content": {"title": "Show us", "rubric": "Secret"}, "order": 2},
        ],
    )
    return store


@pytest.fixture
def owner():
    return Identity(user_id=OWNER_ID, role=UserRole.member)


@pytest.fixture
def participant():
    return Identity(user_id=PARTICIPANT_ID, role=UserRole.member)


@pytest.fixture
def admin():
    return Identity(user_id=ADMIN_ID, role=UserRole.admin)

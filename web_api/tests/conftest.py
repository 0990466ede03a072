# web_api/tests/conftest.py
"""Pytest fixtures for web API tests.

Routes run against an in-memory persistence adapter and a fixed acting
identity, so API tests need neither a database nor session cookies.
"""

import pytest
from fastapi.testclient import TestClient

from core.access import Identity
from core.blocks import ChallengeNotFound, ContentDocument
from core.enums import ChallengeStatus, UserRole
from main import app
from web_api.auth import get_effective_identity
from web_api.routes.blocks import get_persistence

OWNER_ID = 10
PARTICIPANT_ID = 20


class MemoryStore:
    """PersistenceAdapter over plain dicts."""

    def __init__(self):
        self.challenges = {
            1: {
                "challenge_id": 1,
                "owner_id": OWNER_ID,
                "title": "Thirty day sketch",
                "status": ChallengeStatus.active,
            },
        }
        self.blocks = {
            1: [
                {"id": "intro", "type": "rich_text", "content": {"html": "<p>Welcome</p>"}, "order": 0},
                {"id": "clip", "type": "video", "content": {"url": "https://youtu.be/dQw4w9WgXcQ", "title": "Day one"}, "order": 1},
                {"id": "task", "type": "submission", "content": {"title": "Post your sketch", "rubric": "Line weight"}, "order": 2},
            ],
        }
        self.submissions = [
            {"id": 1, "block_id": "task", "challenge_id": 1, "user_id": PARTICIPANT_ID, "created_at": "2026-02-01T09:00:00+00:00"},
            {"id": 2, "block_id": "task", "challenge_id": 1, "user_id": 30, "created_at": "2026-02-02T09:00:00+00:00"},
        ]

    async def load_challenge(self, challenge_id):
        return self.challenges.get(challenge_id)

    async def load_document(self, challenge_id):
        challenge = self.challenges.get(challenge_id)
        if challenge is None:
            raise ChallengeNotFound(challenge_id)
        return ContentDocument.load(
            self.blocks[challenge_id],
            challenge_id=challenge_id,
            owner_id=challenge["owner_id"],
            unknown_type_policy="fail",
            archived=challenge["status"] == ChallengeStatus.archived,
        )

    async def save_document(self, challenge_id, document):
        self.blocks[challenge_id] = document.to_dicts()

    async def load_submissions(self, challenge_id, participant_id):
        return [
            s
            for s in self.submissions
            if s["challenge_id"] == challenge_id and s["user_id"] == participant_id
        ]


class Acting:
    """Mutable holder for the identity the overridden dependency returns."""

    def __init__(self):
        self.identity = Identity(user_id=OWNER_ID, role=UserRole.member)

    def act_as(self, user_id: int, role: UserRole = UserRole.member):
        self.identity = Identity(user_id=user_id, role=role)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def acting():
    return Acting()


@pytest.fixture
def client(store, acting):
    app.dependency_overrides[get_persistence] = lambda: store
    app.dependency_overrides[get_effective_identity] = lambda: acting.identity
    yield TestClient(app)
    app.dependency_overrides.clear()

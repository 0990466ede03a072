"""Tests for the block editor host (authoring session)."""

import pytest

from core.access import Identity
from core.blocks.errors import (
    BlockNotFound,
    DocumentLocked,
    Forbidden,
    InvalidBlockContent,
    InvalidReorder,
    UnknownBlockType,
)
from core.blocks.host import BlockEditorHost, SessionState
from core.enums import ChallengeStatus, UserRole

OWNER_ID = 10
ADMIN_ID = 99


async def open_host(persistence, identity) -> BlockEditorHost:
    return await BlockEditorHost.open(1, identity, persistence)


class TestAuthorization:
    @pytest.mark.asyncio
    async def test_participant_cannot_render(self, persistence, participant):
        host = await open_host(persistence, participant)
        with pytest.raises(Forbidden):
            host.render()

    @pytest.mark.asyncio
    async def test_plain_admin_cannot_edit(self, persistence, admin):
        host = await open_host(persistence, admin)
        with pytest.raises(Forbidden):
            await host.on_update("intro", {"html": "<p>Admin</p>"})
        assert persistence.saves == 0

    @pytest.mark.asyncio
    async def test_admin_impersonating_owner_can_edit(self, persistence):
        acting = Identity(user_id=OWNER_ID, role=UserRole.member, impersonator_id=ADMIN_ID)
        host = await open_host(persistence, acting)

        await host.on_update("intro", {"html": "<p>Fixed</p>"})
        assert persistence.stored_blocks[1][0]["content"]["html"] == "<p>Fixed</p>"

    @pytest.mark.asyncio
    async def test_forbidden_before_any_mutation(self, persistence, participant):
        host = await open_host(persistence, participant)
        before = host.document.to_dicts()

        for call in (
            host.add_block(None, "divider"),
            host.remove_block("intro"),
            host.move_block("task", None),
            host.reorder_blocks(["task", "clip", "intro"]),
        ):
            with pytest.raises(Forbidden):
                await call

        assert host.document.to_dicts() == before
        assert host.state is SessionState.idle
        assert persistence.saves == 0


class TestOnUpdate:
    @pytest.mark.asyncio
    async def test_merges_partial_and_saves(self, persistence, owner):
        host = await open_host(persistence, owner)

        block = await host.on_update("clip", {"url": "b.mp4"})

        assert block.content == {"url": "b.mp4", "title": "Warm-up"}
        assert persistence.stored_blocks[1][1]["content"] == {
            "url": "b.mp4",
            "title": "Warm-up",
        }
        assert host.state is SessionState.idle
        assert host.active_block_id is None

    @pytest.mark.asyncio
    async def test_bind_returns_payload_and_callback(self, persistence, owner):
        host = await open_host(persistence, owner)

        payload, on_update = host.bind("clip")
        assert payload["content"]["url"] == "a.mp4"
        assert host.state is SessionState.editing
        assert host.active_block_id == "clip"

        await on_update({"title": "Cool-down"})
        assert host.document.get("clip").content["title"] == "Cool-down"
        assert host.state is SessionState.idle

    @pytest.mark.asyncio
    async def test_invalid_content_leaves_document_unchanged(self, persistence, owner):
        host = await open_host(persistence, owner)

        with pytest.raises(InvalidBlockContent):
            await host.on_update("task", {"submission_type": "interpretive_dance"})

        assert host.document.get("task").content == {"title": "Show us", "rubric": "Secret"}
        assert host.state is SessionState.error
        assert host.error
        assert persistence.saves == 0

    @pytest.mark.asyncio
    async def test_missing_block(self, persistence, owner):
        host = await open_host(persistence, owner)
        with pytest.raises(BlockNotFound):
            await host.on_update("missing", {"html": ""})


class TestStructureEdits:
    @pytest.mark.asyncio
    async def test_add_block_validates_and_inserts(self, persistence, owner):
        host = await open_host(persistence, owner)

        block = await host.add_block("intro", "callout", {"text": "Remember"})

        assert host.document.ids() == ["intro", block.id, "clip", "task"]
        assert block.content == {"text": "Remember", "callout_type": "tip"}
        assert [b["id"] for b in persistence.stored_blocks[1]] == host.document.ids()

    @pytest.mark.asyncio
    async def test_add_block_rejects_invalid_initial_content(self, persistence, owner):
        host = await open_host(persistence, owner)
        with pytest.raises(InvalidBlockContent):
            await host.add_block(None, "callout", {"callout_type": "shout"})
        assert len(host.document) == 3

    @pytest.mark.asyncio
    async def test_add_unknown_type(self, persistence, owner):
        host = await open_host(persistence, owner)
        with pytest.raises(UnknownBlockType):
            await host.add_block(None, "carousel")

    @pytest.mark.asyncio
    async def test_remove_block(self, persistence, owner):
        host = await open_host(persistence, owner)
        await host.remove_block("clip")

        assert host.document.ids() == ["intro", "task"]
        assert [b["order"] for b in persistence.stored_blocks[1]] == [0, 1]

    @pytest.mark.asyncio
    async def test_move_block(self, persistence, owner):
        host = await open_host(persistence, owner)
        await host.move_block("task", None)
        assert host.document.ids() == ["task", "intro", "clip"]

    @pytest.mark.asyncio
    async def test_move_after_itself_rejected(self, persistence, owner):
        host = await open_host(persistence, owner)
        with pytest.raises(InvalidReorder):
            await host.move_block("clip", "clip")
        assert host.document.ids() == ["intro", "clip", "task"]

    @pytest.mark.asyncio
    async def test_reorder_blocks(self, persistence, owner):
        host = await open_host(persistence, owner)
        await host.reorder_blocks(["clip", "task", "intro"])
        assert [b["id"] for b in persistence.stored_blocks[1]] == ["clip", "task", "intro"]


class TestSaveFailure:
    @pytest.mark.asyncio
    async def test_failed_save_rolls_back(self, persistence, owner):
        host = await open_host(persistence, owner)
        persistence.fail_next_save = ConnectionError("database went away")

        with pytest.raises(ConnectionError):
            await host.on_update("intro", {"html": "<p>Lost</p>"})

        assert host.document.get("intro").content["html"] == "<p>Hi</p>"
        assert host.state is SessionState.error
        assert host.error == "database went away"
        assert host.active_block_id == "intro"

    @pytest.mark.asyncio
    async def test_retry_after_failure_succeeds(self, persistence, owner):
        host = await open_host(persistence, owner)
        persistence.fail_next_save = ConnectionError("database went away")

        with pytest.raises(ConnectionError):
            await host.remove_block("clip")
        await host.remove_block("clip")

        assert host.document.ids() == ["intro", "task"]
        assert host.state is SessionState.idle
        assert host.error is None
        assert persistence.saves == 1


class TestReadOnlyDocuments:
    @pytest.fixture
    def with_unknown_block(self, persistence):
        persistence.unknown_type_policy = "skip"
        persistence.stored_blocks[1].append(
            {"id": "poll", "type": "poll_v2", "content": {"question": "Best day?"}, "order": 3}
        )
        return persistence

    @pytest.mark.asyncio
    async def test_skipped_blocks_still_render(self, with_unknown_block, owner):
        host = await open_host(with_unknown_block, owner)

        assert host.document.skipped_ids == ("poll",)
        assert [b["id"] for b in host.render()] == ["intro", "clip", "task"]

    @pytest.mark.asyncio
    async def test_edit_refused_when_blocks_were_skipped(self, with_unknown_block, owner):
        host = await open_host(with_unknown_block, owner)
        before = [dict(b) for b in with_unknown_block.stored_blocks[1]]

        with pytest.raises(DocumentLocked):
            await host.on_update("intro", {"html": "<p>Edited</p>"})
        with pytest.raises(DocumentLocked):
            await host.remove_block("clip")

        assert with_unknown_block.stored_blocks[1] == before
        assert with_unknown_block.stored_blocks[1][-1]["type"] == "poll_v2"
        assert with_unknown_block.saves == 0
        assert host.state is SessionState.idle

    @pytest.mark.asyncio
    async def test_archived_challenge_is_read_only(self, persistence, owner):
        persistence.challenges[1]["status"] = ChallengeStatus.archived
        host = await open_host(persistence, owner)
        before = [dict(b) for b in persistence.stored_blocks[1]]

        assert host.document.archived
        assert len(host.render()) == 3
        for call in (
            host.on_update("task", {"title": "Changed after the fact"}),
            host.add_block(None, "divider"),
            host.remove_block("task"),
            host.move_block("task", None),
            host.reorder_blocks(["task", "clip", "intro"]),
        ):
            with pytest.raises(DocumentLocked):
                await call

        assert persistence.stored_blocks[1] == before
        assert persistence.saves == 0

    @pytest.mark.asyncio
    async def test_forbidden_checked_before_lock(self, persistence, participant):
        persistence.challenges[1]["status"] = ChallengeStatus.archived
        host = await open_host(persistence, participant)
        with pytest.raises(Forbidden):
            await host.remove_block("task")

"""
Challenge block editing routes.

All editing endpoints act as the effective identity (an admin edits by
impersonating the challenge owner).

Endpoints:
- GET /api/blocks/types - Registered block types for the block inserter
- GET /api/challenges/{challenge_id}/blocks - Editor payloads for every block
- POST /api/challenges/{challenge_id}/blocks - Add a block
- PATCH /api/challenges/{challenge_id}/blocks/reorder - Apply a full ordering
- PATCH /api/challenges/{challenge_id}/blocks/{block_id} - Save a partial content update
- DELETE /api/challenges/{challenge_id}/blocks/{block_id} - Remove a block
- POST /api/challenges/{challenge_id}/blocks/{block_id}/move - Move after another block
"""

import logging
from contextlib import contextmanager
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel

from core.access import Identity
from core.blocks import (
    BlockEditorHost,
    BlockNotFound,
    ChallengeNotFound,
    DatabasePersistenceAdapter,
    DocumentLocked,
    Forbidden,
    InvalidBlockContent,
    InvalidReorder,
    MalformedDocument,
    PersistenceAdapter,
    UnknownBlockType,
    get_registry,
)
from web_api.auth import get_effective_identity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/challenges", tags=["blocks"])
types_router = APIRouter(prefix="/api/blocks", tags=["blocks"])


class AddBlockRequest(BaseModel):
    """Request body for adding a block."""

    type: str
    after_id: str | None = None  # None = insert first
    content: dict[str, Any] = {}


class MoveBlockRequest(BaseModel):
    """Request body for moving a block."""

    after_id: str | None = None  # None = move to the front


class ReorderRequest(BaseModel):
    """Request body for a full reorder."""

    ordered_ids: list[str]


def get_persistence() -> PersistenceAdapter:
    """Dependency so tests can swap in an in-memory adapter."""
    return DatabasePersistenceAdapter()


@contextmanager
def block_errors():
    """Translate block model errors into HTTP errors."""
    try:
        yield
    except Forbidden as e:
        raise HTTPException(403, str(e))
    except DocumentLocked as e:
        raise HTTPException(409, str(e))
    except (ChallengeNotFound, BlockNotFound) as e:
        raise HTTPException(404, str(e))
    except (InvalidReorder, UnknownBlockType) as e:
        raise HTTPException(400, str(e))
    except InvalidBlockContent as e:
        raise HTTPException(422, {"message": str(e), "errors": e.errors})
    except MalformedDocument as e:
        logger.error(f"Malformed document: {e}")
        raise HTTPException(500, "Stored challenge content is corrupt")


async def _open_host(
    challenge_id: int, identity: Identity, persistence: PersistenceAdapter
) -> BlockEditorHost:
    try:
        return await BlockEditorHost.open(challenge_id, identity, persistence)
    except ChallengeNotFound as e:
        raise HTTPException(404, str(e))
    except (MalformedDocument, UnknownBlockType) as e:
        logger.error(f"Challenge {challenge_id} failed to load: {e}")
        raise HTTPException(500, "Stored challenge content is corrupt")


@types_router.get("/types")
async def list_block_types() -> dict[str, Any]:
    """List registered block types with their labels and default content."""
    return {
        "types": [
            {
                "type": d.type,
                "label": d.label,
                "category": d.category,
                "default_content": d.default_content(),
            }
            for d in get_registry().descriptors()
        ]
    }


@router.get("/{challenge_id}/blocks")
async def get_blocks(
    challenge_id: int,
    identity: Identity = Depends(get_effective_identity),
    persistence: PersistenceAdapter = Depends(get_persistence),
) -> dict[str, Any]:
    """Get editor payloads for every block (owner only)."""
    host = await _open_host(challenge_id, identity, persistence)
    with block_errors():
        blocks = host.render()

    updated_at = host.document.updated_at
    return {
        "challenge_id": challenge_id,
        "updated_at": updated_at.isoformat() if updated_at else None,
        "blocks": blocks,
    }


@router.post("/{challenge_id}/blocks", status_code=201)
async def add_block(
    challenge_id: int,
    body: AddBlockRequest,
    identity: Identity = Depends(get_effective_identity),
    persistence: PersistenceAdapter = Depends(get_persistence),
) -> dict[str, Any]:
    """Add a block after ``after_id`` (first when omitted)."""
    host = await _open_host(challenge_id, identity, persistence)
    with block_errors():
        block = await host.add_block(body.after_id, body.type, body.content)
        return host.render_block(block.id)


@router.patch("/{challenge_id}/blocks/reorder")
async def reorder_blocks(
    challenge_id: int,
    body: ReorderRequest,
    identity: Identity = Depends(get_effective_identity),
    persistence: PersistenceAdapter = Depends(get_persistence),
) -> dict[str, Any]:
    """Apply a full ordering (every block id exactly once)."""
    host = await _open_host(challenge_id, identity, persistence)
    with block_errors():
        await host.reorder_blocks(body.ordered_ids)
    return {"status": "reordered", "ordered_ids": host.document.ids()}


@router.patch("/{challenge_id}/blocks/{block_id}")
async def update_block(
    challenge_id: int,
    block_id: str,
    partial_content: dict[str, Any] = Body(...),
    identity: Identity = Depends(get_effective_identity),
    persistence: PersistenceAdapter = Depends(get_persistence),
) -> dict[str, Any]:
    """
    Save a block editor's partial update.

    Only the supplied content fields change; everything else is kept.
    """
    host = await _open_host(challenge_id, identity, persistence)
    with block_errors():
        await host.on_update(block_id, partial_content)
        return host.render_block(block_id)


@router.delete("/{challenge_id}/blocks/{block_id}")
async def remove_block(
    challenge_id: int,
    block_id: str,
    identity: Identity = Depends(get_effective_identity),
    persistence: PersistenceAdapter = Depends(get_persistence),
) -> dict[str, Any]:
    """Remove a block."""
    host = await _open_host(challenge_id, identity, persistence)
    with block_errors():
        await host.remove_block(block_id)
    return {"status": "removed"}


@router.post("/{challenge_id}/blocks/{block_id}/move")
async def move_block(
    challenge_id: int,
    block_id: str,
    body: MoveBlockRequest,
    identity: Identity = Depends(get_effective_identity),
    persistence: PersistenceAdapter = Depends(get_persistence),
) -> dict[str, Any]:
    """Move a block to directly follow ``after_id`` (front when omitted)."""
    host = await _open_host(challenge_id, identity, persistence)
    with block_errors():
        await host.move_block(block_id, body.after_id)
    return {"status": "moved", "ordered_ids": host.document.ids()}

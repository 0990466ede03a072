"""Content block queries: whole-document read and overwrite."""

from datetime import datetime
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncConnection

from ..tables import challenges, content_blocks


async def get_challenge_blocks(
    conn: AsyncConnection,
    challenge_id: int,
) -> list[dict[str, Any]]:
    """
    Get all blocks of a challenge, ordered by sort_order.

    Returns dicts shaped like Block.to_dict() (id/type/content/order).
    """
    result = await conn.execute(
        select(
            content_blocks.c.block_id,
            content_blocks.c.block_type,
            content_blocks.c.content,
            content_blocks.c.sort_order,
        )
        .where(content_blocks.c.challenge_id == challenge_id)
        .order_by(content_blocks.c.sort_order)
    )
    return [
        {
            "id": row["block_id"],
            "type": row["block_type"],
            "content": row["content"] or {},
            "order": row["sort_order"],
        }
        for row in result.mappings()
    ]


async def replace_challenge_blocks(
    conn: AsyncConnection,
    challenge_id: int,
    blocks: list[dict[str, Any]],
    updated_at: datetime,
) -> None:
    """
    Overwrite a challenge's blocks with ``blocks``.

    Rows for blocks no longer in the document are deleted; the rest are
    upserted so submissions referencing surviving blocks are kept.
    Last write wins: no version check against concurrent writers.
    """
    block_ids = [b["id"] for b in blocks]

    stale = delete(content_blocks).where(content_blocks.c.challenge_id == challenge_id)
    if block_ids:
        stale = stale.where(content_blocks.c.block_id.notin_(block_ids))
    await conn.execute(stale)

    for block in blocks:
        stmt = insert(content_blocks).values(
            block_id=block["id"],
            challenge_id=challenge_id,
            block_type=block["type"],
            content=block["content"],
            sort_order=block["order"],
            updated_at=updated_at,
        )
        await conn.execute(
            stmt.on_conflict_do_update(
                index_elements=[content_blocks.c.block_id],
                set_={
                    "block_type": stmt.excluded.block_type,
                    "content": stmt.excluded.content,
                    "sort_order": stmt.excluded.sort_order,
                    "updated_at": stmt.excluded.updated_at,
                },
            )
        )

    await conn.execute(
        update(challenges)
        .where(challenges.c.challenge_id == challenge_id)
        .values(content_updated_at=updated_at)
    )

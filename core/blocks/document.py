"""
Content documents: the ordered list of blocks belonging to one challenge.

Invariants held at all times:
- block ids are unique and never handed out twice by the same document
- ``order`` values are strictly increasing along the list (no ties)
- every block type is registered

Mutations renumber ``order`` densely (0..n-1) and bump ``updated_at``.
"""

import copy
import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Iterable

from ..config import get_unknown_block_type_policy
from .errors import BlockNotFound, InvalidReorder, MalformedDocument, UnknownBlockType
from .registry import BlockTypeRegistry, get_registry
from .types import Block

logger = logging.getLogger(__name__)


def _new_block_id() -> str:
    return str(uuid.uuid4())


class ContentDocument:
    """Ordered blocks owned by a single challenge."""

    def __init__(
        self,
        challenge_id: int,
        owner_id: int,
        *,
        registry: BlockTypeRegistry | None = None,
        id_factory: Callable[[], str] = _new_block_id,
        updated_at: datetime | None = None,
        archived: bool = False,
    ):
        self.challenge_id = challenge_id
        self.owner_id = owner_id
        self.registry = registry or get_registry()
        self.updated_at = updated_at
        self.archived = archived
        self.skipped_ids: tuple[str, ...] = ()  # unknown-type blocks left out on load
        self._id_factory = id_factory
        self._blocks: list[Block] = []
        self._issued_ids: set[str] = set()

    @classmethod
    def load(
        cls,
        blocks: Iterable[Block | dict[str, Any]],
        *,
        challenge_id: int,
        owner_id: int,
        registry: BlockTypeRegistry | None = None,
        unknown_type_policy: str | None = None,
        id_factory: Callable[[], str] = _new_block_id,
        updated_at: datetime | None = None,
        archived: bool = False,
    ) -> "ContentDocument":
        """
        Build a document from stored blocks, validating its invariants.

        Args:
            blocks: Stored blocks (Block instances or dicts with id/type/content/order)
            unknown_type_policy: "fail" or "skip"; defaults to UNKNOWN_BLOCK_TYPE_POLICY
            archived: The challenge is archived (the host refuses to edit it)

        Raises:
            MalformedDocument: Duplicate ids, non-integer or tied order values
            UnknownBlockType: Unregistered type and policy is "fail"
        """
        doc = cls(
            challenge_id,
            owner_id,
            registry=registry,
            id_factory=id_factory,
            updated_at=updated_at,
            archived=archived,
        )
        policy = unknown_type_policy or get_unknown_block_type_policy()

        try:
            parsed = [b if isinstance(b, Block) else Block.from_dict(b) for b in blocks]
        except (KeyError, TypeError) as e:
            raise MalformedDocument(f"Challenge {challenge_id}: unreadable block ({e})") from e

        seen_ids: set[str] = set()
        seen_orders: set[int] = set()
        for block in parsed:
            if block.id in seen_ids:
                raise MalformedDocument(
                    f"Challenge {challenge_id}: duplicate block id {block.id!r}"
                )
            seen_ids.add(block.id)

            if not isinstance(block.order, int) or isinstance(block.order, bool):
                raise MalformedDocument(
                    f"Challenge {challenge_id}: block {block.id!r} has non-integer order"
                )
            if block.order in seen_orders:
                raise MalformedDocument(
                    f"Challenge {challenge_id}: order {block.order} used by more than one block"
                )
            seen_orders.add(block.order)

        kept = []
        skipped = []
        for block in parsed:
            if doc.registry.is_registered(block.type):
                kept.append(block)
            elif policy == "skip":
                skipped.append(block.id)
                logger.warning(
                    f"Skipping block {block.id!r} in challenge {challenge_id}: "
                    f"unknown type {block.type!r}"
                )
            else:
                raise UnknownBlockType(block.type)

        doc._blocks = sorted((replace(b, content=dict(b.content)) for b in kept), key=lambda b: b.order)
        doc._issued_ids = seen_ids
        doc.skipped_ids = tuple(skipped)
        return doc

    # --- Reads ---

    @property
    def blocks(self) -> tuple[Block, ...]:
        return tuple(self._copy(b) for b in self._blocks)

    def ids(self) -> list[str]:
        return [b.id for b in self._blocks]

    def get(self, block_id: str) -> Block:
        return self._copy(self._blocks[self._index(block_id)])

    def to_dicts(self) -> list[dict[str, Any]]:
        return [b.to_dict() for b in self._blocks]

    def copy(self) -> "ContentDocument":
        """Independent copy (blocks and content dicts are not shared)."""
        clone = copy.copy(self)
        clone._blocks = [self._copy(b) for b in self._blocks]
        clone._issued_ids = set(self._issued_ids)
        return clone

    def __len__(self) -> int:
        return len(self._blocks)

    # --- Mutations ---

    def insert(
        self,
        after_id: str | None,
        block_type: str,
        initial_content: dict[str, Any] | None = None,
    ) -> Block:
        """
        Create a block directly after ``after_id`` (or first when None).

        Content starts from the type's defaults with ``initial_content`` on top.

        Raises:
            UnknownBlockType: ``block_type`` is not registered
            BlockNotFound: ``after_id`` is not in the document
        """
        descriptor = self.registry.resolve(block_type)
        position = 0 if after_id is None else self._index(after_id) + 1

        block_id = self._id_factory()
        if block_id in self._issued_ids:
            raise MalformedDocument(f"Block id {block_id!r} was already issued")
        self._issued_ids.add(block_id)

        block = Block(
            id=block_id,
            type=block_type,
            content={**descriptor.default_content(), **(initial_content or {})},
        )
        self._blocks.insert(position, block)
        self._reindex()
        self._touch()
        return self._copy(block)

    def patch(self, block_id: str, partial_content: dict[str, Any]) -> Block:
        """
        Shallow-merge ``partial_content`` into a block's content.

        Provided fields overwrite, omitted fields are kept.

        Raises:
            BlockNotFound: ``block_id`` is not in the document
        """
        block = self._blocks[self._index(block_id)]
        block.content = {**block.content, **partial_content}
        self._touch()
        return self._copy(block)

    def remove(self, block_id: str) -> None:
        """Delete a block and close the gap it leaves in the ordering."""
        del self._blocks[self._index(block_id)]
        self._reindex()
        self._touch()

    def reorder(self, block_id: str, new_predecessor_id: str | None) -> None:
        """
        Move a block to directly follow ``new_predecessor_id`` (front when None).

        Raises:
            BlockNotFound: Either id is not in the document
            InvalidReorder: The block would follow itself
        """
        index = self._index(block_id)
        if new_predecessor_id is not None:
            self._index(new_predecessor_id)
        if new_predecessor_id == block_id:
            raise InvalidReorder(f"Block {block_id!r} cannot follow itself")

        block = self._blocks.pop(index)
        position = 0 if new_predecessor_id is None else self._index(new_predecessor_id) + 1
        self._blocks.insert(position, block)
        self._reindex()
        self._touch()

    def apply_order(self, ordered_ids: list[str]) -> None:
        """
        Reorder the whole document from a full list of block ids.

        Raises:
            InvalidReorder: ``ordered_ids`` is not a permutation of the document's ids
        """
        if len(ordered_ids) != len(self._blocks) or set(ordered_ids) != set(self.ids()):
            raise InvalidReorder("ordered_ids must list every block exactly once")

        by_id = {b.id: b for b in self._blocks}
        self._blocks = [by_id[block_id] for block_id in ordered_ids]
        self._reindex()
        self._touch()

    # --- Internals ---

    def _index(self, block_id: str) -> int:
        for i, block in enumerate(self._blocks):
            if block.id == block_id:
                return i
        raise BlockNotFound(block_id)

    def _reindex(self) -> None:
        for i, block in enumerate(self._blocks):
            block.order = i

    def _touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)

    @staticmethod
    def _copy(block: Block) -> Block:
        return replace(block, content=copy.deepcopy(block.content))

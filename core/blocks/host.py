"""
Block editor host: one authoring session over one challenge document.

The host routes editor save callbacks to ContentDocument.patch and wraps
add/remove/move with an ownership check. Every mutation is applied to a
working copy and saved through the persistence adapter; the session's
document only changes once the save has committed. Archived documents, and
documents loaded with skipped unknown-type blocks, are read-only.

Session states:
    idle -> editing(block_id) -> saving -> idle          (success)
    saving -> error(reason) -> editing(block_id) -> ...  (failure, retry)
"""

import enum
import logging
from functools import partial
from typing import Any, Awaitable, Callable, TypeVar

from ..access import Identity, can_edit_document
from .document import ContentDocument
from .errors import DocumentLocked, Forbidden
from .persistence import PersistenceAdapter
from .types import Block

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SessionState(str, enum.Enum):
    idle = "idle"
    editing = "editing"
    saving = "saving"
    error = "error"


class BlockEditorHost:
    """Authorization-checked editing session for one document and one actor."""

    def __init__(
        self,
        document: ContentDocument,
        identity: Identity,
        persistence: PersistenceAdapter,
    ):
        self.document = document
        self.identity = identity
        self.persistence = persistence
        self.state = SessionState.idle
        self.active_block_id: str | None = None
        self.error: str | None = None

    @classmethod
    async def open(
        cls,
        challenge_id: int,
        identity: Identity,
        persistence: PersistenceAdapter,
    ) -> "BlockEditorHost":
        """Load a challenge's document and start a session on it."""
        document = await persistence.load_document(challenge_id)
        return cls(document, identity, persistence)

    @property
    def registry(self):
        return self.document.registry

    # --- Reads ---

    def render(self) -> list[dict[str, Any]]:
        """Editor payloads for every block, in order."""
        self._authorize()
        return [self._render(block) for block in self.document.blocks]

    def render_block(self, block_id: str) -> dict[str, Any]:
        self._authorize()
        return self._render(self.document.get(block_id))

    def bind(
        self, block_id: str
    ) -> tuple[dict[str, Any], Callable[[dict[str, Any]], Awaitable[Block]]]:
        """
        Start editing a block.

        Returns the block's editor payload and the ``on_update`` callback the
        block editor calls with the fields it wants to change.
        """
        self._authorize()
        payload = self._render(self.document.get(block_id))
        self._begin(block_id)
        return payload, partial(self.on_update, block_id)

    # --- Mutations ---

    async def on_update(self, block_id: str, partial_content: dict[str, Any]) -> Block:
        """
        Save a block editor's partial update.

        The block type's editor validates the partial; only the fields it
        returns are merged into the stored content.

        Raises:
            Forbidden: Actor may not edit this document
            DocumentLocked: Challenge is archived or has skipped blocks
            BlockNotFound: No such block
            InvalidBlockContent: Content fails the type's model
        """

        def apply(doc: ContentDocument) -> Block:
            block = doc.get(block_id)
            editor = self.registry.resolve(block.type).editor
            return doc.patch(block_id, editor.on_update(block, partial_content))

        return await self._commit(block_id, apply)

    async def add_block(
        self,
        after_id: str | None,
        block_type: str,
        initial_content: dict[str, Any] | None = None,
    ) -> Block:
        """Insert a new block after ``after_id`` (first when None)."""

        def apply(doc: ContentDocument) -> Block:
            descriptor = self.registry.resolve(block_type)
            blank = Block(id="", type=block_type, content=descriptor.default_content())
            content = descriptor.editor.on_update(blank, initial_content or {})
            return doc.insert(after_id, block_type, content)

        return await self._commit(after_id, apply)

    async def remove_block(self, block_id: str) -> None:
        await self._commit(block_id, lambda doc: doc.remove(block_id))

    async def move_block(self, block_id: str, after_id: str | None) -> None:
        """Move a block to directly follow ``after_id`` (front when None)."""
        await self._commit(block_id, lambda doc: doc.reorder(block_id, after_id))

    async def reorder_blocks(self, ordered_ids: list[str]) -> None:
        """Apply a full ordering, as sent by drag-and-drop."""
        await self._commit(None, lambda doc: doc.apply_order(ordered_ids))

    # --- Internals ---

    def _authorize(self) -> None:
        if not can_edit_document(self.identity, self.document.owner_id):
            raise Forbidden(
                f"User {self.identity.user_id} may not edit challenge "
                f"{self.document.challenge_id}"
            )

    def _check_writable(self) -> None:
        # Saves replace the stored block list; skipped blocks are not in it.
        if self.document.archived:
            raise DocumentLocked(
                self.document.challenge_id,
                "archived challenges cannot be updated",
            )
        if self.document.skipped_ids:
            raise DocumentLocked(
                self.document.challenge_id,
                f"blocks of unknown type {list(self.document.skipped_ids)} were skipped on load",
            )

    def _render(self, block: Block) -> dict[str, Any]:
        return self.registry.resolve(block.type).editor.render(block)

    def _begin(self, block_id: str | None) -> None:
        self.state = SessionState.editing
        self.active_block_id = block_id
        self.error = None

    async def _commit(
        self, block_id: str | None, mutation: Callable[[ContentDocument], T]
    ) -> T:
        self._authorize()
        self._check_writable()
        self._begin(block_id)

        self.state = SessionState.saving
        working = self.document.copy()
        try:
            result = mutation(working)
            await self.persistence.save_document(working.challenge_id, working)
        except Exception as e:
            self.state = SessionState.error
            self.error = str(e)
            logger.info(
                f"Edit failed on challenge {self.document.challenge_id} "
                f"(block {block_id}): {e}"
            )
            raise

        self.document = working
        self.state = SessionState.idle
        self.active_block_id = None
        return result

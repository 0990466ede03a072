"""
Archive projection.

Derives what a participant sees of an archived challenge: block structure
always, creator content only where the registry marks a field as
structural (or the requester is the owner/admin), and the requester's own
submissions joined onto assignment blocks.

project() is a pure function of its inputs. The whole access decision for
archived content lives here, so it can be exercised without a database.
"""

from dataclasses import dataclass, field
from typing import Any

from .document import ContentDocument
from .registry import BlockTypeRegistry
from .types import FieldClass


@dataclass
class ArchivedView:
    challenge_id: int
    title: str | None
    blocks: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "challenge": {"id": self.challenge_id, "title": self.title},
            "blocks": self.blocks,
        }


def _sort_key(submission: dict[str, Any]) -> str:
    created_at = submission.get("created_at")
    return created_at.isoformat() if hasattr(created_at, "isoformat") else str(created_at or "")


def project(
    document: ContentDocument,
    submissions: list[dict[str, Any]],
    requester_is_owner_or_admin: bool,
    *,
    participant_id: int,
    title: str | None = None,
    registry: BlockTypeRegistry | None = None,
) -> ArchivedView:
    """
    Build the archived view of ``document`` for one requester.

    Args:
        document: The challenge's full document
        submissions: Submission dicts (block_id, user_id, created_at, ...)
        requester_is_owner_or_admin: Show gated content fields too
        participant_id: The requester; only their submissions are joined
        title: Challenge title to carry into the view
        registry: Defaults to the document's registry

    Returns:
        ArchivedView with one entry per block, in document order
    """
    registry = registry or document.registry

    own_by_block: dict[str, list[dict[str, Any]]] = {}
    for submission in submissions:
        if submission.get("user_id") != participant_id:
            continue
        own_by_block.setdefault(submission["block_id"], []).append(dict(submission))

    blocks = []
    for block in document.blocks:
        descriptor = registry.resolve(block.type)
        entry: dict[str, Any] = {
            "id": block.id,
            "type": block.type,
            "order": block.order,
        }

        if requester_is_owner_or_admin:
            entry["content"] = dict(block.content)
        else:
            visible = {
                name: value
                for name, value in block.content.items()
                if descriptor.classify(name) is FieldClass.structural
            }
            if visible:
                entry["content"] = visible

        if descriptor.is_assignment:
            entry["submissions"] = sorted(
                own_by_block.get(block.id, []), key=_sort_key, reverse=True
            )

        blocks.append(entry)

    return ArchivedView(challenge_id=document.challenge_id, title=title, blocks=blocks)

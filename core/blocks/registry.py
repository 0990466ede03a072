"""
Block type registry.

Maps a block type tag to its descriptor: label/category for the block
inserter, the editor that handles it, and which content fields are
creator content (gated) versus structure (always visible).

Registration happens at import time for built-in types. Re-registering a
type with a different descriptor raises immediately, so conflicts surface
at startup rather than while serving a request.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from .editors import BlockEditor, VideoBlockEditor
from .errors import RegistryConflict, UnknownBlockType
from .types import (
    BlockCategory,
    CalloutContent,
    ChecklistContent,
    DiscussionContent,
    DividerContent,
    DownloadContent,
    FieldClass,
    FileContent,
    ImageContent,
    QuizContent,
    RichTextContent,
    SubmissionContent,
    TrainerLinkContent,
    VideoContent,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockTypeDescriptor:
    """Registry entry for one block type."""

    type: str
    label: str
    category: BlockCategory
    editor: BlockEditor
    is_gated: bool = True  # carries creator-proprietary content
    structural_fields: frozenset[str] = field(default_factory=frozenset)
    is_assignment: bool = False  # participants submit against it

    def classify(self, field_name: str) -> FieldClass:
        """Classify a content field as structural or gated."""
        if self.is_gated and field_name not in self.structural_fields:
            return FieldClass.gated
        return FieldClass.structural

    @property
    def content_model(self) -> type[BaseModel]:
        return self.editor.content_model

    def default_content(self) -> dict[str, Any]:
        return self.editor.default_content()


class BlockTypeRegistry:
    """Block type tag -> descriptor."""

    def __init__(self):
        self._descriptors: dict[str, BlockTypeDescriptor] = {}

    def register(self, block_type: str, descriptor: BlockTypeDescriptor) -> None:
        """
        Register a descriptor for a block type.

        Registering the same descriptor twice is a no-op.

        Raises:
            RegistryConflict: If the type already has a different descriptor
            ValueError: If ``descriptor.type`` does not match ``block_type``
        """
        if descriptor.type != block_type:
            raise ValueError(
                f"Descriptor type {descriptor.type!r} does not match {block_type!r}"
            )
        existing = self._descriptors.get(block_type)
        if existing is not None:
            if existing == descriptor:
                return
            raise RegistryConflict(block_type)
        self._descriptors[block_type] = descriptor
        logger.debug(f"Registered block type {block_type!r}")

    def resolve(self, block_type: str) -> BlockTypeDescriptor:
        try:
            return self._descriptors[block_type]
        except KeyError:
            raise UnknownBlockType(block_type) from None

    def is_registered(self, block_type: str) -> bool:
        return block_type in self._descriptors

    def is_gated(self, block_type: str, field_name: str) -> bool:
        return self.resolve(block_type).classify(field_name) is FieldClass.gated

    def types(self) -> list[str]:
        return list(self._descriptors)

    def descriptors(self) -> list[BlockTypeDescriptor]:
        return list(self._descriptors.values())

    def by_category(self, category: BlockCategory) -> list[BlockTypeDescriptor]:
        return [d for d in self._descriptors.values() if d.category == category]

    def default_content(self, block_type: str) -> dict[str, Any]:
        return self.resolve(block_type).default_content()


# =============================================================================
# Built-in block types
# =============================================================================

BUILTIN_BLOCK_TYPES = [
    BlockTypeDescriptor(
        type="rich_text",
        label="Rich Text",
        category="content",
        editor=BlockEditor(RichTextContent),
    ),
    BlockTypeDescriptor(
        type="image",
        label="Image",
        category="media",
        editor=BlockEditor(ImageContent),
        structural_fields=frozenset({"alignment"}),
    ),
    BlockTypeDescriptor(
        type="video",
        label="Video",
        category="media",
        editor=VideoBlockEditor(VideoContent),
        structural_fields=frozenset({"title", "track_completion"}),
    ),
    BlockTypeDescriptor(
        type="file",
        label="File",
        category="media",
        editor=BlockEditor(FileContent),
        structural_fields=frozenset({"label"}),
    ),
    BlockTypeDescriptor(
        type="discussion",
        label="Discussion",
        category="interactive",
        editor=BlockEditor(DiscussionContent),
        structural_fields=frozenset({"sort_default", "min_participation"}),
    ),
    BlockTypeDescriptor(
        type="submission",
        label="Submission",
        category="interactive",
        editor=BlockEditor(SubmissionContent),
        structural_fields=frozenset({"title", "submission_type"}),
        is_assignment=True,
    ),
    BlockTypeDescriptor(
        type="quiz",
        label="Quiz",
        category="interactive",
        editor=BlockEditor(QuizContent),
        structural_fields=frozenset({"title", "passing_percent"}),
    ),
    BlockTypeDescriptor(
        type="checklist",
        label="Checklist",
        category="interactive",
        editor=BlockEditor(ChecklistContent),
    ),
    BlockTypeDescriptor(
        type="download",
        label="Download",
        category="media",
        editor=BlockEditor(DownloadContent),
        structural_fields=frozenset({"label"}),
    ),
    BlockTypeDescriptor(
        type="callout",
        label="Callout",
        category="content",
        editor=BlockEditor(CalloutContent),
        structural_fields=frozenset({"callout_type"}),
    ),
    BlockTypeDescriptor(
        type="divider",
        label="Divider",
        category="layout",
        editor=BlockEditor(DividerContent),
        is_gated=False,
    ),
    BlockTypeDescriptor(
        type="trainer_link",
        label="Trainer Link",
        category="interactive",
        editor=BlockEditor(TrainerLinkContent),
    ),
]


def register_builtin_types(registry: BlockTypeRegistry) -> BlockTypeRegistry:
    """Register every built-in block type on ``registry`` and return it."""
    for descriptor in BUILTIN_BLOCK_TYPES:
        registry.register(descriptor.type, descriptor)
    return registry


_registry: BlockTypeRegistry | None = None


def get_registry() -> BlockTypeRegistry:
    """Get the process-wide registry, populated with built-in types."""
    global _registry
    if _registry is None:
        _registry = register_builtin_types(BlockTypeRegistry())
    return _registry

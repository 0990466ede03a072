"""Challenge content blocks: registry, document model, editing host, archive projection."""

from .archive import ArchivedView, project
from .document import ContentDocument
from .editors import BlockEditor, VideoBlockEditor, parse_video_url
from .errors import (
    BlockError,
    BlockNotFound,
    ChallengeNotArchived,
    ChallengeNotFound,
    DocumentLocked,
    Forbidden,
    InvalidBlockContent,
    InvalidReorder,
    MalformedDocument,
    RegistryConflict,
    UnknownBlockType,
)
from .host import BlockEditorHost, SessionState
from .persistence import DatabasePersistenceAdapter, PersistenceAdapter
from .registry import (
    BUILTIN_BLOCK_TYPES,
    BlockTypeDescriptor,
    BlockTypeRegistry,
    get_registry,
    register_builtin_types,
)
from .types import Block, FieldClass

__all__ = [
    # Model
    "Block",
    "FieldClass",
    "ContentDocument",
    # Registry
    "BlockTypeDescriptor",
    "BlockTypeRegistry",
    "BUILTIN_BLOCK_TYPES",
    "get_registry",
    "register_builtin_types",
    # Editors
    "BlockEditor",
    "VideoBlockEditor",
    "parse_video_url",
    "BlockEditorHost",
    "SessionState",
    # Archive
    "ArchivedView",
    "project",
    # Persistence
    "PersistenceAdapter",
    "DatabasePersistenceAdapter",
    # Errors
    "BlockError",
    "UnknownBlockType",
    "RegistryConflict",
    "MalformedDocument",
    "BlockNotFound",
    "InvalidReorder",
    "InvalidBlockContent",
    "Forbidden",
    "DocumentLocked",
    "ChallengeNotFound",
    "ChallengeNotArchived",
]

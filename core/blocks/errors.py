"""Errors raised by the block document model and editing host."""


class BlockError(Exception):
    """Base class for block model errors."""


class UnknownBlockType(BlockError):
    """Block type tag is not registered."""

    def __init__(self, block_type: str):
        self.block_type = block_type
        super().__init__(f"Unknown block type: {block_type!r}")


class RegistryConflict(BlockError):
    """A block type was registered twice with different descriptors."""

    def __init__(self, block_type: str):
        self.block_type = block_type
        super().__init__(
            f"Block type {block_type!r} is already registered with a different descriptor"
        )


class MalformedDocument(BlockError):
    """Stored blocks violate id uniqueness or ordering invariants."""


class BlockNotFound(BlockError):
    """Referenced block id does not exist in the document."""

    def __init__(self, block_id: str):
        self.block_id = block_id
        super().__init__(f"Block not found: {block_id!r}")


class InvalidReorder(BlockError):
    """Reorder request cannot be applied (e.g. a block following itself)."""


class InvalidBlockContent(BlockError):
    """Content update failed validation against the block type's model."""

    def __init__(self, block_type: str, errors: list[dict]):
        self.block_type = block_type
        self.errors = errors
        super().__init__(f"Invalid content for {block_type!r} block: {errors}")


class Forbidden(BlockError):
    """Acting identity may not edit this document."""


class DocumentLocked(BlockError):
    """Document may be read but not changed (archived, or holding skipped blocks)."""

    def __init__(self, challenge_id: int, reason: str):
        self.challenge_id = challenge_id
        self.reason = reason
        super().__init__(f"Challenge {challenge_id} is locked: {reason}")


class ChallengeNotFound(BlockError):
    """Challenge does not exist."""

    def __init__(self, challenge_id: int):
        self.challenge_id = challenge_id
        super().__init__(f"Challenge not found: {challenge_id}")


class ChallengeNotArchived(BlockError):
    """Challenge exists but has not been archived yet."""

    def __init__(self, challenge_id: int):
        self.challenge_id = challenge_id
        super().__init__(f"Challenge {challenge_id} is not archived")

"""
Type definitions for challenge content blocks.

A block is stored as a tag (``type``) plus a free-form ``content`` dict.
The shape of ``content`` for each built-in type is described by the
pydantic models below; they also supply the defaults a new block starts with.
"""

import enum
from dataclasses import dataclass, field
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator


@dataclass
class Block:
    """One unit of content within a challenge document."""

    id: str
    type: str
    content: dict[str, Any] = field(default_factory=dict)
    order: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "content": dict(self.content),
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Block":
        return cls(
            id=str(data["id"]),
            type=data["type"],
            content=dict(data.get("content") or {}),
            order=data["order"],
        )


class FieldClass(str, enum.Enum):
    """Visibility class of a content field in the archived view."""

    structural = "structural"  # always visible
    gated = "gated"  # owner/admin only once archived


BlockCategory = Literal["content", "media", "interactive", "layout"]


# --- Content models ---


class BlockContent(BaseModel):
    """Base for block content models. Unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")


class RichTextContent(BlockContent):
    html: str = ""


class ImageContent(BlockContent):
    url: str | None = None
    caption: str | None = None
    alignment: Literal["full", "left", "right"] = "full"
    allow_enlarge: bool = True


class VideoContent(BlockContent):
    url: str | None = None
    title: str | None = None
    description: str | None = None
    track_completion: bool = False


class FileContent(BlockContent):
    url: str | None = None
    file_name: str | None = None
    label: str | None = None
    description: str | None = None


class DiscussionContent(BlockContent):
    prompt: str | None = None
    sort_default: Literal["newest", "top"] = "newest"
    min_participation: int = Field(default=0, ge=0)


class TrainerOption(BlockContent):
    trainer_id: UUID
    price_amount: int = Field(ge=0)
    turnaround_days: int = Field(ge=1)


class SubmissionContent(BlockContent):
    """Assignment block: participants submit work against it."""

    title: str | None = None
    submission_type: Literal["video", "image", "text", "mixed"] = "text"
    instructions: str | None = None
    rubric: str | None = None
    max_files: int = Field(default=3, ge=1)
    allow_resubmission: bool = True
    ai_feedback_enabled: bool = False
    trainer_options: list[TrainerOption] = []


class QuizQuestion(BlockContent):
    question: str = Field(min_length=1)
    options: list[Annotated[str, Field(min_length=1)]] = Field(min_length=2)
    correct_index: int = Field(ge=0)
    explanation: str | None = None

    @model_validator(mode="after")
    def _correct_index_in_range(self) -> "QuizQuestion":
        if self.correct_index >= len(self.options):
            raise ValueError("correct_index must point at one of the options")
        return self


class QuizContent(BlockContent):
    title: str | None = None
    questions: list[QuizQuestion] = []
    passing_percent: float = Field(default=70, ge=0, le=100)


class ChecklistItem(BlockContent):
    label: str = Field(min_length=1)
    required: bool = False


class ChecklistContent(BlockContent):
    items: list[ChecklistItem] = []


class DownloadContent(BlockContent):
    url: str | None = None
    file_name: str | None = None
    label: str | None = None
    description: str | None = None


class CalloutContent(BlockContent):
    text: str = ""
    callout_type: Literal["tip", "warning", "info", "key_point"] = "tip"


class DividerContent(BlockContent):
    pass


class TrainerLink(BlockContent):
    trainer_id: UUID
    cta_text: str | None = None


class TrainerLinkContent(BlockContent):
    trainers: list[TrainerLink] = []

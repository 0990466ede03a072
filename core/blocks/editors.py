"""
Block editors.

Every block type is edited through an object with two capabilities:

- ``render(block)`` builds the payload the authoring UI shows for the block
- ``on_update(block, partial)`` validates a partial save coming back from
  that UI and returns only the fields the editor is changing

The host merges whatever ``on_update`` returns into the stored content, so an
editor never has to resend fields it does not control.
"""

import re
from typing import Any

from pydantic import BaseModel, ValidationError

from .errors import InvalidBlockContent
from .types import Block

YOUTUBE_URL_RE = re.compile(
    r"(?:youtube\.com/(?:watch\?v=|embed/|shorts/)|youtu\.be/)([\w-]{11})"
)
VIMEO_URL_RE = re.compile(r"vimeo\.com/(\d+)")


class BlockEditor:
    """Default editor: validates content against the type's pydantic model."""

    def __init__(self, content_model: type[BaseModel]):
        self.content_model = content_model

    def __eq__(self, other: object) -> bool:
        return (
            type(self) is type(other)
            and self.content_model is other.content_model  # type: ignore[attr-defined]
        )

    def __hash__(self) -> int:
        return hash((type(self), self.content_model))

    def default_content(self) -> dict[str, Any]:
        return self.content_model().model_dump(mode="json")

    def render(self, block: Block) -> dict[str, Any]:
        return {
            "id": block.id,
            "type": block.type,
            "order": block.order,
            "content": {**self.default_content(), **block.content},
        }

    def on_update(self, block: Block, partial: dict[str, Any]) -> dict[str, Any]:
        """
        Validate a partial content update for ``block``.

        The merged result must satisfy the content model; only the keys
        present in ``partial`` are returned (normalized by the model).

        Raises:
            InvalidBlockContent: If the merged content fails validation
        """
        merged = {**block.content, **partial}
        try:
            validated = self.content_model.model_validate(merged)
        except ValidationError as e:
            errors = [
                {"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()
            ]
            raise InvalidBlockContent(block.type, errors) from e

        dumped = validated.model_dump(mode="json")
        return {key: dumped[key] for key in partial}


def parse_video_url(url: str | None) -> dict[str, str] | None:
    """Recognize YouTube and Vimeo links and build their embed URL."""
    if not url:
        return None

    youtube = YOUTUBE_URL_RE.search(url)
    if youtube:
        video_id = youtube.group(1)
        return {
            "provider": "youtube",
            "video_id": video_id,
            "embed_url": f"https://www.youtube.com/embed/{video_id}",
        }

    vimeo = VIMEO_URL_RE.search(url)
    if vimeo:
        video_id = vimeo.group(1)
        return {
            "provider": "vimeo",
            "video_id": video_id,
            "embed_url": f"https://player.vimeo.com/video/{video_id}",
        }

    return None


class VideoBlockEditor(BlockEditor):
    """Video editor: also exposes the embed target for the stored URL."""

    def render(self, block: Block) -> dict[str, Any]:
        payload = super().render(block)
        payload["embed"] = parse_video_url(payload["content"].get("url"))
        return payload

    def on_update(self, block: Block, partial: dict[str, Any]) -> dict[str, Any]:
        if isinstance(partial.get("url"), str):
            partial = {**partial, "url": partial["url"].strip() or None}
        return super().on_update(block, partial)

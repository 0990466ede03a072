"""Tests for the block type registry."""

import pytest

from core.blocks.editors import BlockEditor, VideoBlockEditor
from core.blocks.errors import RegistryConflict, UnknownBlockType
from core.blocks.registry import (
    BUILTIN_BLOCK_TYPES,
    BlockTypeDescriptor,
    BlockTypeRegistry,
    get_registry,
    register_builtin_types,
)
from core.blocks.types import (
    CalloutContent,
    FieldClass,
    RichTextContent,
    VideoContent,
)


def _descriptor(**overrides) -> BlockTypeDescriptor:
    fields = {
        "type": "callout",
        "label": "Callout",
        "category": "content",
        "editor": BlockEditor(CalloutContent),
        "structural_fields": frozenset({"callout_type"}),
    }
    fields.update(overrides)
    return BlockTypeDescriptor(**fields)


class TestRegister:
    def test_resolves_registered_type(self):
        registry = BlockTypeRegistry()
        descriptor = _descriptor()
        registry.register("callout", descriptor)

        assert registry.resolve("callout") is descriptor
        assert registry.is_registered("callout")

    def test_same_descriptor_twice_is_noop(self):
        registry = BlockTypeRegistry()
        registry.register("callout", _descriptor())
        registry.register("callout", _descriptor())

        assert registry.types() == ["callout"]

    def test_different_descriptor_raises_conflict(self):
        registry = BlockTypeRegistry()
        registry.register("callout", _descriptor())

        with pytest.raises(RegistryConflict) as exc:
            registry.register("callout", _descriptor(label="Tip box"))
        assert exc.value.block_type == "callout"

    def test_conflict_on_different_editor(self):
        registry = BlockTypeRegistry()
        registry.register("callout", _descriptor())

        with pytest.raises(RegistryConflict):
            registry.register("callout", _descriptor(editor=BlockEditor(RichTextContent)))

    def test_tag_must_match_descriptor(self):
        registry = BlockTypeRegistry()
        with pytest.raises(ValueError):
            registry.register("rich_text", _descriptor())

    def test_unknown_type_raises(self):
        registry = BlockTypeRegistry()
        with pytest.raises(UnknownBlockType) as exc:
            registry.resolve("carousel")
        assert exc.value.block_type == "carousel"


class TestClassify:
    def test_structural_field_on_gated_type(self):
        descriptor = _descriptor()
        assert descriptor.classify("callout_type") is FieldClass.structural
        assert descriptor.classify("text") is FieldClass.gated

    def test_ungated_type_has_only_structural_fields(self):
        descriptor = get_registry().resolve("divider")
        assert descriptor.classify("anything") is FieldClass.structural

    def test_registry_is_gated_shortcut(self):
        registry = get_registry()
        assert registry.is_gated("video", "url")
        assert not registry.is_gated("video", "title")
        assert registry.is_gated("rich_text", "html")


class TestBuiltins:
    def test_all_builtins_registered(self):
        registry = get_registry()
        assert set(registry.types()) == {d.type for d in BUILTIN_BLOCK_TYPES}
        assert len(registry.types()) == 12

    def test_registering_builtins_again_is_idempotent(self):
        registry = register_builtin_types(BlockTypeRegistry())
        register_builtin_types(registry)
        assert len(registry.types()) == len(BUILTIN_BLOCK_TYPES)

    def test_submission_is_the_assignment_type(self):
        registry = get_registry()
        assignments = [d.type for d in registry.descriptors() if d.is_assignment]
        assert assignments == ["submission"]

    def test_video_uses_video_editor(self):
        descriptor = get_registry().resolve("video")
        assert isinstance(descriptor.editor, VideoBlockEditor)
        assert descriptor.editor == VideoBlockEditor(VideoContent)
        assert descriptor.content_model is VideoContent

    def test_by_category(self):
        layout = get_registry().by_category("layout")
        assert [d.type for d in layout] == ["divider"]

    def test_default_content_comes_from_model(self):
        registry = get_registry()
        assert registry.default_content("callout") == {"text": "", "callout_type": "tip"}
        assert registry.default_content("divider") == {}
        assert registry.default_content("submission")["max_files"] == 3

"""Unit tests for message content normalization."""

from core.memory_adapter.normalizer import normalize_content
from infrastructure.models.memory import ContentBlock


def test_plain_string_is_returned_as_is() -> None:
    assert normalize_content("  hello there  ") == "  hello there  "


def test_blocks_joined_by_newline_in_order() -> None:
    content = [
        {"type": "text", "text": "first"},
        {"type": "image", "source": "..."},
        {"type": "text", "text": "second"},
    ]

    assert normalize_content(content) == "first\nsecond"


def test_block_objects_and_non_string_text() -> None:
    content = [ContentBlock(type="text", text="from model"), {"text": 42}, None, "bare"]

    assert normalize_content(content) == "from model"


def test_missing_content() -> None:
    assert normalize_content(None) == ""
    assert normalize_content([]) == ""

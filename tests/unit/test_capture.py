"""Unit tests for conversation-to-capture-item extraction."""

import pytest

from core.memory_adapter.capture import MIN_CAPTURE_CHARS, extract_capture_items, extract_turn
from core.memory_adapter.sanitizer import MEMORY_CONTEXT_CLOSE, MEMORY_CONTEXT_OPEN
from infrastructure.models.memory import ConversationTurn


class TestExtractTurn:
    """Tests for single-turn rules."""

    def test_user_turn_is_tagged(self) -> None:
        item = extract_turn(ConversationTurn(role="user", content="I moved to Lisbon last spring"))

        assert item is not None
        assert item.content == "[user]: I moved to Lisbon last spring"
        assert item.context == "user message"

    def test_assistant_turn_context(self) -> None:
        item = extract_turn(ConversationTurn(role="assistant", content="Noted, Lisbon it is."))

        assert item is not None
        assert item.context == "assistant response"

    @pytest.mark.parametrize("role", ["system", "tool", "toolResult", ""])
    def test_other_roles_are_ignored(self, role: str) -> None:
        assert extract_turn(ConversationTurn(role=role, content="long enough content here")) is None

    @pytest.mark.parametrize("text", ["", "ok", "thanks!!", "   short   ", "123456789"])
    def test_short_text_is_rejected(self, text: str) -> None:
        assert len(text.strip()) < MIN_CAPTURE_CHARS
        assert extract_turn(ConversationTurn(role="user", content=text)) is None

    def test_exactly_ten_characters_is_kept(self) -> None:
        assert extract_turn(ConversationTurn(role="user", content="0123456789")) is not None

    def test_block_content_is_normalized(self) -> None:
        turn = ConversationTurn.model_validate(
            {
                "role": "assistant",
                "content": [
                    {"type": "text", "text": "Here is the plan:"},
                    {"type": "tool_use", "id": "t1", "input": {}},
                    {"type": "text", "text": "step one"},
                ],
            }
        )

        item = extract_turn(turn)

        assert item is not None
        assert item.content == "[assistant]: Here is the plan:\nstep one"

    def test_injected_context_is_stripped(self) -> None:
        content = (
            f"{MEMORY_CONTEXT_OPEN}\n1. [world] User prefers oatmeal\n{MEMORY_CONTEXT_CLOSE}\n"
            "Sure, I'll remember that."
        )

        item = extract_turn(ConversationTurn(role="assistant", content=content))

        assert item is not None
        assert item.content == "[assistant]: Sure, I'll remember that."

    def test_too_short_after_stripping_is_rejected(self) -> None:
        content = f"{MEMORY_CONTEXT_OPEN}\n1. [world] User prefers oatmeal\n{MEMORY_CONTEXT_CLOSE}\nOK!"

        assert extract_turn(ConversationTurn(role="user", content=content)) is None


class TestExtractCaptureItems:
    """Tests for the conversation window."""

    def test_only_last_window_contributes(self) -> None:
        messages = [
            {"role": "user" if i % 2 == 0 else "assistant", "content": f"message number {i:02d}"}
            for i in range(25)
        ]

        items = extract_capture_items(messages, max_messages=10)

        assert len(items) == 10
        assert items[0].content.endswith("message number 15")
        assert items[-1].content.endswith("message number 24")

    def test_window_counts_ignored_roles(self) -> None:
        messages = [
            {"role": "user", "content": "an early user message"},
            {"role": "system", "content": "system prompt text"},
            {"role": "assistant", "content": "the latest response"},
        ]

        items = extract_capture_items(messages, max_messages=2)

        assert [item.content for item in items] == ["[assistant]: the latest response"]

    def test_one_item_per_substantive_turn(self) -> None:
        messages = [
            {"role": "user", "content": "What do I like for breakfast?"},
            {"role": "assistant", "content": "You like oatmeal on weekdays."},
            {"role": "user", "content": "thx"},
        ]

        items = extract_capture_items(messages, max_messages=10)

        assert [item.context for item in items] == ["user message", "assistant response"]

    def test_malformed_entries_are_skipped(self) -> None:
        messages = [None, "string message", 7, {"role": "user", "content": 12345678901}, {"role": "user", "content": "a perfectly fine message"}]

        items = extract_capture_items(messages, max_messages=10)

        assert [item.content for item in items] == ["[user]: a perfectly fine message"]

    def test_malformed_blocks_do_not_drop_the_turn(self) -> None:
        messages = [
            {
                "role": "user",
                "content": [None, "raw string block", 42, {"type": "text", "text": "I moved to Lisbon last spring."}],
            }
        ]

        items = extract_capture_items(messages, max_messages=10)

        assert [item.content for item in items] == ["[user]: I moved to Lisbon last spring."]

    def test_empty_conversation(self) -> None:
        assert extract_capture_items([], max_messages=10) == []

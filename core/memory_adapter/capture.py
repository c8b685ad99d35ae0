"""Derive retain items from the tail of a finished conversation."""
from __future__ import annotations

from typing import Any, List, Optional, Sequence

from pydantic import ValidationError

from infrastructure.models.memory import CaptureItem, ConversationTurn

from .normalizer import normalize_content
from .sanitizer import MEMORY_CONTEXT_OPEN, strip_memory_context

MIN_CAPTURE_CHARS = 10
CAPTURE_ROLES = {"user", "assistant"}
_CONTEXT_LABELS = {
    "user": "user message",
    "assistant": "assistant response",
}


def _coerce_turn(raw: Any) -> Optional[ConversationTurn]:
    if isinstance(raw, ConversationTurn):
        return raw
    if not isinstance(raw, dict):
        return None
    try:
        return ConversationTurn.model_validate(raw)
    except ValidationError:
        return None


def extract_turn(turn: ConversationTurn) -> Optional[CaptureItem]:
    """Turn one message into a capture item, or None when it is not worth keeping."""

    if turn.role not in CAPTURE_ROLES:
        return None

    text = normalize_content(turn.content).strip()
    if len(text) < MIN_CAPTURE_CHARS:
        return None

    if MEMORY_CONTEXT_OPEN in text:
        text = strip_memory_context(text)
        if len(text) < MIN_CAPTURE_CHARS:
            return None

    return CaptureItem(
        content=f"[{turn.role}]: {text}",
        context=_CONTEXT_LABELS[turn.role],
    )


def extract_capture_items(messages: Sequence[Any], max_messages: int) -> List[CaptureItem]:
    """Build capture items from the last `max_messages` entries of the conversation.

    Earlier messages are ignored entirely. Entries that are not well-formed
    turns are skipped.
    """

    if max_messages <= 0:
        return []

    items: List[CaptureItem] = []
    for raw in list(messages)[-max_messages:]:
        turn = _coerce_turn(raw)
        if turn is None:
            continue
        item = extract_turn(turn)
        if item is not None:
            items.append(item)
    return items

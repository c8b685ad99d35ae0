"""
Normalization of message content into plain text.

Content arrives either as a plain string or as an ordered list of blocks
(dicts or objects), of which only those carrying a string `text` count.
"""
from __future__ import annotations

from typing import Any, Optional, Sequence, Union

Content = Union[str, Sequence[Any], None]


def _block_text(block: Any) -> Optional[str]:
    if isinstance(block, dict):
        text = block.get("text")
    else:
        text = getattr(block, "text", None)
    return text if isinstance(text, str) else None


def normalize_content(content: Content) -> str:
    """Return the text of a message: the string itself, or block texts joined by newline."""

    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, (list, tuple)):
        parts = [text for text in (_block_text(block) for block in content) if text is not None]
        return "\n".join(parts)
    return ""

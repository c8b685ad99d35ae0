"""
Memory adapter entry points.

Auto-recall and auto-capture against a Hindsight memory bank, plus the pieces
they are built from (config parsing, sanitizer, capture extraction).
"""

from .bank import BankLifecycle
from .capture import extract_capture_items
from .config import MemorySettings, get_memory_settings, parse_memory_config
from .connector import (
    AGENT_END,
    BEFORE_AGENT_START,
    MemoryOrchestrator,
    get_memory_orchestrator,
    init_memory_adapter,
    reset_memory_adapter,
)
from .normalizer import normalize_content
from .sanitizer import escape_for_prompt, format_memories_context, strip_memory_context

__all__ = [
    "AGENT_END",
    "BEFORE_AGENT_START",
    "BankLifecycle",
    "MemoryOrchestrator",
    "MemorySettings",
    "get_memory_settings",
    "get_memory_orchestrator",
    "init_memory_adapter",
    "reset_memory_adapter",
    "parse_memory_config",
    "extract_capture_items",
    "normalize_content",
    "escape_for_prompt",
    "format_memories_context",
    "strip_memory_context",
]

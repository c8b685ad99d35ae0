from .memory import (
    AgentEndEvent,
    BankInfo,
    BeforeAgentStartEvent,
    CaptureItem,
    CaptureSummary,
    ContentBlock,
    ConversationTurn,
    EntityInfo,
    EntityList,
    Memory,
    MemoryList,
    PrependContext,
    RecallResult,
    ReflectResult,
    RetainResult,
    TextContent,
    ToolResult,
)

__all__ = [
    "AgentEndEvent",
    "BankInfo",
    "BeforeAgentStartEvent",
    "CaptureItem",
    "CaptureSummary",
    "ContentBlock",
    "ConversationTurn",
    "EntityInfo",
    "EntityList",
    "Memory",
    "MemoryList",
    "PrependContext",
    "RecallResult",
    "ReflectResult",
    "RetainResult",
    "TextContent",
    "ToolResult",
]

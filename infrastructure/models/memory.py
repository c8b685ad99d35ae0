"""Pydantic models for Hindsight payloads, conversation turns and hook effects."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Remote service payloads
# ---------------------------------------------------------------------------

class Memory(BaseModel):
    """A single memory as returned by Hindsight (transient local copy)."""

    id: str
    text: str
    type: str = Field("world", description="world | experience")
    entities: Optional[List[str]] = None
    context: Optional[str] = None
    occurred_start: Optional[str] = None
    occurred_end: Optional[str] = None
    mentioned_at: Optional[str] = None
    document_id: Optional[str] = None
    score: Optional[float] = None

    @property
    def short_id(self) -> str:
        return self.id[:8]


class BankInfo(BaseModel):
    bank_id: str
    name: Optional[str] = None
    mission: Optional[str] = None
    disposition: Optional[Dict[str, float]] = None


class EntityInfo(BaseModel):
    id: str
    name: str
    type: Optional[str] = None
    summary: Optional[str] = None


class RecallResult(BaseModel):
    # Relevance order is the server's; never re-sorted locally.
    results: List[Memory] = Field(default_factory=list)


class RetainResult(BaseModel):
    success: bool = True
    bank_id: Optional[str] = None
    items_count: int = 0


class ReflectResult(BaseModel):
    answer: str = ""
    sources: Optional[List[Memory]] = None


class MemoryList(BaseModel):
    items: List[Memory] = Field(default_factory=list)


class EntityList(BaseModel):
    items: List[EntityInfo] = Field(default_factory=list)


class CaptureItem(BaseModel):
    """Unit of text submitted to the retain operation."""

    content: str
    context: Optional[str] = None
    document_id: Optional[str] = None
    timestamp: Optional[str] = None


# ---------------------------------------------------------------------------
# Conversation turns supplied by the host runtime
# ---------------------------------------------------------------------------

class ContentBlock(BaseModel):
    """One block of structured message content; only `text` is consumed."""

    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None
    text: Any = None


class ConversationTurn(BaseModel):
    """A message of the finished turn. Roles other than user/assistant are ignored."""

    model_config = ConfigDict(extra="allow")

    role: str = ""
    # Blocks stay raw: malformed ones are skipped during normalization, not rejected here.
    content: Union[str, List[Any], None] = None


# ---------------------------------------------------------------------------
# Lifecycle events and effects
# ---------------------------------------------------------------------------

class BeforeAgentStartEvent(BaseModel):
    model_config = ConfigDict(extra="allow")

    prompt: Optional[str] = None


class AgentEndEvent(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool = False
    messages: List[Any] = Field(default_factory=list)


class PrependContext(BaseModel):
    """Effect of the pre-turn hook: context to prepend to the agent prompt."""

    model_config = ConfigDict(populate_by_name=True)

    prepend_context: Optional[str] = Field(None, alias="prependContext")
    memories_count: int = Field(0, alias="memoriesCount")


class CaptureSummary(BaseModel):
    """Effect of the post-turn hook."""

    model_config = ConfigDict(populate_by_name=True)

    items_submitted: int = Field(0, alias="itemsSubmitted")
    items_accepted: int = Field(0, alias="itemsAccepted")


# ---------------------------------------------------------------------------
# Tool results
# ---------------------------------------------------------------------------

class TextContent(BaseModel):
    type: str = "text"
    text: str


class ToolResult(BaseModel):
    """Agent-facing tool response: a readable summary plus structured details."""

    content: List[TextContent]
    details: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def text(cls, text: str, **details: Any) -> "ToolResult":
        return cls(content=[TextContent(text=text)], details=details)

    @property
    def summary(self) -> str:
        return "\n".join(block.text for block in self.content)

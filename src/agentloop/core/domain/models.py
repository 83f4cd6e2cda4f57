"""
Core Domain Models

This module defines the value types exchanged between the controller and its
capabilities: chat messages and reasoning responses, tool outputs, the closed
set of agent results, and the closed set of user intents.

Dynamic, schema-less payloads (tool arguments, structured results) are plain
JSON values (JsonValue): dicts, lists, strings, numbers, booleans or None.
"""

from dataclasses import dataclass, field
from typing import Any, Union

JsonValue = Any


# =============================================================================
# Reasoning backend exchange
# =============================================================================


@dataclass
class ChatMessage:
    """One message in the ordered view sent to the reasoning backend."""

    role: str
    content: str
    tool_calls: list[dict[str, Any]] | None = None

    def to_dict(self) -> dict[str, Any]:
        message: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.tool_calls:
            message["tool_calls"] = self.tool_calls
        return message


@dataclass
class LlmUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0


@dataclass
class LlmResponse:
    """Reasoning backend reply: raw text plus token usage."""

    content: str
    usage: LlmUsage = field(default_factory=LlmUsage)


# =============================================================================
# Tool backend exchange
# =============================================================================


@dataclass
class ToolOutput:
    """
    Output from a tool execution.

    Attributes:
        success: Whether the tool execution was successful
        content: Output text (may describe a stored artifact for large outputs)
        data: Optional structured data
        created_refs: Artifact references created during execution
    """

    success: bool
    content: str
    data: JsonValue = None
    created_refs: list[str] = field(default_factory=list)

    @classmethod
    def text(cls, content: str) -> "ToolOutput":
        return cls(success=True, content=content)

    @classmethod
    def error(cls, message: str) -> "ToolOutput":
        return cls(success=False, content=message)

    @classmethod
    def reference(cls, ref_id: str, summary: str) -> "ToolOutput":
        return cls(
            success=True,
            content=f"Output saved as RefID: {ref_id}. {summary}",
            created_refs=[ref_id],
        )

    def with_data(self, data: JsonValue) -> "ToolOutput":
        self.data = data
        return self


@dataclass
class ToolDefinition:
    name: str
    description: str
    parameters: dict[str, Any] = field(default_factory=dict)
    supports_streaming: bool = False


# =============================================================================
# Agent results
# =============================================================================


@dataclass(frozen=True)
class TextResult:
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "text", "payload": self.text}


@dataclass(frozen=True)
class DataResult:
    data: JsonValue

    def to_dict(self) -> dict[str, Any]:
        return {"type": "data", "payload": self.data}


@dataclass(frozen=True)
class FileResult:
    ref_id: str
    filename: str
    mime_type: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "file",
            "payload": {
                "ref_id": self.ref_id,
                "filename": self.filename,
                "mime_type": self.mime_type,
            },
        }


@dataclass(frozen=True)
class ErrorResult:
    """Structured error result; the fast path returns these instead of raising."""

    message: str
    code: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "error", "payload": {"message": self.message, "code": self.code}}


AgentResult = Union[TextResult, DataResult, FileResult, ErrorResult]


# =============================================================================
# User intents
# =============================================================================


@dataclass(frozen=True)
class FastAction:
    """Fast path: direct tool invocation, no session and no loop."""

    tool_name: str
    args: JsonValue = field(default_factory=dict)


@dataclass(frozen=True)
class ComplexMission:
    """
    Slow path: run the ReAct loop for a goal.

    Attributes:
        goal: High-level goal for the session
        context_summary: Summarized request context, appended as the first user entry
        visual_refs: Artifact references attached to the request
        session_id: Optional caller-chosen session id (generated when omitted)
    """

    goal: str
    context_summary: str = ""
    visual_refs: tuple[str, ...] = ()
    session_id: str | None = None


UserIntent = Union[FastAction, ComplexMission]


def intent_from_dict(data: dict[str, Any]) -> UserIntent:
    """
    Parse a tagged intent dict.

    Accepts {"type": "fast_action", "payload": {"tool_name", "args"}} or
    {"type": "complex_mission", "payload": {"goal", "context_summary",
    "visual_refs", "session_id"}}.

    Raises:
        ValueError: If the tag is unknown or required fields are missing
    """
    intent_type = data.get("type")
    payload = data.get("payload") or {}

    if intent_type == "fast_action":
        if "tool_name" not in payload:
            raise ValueError("fast_action payload requires 'tool_name'")
        return FastAction(tool_name=payload["tool_name"], args=payload.get("args", {}))

    if intent_type == "complex_mission":
        if "goal" not in payload:
            raise ValueError("complex_mission payload requires 'goal'")
        return ComplexMission(
            goal=payload["goal"],
            context_summary=payload.get("context_summary", ""),
            visual_refs=tuple(payload.get("visual_refs") or ()),
            session_id=payload.get("session_id"),
        )

    raise ValueError(f"Unknown intent type: {intent_type!r}")

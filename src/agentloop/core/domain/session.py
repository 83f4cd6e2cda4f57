"""
Session State Machine

A Session is created once per slow-path request and owns:
- identity and status (Running -> Completed | Failed within one loop run)
- an append-only history of entries, never mutated after append
- the task-progress record (iteration, goal, observations, pending actions)
- the token budget tracker

Paused is part of the status vocabulary for persisted sessions but is not
entered by the current loop.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from agentloop.core.domain.budget import TokenUsage
from agentloop.core.domain.errors import InvalidTransitionError
from agentloop.core.domain.models import ChatMessage, JsonValue
from agentloop.core.prompts.react_prompts import build_system_prompt


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SessionStatus(str, Enum):
    """Session lifecycle status."""

    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionStatus.COMPLETED, SessionStatus.FAILED)


@dataclass(frozen=True)
class ToolCallInfo:
    name: str
    arguments: JsonValue
    result: str | None = None


@dataclass(frozen=True)
class HistoryEntry:
    """One immutable entry of the session history."""

    role: str
    content: str
    tool_call: ToolCallInfo | None = None
    timestamp: str = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        tool_call = None
        if self.tool_call is not None:
            tool_call = {
                "name": self.tool_call.name,
                "arguments": self.tool_call.arguments,
                "result": self.tool_call.result,
            }
        return {
            "role": self.role,
            "content": self.content,
            "tool_call": tool_call,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryEntry":
        raw_call = data.get("tool_call")
        tool_call = None
        if raw_call:
            tool_call = ToolCallInfo(
                name=raw_call["name"],
                arguments=raw_call.get("arguments", {}),
                result=raw_call.get("result"),
            )
        return cls(
            role=data["role"],
            content=data["content"],
            tool_call=tool_call,
            timestamp=data.get("timestamp") or utc_now(),
        )


@dataclass
class TaskState:
    """Task progress record, updated once per non-terminal iteration."""

    goal: str
    iteration: int = 0
    observations: list[str] = field(default_factory=list)
    pending_actions: list[JsonValue] = field(default_factory=list)


@dataclass
class Session:
    id: str
    status: SessionStatus
    history: list[HistoryEntry]
    token_usage: TokenUsage
    task_state: TaskState | None = None
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)

    @classmethod
    def create(
        cls,
        goal: str,
        budget: int,
        session_id: str | None = None,
    ) -> "Session":
        """
        Create a Running session for a goal.

        The first history entry is the system prompt; task progress starts at
        iteration 0 with empty observation and pending lists.
        """
        now = utc_now()
        return cls(
            id=session_id or str(uuid.uuid4()),
            status=SessionStatus.RUNNING,
            history=[HistoryEntry(role="system", content=build_system_prompt(goal), timestamp=now)],
            token_usage=TokenUsage.with_budget(budget),
            task_state=TaskState(goal=goal),
            created_at=now,
            updated_at=now,
        )

    @property
    def goal(self) -> str:
        return self.task_state.goal if self.task_state else "unknown"

    def append(
        self,
        role: str,
        content: str,
        tool_call: ToolCallInfo | None = None,
    ) -> HistoryEntry:
        entry = HistoryEntry(role=role, content=content, tool_call=tool_call)
        self.history.append(entry)
        return entry

    def record_observation(self, observation: str) -> None:
        if self.task_state is not None:
            self.task_state.observations.append(observation)

    def set_iteration(self, iteration: int) -> None:
        if self.task_state is not None:
            self.task_state.iteration = iteration

    def build_messages(self) -> list[ChatMessage]:
        """Ordered message view of the full history."""
        return [ChatMessage(role=entry.role, content=entry.content) for entry in self.history]

    def touch(self) -> None:
        self.updated_at = utc_now()

    def mark_completed(self) -> None:
        self._transition(SessionStatus.COMPLETED)

    def mark_failed(self) -> None:
        self._transition(SessionStatus.FAILED)

    def _transition(self, target: SessionStatus) -> None:
        if self.status.is_terminal:
            raise InvalidTransitionError(self.status.value, target.value)
        self.status = target
        self.touch()

    def to_dict(self) -> dict[str, Any]:
        task_state = None
        if self.task_state is not None:
            task_state = {
                "iteration": self.task_state.iteration,
                "goal": self.task_state.goal,
                "observations": list(self.task_state.observations),
                "pending_actions": list(self.task_state.pending_actions),
            }
        return {
            "id": self.id,
            "status": self.status.value,
            "history": [entry.to_dict() for entry in self.history],
            "task_state": task_state,
            "token_usage": self.token_usage.to_dict(),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Session":
        raw_state = data.get("task_state")
        task_state = None
        if raw_state is not None:
            task_state = TaskState(
                goal=raw_state.get("goal", ""),
                iteration=int(raw_state.get("iteration", 0)),
                observations=list(raw_state.get("observations", [])),
                pending_actions=list(raw_state.get("pending_actions", [])),
            )
        return cls(
            id=data["id"],
            status=SessionStatus(data.get("status", SessionStatus.RUNNING.value)),
            history=[HistoryEntry.from_dict(entry) for entry in data.get("history", [])],
            token_usage=TokenUsage.from_dict(data.get("token_usage", {})),
            task_state=task_state,
            created_at=data.get("created_at") or utc_now(),
            updated_at=data.get("updated_at") or utc_now(),
        )

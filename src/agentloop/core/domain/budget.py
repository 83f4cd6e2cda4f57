"""Token budget accounting for one session."""

from dataclasses import dataclass
from typing import Any


@dataclass
class TokenUsage:
    """
    Cumulative token usage against a budget ceiling.

    total_tokens always equals prompt_tokens + completion_tokens; add() is the
    only mutator and counters never go down. One instance is owned by each
    Session and written by that session's loop only.
    """

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    budget_limit: int = 0

    @classmethod
    def with_budget(cls, limit: int) -> "TokenUsage":
        return cls(budget_limit=limit)

    def add(self, prompt: int, completion: int) -> None:
        self.prompt_tokens += prompt
        self.completion_tokens += completion
        self.total_tokens += prompt + completion

    def is_exceeded(self) -> bool:
        """True once total usage reaches the limit (boundary inclusive)."""
        return self.total_tokens >= self.budget_limit

    def remaining(self) -> int:
        return max(self.budget_limit - self.total_tokens, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens,
            "budget_limit": self.budget_limit,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenUsage":
        prompt = int(data.get("prompt_tokens", 0))
        completion = int(data.get("completion_tokens", 0))
        return cls(
            prompt_tokens=prompt,
            completion_tokens=completion,
            total_tokens=prompt + completion,
            budget_limit=int(data.get("budget_limit", 0)),
        )

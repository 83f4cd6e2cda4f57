"""
Delegation Protocol

Sub-task runner used when the agent emits a DELEGATE action.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass
class DelegationRequest:
    objective: str
    context: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def with_context(self, context: str) -> "DelegationRequest":
        self.context = context
        return self


@dataclass
class DelegationResult:
    """
    Outcome of a delegated sub-task.

    Attributes:
        success: Whether the sub-task completed
        result: Result text of the sub-task (empty on failure)
        error: Optional error detail when success is False
    """

    success: bool
    result: str = ""
    error: str | None = None


class DelegatorProtocol(Protocol):
    async def delegate(self, request: DelegationRequest) -> DelegationResult:
        """
        Run a sub-task for the request objective.

        Raises:
            Exception: Backend failures; the gateway turns them into observations
        """
        ...

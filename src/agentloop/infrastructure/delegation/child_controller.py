"""
Child Controller Delegator

Local delegation backend: each delegated objective runs as a fresh
ComplexMission on a child controller built by a factory callable. Nesting is
bounded by max_depth so a child that delegates again cannot recurse forever.
"""

import json
from collections.abc import Callable
from typing import TYPE_CHECKING

import structlog

from agentloop.core.domain.errors import ControllerError, DelegationError
from agentloop.core.domain.models import ComplexMission, ErrorResult, TextResult
from agentloop.core.interfaces.delegation import DelegationRequest, DelegationResult

if TYPE_CHECKING:
    from agentloop.core.domain.controller import ReActController

ChildControllerBuilder = Callable[["ChildControllerDelegator | None"], "ReActController"]


class ChildControllerDelegator:
    """
    Delegator that spawns child ReAct sessions.

    Args:
        controller_factory: Builds the child controller; receives the delegator
            the child may use (None once the depth limit is reached)
        max_depth: Maximum nesting of delegated sessions
        depth: Nesting level of this delegator (0 for the top-level controller)
    """

    def __init__(
        self,
        controller_factory: ChildControllerBuilder,
        max_depth: int = 1,
        depth: int = 0,
    ):
        self.controller_factory = controller_factory
        self.max_depth = max_depth
        self.depth = depth
        self.logger = structlog.get_logger().bind(component="child_delegator", depth=depth)

    def _child_delegator(self) -> "ChildControllerDelegator | None":
        if self.depth + 1 >= self.max_depth:
            return None
        return ChildControllerDelegator(
            self.controller_factory, max_depth=self.max_depth, depth=self.depth + 1
        )

    async def delegate(self, request: DelegationRequest) -> DelegationResult:
        """
        Run the objective as a child mission.

        Raises:
            DelegationError: If the child controller cannot be built
        """
        if self.depth >= self.max_depth:
            return DelegationResult(
                success=False,
                error=f"Maximum delegation depth ({self.max_depth}) reached",
            )

        try:
            controller = self.controller_factory(self._child_delegator())
        except ControllerError as e:
            raise DelegationError(f"Cannot build child controller: {e}") from e

        mission = ComplexMission(goal=request.objective, context_summary=request.context)
        self.logger.info("child_session_started", objective=request.objective[:100])

        try:
            result = await controller.execute(mission)
        except ControllerError as e:
            self.logger.warning("child_session_failed", error=str(e), error_type=type(e).__name__)
            return DelegationResult(success=False, error=str(e))

        if isinstance(result, ErrorResult):
            return DelegationResult(success=False, error=result.message)
        if isinstance(result, TextResult):
            return DelegationResult(success=True, result=result.text)
        return DelegationResult(success=True, result=json.dumps(result.to_dict(), default=str))

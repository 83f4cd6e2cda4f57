"""
Delegation Gateway

Routes a decoded Delegate action to the bound delegator and turns every
outcome (success, sub-task failure, backend error, no delegator) into an
observation. Delegation never raises into the loop.
"""

import structlog

from agentloop.core.domain.actions import Delegate
from agentloop.core.domain.session import Session
from agentloop.core.interfaces.delegation import DelegationRequest, DelegatorProtocol
from agentloop.core.prompts.react_prompts import DELEGATION_RESULT_PREFIX


class DelegationGateway:
    def __init__(self, delegator: DelegatorProtocol | None = None):
        self.delegator = delegator
        self.logger = structlog.get_logger().bind(component="delegation_gateway")

    async def observe(self, action: Delegate) -> str:
        """Run the delegation and return the observation text."""
        if self.delegator is None:
            return (
                "Delegation not available (no delegator configured). "
                f"Objective: {action.objective}"
            )

        request = DelegationRequest(objective=action.objective).with_context(action.context)
        try:
            result = await self.delegator.delegate(request)
        except Exception as e:
            self.logger.warning("delegation_error", objective=action.objective, error=str(e))
            return f"Delegation error: {e}"

        if result.success:
            return f"Subagent completed successfully:\n{result.result}"
        return f"Subagent failed: {result.error or ''}"

    async def handle(self, session: Session, action: Delegate) -> str:
        """
        Delegate and record the outcome on the session.

        Appends exactly one user-role history entry and one task-progress
        observation.
        """
        self.logger.info(
            "delegation_started",
            session_id=session.id,
            objective=action.objective,
            has_context=bool(action.context),
        )
        observation = await self.observe(action)
        session.append("user", f"{DELEGATION_RESULT_PREFIX}{observation}")
        session.record_observation(observation)
        return observation

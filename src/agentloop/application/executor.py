"""
Application Layer - Controller Executor Service

Service layer shared by the CLI and the HTTP API.

The ControllerExecutor:
- Creates (and caches) one controller per profile via ControllerFactory
- Executes intents with structured logging and timing
- Converts controller errors into failed outcomes for presentation layers
- Forwards cancel requests and session lookups
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

import structlog

from agentloop.application.factory import ControllerFactory
from agentloop.core.domain.controller import ReActController
from agentloop.core.domain.errors import ControllerError, SessionNotFoundError
from agentloop.core.domain.models import AgentResult, ComplexMission, ErrorResult, UserIntent
from agentloop.core.domain.session import Session

logger = structlog.get_logger()


@dataclass
class ExecutionOutcome:
    """
    Result of executing one intent.

    Attributes:
        status: "completed" when the controller returned a result, else "failed"
        result: The AgentResult (None when the controller raised)
        error: Error message when the controller raised
        error_type: Exception class name when the controller raised
        session_id: Session id of a complex mission (None for fast actions)
    """

    status: str
    result: AgentResult | None = None
    error: str | None = None
    error_type: str | None = None
    session_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "result": self.result.to_dict() if self.result is not None else None,
            "error": self.error,
            "error_type": self.error_type,
            "session_id": self.session_id,
        }


class ControllerExecutor:
    """Service layer orchestrating intent execution."""

    def __init__(self, factory: ControllerFactory | None = None):
        self.factory = factory or ControllerFactory()
        self._controllers: dict[str, ReActController] = {}
        self.logger = logger.bind(component="controller_executor")

    def get_controller(self, profile: str = "dev") -> ReActController:
        if profile not in self._controllers:
            self._controllers[profile] = self.factory.create_controller(profile=profile)
        return self._controllers[profile]

    async def execute_intent(self, intent: UserIntent, profile: str = "dev") -> ExecutionOutcome:
        """
        Execute an intent on the profile's controller.

        Complex missions without a session id get one assigned here so the
        outcome always reports it. Controller errors (budget, iterations,
        misconfiguration, cancellation) become failed outcomes. Anything else
        is logged and re-raised.
        """
        start_time = datetime.now()
        session_id = None
        if isinstance(intent, ComplexMission):
            if intent.session_id is None:
                intent = replace(intent, session_id=str(uuid.uuid4()))
            session_id = intent.session_id
        intent_type = type(intent).__name__

        self.logger.info(
            "intent.execution.started",
            intent_type=intent_type,
            profile=profile,
            session_id=session_id,
        )

        try:
            controller = self.get_controller(profile)
            result = await controller.execute(intent)
        except ControllerError as e:
            duration = (datetime.now() - start_time).total_seconds()
            self.logger.warning(
                "intent.execution.failed",
                intent_type=intent_type,
                error=str(e),
                error_type=type(e).__name__,
                duration_seconds=duration,
            )
            return ExecutionOutcome(
                status="failed",
                error=str(e),
                error_type=type(e).__name__,
                session_id=getattr(e, "session_id", None) or session_id,
            )
        except Exception as e:
            duration = (datetime.now() - start_time).total_seconds()
            self.logger.error(
                "intent.execution.crashed",
                intent_type=intent_type,
                error=str(e),
                error_type=type(e).__name__,
                duration_seconds=duration,
            )
            raise

        duration = (datetime.now() - start_time).total_seconds()
        status = "failed" if isinstance(result, ErrorResult) else "completed"
        self.logger.info(
            "intent.execution.completed",
            intent_type=intent_type,
            status=status,
            duration_seconds=duration,
        )
        return ExecutionOutcome(status=status, result=result, session_id=session_id)

    async def cancel(self, session_id: str, profile: str = "dev") -> None:
        await self.get_controller(profile).cancel(session_id)

    async def list_sessions(self, profile: str = "dev") -> list[str]:
        return await self.factory.get_session_store(profile).list_sessions()

    async def get_session(self, session_id: str, profile: str = "dev") -> Session:
        """
        Raises:
            SessionNotFoundError: If the profile's store has no such session
        """
        session = await self.factory.get_session_store(profile).load(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

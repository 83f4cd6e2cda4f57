"""
ReAct Controller - Bounded Reason + Act Loop

The controller executes user intents over a set of optional capabilities
(reasoning backend, tool backend, artifact store, session store, context
compressor, delegator).

Entry paths:
- FastAction: direct tool invocation, no session, never raises for tool problems
- ComplexMission: create a Session and loop until a final answer, the token
  budget is exhausted, or the iteration cap is reached

One iteration with a reasoning backend:
1. Build the (possibly compressed) message view
2. Call the reasoning backend and account token usage
3. Append the raw reply as an assistant entry and decode one action
4. Enact it: final answer ends the loop; tool calls, thoughts and delegations
   append exactly one user-role entry and the loop continues

Without a reasoning backend the loop runs in an explicit degraded mode: the
first iteration returns a mock text result echoing the goal.
"""

from dataclasses import dataclass
from enum import Enum

import structlog

from agentloop.core.domain.actions import Delegate, FinalAnswer, Think, ToolCall, parse_action
from agentloop.core.domain.context import prepare_messages
from agentloop.core.domain.delegation import DelegationGateway
from agentloop.core.domain.errors import (
    BudgetExceededError,
    ControllerError,
    MaxIterationsExceededError,
    MisconfigurationError,
    SessionCancelledError,
    ToolNotFoundError,
)
from agentloop.core.domain.models import (
    AgentResult,
    ComplexMission,
    ErrorResult,
    FastAction,
    TextResult,
    UserIntent,
)
from agentloop.core.domain.session import Session, ToolCallInfo
from agentloop.core.interfaces.artifacts import ArtifactStoreProtocol
from agentloop.core.interfaces.compression import CompressionConfig, ContextCompressorProtocol
from agentloop.core.interfaces.delegation import DelegatorProtocol
from agentloop.core.interfaces.llm import LLMProviderProtocol
from agentloop.core.interfaces.state import SessionStoreProtocol
from agentloop.core.interfaces.tools import ToolRegistryProtocol
from agentloop.core.prompts.react_prompts import (
    OBSERVATION_PREFIX,
    THINK_NUDGE,
    format_references,
    mock_execution_message,
)


class EntryPath(str, Enum):
    FAST = "fast"
    COMPLEX = "complex"


# Capability attribute names each entry path cannot run without
REQUIRED_CAPABILITIES: dict[EntryPath, tuple[str, ...]] = {
    EntryPath.FAST: ("tools",),
    EntryPath.COMPLEX: ("llm",),
}


@dataclass
class ReActConfig:
    """
    ReAct controller configuration.

    Attributes:
        max_iterations: Maximum iterations before giving up
        default_budget: Token budget for each new session
        persist_state: Save the session after every iteration
        temperature: Sampling temperature handed to reasoning backends
        honor_cancellation: Check cancel requests at the top of each iteration
    """

    max_iterations: int = 10
    default_budget: int = 50_000
    persist_state: bool = True
    temperature: float = 0.7
    honor_cancellation: bool = False


class ReActController:
    """
    ReAct controller for fast actions and complex missions.

    All capabilities are optional. required_paths lists entry paths that must
    not run in degraded mode; executing such a path with a missing capability
    raises MisconfigurationError before any session work.

    A controller may run many sessions concurrently, but each session is
    driven by exactly one caller and its iterations run strictly in sequence.
    """

    def __init__(
        self,
        config: ReActConfig | None = None,
        *,
        llm: LLMProviderProtocol | None = None,
        tools: ToolRegistryProtocol | None = None,
        artifact_store: ArtifactStoreProtocol | None = None,
        session_store: SessionStoreProtocol | None = None,
        compressor: ContextCompressorProtocol | None = None,
        compression_config: CompressionConfig | None = None,
        delegator: DelegatorProtocol | None = None,
        required_paths: frozenset[EntryPath] | set[EntryPath] = frozenset(),
    ):
        self.config = config or ReActConfig()
        self.llm = llm
        self.tools = tools
        self.artifact_store = artifact_store
        self.session_store = session_store
        self.compressor = compressor
        self.compression_config = compression_config or CompressionConfig()
        self.delegator = delegator
        self.required_paths = frozenset(required_paths)
        self.logger = structlog.get_logger().bind(component="react_controller")

        self._delegation = DelegationGateway(delegator)
        self._running: set[str] = set()
        self._cancel_requested: set[str] = set()

    def missing_capabilities(self, path: EntryPath) -> list[str]:
        return [name for name in REQUIRED_CAPABILITIES[path] if getattr(self, name) is None]

    def _ensure_capabilities(self, path: EntryPath) -> None:
        if path not in self.required_paths:
            return
        missing = self.missing_capabilities(path)
        if missing:
            raise MisconfigurationError(path.value, missing)

    async def execute(self, intent: UserIntent) -> AgentResult:
        """
        Execute a user intent.

        Returns:
            AgentResult (TextResult for answers, ErrorResult for fast-path tool problems)

        Raises:
            MisconfigurationError: Required capability missing for the entry path
            BudgetExceededError: Session token budget reached
            MaxIterationsExceededError: No final answer within max_iterations
            SessionCancelledError: Cancellation honored between iterations
        """
        if isinstance(intent, FastAction):
            return await self._execute_fast(intent)
        if isinstance(intent, ComplexMission):
            return await self._execute_mission(intent)
        raise TypeError(f"Unsupported intent: {type(intent).__name__}")

    async def _execute_fast(self, intent: FastAction) -> AgentResult:
        self._ensure_capabilities(EntryPath.FAST)
        self.logger.info("fast_path_execution", tool=intent.tool_name)

        if self.tools is None:
            return TextResult(
                f"Fast path: would execute tool '{intent.tool_name}'. Tools not configured."
            )

        try:
            output = await self.tools.execute(intent.tool_name, intent.args)
        except ToolNotFoundError as e:
            return ErrorResult(message=str(e), code="TOOL_NOT_FOUND")
        except Exception as e:
            self.logger.warning("fast_path_tool_error", tool=intent.tool_name, error=str(e))
            return ErrorResult(message=str(e), code="TOOL_EXECUTION_ERROR")

        if output.success:
            return TextResult(output.content)
        return ErrorResult(message=output.content, code="TOOL_ERROR")

    async def _execute_mission(self, intent: ComplexMission) -> AgentResult:
        self._ensure_capabilities(EntryPath.COMPLEX)

        session = Session.create(
            goal=intent.goal,
            budget=self.config.default_budget,
            session_id=intent.session_id,
        )
        self.logger.info(
            "react_loop_started",
            session_id=session.id,
            goal=intent.goal[:100],
            context_len=len(intent.context_summary),
            refs_count=len(intent.visual_refs),
        )
        session.append("user", format_references(intent.context_summary, intent.visual_refs))

        self._running.add(session.id)
        try:
            return await self._run_loop(session)
        finally:
            self._running.discard(session.id)
            self._cancel_requested.discard(session.id)

    async def _run_loop(self, session: Session) -> AgentResult:
        for iteration in range(self.config.max_iterations):
            await self._check_cancelled(session)
            session.set_iteration(iteration)

            try:
                result = await self._execute_iteration(session, iteration)
            except Exception:
                await self._fail(session)
                raise

            session.touch()
            if result is not None:
                session.mark_completed()
                await self._persist(session)
                return result

            await self._persist(session)

            if session.token_usage.is_exceeded():
                self.logger.warning(
                    "budget_exceeded",
                    session_id=session.id,
                    used=session.token_usage.total_tokens,
                    limit=session.token_usage.budget_limit,
                )
                await self._fail(session)
                raise BudgetExceededError(
                    used=session.token_usage.total_tokens,
                    limit=session.token_usage.budget_limit,
                    session_id=session.id,
                )

        self.logger.warning(
            "max_iterations_exceeded",
            session_id=session.id,
            max_iterations=self.config.max_iterations,
        )
        await self._fail(session)
        raise MaxIterationsExceededError(self.config.max_iterations, session_id=session.id)

    async def _execute_iteration(self, session: Session, iteration: int) -> AgentResult | None:
        """Run one step; None means continue the loop."""
        if self.llm is not None:
            return await self._execute_iteration_with_llm(session, iteration)

        self.logger.info(
            "react_iteration",
            session_id=session.id,
            iteration=iteration,
            mode="mock",
        )
        return TextResult(mock_execution_message(session.goal))

    async def _execute_iteration_with_llm(
        self, session: Session, iteration: int
    ) -> AgentResult | None:
        self.logger.info(
            "react_iteration",
            session_id=session.id,
            iteration=iteration,
            history_len=len(session.history),
        )

        messages = await prepare_messages(session, self.compressor, self.compression_config)
        response = await self.llm.chat(messages)

        session.token_usage.add(
            response.usage.prompt_tokens,
            response.usage.completion_tokens,
        )
        self.logger.debug(
            "llm_response_received",
            response_len=len(response.content),
            tokens_used=session.token_usage.total_tokens,
        )

        session.append("assistant", response.content)
        action = parse_action(response.content)

        if isinstance(action, FinalAnswer):
            self.logger.info("final_answer_received", session_id=session.id, answer_len=len(action.text))
            return TextResult(action.text)

        if isinstance(action, ToolCall):
            await self._handle_tool_call(session, action)
        elif isinstance(action, Think):
            self.logger.debug("agent_thinking", thought_len=len(action.text))
            session.append("user", THINK_NUDGE)
        elif isinstance(action, Delegate):
            await self._delegation.handle(session, action)
        return None

    async def _handle_tool_call(self, session: Session, action: ToolCall) -> None:
        self.logger.info("tool_call_executing", session_id=session.id, tool=action.name)
        observation = await self._observe_tool_call(action)
        session.append(
            "user",
            f"{OBSERVATION_PREFIX}{observation}",
            tool_call=ToolCallInfo(name=action.name, arguments=action.args, result=observation),
        )
        session.record_observation(observation)

    async def _observe_tool_call(self, action: ToolCall) -> str:
        if self.tools is None:
            return f"Tool '{action.name}' not available (no tools configured)"

        try:
            output = await self.tools.execute(action.name, action.args)
        except Exception as e:
            return f"Tool '{action.name}' error: {e}"

        if output.success:
            return f"Tool '{action.name}' succeeded:\n{output.content}"
        return f"Tool '{action.name}' failed:\n{output.content}"

    async def _persist(self, session: Session) -> None:
        if not self.config.persist_state or self.session_store is None:
            return
        try:
            await self.session_store.save(session)
        except Exception as e:
            self.logger.warning("session_save_failed", session_id=session.id, error=str(e))

    async def _fail(self, session: Session) -> None:
        session.mark_failed()
        await self._persist(session)

    async def _check_cancelled(self, session: Session) -> None:
        if not self.config.honor_cancellation or session.id not in self._cancel_requested:
            return
        self._cancel_requested.discard(session.id)
        self.logger.info("session_cancelled", session_id=session.id)
        await self._fail(session)
        raise SessionCancelledError(session.id)

    async def resume(self, session_id: str) -> AgentResult:
        """Reload a persisted session and continue its loop (not implemented yet)."""
        self.logger.warning("resume_not_implemented", session_id=session_id)
        raise ControllerError("Resume not yet implemented - coming in Phase 2 persistence")

    async def cancel(self, session_id: str) -> None:
        """
        Record a cancellation request for a session.

        The request is acknowledged immediately. It is only recorded when
        config.honor_cancellation is enabled and the session is running on this
        controller; the loop acts on it at the start of its next iteration.
        """
        recorded = self.config.honor_cancellation and session_id in self._running
        self.logger.info(
            "cancel_requested",
            session_id=session_id,
            honored=self.config.honor_cancellation,
            recorded=recorded,
        )
        if recorded:
            self._cancel_requested.add(session_id)

    def is_cancel_requested(self, session_id: str) -> bool:
        return session_id in self._cancel_requested

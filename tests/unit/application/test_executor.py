"""Unit tests for ControllerExecutor."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from agentloop.application.executor import ControllerExecutor, ExecutionOutcome
from agentloop.core.domain.errors import (
    MaxIterationsExceededError,
    SessionNotFoundError,
)
from agentloop.core.domain.models import ComplexMission, ErrorResult, FastAction, TextResult
from agentloop.core.domain.session import Session
from agentloop.infrastructure.persistence.memory_session_store import InMemorySessionStore


@pytest.fixture
def mock_controller():
    controller = MagicMock()
    controller.execute = AsyncMock(return_value=TextResult("ok"))
    controller.cancel = AsyncMock()
    return controller


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture
def mock_factory(mock_controller, session_store):
    factory = MagicMock()
    factory.create_controller.return_value = mock_controller
    factory.get_session_store.return_value = session_store
    return factory


@pytest.fixture
def executor(mock_factory):
    return ControllerExecutor(factory=mock_factory)


class TestControllerExecutor:
    def test_controller_cached_per_profile(self, executor, mock_factory):
        first = executor.get_controller("dev")
        second = executor.get_controller("dev")

        assert first is second
        mock_factory.create_controller.assert_called_once_with(profile="dev")

    @pytest.mark.asyncio
    async def test_execute_completed(self, executor):
        outcome = await executor.execute_intent(
            ComplexMission(goal="g", session_id="s-1"), profile="dev"
        )

        assert outcome == ExecutionOutcome(status="completed", result=TextResult("ok"), session_id="s-1")
        assert outcome.to_dict() == {
            "status": "completed",
            "result": {"type": "text", "payload": "ok"},
            "error": None,
            "error_type": None,
            "session_id": "s-1",
        }

    @pytest.mark.asyncio
    async def test_error_result_is_failed(self, executor, mock_controller):
        mock_controller.execute.return_value = ErrorResult(message="Tool not found: x", code="TOOL_NOT_FOUND")

        outcome = await executor.execute_intent(FastAction(tool_name="x"))

        assert outcome.status == "failed"
        assert outcome.session_id is None
        assert outcome.result.code == "TOOL_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_controller_error_becomes_failed_outcome(self, executor, mock_controller):
        mock_controller.execute.side_effect = MaxIterationsExceededError(5, session_id="s-9")

        outcome = await executor.execute_intent(ComplexMission(goal="g"))

        assert outcome.status == "failed"
        assert outcome.result is None
        assert outcome.error == "Maximum iterations exceeded: 5"
        assert outcome.error_type == "MaxIterationsExceededError"
        assert outcome.session_id == "s-9"

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, executor, mock_controller):
        mock_controller.execute.side_effect = ConnectionError("backend down")

        with pytest.raises(ConnectionError):
            await executor.execute_intent(ComplexMission(goal="g"))

    @pytest.mark.asyncio
    async def test_cancel_forwards_to_controller(self, executor, mock_controller):
        await executor.cancel("s-1", profile="dev")
        mock_controller.cancel.assert_awaited_once_with("s-1")

    @pytest.mark.asyncio
    async def test_session_lookup(self, executor, session_store):
        session = Session.create(goal="g", budget=10, session_id="s-1")
        await session_store.save(session)

        assert await executor.list_sessions("dev") == ["s-1"]
        loaded = await executor.get_session("s-1", "dev")
        assert loaded.id == "s-1"

    @pytest.mark.asyncio
    async def test_missing_session(self, executor):
        with pytest.raises(SessionNotFoundError):
            await executor.get_session("nope", "dev")

    @pytest.mark.asyncio
    async def test_generated_session_id_is_reported(self, executor, mock_controller):
        outcome = await executor.execute_intent(ComplexMission(goal="g"))

        sent = mock_controller.execute.await_args.args[0]
        assert sent.session_id
        assert outcome.session_id == sent.session_id
        assert sent.goal == "g"

    @pytest.mark.asyncio
    async def test_generated_session_id_reported_on_failure(self, executor, mock_controller):
        mock_controller.execute.side_effect = MaxIterationsExceededError(5)

        outcome = await executor.execute_intent(ComplexMission(goal="g"))

        assert outcome.status == "failed"
        assert outcome.session_id == mock_controller.execute.await_args.args[0].session_id

"""Unit tests for ChildControllerDelegator."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from agentloop.core.domain.errors import (
    DelegationError,
    MaxIterationsExceededError,
    MisconfigurationError,
)
from agentloop.core.domain.models import ComplexMission, DataResult, ErrorResult, TextResult
from agentloop.core.interfaces.delegation import DelegationRequest
from agentloop.infrastructure.delegation.child_controller import ChildControllerDelegator


@pytest.fixture
def child_controller():
    controller = MagicMock()
    controller.execute = AsyncMock(return_value=TextResult("child answer"))
    return controller


@pytest.fixture
def controller_factory(child_controller):
    return MagicMock(return_value=child_controller)


class TestChildControllerDelegator:
    @pytest.mark.asyncio
    async def test_runs_child_mission(self, controller_factory, child_controller):
        delegator = ChildControllerDelegator(controller_factory, max_depth=1)

        result = await delegator.delegate(DelegationRequest(objective="research", context="AI"))

        assert result.success
        assert result.result == "child answer"
        mission = child_controller.execute.await_args.args[0]
        assert mission == ComplexMission(goal="research", context_summary="AI")

    @pytest.mark.asyncio
    async def test_child_gets_no_delegator_at_depth_limit(self, controller_factory):
        await ChildControllerDelegator(controller_factory, max_depth=1).delegate(
            DelegationRequest(objective="x")
        )
        controller_factory.assert_called_once_with(None)

    @pytest.mark.asyncio
    async def test_child_gets_nested_delegator(self, controller_factory):
        await ChildControllerDelegator(controller_factory, max_depth=3).delegate(
            DelegationRequest(objective="x")
        )
        nested = controller_factory.call_args.args[0]
        assert isinstance(nested, ChildControllerDelegator)
        assert nested.depth == 1
        assert nested.max_depth == 3

    @pytest.mark.asyncio
    async def test_depth_limit_reached(self, controller_factory):
        delegator = ChildControllerDelegator(controller_factory, max_depth=1, depth=1)

        result = await delegator.delegate(DelegationRequest(objective="x"))

        assert not result.success
        assert result.error == "Maximum delegation depth (1) reached"
        controller_factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_child_controller_error(self, controller_factory, child_controller):
        child_controller.execute.side_effect = MaxIterationsExceededError(3)

        result = await ChildControllerDelegator(controller_factory).delegate(
            DelegationRequest(objective="x")
        )

        assert not result.success
        assert result.error == "Maximum iterations exceeded: 3"

    @pytest.mark.asyncio
    async def test_child_error_result(self, controller_factory, child_controller):
        child_controller.execute.return_value = ErrorResult(message="nope", code="TOOL_ERROR")

        result = await ChildControllerDelegator(controller_factory).delegate(
            DelegationRequest(objective="x")
        )

        assert not result.success
        assert result.error == "nope"

    @pytest.mark.asyncio
    async def test_child_structured_result(self, controller_factory, child_controller):
        child_controller.execute.return_value = DataResult({"n": 1})

        result = await ChildControllerDelegator(controller_factory).delegate(
            DelegationRequest(objective="x")
        )

        assert result.success
        assert result.result == '{"type": "data", "payload": {"n": 1}}'

    @pytest.mark.asyncio
    async def test_child_build_failure(self):
        factory = MagicMock(side_effect=MisconfigurationError("complex", ["llm"]))

        with pytest.raises(DelegationError, match="Cannot build child controller"):
            await ChildControllerDelegator(factory).delegate(DelegationRequest(objective="x"))

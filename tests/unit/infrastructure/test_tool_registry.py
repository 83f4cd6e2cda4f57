"""Unit tests for InMemoryToolRegistry, FunctionTool and the builtin tools."""

import pytest

from agentloop.core.domain.errors import ToolExecutionError, ToolNotFoundError
from agentloop.infrastructure.tools.builtin import BUILTIN_TOOLS, calculate, calculator_tool, echo_tool
from agentloop.infrastructure.tools.registry import FunctionTool, InMemoryToolRegistry


@pytest.fixture
def registry():
    return InMemoryToolRegistry([calculator_tool(), echo_tool()])


class TestFunctionTool:
    @pytest.mark.asyncio
    async def test_sync_function(self):
        tool = FunctionTool("double", "Double a number", lambda x: x * 2)
        assert await tool.execute(x=4) == {"success": True, "output": 8}

    @pytest.mark.asyncio
    async def test_async_function(self):
        async def fetch(url: str) -> str:
            return f"<html>{url}</html>"

        tool = FunctionTool("fetch", "Fetch a page", fetch)
        assert await tool.execute(url="a") == {"success": True, "output": "<html>a</html>"}

    @pytest.mark.asyncio
    async def test_exception_becomes_error(self):
        def boom():
            raise ValueError("bad input")

        tool = FunctionTool("boom", "Always fails", boom)
        assert await tool.execute() == {"success": False, "error": "bad input"}


class TestInMemoryToolRegistry:
    def test_list_tools(self, registry):
        definitions = {d.name: d for d in registry.list_tools()}

        assert set(definitions) == {"calculator", "echo"}
        assert definitions["calculator"].parameters["required"] == ["operation", "a", "b"]

    @pytest.mark.asyncio
    async def test_string_output(self, registry):
        output = await registry.execute("echo", {"text": "hello"})
        assert output.success
        assert output.content == "hello"
        assert output.data is None

    @pytest.mark.asyncio
    async def test_structured_output(self, registry):
        registry.register(FunctionTool("info", "Info", lambda: {"files": 3}))

        output = await registry.execute("info", {})

        assert output.content == '{"files": 3}'
        assert output.data == {"files": 3}

    @pytest.mark.asyncio
    async def test_none_args(self, registry):
        output = await registry.execute("echo", None)
        assert output.success
        assert output.content == ""

    @pytest.mark.asyncio
    async def test_tool_failure(self, registry):
        output = await registry.execute("calculator", {"operation": "divide", "a": 1, "b": 0})
        assert not output.success
        assert output.content == "Division by zero"

    @pytest.mark.asyncio
    async def test_unexpected_argument_is_failure(self, registry):
        output = await registry.execute("echo", {"txt": "typo"})
        assert not output.success

    @pytest.mark.asyncio
    async def test_unknown_tool(self, registry):
        with pytest.raises(ToolNotFoundError, match="Tool not found: missing"):
            await registry.execute("missing", {})

    @pytest.mark.asyncio
    async def test_non_object_args(self, registry):
        with pytest.raises(ToolExecutionError, match="arguments must be a JSON object"):
            await registry.execute("echo", "hello")


class TestBuiltinTools:
    @pytest.mark.parametrize(
        "operation,expected",
        [("add", 8), ("subtract", 2), ("multiply", 15), ("divide", 5 / 3)],
    )
    def test_calculate(self, operation, expected):
        assert calculate(operation, 5, 3) == expected

    def test_unsupported_operation(self):
        with pytest.raises(ValueError, match="Unsupported operation"):
            calculate("pow", 2, 3)

    def test_division_by_zero(self):
        with pytest.raises(ValueError, match="Division by zero"):
            calculate("divide", 1, 0)

    def test_builtin_names(self):
        assert {name: factory().name for name, factory in BUILTIN_TOOLS.items()} == {
            "calculator": "calculator",
            "echo": "echo",
        }

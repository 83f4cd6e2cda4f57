"""
In-Memory Tool Registry

Maps tool names to FunctionTool instances and adapts their dict results to
ToolOutput. Used as the tool backend for both the fast path and the loop.
"""

import inspect
import json
from collections.abc import Callable
from typing import Any

import structlog

from agentloop.core.domain.errors import ToolExecutionError, ToolNotFoundError
from agentloop.core.domain.models import JsonValue, ToolDefinition, ToolOutput


class FunctionTool:
    """
    Tool backed by a plain (sync or async) callable.

    The callable receives the decoded arguments as keyword arguments and
    returns any value; execute() wraps it as {"success": True, "output": ...}
    and turns exceptions into {"success": False, "error": ...}.
    """

    def __init__(
        self,
        name: str,
        description: str,
        func: Callable[..., Any],
        parameters_schema: dict[str, Any] | None = None,
    ):
        self.name = name
        self.description = description
        self.func = func
        self.parameters_schema = parameters_schema or {"type": "object", "properties": {}}

    async def execute(self, **kwargs: Any) -> dict[str, Any]:
        try:
            result = self.func(**kwargs)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            return {"success": False, "error": str(e)}
        return {"success": True, "output": result}


class InMemoryToolRegistry:
    def __init__(self, tools: list[FunctionTool] | None = None):
        self.tools: dict[str, FunctionTool] = {}
        self.logger = structlog.get_logger().bind(component="tool_registry")
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: FunctionTool) -> None:
        self.tools[tool.name] = tool

    def list_tools(self) -> list[ToolDefinition]:
        return [
            ToolDefinition(
                name=tool.name,
                description=tool.description,
                parameters=tool.parameters_schema,
            )
            for tool in self.tools.values()
        ]

    async def execute(self, name: str, args: JsonValue) -> ToolOutput:
        """
        Execute a registered tool.

        Raises:
            ToolNotFoundError: If the tool is not registered
            ToolExecutionError: If args is not a JSON object or the tool crashes
        """
        tool = self.tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)

        if args is None:
            args = {}
        if not isinstance(args, dict):
            raise ToolExecutionError(name, "arguments must be a JSON object")

        self.logger.info("tool_execute", tool=name, args_keys=list(args.keys()))
        try:
            result = await tool.execute(**args)
        except Exception as e:
            self.logger.error("tool_exception", tool=name, error=str(e))
            raise ToolExecutionError(name, str(e)) from e

        self.logger.info("tool_complete", tool=name, success=result.get("success"))
        if not result.get("success"):
            return ToolOutput.error(str(result.get("error", "Unknown error")))

        output = result.get("output")
        if isinstance(output, str):
            return ToolOutput.text(output)
        return ToolOutput.text(json.dumps(output, default=str)).with_data(output)

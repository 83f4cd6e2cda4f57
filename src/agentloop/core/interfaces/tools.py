"""
Tool Registry Protocol

The tool-invocation backend consumed by both the fast path and the ReAct loop.
"""

from typing import Protocol

from agentloop.core.domain.models import JsonValue, ToolDefinition, ToolOutput


class ToolRegistryProtocol(Protocol):
    """Protocol for executing tools by name."""

    async def execute(self, name: str, args: JsonValue) -> ToolOutput:
        """
        Execute a tool.

        Returns:
            ToolOutput; success=False signals a tool-level failure

        Raises:
            ToolNotFoundError: If no tool with that name exists
            ToolExecutionError: If the tool could not be executed
        """
        ...

    def list_tools(self) -> list[ToolDefinition]:
        ...

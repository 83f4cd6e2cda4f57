"""Builtin tools available to profiles by name."""

from agentloop.infrastructure.tools.registry import FunctionTool

_OPERATIONS = {
    "add": lambda a, b: a + b,
    "subtract": lambda a, b: a - b,
    "multiply": lambda a, b: a * b,
    "divide": lambda a, b: a / b,
}


def calculate(operation: str, a: float, b: float) -> float:
    if operation not in _OPERATIONS:
        raise ValueError(
            f"Unsupported operation '{operation}'. Use one of: {', '.join(_OPERATIONS)}"
        )
    if operation == "divide" and b == 0:
        raise ValueError("Division by zero")
    return _OPERATIONS[operation](a, b)


def echo(text: str = "") -> str:
    return text


def calculator_tool() -> FunctionTool:
    return FunctionTool(
        name="calculator",
        description="Basic arithmetic on two numbers (add, subtract, multiply, divide).",
        func=calculate,
        parameters_schema={
            "type": "object",
            "properties": {
                "operation": {"type": "string", "enum": list(_OPERATIONS)},
                "a": {"type": "number"},
                "b": {"type": "number"},
            },
            "required": ["operation", "a", "b"],
        },
    )


def echo_tool() -> FunctionTool:
    return FunctionTool(
        name="echo",
        description="Return the given text unchanged.",
        func=echo,
        parameters_schema={
            "type": "object",
            "properties": {"text": {"type": "string"}},
        },
    )


BUILTIN_TOOLS = {
    "calculator": calculator_tool,
    "echo": echo_tool,
}

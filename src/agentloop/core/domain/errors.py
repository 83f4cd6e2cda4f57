"""
Domain Errors

Exception hierarchy raised by the controller and its capability backends.

Loop-fatal conditions (misconfiguration, budget, iteration cap, cancellation)
derive from ControllerError. Backend errors (tools, delegation, stores) derive
directly from AgentLoopError; the controller turns those into in-band
observations instead of letting them abort the loop.
"""


class AgentLoopError(Exception):
    """Base class for all agentloop errors."""


class ControllerError(AgentLoopError):
    """Generic controller failure."""


class MisconfigurationError(ControllerError):
    """A capability required by the requested entry path is not bound."""

    def __init__(self, entry_path: str, missing: list[str]):
        self.entry_path = entry_path
        self.missing = list(missing)
        super().__init__(
            f"Entry path '{entry_path}' requires missing capabilities: "
            f"{', '.join(self.missing)}"
        )


class BudgetExceededError(ControllerError):
    """Cumulative token usage reached the session budget."""

    def __init__(self, used: int, limit: int, session_id: str | None = None):
        self.used = used
        self.limit = limit
        self.session_id = session_id
        super().__init__(f"Token budget exceeded: used {used}, limit {limit}")


class MaxIterationsExceededError(ControllerError):
    """The loop ran out of iterations without a final answer."""

    def __init__(self, max_iterations: int, session_id: str | None = None):
        self.max_iterations = max_iterations
        self.session_id = session_id
        super().__init__(f"Maximum iterations exceeded: {max_iterations}")


class SessionCancelledError(ControllerError):
    """The session was cancelled between iterations."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session cancelled: {session_id}")


class InvalidTransitionError(AgentLoopError):
    """Illegal session status transition."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot transition session from {current} to {target}")


class ToolError(AgentLoopError):
    """Base class for tool backend failures."""


class ToolNotFoundError(ToolError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tool not found: {name}")


class ToolExecutionError(ToolError):
    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Tool '{name}' execution failed: {reason}")


class DelegationError(AgentLoopError):
    """Delegation backend failure."""


class SessionNotFoundError(AgentLoopError):
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")

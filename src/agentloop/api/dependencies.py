"""Shared FastAPI dependencies."""

import os

from agentloop.application.executor import ControllerExecutor
from agentloop.application.factory import ControllerFactory

_executor: ControllerExecutor | None = None


def get_executor() -> ControllerExecutor:
    """Process-wide executor; profiles are read from AGENTLOOP_CONFIG_DIR (default: configs)."""
    global _executor
    if _executor is None:
        config_dir = os.getenv("AGENTLOOP_CONFIG_DIR", "configs")
        _executor = ControllerExecutor(ControllerFactory(config_dir=config_dir))
    return _executor

"""Helpers shared by CLI commands."""

import typer

from agentloop.application.executor import ControllerExecutor
from agentloop.application.factory import ControllerFactory


def resolve_options(ctx: typer.Context, profile: str | None) -> tuple[str, str]:
    """Return (profile, config_dir), letting a local --profile override the global one."""
    global_opts = ctx.obj or {}
    return profile or global_opts.get("profile", "dev"), global_opts.get("config_dir", "configs")


def build_executor(config_dir: str) -> ControllerExecutor:
    return ControllerExecutor(ControllerFactory(config_dir=config_dir))

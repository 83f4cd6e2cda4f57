"""agentloop CLI entry point."""

import logging

import structlog
import typer
from rich.console import Console

from agentloop.api.cli.commands import run, sessions, tools

app = typer.Typer(
    name="agentloop",
    help="agentloop - bounded ReAct control loop",
    add_completion=True,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

# Register command groups
app.add_typer(run.app, name="run", help="Execute intents")
app.add_typer(sessions.app, name="sessions", help="Session management")
app.add_typer(tools.app, name="tools", help="Tool management")


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(message)s")
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))


@app.callback()
def main(
    ctx: typer.Context,
    profile: str = typer.Option("dev", "--profile", "-p", help="Configuration profile"),
    config_dir: str = typer.Option("configs", "--config-dir", "-c", help="Profile directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
):
    """agentloop CLI."""
    configure_logging(verbose)
    # Store global options in context for subcommands
    ctx.obj = {"profile": profile, "config_dir": config_dir, "verbose": verbose}


@app.command()
def version():
    """Show agentloop version."""
    from agentloop import __version__

    console.print(f"[bold blue]agentloop[/bold blue] version [cyan]{__version__}[/cyan]")


if __name__ == "__main__":
    app()

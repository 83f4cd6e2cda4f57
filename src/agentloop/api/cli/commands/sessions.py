"""Sessions command - Inspect persisted sessions."""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from agentloop.api.cli.options import build_executor, resolve_options
from agentloop.core.domain.errors import SessionNotFoundError

app = typer.Typer(help="Session management")
console = Console()


async def _load_all(executor, profile: str):
    sessions = []
    for session_id in await executor.list_sessions(profile):
        sessions.append(await executor.get_session(session_id, profile))
    return sessions


@app.command("list")
def list_sessions(
    ctx: typer.Context,
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Configuration profile"),
):
    """List persisted sessions."""
    profile, config_dir = resolve_options(ctx, profile)
    executor = build_executor(config_dir)
    sessions = asyncio.run(_load_all(executor, profile))

    table = Table(title="Sessions")
    table.add_column("Session ID", style="cyan")
    table.add_column("Status", style="white")
    table.add_column("Iteration", justify="right")
    table.add_column("Tokens", justify="right")
    table.add_column("Goal", style="white")

    for session in sessions:
        iteration = session.task_state.iteration if session.task_state else 0
        table.add_row(
            session.id,
            session.status.value,
            str(iteration),
            f"{session.token_usage.total_tokens}/{session.token_usage.budget_limit}",
            session.goal[:60],
        )

    console.print(table)


@app.command("show")
def show_session(
    ctx: typer.Context,
    session_id: str = typer.Argument(..., help="Session ID"),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Configuration profile"),
):
    """Show session details."""
    profile, config_dir = resolve_options(ctx, profile)
    executor = build_executor(config_dir)

    try:
        session = asyncio.run(executor.get_session(session_id, profile))
    except SessionNotFoundError:
        console.print(f"[red]Session '{session_id}' not found[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold]Session:[/bold] {session.id}")
    console.print(f"[bold]Goal:[/bold] {session.goal}")
    console.print(f"[bold]Status:[/bold] {session.status.value}")
    console.print_json(data=session.to_dict())

"""Run command - Execute fast actions and complex missions."""

import asyncio
import json
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from agentloop.api.cli.options import build_executor, resolve_options
from agentloop.application.executor import ExecutionOutcome
from agentloop.core.domain.models import (
    ComplexMission,
    DataResult,
    ErrorResult,
    FastAction,
    FileResult,
    TextResult,
)

app = typer.Typer(help="Execute intents")
console = Console()


def _print_outcome(outcome: ExecutionOutcome) -> None:
    result = outcome.result
    if isinstance(result, TextResult):
        console.print(Panel(escape(result.text), title="Result", border_style="green"))
    elif isinstance(result, DataResult):
        console.print_json(data=result.data)
    elif isinstance(result, FileResult):
        console.print(f"[green]File:[/green] {result.filename} ({result.mime_type}) ref={result.ref_id}")
    elif isinstance(result, ErrorResult):
        console.print(f"[red]Error ({result.code}):[/red] {escape(result.message)}")
    else:
        console.print(f"[red]Failed ({outcome.error_type}):[/red] {escape(outcome.error or '')}")

    if outcome.session_id:
        console.print(f"[dim]Session ID: {outcome.session_id}[/dim]")


@app.command("fast")
def run_fast(
    ctx: typer.Context,
    tool_name: str = typer.Argument(..., help="Tool to invoke"),
    args: str = typer.Option("{}", "--args", "-a", help="Tool arguments as a JSON object"),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Configuration profile (overrides global --profile)"),
):
    """Invoke a tool directly, bypassing the ReAct loop.

    Examples:
        agentloop run fast calculator --args '{"operation": "add", "a": 5, "b": 3}'
    """
    profile, config_dir = resolve_options(ctx, profile)
    try:
        parsed_args = json.loads(args)
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid --args JSON:[/red] {escape(str(e))}")
        raise typer.Exit(2)

    executor = build_executor(config_dir)
    outcome = asyncio.run(
        executor.execute_intent(FastAction(tool_name=tool_name, args=parsed_args), profile=profile)
    )
    _print_outcome(outcome)
    if outcome.status != "completed":
        raise typer.Exit(1)


@app.command("mission")
def run_mission(
    ctx: typer.Context,
    goal: str = typer.Argument(..., help="Mission goal"),
    context: str = typer.Option("", "--context", help="Context summary for the first user message"),
    refs: Optional[List[str]] = typer.Option(None, "--ref", "-r", help="Visual reference id (repeatable)"),
    session_id: Optional[str] = typer.Option(None, "--session", "-s", help="Session id to use"),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Configuration profile (overrides global --profile)"),
):
    """Run the ReAct loop for a goal.

    Examples:
        agentloop run mission "Add 5 and 3" --context "Use the calculator"
    """
    profile, config_dir = resolve_options(ctx, profile)
    console.print(f"[bold]Mission:[/bold] {goal}")
    console.print(f"[dim]Profile: {profile}[/dim]")

    executor = build_executor(config_dir)
    intent = ComplexMission(
        goal=goal,
        context_summary=context,
        visual_refs=tuple(refs or ()),
        session_id=session_id,
    )
    with console.status("[>] Executing mission..."):
        outcome = asyncio.run(executor.execute_intent(intent, profile=profile))

    _print_outcome(outcome)
    if outcome.status != "completed":
        raise typer.Exit(1)

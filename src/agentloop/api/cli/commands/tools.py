"""Tools command - List and inspect available tools."""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from agentloop.api.cli.options import build_executor, resolve_options

app = typer.Typer(help="Tool management")
console = Console()


def _tool_definitions(ctx: typer.Context, profile: Optional[str]):
    profile, config_dir = resolve_options(ctx, profile)
    controller = build_executor(config_dir).get_controller(profile)
    if controller.tools is None:
        return []
    return controller.tools.list_tools()


@app.command("list")
def list_tools(
    ctx: typer.Context,
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Configuration profile"),
):
    """List available tools."""
    table = Table(title="Available Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description", style="white")

    for tool in _tool_definitions(ctx, profile):
        table.add_row(tool.name, tool.description)

    console.print(table)


@app.command("inspect")
def inspect_tool(
    ctx: typer.Context,
    tool_name: str = typer.Argument(..., help="Tool name to inspect"),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Configuration profile"),
):
    """Inspect tool details and parameters."""
    tool = next((t for t in _tool_definitions(ctx, profile) if t.name == tool_name), None)

    if not tool:
        console.print(f"[red]Tool '{tool_name}' not found[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold cyan]{tool.name}[/bold cyan]")
    console.print(f"{tool.description}\n")

    console.print("[bold]Parameters:[/bold]")
    console.print_json(data=tool.parameters)

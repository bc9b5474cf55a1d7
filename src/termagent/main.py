from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .app_context import AppContext
from .llm.scripted import load_script
from .runner import dispatch, run_turn
from .session.models import TextFragment, ToolInvocation, ToolResultEntry, TurnStatus
from .tools.base import format_call
from .util.console import console


app = typer.Typer(add_completion=False, help="termagent: tool execution engine for a terminal agent.")


def _resolve_cwd(cwd: Path | None) -> Path:
    cwd = Path(str(cwd or Path.cwd())).expanduser()
    if not cwd.is_absolute():
        cwd = (Path.cwd() / cwd).resolve()
    else:
        cwd = cwd.resolve()
    if not cwd.is_dir():
        raise typer.BadParameter(f"--cwd must be an existing directory, got: {cwd}")
    return cwd


def _header(ctx: AppContext) -> None:
    table = Table.grid(padding=(0, 2))
    table.add_row("[bold green]cwd[/bold green]", f"[bright_cyan]{ctx.cwd}[/bright_cyan]")
    table.add_row("[bold green]auto-approve[/bold green]", f"[bright_cyan]{ctx.config.auto_approve}[/bright_cyan]")
    table.add_row("[bold green]max steps[/bold green]", f"[bright_cyan]{ctx.config.max_steps}[/bright_cyan]")
    table.add_row("[bold green]config[/bold green]", f"[bright_cyan]{ctx.config.loaded_from or '(none)'}[/bright_cyan]")
    if ctx.events and ctx.events.path:
        table.add_row("[bold green]events[/bold green]", f"[bright_cyan]{ctx.events.path}[/bright_cyan]")
    console.print(Panel(table, title="[bold magenta]termagent[/bold magenta]", border_style="bright_blue"))


@app.command()
def tools(
    schema: bool = typer.Option(False, "--schema", help="Print the JSON function descriptions."),
):
    """List the built-in tool catalog."""
    ctx = AppContext.create(Path.cwd())
    if schema:
        console.print_json(json.dumps(ctx.tools.describe()))
        return
    for spec in ctx.tools.list_specs():
        first = spec.description.strip().splitlines()[0]
        console.print(f"- [bold]{spec.name}[/bold] {escape(first)}")


@app.command()
def call(
    name: str = typer.Argument(..., help="Tool name."),
    args: str = typer.Option("{}", "--args", "-a", help="Tool arguments as a JSON object."),
    cwd: Path = typer.Option(None, "--cwd", help="Working directory. Defaults to current directory."),
    config: Path = typer.Option(None, "--config", help="Optional termagent.json path."),
    yes: bool = typer.Option(False, "--yes", help="Auto-approve confirmation prompts."),
    debug: bool = typer.Option(False, "--debug", help="Print internal diagnostics."),
):
    """Run a single tool call and print its result."""
    try:
        parsed = json.loads(args)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"--args is not valid JSON: {e}")
    ctx = AppContext.from_env(_resolve_cwd(cwd), config_path=config, auto_approve=yes, debug=debug)
    inv = ToolInvocation(id="cli", name=name, arguments=parsed)
    res = dispatch(ctx, inv)
    console.print_json(res.content)
    raise typer.Exit(code=0 if res.success else 1)


@app.command()
def replay(
    script: Path = typer.Argument(..., help="YAML/JSON script of model steps."),
    prompt: str = typer.Option(None, "--prompt", "-p", help="User prompt recorded for the turn."),
    cwd: Path = typer.Option(None, "--cwd", help="Working directory. Defaults to current directory."),
    config: Path = typer.Option(None, "--config", help="Optional termagent.json path."),
    yes: bool = typer.Option(False, "--yes", help="Auto-approve confirmation prompts."),
    debug: bool = typer.Option(False, "--debug", help="Print internal diagnostics."),
    max_steps: int = typer.Option(None, "--max-steps", help="Max tool-call rounds for the turn."),
    trace: bool = typer.Option(True, "--trace/--no-trace", help="Print tool results as they happen."),
):
    """Feed a scripted model conversation through the dispatch loop."""
    model = load_script(script)
    ctx = AppContext.from_env(
        _resolve_cwd(cwd),
        config_path=config,
        auto_approve=yes,
        debug=debug,
        max_steps=max_steps,
        trace=trace,
    )
    _header(ctx)
    if prompt:
        console.print(f"\n[bold]You:[/bold] {escape(prompt)}\n")
    outcome = run_turn(ctx, model, user_prompt=prompt)

    console.print("\n[bold]Turn:[/bold]\n")
    for entry in outcome.conversation:
        if isinstance(entry, TextFragment):
            console.print(escape(entry.text))
        elif isinstance(entry, ToolInvocation):
            tool = ctx.tools.get_optional(entry.name)
            line = format_call(tool.spec, entry.arguments) if tool else entry.name
            console.print(f"[grey50]> {escape(line)}[/grey50]")
        elif isinstance(entry, ToolResultEntry):
            mark = "[green]ok[/green]" if entry.result.success else f"[red]{escape(entry.result.error or 'failed')}[/red]"
            console.print(f"  {mark}")
        else:
            console.print(f"[red]model error:[/red] {escape(entry.error)}")

    if outcome.status is not TurnStatus.COMPLETED:
        console.print(f"\n[red]{outcome.status.value}[/red] {escape(outcome.error or '')}")
        raise typer.Exit(code=1)

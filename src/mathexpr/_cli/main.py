import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from mathexpr._errors import EvalError
from mathexpr._eval import evaluate_formula
from mathexpr._io import Document, export_sweep_to_toml, load_document
from mathexpr._render import render, render_formula
from mathexpr._sweep import VariableRange, sweep
from mathexpr._tree import Binary, Num, Var
from mathexpr._validate import validate_tree

from .config import ConfigError, MathexprConfig, get_config

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Mathexpr CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _parse_assignments(assignments: list[str]) -> dict[str, float]:
    """Parse `NAME=VALUE` options into bindings."""
    bindings: dict[str, float] = {}
    for assignment in assignments:
        name, sep, value = assignment.partition("=")
        name = name.strip()
        if not sep or not name:
            msg = f"Expected NAME=VALUE, got '{assignment}'"
            raise typer.BadParameter(msg, param_hint="--set")
        try:
            bindings[name] = float(value)
        except ValueError:
            msg = f"'{value}' is not a number (in '{assignment}')"
            raise typer.BadParameter(msg, param_hint="--set") from None
    return bindings


def _load_config() -> MathexprConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def _load(path: Path) -> Document:
    err_console.print(f"[cyan]Loading formula from:[/cyan] {path}")
    try:
        document = load_document(path)
    except EvalError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    err_console.print(f"[cyan]Formula:[/cyan] [bold]{escape(render_formula(document.formula))}[/bold]")
    return document


SetOption = Annotated[
    list[str] | None,
    typer.Option("--set", "-s", help="Bind a variable, e.g. --set a=39 (repeatable)"),
]
StrictOption = Annotated[
    bool | None,
    typer.Option("--strict/--ieee", help="Fail on non-finite results instead of returning inf/NaN"),
]


@app.command("eval")
def eval_(
    path: Annotated[Path, typer.Argument(help="Path to the formula document (TOML)")],
    *,
    assignments: SetOption = None,
    strict: StrictOption = None,
) -> None:
    """Evaluate a formula and print its value."""
    config = _load_config()
    err_console.print()
    document = _load(path)

    bindings = {**document.bindings, **_parse_assignments(assignments or [])}
    logger.debug(f"Bindings: {bindings}")
    strict_mode = config.strict if strict is None else strict

    try:
        value = evaluate_formula(document.formula, bindings, strict=strict_mode)
    except EvalError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    err_console.print()
    out_console.print(repr(value))


@app.command("sweep")
def sweep_(  # noqa: PLR0913
    path: Annotated[Path, typer.Argument(help="Path to the formula document (TOML)")],
    *,
    variable: Annotated[str | None, typer.Option("--var", help="Variable to sweep")] = None,
    start: Annotated[float | None, typer.Option("--start", help="First sample")] = None,
    end: Annotated[float | None, typer.Option("--end", help="Last sample")] = None,
    resolution: Annotated[int | None, typer.Option("-n", "--resolution", help="Number of samples")] = None,
    assignments: SetOption = None,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Path to output TOML file"),
    ] = None,
    strict: StrictOption = None,
) -> None:
    """Sweep one variable over a range and print the samples."""
    config = _load_config()
    err_console.print()
    document = _load(path)

    base = document.var_range
    if base is not None:
        variable = base.variable if variable is None else variable
        start = base.start if start is None else start
        end = base.end if end is None else end
        resolution = base.resolution if resolution is None else resolution
    if resolution is None:
        resolution = config.resolution

    if variable is None or start is None or end is None or resolution is None:
        missing = [
            option
            for option, value in (("--var", variable), ("--start", start), ("--end", end), ("--resolution", resolution))
            if value is None
        ]
        err_console.print(
            f"[red]✗ The document has no \\[range] table; missing {', '.join(missing)}[/red]",
        )
        raise typer.Exit(code=1)

    var_range = VariableRange(variable=variable, start=start, end=end, resolution=resolution)
    bindings = {**document.bindings, **_parse_assignments(assignments or [])}
    logger.debug(f"Bindings: {bindings}")
    strict_mode = config.strict if strict is None else strict

    err_console.print(
        f"[cyan]Sweeping[/cyan] [bold]{escape(var_range.variable)}[/bold] "
        f"[cyan]from[/cyan] {var_range.start!r} [cyan]to[/cyan] {var_range.end!r} "
        f"[cyan]with[/cyan] {var_range.resolution} samples",
    )
    try:
        result = sweep(document.formula, bindings, var_range, strict=strict_mode)
    except EvalError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    err_console.print()

    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column(escape(result.variable), justify="right")
    table.add_column("value", justify="right")
    for point, value in result.pairs():
        table.add_row(repr(point), repr(value))
    out_console.print(table)

    if output is None:
        output = config.output
    if output is not None:
        err_console.print()
        err_console.print(f"[cyan]Exporting samples to:[/cyan] {output}")
        export_sweep_to_toml(result, output)

    err_console.print()
    err_console.print("[green]✓ Sweep complete[/green]")
    err_console.print()


@app.command()
def show(
    path: Annotated[Path, typer.Argument(help="Path to the formula document (TOML)")],
) -> None:
    """Show a formula and the nodes reachable from its roots."""
    err_console.print()
    document = _load(path)
    formula = document.formula
    err_console.print()

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Ref", style="dim")
    table.add_column("Node")
    table.add_column("Renders as")

    for ref in validate_tree(formula.tree, formula.roots()):
        match formula.tree.get(ref):
            case Binary(op, lhs, rhs):
                kind = f"{op.value} {lhs} {rhs}"
            case Num(value):
                kind = f"num {value!r}"
            case Var(name):
                kind = f"var {name}"
        table.add_row(str(ref), escape(kind), escape(render(formula.tree, ref)))

    title = "Equality" if formula.is_equality else "Expression"
    out_console.print(
        Panel(
            table,
            title=f"[bold]{title}[/bold]",
            subtitle=f"[dim]{len(formula.tree)} nodes[/dim]",
            border_style="cyan",
        ),
    )


def main() -> None:
    app()

"""
Abacus CLI.

Commands:
- run:    Evaluate a file, inline source or stdin
- tokens: Show the token stream of some source
- ast:    Show the parsed program
- repl:   Interactive session with persistent variables
"""

from __future__ import annotations

import json
import logging
import math
import platform
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from abacus._version import get_version
from abacus.core.config import DIVISION_POLICIES, Settings, load_settings
from abacus.core.environment import Environment
from abacus.core.errors import AbacusError, ConfigError
from abacus.core.evaluator import Evaluator
from abacus.core.parser import parse
from abacus.core.tokenizer import tokenize
from abacus.runner import run

app = typer.Typer(
    help="Abacus - a small arithmetic scripting language.",
    no_args_is_help=True,
)

console = Console()

REPL_PROMPT = "abacus> "


def format_value(value: float) -> str:
    """Render a result the way the REPL and ``run`` print it."""
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return repr(value)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"Abacus version {get_version()}")
        typer.echo(f"Python {platform.python_implementation()} {platform.python_version()}")
        raise typer.Exit()


def _resolve_settings(project_dir: Path, division: str | None) -> Settings:
    try:
        settings = load_settings(project_dir)
        if division is not None:
            settings = Settings(
                division=division.lower(),
                max_depth=settings.max_depth,
                max_steps=settings.max_steps,
            )
    except ConfigError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=2)
    return settings


def _read_source(file: Path | None, expr: str | None) -> str:
    if expr is not None and file is not None:
        typer.echo("Error: pass either FILE or --expr, not both", err=True)
        raise typer.Exit(code=2)
    if expr is not None:
        return expr
    if file is None or str(file) == "-":
        return typer.get_text_stream("stdin").read()
    if not file.exists():
        typer.echo(f"Error: File not found: {file}", err=True)
        raise typer.Exit(code=1)
    return file.read_text()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Abacus CLI main callback for global options."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )


@app.command(name="run")
def run_command(
    file: Path | None = typer.Argument(None, help="Source file ('-' or omitted: stdin)"),
    expr: str | None = typer.Option(None, "--expr", "-e", help="Inline source text"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    division: str | None = typer.Option(
        None,
        "--division",
        help=f"Division-by-zero policy: {' or '.join(DIVISION_POLICIES)}",
    ),
    project_dir: Path = typer.Option(  # noqa: B008
        ".",
        "--project-dir",
        "-p",
        help="Directory holding abacus.toml or pyproject.toml",
    ),
) -> None:
    """Evaluate a program and print the value of its last statement."""
    settings = _resolve_settings(project_dir, division)
    source = _read_source(file, expr)
    result = run(source, settings)

    if as_json:
        payload = result.to_dict()
        if result.result is not None and not math.isfinite(result.result):
            payload["result"] = format_value(result.result)
        typer.echo(json.dumps(payload, allow_nan=False))
    elif result.result is not None:
        typer.echo(format_value(result.result))
    else:
        typer.echo(result.error, err=True)

    if not result.success:
        raise typer.Exit(code=1)


@app.command(name="tokens")
def tokens_command(
    source: str = typer.Argument(..., help="Source text to tokenize"),
) -> None:
    """Show the token stream for some source text."""
    try:
        tokens = tokenize(source)
    except AbacusError as e:
        typer.echo(e.describe(), err=True)
        raise typer.Exit(code=1)

    table = Table(title="Tokens")
    table.add_column("Pos", justify="right")
    table.add_column("Kind")
    table.add_column("Value")
    for tok in tokens:
        if isinstance(tok.value, float):
            value = format_value(tok.value)
        else:
            value = "" if tok.value is None else tok.value
        table.add_row(str(tok.pos), str(tok.kind), value)
    console.print(table)


@app.command(name="ast")
def ast_command(
    source: str = typer.Argument(..., help="Source text to parse"),
    as_json: bool = typer.Option(False, "--json", help="Dump the AST as JSON"),
) -> None:
    """Parse source text and print the program in canonical form."""
    try:
        program = parse(source)
    except AbacusError as e:
        typer.echo(e.describe(), err=True)
        raise typer.Exit(code=1)

    if as_json:
        try:
            dumped = program.model_dump_json(indent=2)
        except (RecursionError, ValueError) as e:
            typer.echo(f"Error: program is too deeply nested to dump as JSON ({e})", err=True)
            raise typer.Exit(code=1)
        typer.echo(dumped)
    else:
        typer.echo(str(program))


@app.command(name="repl")
def repl_command(
    division: str | None = typer.Option(
        None,
        "--division",
        help=f"Division-by-zero policy: {' or '.join(DIVISION_POLICIES)}",
    ),
    project_dir: Path = typer.Option(  # noqa: B008
        ".",
        "--project-dir",
        "-p",
        help="Directory holding abacus.toml or pyproject.toml",
    ),
) -> None:
    """Read statements line by line, keeping variables between lines.

    Type ``:vars`` to list bindings and ``:quit`` to leave.
    """
    settings = _resolve_settings(project_dir, division)
    evaluator = Evaluator(settings)
    env = Environment()
    stdin = typer.get_text_stream("stdin")

    while True:
        typer.echo(REPL_PROMPT, nl=False)
        line = stdin.readline()
        if not line:
            typer.echo()
            break

        text = line.strip()
        if not text:
            continue
        if text == ":quit":
            break
        if text == ":vars":
            for name, value in sorted(env.snapshot().items()):
                typer.echo(f"{name} = {format_value(value)}")
            continue

        try:
            program = parse(text, settings)
            if not program.statements:
                continue
            value = evaluator.evaluate_node(program, env)
        except AbacusError as e:
            typer.echo(e.describe(), err=True)
            continue
        typer.echo(format_value(value))


@app.command(name="version")
def version_command() -> None:
    """Print the Abacus version."""
    typer.echo(get_version())


def main() -> None:
    app()


if __name__ == "__main__":
    main()

from __future__ import annotations

import logging

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from seq_expander.core.config import ConfigError, SeqConfig, load_and_merge
from seq_expander.core.errors import SeqError, SeqLexError, SeqLoadError, SeqSyntaxError
from seq_expander.core.expand.expand_seq import expand_seq
from seq_expander.core.expand.header import parse_header
from seq_expander.core.expand.scan import count_sections
from seq_expander.core.io.tree_io import dump_tree, format_tree, load_invocation
from seq_expander.core.model import Node

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()


@app.callback()
def _callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log expansion steps to stderr"),
) -> None:
    """Sequence expander CLI."""
    if verbose:
        _enable_debug_logging()


@app.command("expand")
def expand(
    path: str = typer.Argument(..., help="Invocation file (.seq source, or .yaml/.yml/.json token tree)"),
    out: str | None = typer.Option(None, "--out", help="Write the expanded tree here instead of stdout"),
    format: str = typer.Option("yaml", "--format", help="Output format: yaml|json"),
    spans: bool = typer.Option(False, "--spans", help="Include source line/column for each node"),
    config_file: str | None = typer.Option(None, "--config", help="Optional YAML file overriding marker/fusion symbols"),
) -> None:
    """Expand an invocation and write the resulting token tree."""
    if format not in ("yaml", "json"):
        _print_errors(
            [
                SeqError(
                    code="E_EXPAND_UNKNOWN_FORMAT",
                    message=f"unknown format: {format} (choose one of: json, yaml)",
                )
            ]
        )
        raise typer.Exit(code=2)

    config = _load_config(config_file)
    tokens = _load_tokens(path)

    try:
        expanded = expand_seq(tokens, file=path, config=config)
    except SeqSyntaxError as e:
        _print_errors([e])
        raise typer.Exit(code=2)

    if out is None:
        typer.echo(format_tree(expanded, fmt=format, spans=spans), nl=False)
        return

    dump_tree(expanded, out, fmt=format, spans=spans)
    typer.echo(f"OK: wrote {len(expanded)} nodes to {out}")


@app.command("check")
def check(
    path: str = typer.Argument(..., help="Invocation file (.seq source, or .yaml/.yml/.json token tree)"),
    config_file: str | None = typer.Option(None, "--config", help="Optional YAML file overriding marker/fusion symbols"),
) -> None:
    """Parse the header and report what an expansion would do, without expanding."""
    config = _load_config(config_file)
    tokens = _load_tokens(path)

    try:
        loop, body = parse_header(tokens, file=path)
    except SeqSyntaxError as e:
        _print_errors([e])
        raise typer.Exit(code=2)

    sections = count_sections(body, config=config)
    strategy = "sections" if sections else "whole body"

    table = Table(title=f"seq check: {path}")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Variable", loop.variable.text)
    table.add_row("Range", f"{loop.start}..{loop.end}")
    table.add_row("Iterations", str(loop.iterations))
    table.add_row("Sections", str(sections))
    table.add_row("Strategy", strategy)
    console.print(table)
    typer.echo(f"OK: {loop.iterations} iterations, strategy={strategy}")


@app.command("config")
def show_config(
    config_file: str | None = typer.Option(None, "--config", help="Optional YAML file overriding marker/fusion symbols"),
) -> None:
    """Show the effective marker and fusion symbols."""
    config = _load_config(config_file)
    typer.echo("Symbols:")
    typer.echo(f"- marker_open: {config.marker_open}")
    typer.echo(f"- marker_close: {config.marker_close}")
    typer.echo(f"- fusion: {config.fusion}")
    typer.echo(f"Section syntax: {config.marker_open}( ... ){config.marker_close}")


def _load_config(config_file: str | None) -> SeqConfig:
    try:
        return load_and_merge(config_file)
    except FileNotFoundError:
        _print_errors(
            [
                SeqLoadError(
                    code="E_CONFIG_FILE_NOT_FOUND",
                    message=f"config file not found: {config_file}",
                    file=config_file,
                )
            ]
        )
        raise typer.Exit(code=1)
    except OSError as e:
        _print_errors([SeqLoadError(code="E_CONFIG_FILE_READ", message=str(e), file=config_file)])
        raise typer.Exit(code=1)
    except (ConfigError, yaml.YAMLError) as e:
        _print_errors([SeqError(code="E_CONFIG_INVALID", message=str(e), file=config_file)])
        raise typer.Exit(code=2)


def _load_tokens(path: str) -> list[Node]:
    try:
        return load_invocation(path)
    except SeqLoadError as e:
        _print_errors([e])
        raise typer.Exit(code=1)
    except SeqLexError as e:
        _print_errors([e])
        raise typer.Exit(code=2)


def _enable_debug_logging() -> None:
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


def _print_errors(errors: list[SeqError]) -> None:
    errors_sorted = sorted(errors, key=lambda e: (e.file or "", e.line or 0, e.column or 0, e.code))
    for e in errors_sorted:
        typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="seq")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()

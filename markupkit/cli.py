"""CLI entry point for markupkit."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from markupkit.config import MarkupConfig, load_config
from markupkit.config.loader import DEFAULT_CONFIG_TEMPLATE
from markupkit.engine import RenderEngine, RenderRequest, create_engine
from markupkit.errors import RegistryError, UnsupportedFormat
from markupkit.log import configure_logging

app = typer.Typer(
    name="markupkit",
    help="Render Markdown, reStructuredText, AsciiDoc and friends to HTML.",
)

config_app = typer.Typer(help="Manage markupkit configuration.")
app.add_typer(config_app, name="config")

err_console = Console(stderr=True, soft_wrap=True)

# Global state
_config: MarkupConfig | None = None


def _get_config() -> MarkupConfig:
    if _config is None:
        return load_config()
    return _config


def _get_engine() -> RenderEngine:
    try:
        return create_engine(_get_config())
    except RegistryError as e:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to markupkit.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    configure_logging(_config.log_level, _config.log_format)


@app.command()
def render(
    source: str = typer.Argument(..., help="Markup file to render, or '-' for stdin"),
    output: str | None = typer.Option(None, "--output", "-o", help="Write HTML to file"),
    language: str | None = typer.Option(
        None, "--language", "-l", help="Language name or extension (overrides the filename)"
    ),
) -> None:
    """Render a markup file to HTML."""
    if source == "-":
        if language is None:
            err_console.print("[red]Error:[/red] --language is required when reading stdin")
            raise typer.Exit(2)
        content = sys.stdin.read()
    else:
        path = Path(source)
        if not path.is_file():
            err_console.print(f"[red]Error:[/red] File not found: {escape(source)}")
            raise typer.Exit(1)
        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            err_console.print(f"[red]Error:[/red] {escape(source)} is not valid UTF-8: {escape(str(e))}")
            raise typer.Exit(1)

    engine = _get_engine()
    result = engine.execute(RenderRequest(identifier=language or source, content=content))

    if not result.ok:
        err = result.error
        err_console.print(f"[red]Error \\[{err.kind}]:[/red] {escape(str(err))}")
        raise typer.Exit(2 if isinstance(err, UnsupportedFormat) else 1)

    if output:
        Path(output).write_text(result.html, encoding="utf-8")
        err_console.print(f"[green]Written to[/green] {escape(output)} ({result.language})")
    else:
        typer.echo(result.html, nl=False)


@app.command()
def languages() -> None:
    """List registered languages and whether their renderer is usable here."""
    engine = _get_engine()
    availability = engine.availability()

    table = Table(title=f"Languages ({len(availability)})")
    table.add_column("Name", style="cyan")
    table.add_column("Strategy")
    table.add_column("Identifiers", style="green")
    table.add_column("Available", justify="center")
    for d in engine.languages():
        table.add_row(
            d.name,
            d.strategy.value,
            ", ".join(d.identifiers[1:]) or "-",
            "[green]yes[/green]" if availability[d.name] else "[red]no[/red]",
        )
    rprint(table)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(mode="json"), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default markupkit.yaml in current directory."""
    target = Path("markupkit.yaml")
    if target.exists() and not force:
        rprint("[yellow]markupkit.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()

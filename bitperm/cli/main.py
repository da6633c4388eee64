"""bitperm permission management CLI."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from bitperm import __version__
from bitperm.cli.commands import mask, registry
from bitperm.cli.utils.context import CLIContext
from bitperm.cli.utils.output import OutputFormatter
from bitperm.core.config import Settings, get_settings
from bitperm.core.exceptions import BitpermError
from bitperm.core.permissions.engine import PermissionEngine, build_engine
from bitperm.core.permissions.registry import load_registry
from bitperm.infrastructure.logging import setup_logging

app = typer.Typer(
    name="bitperm",
    help="bitperm - inspect permission registries and edit permission masks",
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
    pretty_exceptions_enable=False,
)

console = Console()


def version_callback(value: bool):
    """Display version and exit."""
    if value:
        console.print(f"bitperm v{__version__}")
        raise typer.Exit()


def _load_engine(settings: Settings, registry_file: Optional[Path]) -> PermissionEngine:
    if registry_file is not None:
        return PermissionEngine(
            load_registry(registry_file, max_bits=settings.max_permission_bits)
        )
    return build_engine(settings)


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug logging on stderr",
    ),
    output_format: str = typer.Option(
        "table",
        "--output",
        "-o",
        help="Output format: table, json, yaml",
    ),
    registry_file: Optional[Path] = typer.Option(
        None,
        "--registry",
        "-R",
        help="YAML permission registry (defaults to the configured registry)",
    ),
):
    """
    bitperm CLI

    Decode, encode and edit permission masks against a permission registry.
    """
    formatter = OutputFormatter(output_format, console=console)

    try:
        settings = get_settings()
        # Command output goes to stdout; keep logs quiet unless asked for
        setup_logging(
            settings.model_copy(update={"log_level": "DEBUG" if debug else "WARNING"})
        )
        engine = _load_engine(settings, registry_file)
    except BitpermError as e:
        formatter.print_error(e.message)
        raise typer.Exit(2)

    ctx.obj = CLIContext(
        debug=debug,
        engine=engine,
        formatter=formatter,
        console=console,
    )

    if debug:
        formatter.err_console.print("[dim]Debug mode enabled[/dim]")


app.add_typer(registry.app, name="registry", help="Inspect the permission registry")
app.add_typer(mask.app, name="mask", help="Inspect and edit permission masks")


if __name__ == "__main__":
    app()

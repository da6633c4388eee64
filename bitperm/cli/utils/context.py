"""CLI context management."""

from dataclasses import dataclass

from rich.console import Console

from bitperm.cli.utils.output import OutputFormatter
from bitperm.core.permissions.engine import PermissionEngine


@dataclass
class CLIContext:
    """Context object passed through CLI commands."""

    debug: bool
    engine: PermissionEngine
    formatter: OutputFormatter
    console: Console

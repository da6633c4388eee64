"""Output formatting utilities for CLI."""

import json
from enum import Enum
from typing import Any, Dict, List, Optional

import yaml
from rich.console import Console
from rich.table import Table


class OutputFormat(Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


class OutputFormatter:
    """Handle output formatting for different formats."""

    def __init__(self, format_type: str = "table", console: Optional[Console] = None):
        """
        Initialize output formatter.

        Args:
            format_type: Output format (table, json, yaml)
            console: Console to print to, a new one when omitted
        """
        self.console = console or Console()
        self.err_console = Console(stderr=True)
        try:
            self.format = OutputFormat(format_type.lower())
        except ValueError:
            self.format = OutputFormat.TABLE

    def _print_raw(self, text: str):
        # Machine-readable output must not be wrapped or highlighted
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)

    def _dump(self, data: Any):
        if self.format == OutputFormat.JSON:
            self._print_raw(json.dumps(data, indent=2, default=str))
        else:
            self._print_raw(
                yaml.safe_dump(data, default_flow_style=False, sort_keys=False).rstrip()
            )

    def print_list(
        self,
        items: List[Dict[str, Any]],
        columns: Optional[List[str]] = None,
        title: Optional[str] = None,
    ):
        """
        Print a list of items.

        Args:
            items: List of items to print
            columns: Column names to display (for table format)
            title: Table title (for table format)
        """
        if self.format != OutputFormat.TABLE:
            self._dump(items)
            return

        if not items:
            self.console.print("[dim]No items found[/dim]")
            return

        if not columns:
            columns = list(items[0].keys())

        table = Table(title=title)
        for col in columns:
            table.add_column(col.replace("_", " ").title())

        for item in items:
            row = []
            for col in columns:
                value = item.get(col, "")
                if value is None:
                    value = "[dim]-[/dim]"
                elif isinstance(value, bool):
                    value = "[green]✓[/green]" if value else "[red]✗[/red]"
                elif isinstance(value, (list, tuple)):
                    value = ", ".join(str(v) for v in value) or "[dim]-[/dim]"
                else:
                    value = str(value)
                row.append(value)
            table.add_row(*row)

        self.console.print(table)

    def print_detail(
        self,
        item: Dict[str, Any],
        title: Optional[str] = None,
    ):
        """
        Print detailed view of a single item.

        Args:
            item: Item to print
            title: Optional title
        """
        if self.format != OutputFormat.TABLE:
            self._dump(item)
            return

        if title:
            self.console.print(f"[bold]{title}[/bold]\n")

        for key, value in item.items():
            formatted_key = key.replace("_", " ").title()

            if value is None:
                formatted_value = "[dim]Not set[/dim]"
            elif isinstance(value, bool):
                formatted_value = "[green]Yes[/green]" if value else "[red]No[/red]"
            elif isinstance(value, (list, tuple)):
                formatted_value = ", ".join(str(v) for v in value) or "[dim]None[/dim]"
            else:
                formatted_value = str(value)

            self.console.print(f"[cyan]{formatted_key}:[/cyan] {formatted_value}")

    def print_error(self, message: str):
        """Print error message."""
        self.err_console.print(f"[red]✗[/red] {message}", highlight=False)

    def print_warning(self, message: str):
        """Print warning message. Structured formats carry warnings in their payload."""
        if self.format != OutputFormat.TABLE:
            return
        self.err_console.print(f"[yellow]⚠[/yellow] {message}", highlight=False)

"""Permission registry commands."""

import typer

from bitperm.cli.utils.context import CLIContext
from bitperm.core.exceptions import PermissionNotFoundError
from bitperm.core.permissions.serialization import to_string

app = typer.Typer(help="Inspect the permission registry")


@app.command("list")
def list_permissions(ctx: typer.Context):
    """
    List every registered permission with its bit and dependencies.

    Example:
        bitperm registry list
        bitperm -o json registry list
    """
    cli_ctx: CLIContext = ctx.obj
    registry = cli_ctx.engine.registry

    items = [
        {
            "name": definition.name,
            "bit": definition.bit,
            "mask": to_string(definition.mask),
            "depends_on": sorted(definition.depends_on),
            "dependants": sorted(registry.permission_dependants(definition)),
            "description": definition.description,
        }
        for definition in registry
    ]

    cli_ctx.formatter.print_list(items, title="Permissions")


@app.command("dependants")
def show_dependants(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Permission name"),
):
    """
    Show which permissions depend on a permission.

    Example:
        bitperm registry dependants MANAGE_USERS
    """
    cli_ctx: CLIContext = ctx.obj
    registry = cli_ctx.engine.registry

    try:
        definition = registry.require(name)
    except PermissionNotFoundError as e:
        cli_ctx.formatter.print_error(e.message)
        raise typer.Exit(2)

    cli_ctx.formatter.print_detail(
        {
            "name": definition.name,
            "depends_on": sorted(definition.depends_on),
            "dependants": sorted(registry.permission_dependants(definition)),
        }
    )

"""Mask inspection and editing commands."""

from typing import List, Optional

import typer

from bitperm.cli.utils.context import CLIContext
from bitperm.core.exceptions import InvalidMaskError, PermissionNotFoundError
from bitperm.core.permissions.registry import PermissionDefinition
from bitperm.core.permissions.serialization import parse, to_string
from bitperm.core.permissions.subject import Role, Subject

app = typer.Typer(help="Inspect and edit permission masks")


def _parse_mask(cli_ctx: CLIContext, value: str) -> int:
    try:
        return parse(value)
    except InvalidMaskError as e:
        cli_ctx.formatter.print_error(e.message)
        raise typer.Exit(2)


def _require_permission(cli_ctx: CLIContext, name: str) -> PermissionDefinition:
    try:
        return cli_ctx.engine.registry.require(name)
    except PermissionNotFoundError as e:
        cli_ctx.formatter.print_error(e.message)
        raise typer.Exit(2)


def _subject(cli_ctx: CLIContext, mask: str, roles: Optional[List[str]]) -> Subject:
    return Subject(
        permissions=to_string(_parse_mask(cli_ctx, mask)),
        roles=[
            Role(name=f"role-{i}", permissions=to_string(_parse_mask(cli_ctx, r)))
            for i, r in enumerate(roles or [])
        ],
    )


@app.command("decode")
def decode_mask(
    ctx: typer.Context,
    mask: str = typer.Argument(..., help="Decimal permission mask"),
):
    """
    List the permissions held by a mask.

    Example:
        bitperm mask decode 6
    """
    cli_ctx: CLIContext = ctx.obj
    value = _parse_mask(cli_ctx, mask)

    cli_ctx.formatter.print_detail(
        {
            "mask": to_string(value),
            "permissions": cli_ctx.engine.get_permission_list(value),
        },
        title="Permission mask",
    )


@app.command("encode")
def encode_mask(
    ctx: typer.Context,
    names: List[str] = typer.Argument(..., help="Permission names"),
):
    """
    Build a mask from permission names. Unknown names are skipped.

    Example:
        bitperm mask encode MANAGE_USERS MANAGE_USERS_EXTENDED
    """
    cli_ctx: CLIContext = ctx.obj
    engine = cli_ctx.engine

    unknown = [name for name in names if engine.get_permission(name) is None]
    for name in unknown:
        cli_ctx.formatter.print_warning(f"Unknown permission skipped: {name}")

    value = engine.get_permissions(list(names))
    cli_ctx.formatter.print_detail(
        {
            "mask": to_string(value),
            "permissions": engine.get_permission_list(value),
            "unknown": unknown,
        },
        title="Permission mask",
    )


@app.command("check")
def check_mask(
    ctx: typer.Context,
    mask: str = typer.Argument(..., help="Subject's own permission mask"),
    permissions: List[str] = typer.Argument(..., help="Permissions to check"),
    match_any: bool = typer.Option(
        False, "--any", help="Succeed if any permission is held instead of all"
    ),
    role: Optional[List[str]] = typer.Option(
        None, "--role", "-r", help="Mask of an attached role (can be used multiple times)"
    ),
):
    """
    Check permissions for a subject. Exits with 1 when not granted.

    Example:
        bitperm mask check 2 MANAGE_USERS
        bitperm mask check 0 HIDE_POSTS --role 32
    """
    cli_ctx: CLIContext = ctx.obj
    for name in permissions:
        _require_permission(cli_ctx, name)

    subject = _subject(cli_ctx, mask, role)
    granted = cli_ctx.engine.has_permission(subject, list(permissions), match_any=match_any)

    cli_ctx.formatter.print_detail(
        {
            "effective_mask": to_string(cli_ctx.engine.get_permissions(subject)),
            "requested": list(permissions),
            "match": "any" if match_any else "all",
            "granted": granted,
        }
    )
    if not granted:
        raise typer.Exit(1)


@app.command("add")
def add_to_mask(
    ctx: typer.Context,
    mask: str = typer.Argument(..., help="Subject's own permission mask"),
    permission: str = typer.Argument(..., help="Permission to add"),
):
    """
    Add a permission to a mask.

    Example:
        bitperm mask add 2 MANAGE_USERS_EXTENDED
    """
    cli_ctx: CLIContext = ctx.obj
    definition = _require_permission(cli_ctx, permission)
    subject = _subject(cli_ctx, mask, None)

    new_mask = cli_ctx.engine.add_permission(subject, definition)
    cli_ctx.formatter.print_detail(
        {
            "mask": to_string(new_mask),
            "changed": new_mask != parse(subject.permissions),
            "permissions": cli_ctx.engine.get_permission_list(new_mask),
        }
    )


@app.command("remove")
def remove_from_mask(
    ctx: typer.Context,
    mask: str = typer.Argument(..., help="Subject's own permission mask"),
    permission: str = typer.Argument(..., help="Permission to remove"),
    role: Optional[List[str]] = typer.Option(
        None, "--role", "-r", help="Mask of an attached role (can be used multiple times)"
    ),
):
    """
    Remove a permission from a mask unless a held permission depends on it.

    Example:
        bitperm mask remove 6 MANAGE_USERS_EXTENDED
    """
    cli_ctx: CLIContext = ctx.obj
    engine = cli_ctx.engine
    definition = _require_permission(cli_ctx, permission)
    subject = _subject(cli_ctx, mask, role)

    blockers = engine.removal_blockers(subject, definition)
    new_mask = engine.remove_permission(subject, definition)

    if blockers:
        cli_ctx.formatter.print_warning(
            f"{definition.name} is required by {', '.join(blockers)}; mask unchanged"
        )

    cli_ctx.formatter.print_detail(
        {
            "mask": to_string(new_mask),
            "changed": new_mask != parse(subject.permissions),
            "blocked_by": blockers,
            "permissions": engine.get_permission_list(new_mask),
        }
    )

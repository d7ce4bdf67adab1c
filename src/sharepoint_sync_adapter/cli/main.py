"""
Typer application exposing the list adapter operations on the command line.

Every command builds one adapter from the loaded settings, runs a single
operation through it and prints the result as JSON. Adapter failures are
reported on stderr with exit code 1.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional

import anyio
import typer

from ..adapters import AdapterError, ConfigurationError, ItemRequest, SharePointListAdapter
from ..config import SettingsBundle, load_settings
from ..core.logging import configure_logging
from .factory import build_adapter

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Create, read, update, delete and list items of a SharePoint list.\n\n"
        "Credentials and the target list come from the settings file; --list-id and --list-title override the latter."
    ),
)


def _render(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2, default=str)


def _parse_item_id(value: str) -> Any:
    stripped = value.strip()
    return int(stripped) if stripped.isdigit() else stripped


def _parse_data(raw: str) -> Dict[str, Any]:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"--data must be a JSON object: {exc}") from exc
    if not isinstance(payload, dict):
        raise typer.BadParameter("--data must be a JSON object.")
    return payload


@app.callback(invoke_without_command=False)
def main(
    ctx: typer.Context,
    secrets_file: Optional[Path] = typer.Option(
        None,
        "--secrets",
        "-s",
        help="Settings TOML file. Defaults to SHAREPOINT_SYNC_SECRETS_PATH or .secrets/secret.toml.",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    list_id: Optional[str] = typer.Option(None, "--list-id", help="SharePoint list GUID."),
    list_title: Optional[str] = typer.Option(None, "--list-title", help="SharePoint list Title."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level, e.g. DEBUG or INFO."),
) -> None:
    """
    Configure logging and load settings.

    The callback stores the settings and list overrides in Typer's state so
    child commands can build their adapter via :class:`typer.Context`.
    """

    configure_logging(log_level, force=log_level is not None)
    state = ctx.ensure_object(dict)
    state["settings"] = load_settings(path=secrets_file)
    state["list_id"] = list_id
    state["list_title"] = list_title


def _require_adapter(ctx: typer.Context) -> SharePointListAdapter:
    state = ctx.ensure_object(dict)
    settings = state.get("settings")
    if not isinstance(settings, SettingsBundle):
        raise typer.Exit(code=2)
    try:
        return build_adapter(settings, list_id=state.get("list_id"), list_title=state.get("list_title"))
    except ConfigurationError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2) from exc


def _execute(ctx: typer.Context, operation: Callable[[SharePointListAdapter], Awaitable[Any]]) -> Any:
    adapter = _require_adapter(ctx)

    async def _run() -> Any:
        async with adapter:
            return await operation(adapter)

    try:
        return anyio.run(_run)
    except AdapterError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc


@app.command("verify")
def verify(ctx: typer.Context) -> None:
    """Log in and read the configured list."""

    result = _execute(ctx, lambda adapter: adapter.verify())
    typer.echo(result.message)
    if result.details:
        typer.echo(_render(dict(result.details)))
    if not result.success:
        raise typer.Exit(code=1)


@app.command("create")
def create(
    ctx: typer.Context,
    data: str = typer.Option(..., "--data", "-d", help="Item fields as a JSON object."),
) -> None:
    """Create an item and print ``{"uid", "data"}``."""

    fields = _parse_data(data)
    result = _execute(ctx, lambda adapter: adapter.create(ItemRequest(data=fields)))
    typer.echo(_render(result.as_dict()))


@app.command("read")
def read(
    ctx: typer.Context,
    item_id: str = typer.Argument(..., help="Identifier of the item."),
) -> None:
    """Print a single item."""

    result = _execute(ctx, lambda adapter: adapter.read(ItemRequest(id=_parse_item_id(item_id))))
    typer.echo(_render(result))


@app.command("update")
def update(
    ctx: typer.Context,
    item_id: str = typer.Argument(..., help="Identifier of the item."),
    data: str = typer.Option(..., "--data", "-d", help="Fields to change as a JSON object."),
) -> None:
    """Update an item and print the stored record."""

    fields = _parse_data(data)
    result = _execute(ctx, lambda adapter: adapter.update(ItemRequest(id=_parse_item_id(item_id), data=fields)))
    typer.echo(_render(result))


@app.command("delete")
def delete(
    ctx: typer.Context,
    item_id: str = typer.Argument(..., help="Identifier of the item."),
) -> None:
    """Delete an item and print its content as it was before deletion."""

    result = _execute(ctx, lambda adapter: adapter.delete(ItemRequest(id=_parse_item_id(item_id))))
    typer.echo(_render(result))


@app.command("list")
def list_items(ctx: typer.Context) -> None:
    """Print every item of the list keyed by item id."""

    result = _execute(ctx, lambda adapter: adapter.list(ItemRequest()))
    typer.echo(_render(result))


if __name__ == "__main__":  # pragma: no cover
    app()

"""
Trashed CLI - Records list and inspection commands.

List TrashedResources and show the manifest a record holds.
"""

import json
from datetime import timedelta
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from trashed.cli.common import build_service, resolve_namespace
from trashed.cli.errors import (
    ExitCode,
    print_error,
    print_incompatible_flags_error,
    print_record_not_found_error,
)
from trashed.core.config.loader import load_config
from trashed.core.errors import InvalidNameError, NotFoundError, StoreError
from trashed.core.records.models import RetainedRecord
from trashed.core.retention.calculator import time_remaining
from trashed.utils.timestamps import format_rfc3339, utc_now

console = Console()
app = typer.Typer(help="List and inspect TrashedResources")


@app.callback(invoke_without_command=True)
def list_records(
    ctx: typer.Context,
    namespace: str | None = typer.Option(
        None,
        "--namespace",
        "-n",
        help="Namespace to list (defaults to the configured namespace)",
    ),
    all_namespaces: bool = typer.Option(
        False,
        "--all-namespaces",
        "-A",
        help="List records in every namespace",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON",
    ),
) -> None:
    """
    List TrashedResources, newest first.

    Examples:
        trashed records -n ns1
        trashed records -A --json
    """
    # If a subcommand was invoked, don't run the default callback
    if ctx.invoked_subcommand is not None:
        return

    if all_namespaces and namespace is not None:
        print_incompatible_flags_error("--all-namespaces", "--namespace")
        raise typer.Exit(ExitCode.USER_ERROR)

    config = load_config()
    ns = resolve_namespace(namespace, all_namespaces, config)
    service = build_service(config)

    try:
        records = service.list_records(namespace=ns)
    except InvalidNameError as e:
        print_error(str(e))
        raise typer.Exit(ExitCode.USER_ERROR)
    except StoreError as e:
        print_error("Failed to list TrashedResources", reason=str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if json_output:
        typer.echo(json.dumps([_record_to_dict(r) for r in records], indent=2))
        return

    if not records:
        where = "any namespace" if ns is None else f"namespace {ns}"
        console.print(f"[yellow]No TrashedResources found in {where}.[/yellow]")
        return

    now = utc_now()
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Name", overflow="fold")
    if ns is None:
        table.add_column("Namespace")
    table.add_column("Original")
    table.add_column("Created")
    table.add_column("Keep Until")
    table.add_column("Remaining", justify="right")

    for record in records:
        source = record.source_ref()
        row = [record.name]
        if ns is None:
            row.append(record.namespace or "[dim]-[/dim]")
        row.extend(
            [
                f"{source.kind}/{source.name}" if source else "[dim]?[/dim]",
                format_rfc3339(record.created_at) if record.created_at else "[dim]-[/dim]",
                record.keep_until or "[dim]-[/dim]",
                _format_remaining(time_remaining(record.keep_until, now)),
            ]
        )
        table.add_row(*row)

    console.print(table)


@app.command()
def show(
    name: str = typer.Argument(..., help="Name of the TrashedResource"),
    namespace: str | None = typer.Option(
        None,
        "--namespace",
        "-n",
        help="Namespace of the TrashedResource (defaults to the configured namespace)",
    ),
) -> None:
    """
    Show a TrashedResource and the manifest it holds.

    Examples:
        trashed records show trashed-delete-secret-db-x7k2p -n ns1
    """
    config = load_config()
    ns = namespace if namespace is not None else config.namespace
    service = build_service(config)

    try:
        record = service.get_record(name, ns)
    except InvalidNameError as e:
        print_error(str(e))
        raise typer.Exit(ExitCode.USER_ERROR)
    except NotFoundError:
        print_record_not_found_error(name, ns)
        raise typer.Exit(ExitCode.USER_ERROR)
    except StoreError as e:
        print_error(f"Failed to read {name}", reason=str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    console.print(f"[bold]Name:[/bold] {record.name}")
    if record.namespace:
        console.print(f"[bold]Namespace:[/bold] {record.namespace}")
    if record.created_at:
        console.print(f"[bold]Created:[/bold] {format_rfc3339(record.created_at)}")
    console.print(f"[bold]Keep Until:[/bold] {record.keep_until or '-'}")
    console.print()
    typer.echo(record.manifest)


def _record_to_dict(record: RetainedRecord) -> dict[str, Any]:
    source = record.source_ref()
    return {
        "name": record.name,
        "namespace": record.namespace,
        "created_at": format_rfc3339(record.created_at) if record.created_at else None,
        "keep_until": record.keep_until,
        "original": (
            {"kind": source.kind, "name": source.name, "namespace": source.namespace}
            if source
            else None
        ),
    }


def _format_remaining(remaining: timedelta) -> str:
    """Format time left as e.g. '1h 5m', or 'expired'."""
    if remaining <= timedelta(0):
        return "[red]expired[/red]"
    total_minutes = int(remaining.total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    if hours >= 24:
        days, hours = divmod(hours, 24)
        return f"{days}d {hours}h"
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"

"""
Trashed CLI - Prune command.

Deletes TrashedResources by age, by exact name, or once their keepUntil
deadline has passed.
"""

import typer
from rich.console import Console

from trashed.cli.common import build_service, resolve_namespace
from trashed.cli.errors import ExitCode, print_error, print_incompatible_flags_error
from trashed.core.config.loader import load_config
from trashed.core.errors import ConfigInvalidError, StoreError
from trashed.core.prune.duration import parse_duration
from trashed.core.prune.engine import PruneResult

console = Console()


def prune(
    older_than: str | None = typer.Option(
        None,
        "--older-than",
        help="Delete records older than this duration (e.g. 14m, 11h, 24h, 1d)",
    ),
    name: str | None = typer.Option(
        None,
        "--name",
        help="Delete records with exactly this name",
    ),
    expired: bool = typer.Option(
        False,
        "--expired",
        help="Delete records whose keepUntil deadline has passed",
    ),
    namespace: str | None = typer.Option(
        None,
        "--namespace",
        "-n",
        help="Namespace to prune (defaults to the configured namespace)",
    ),
    all_namespaces: bool = typer.Option(
        False,
        "--all-namespaces",
        "-A",
        help="Prune records in every namespace",
    ),
) -> None:
    """
    Delete TrashedResources.

    At least one of --older-than, --name or --expired is required. With
    --name alone every record of that name is deleted regardless of age.

    Examples:
        trashed prune --older-than 24h -n ns1
        trashed prune --name trashed-delete-secret-db-x7k2p -n ns1
        trashed prune --older-than 1d -A
        trashed prune --expired -A
    """
    if expired and (older_than or name):
        print_incompatible_flags_error(
            "--expired",
            "--older-than/--name",
            reason="--expired selects records by their keepUntil deadline only",
        )
        raise typer.Exit(ExitCode.USER_ERROR)
    if all_namespaces and namespace is not None:
        print_incompatible_flags_error("--all-namespaces", "--namespace")
        raise typer.Exit(ExitCode.USER_ERROR)

    config = load_config()
    ns = resolve_namespace(namespace, all_namespaces, config)
    service = build_service(config)

    try:
        if expired:
            result = service.prune_expired(namespace=ns)
        else:
            age = parse_duration(older_than) if older_than else None
            result = service.prune(namespace=ns, older_than=age, name=name)
    except ConfigInvalidError as e:
        print_error(str(e), solution="trashed prune --older-than 24h  # or --name NAME")
        raise typer.Exit(ExitCode.USER_ERROR)
    except StoreError as e:
        print_error("Failed to list TrashedResources", reason=str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    _print_result(result)


def _print_result(result: PruneResult) -> None:
    for key in result.deleted:
        console.print(f"[dim]deleted[/dim] {key}")
    for key in result.failed:
        console.print(f"[yellow]Warning:[/yellow] failed to delete {key}")

    console.print(f"Total deleted: {result.deleted_count}")

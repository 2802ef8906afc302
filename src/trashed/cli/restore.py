"""
Trashed CLI - Restore command.

Re-creates a deleted object from its TrashedResource and removes the record.
"""

import typer
from rich.console import Console

from trashed.cli.common import build_service
from trashed.cli.errors import ExitCode, print_error, print_record_not_found_error
from trashed.core.config.loader import load_config
from trashed.core.errors import (
    AlreadyExistsError,
    CorruptManifestError,
    InvalidNameError,
    NotFoundError,
    StoreError,
)
from trashed.core.records.models import RECORD_KIND

console = Console()


def restore(
    name: str = typer.Argument(..., help="Name of the TrashedResource to restore"),
    namespace: str | None = typer.Option(
        None,
        "--namespace",
        "-n",
        help="Namespace of the TrashedResource (defaults to the configured namespace)",
    ),
) -> None:
    """
    Restore a deleted resource from a TrashedResource.

    The original object is re-created without its old uid and
    resourceVersion; the record is deleted afterwards.

    Examples:
        trashed restore trashed-delete-deployment-myapp-x7k2p -n ns1
    """
    config = load_config()
    ns = namespace if namespace is not None else config.namespace
    service = build_service(config)

    try:
        result = service.restore(name, ns)
    except InvalidNameError as e:
        print_error(f"Failed to restore {name}", reason=str(e))
        raise typer.Exit(ExitCode.USER_ERROR)
    except NotFoundError as e:
        if e.kind == RECORD_KIND:
            print_record_not_found_error(name, ns)
        else:
            print_error(f"Failed to restore {name}", reason=str(e))
        raise typer.Exit(ExitCode.USER_ERROR)
    except AlreadyExistsError as e:
        print_error(
            f"Failed to restore {name}",
            reason=f"{e}. The TrashedResource was kept.",
            solution=f"delete the existing object first, then: trashed restore {name} -n {ns}",
        )
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except CorruptManifestError as e:
        print_error(
            f"Failed to restore {name}",
            reason=f"The stored manifest cannot be decoded: {e}",
            solution=f"trashed records show {name} -n {ns}",
        )
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except StoreError as e:
        print_error(f"Failed to restore {name}", reason=str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    console.print(f"[green]Restored[/green] {result.restored}")
    if result.warning:
        console.print(f"[yellow]Warning:[/yellow] {result.warning}")

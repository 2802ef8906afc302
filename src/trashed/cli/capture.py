"""
Trashed CLI - Capture and delete commands.

``capture`` turns manifests into TrashedResources as if their objects had
just been deleted. ``delete`` removes a live object from the object store
and hands the deletion to the capture controller.
"""

import sys
from typing import Any

import typer
import yaml
from rich.console import Console

from trashed.cli.common import build_service
from trashed.cli.errors import ExitCode, print_error
from trashed.core.capture.pipeline import CaptureOutcome, CaptureResult
from trashed.core.config.loader import load_config
from trashed.core.errors import InvalidNameError, NotFoundError, StoreError
from trashed.core.kinds.registry import DEFAULT_REGISTRY

console = Console()


def _read_documents(file: str) -> list[dict[str, Any]]:
    """
    Read YAML/JSON documents from a file or stdin.

    ``kind: List`` documents are flattened into their items.

    Raises:
        typer.Exit: If the input cannot be read or parsed
    """
    try:
        if file == "-":
            text = sys.stdin.read()
        else:
            with open(file, encoding="utf-8") as f:
                text = f.read()
        loaded = list(yaml.safe_load_all(text))
    except (OSError, yaml.YAMLError) as e:
        print_error(f"Cannot read manifests from {file}", reason=str(e))
        raise typer.Exit(ExitCode.USER_ERROR)

    documents: list[dict[str, Any]] = []
    for doc in loaded:
        if doc is None:
            continue
        if not isinstance(doc, dict):
            print_error(f"Not an object manifest in {file}", reason=f"got {type(doc).__name__}")
            raise typer.Exit(ExitCode.USER_ERROR)
        if doc.get("kind") == "List" and isinstance(doc.get("items"), list):
            documents.extend(item for item in doc["items"] if isinstance(item, dict))
        else:
            documents.append(doc)
    return documents


def _print_outcome(label: str, result: CaptureResult | None) -> None:
    if result is None:
        console.print(f"[dim]{label}: kind is not watched, nothing captured[/dim]")
        return

    if result.outcome == CaptureOutcome.CAPTURED and result.record is not None:
        ns = f" -n {result.record.namespace}" if result.record.namespace else ""
        console.print(f"[green]Captured[/green] {label} as {result.record.name}{ns}")
        console.print(f"[dim]Keep until: {result.record.keep_until}[/dim]")
    elif result.outcome == CaptureOutcome.DUPLICATE and result.record is not None:
        console.print(f"[yellow]Already captured[/yellow] {label} as {result.record.name}")
    elif result.outcome == CaptureOutcome.SKIPPED:
        console.print(f"[dim]{label}: skipped ({result.reason})[/dim]")
    else:
        console.print(f"[red]Failed[/red] to capture {label}: {result.reason}")


def capture(
    file: str = typer.Option(
        ...,
        "--filename",
        "-f",
        help="Manifest file to capture ('-' reads stdin)",
    ),
) -> None:
    """
    Capture manifests as TrashedResources.

    Each document is treated as a deletion event for its object. Kinds that
    are not in the current watch set are ignored.

    Examples:
        trashed capture -f deployment.yaml
        kubectl get cm app-cfg -n ns1 -o yaml | trashed capture -f -
    """
    documents = _read_documents(file)
    if not documents:
        console.print("[yellow]No manifests found.[/yellow]")
        return

    service = build_service()
    failed = 0
    for doc in documents:
        result = service.capture(doc)
        kind = doc.get("kind") or "?"
        name = (doc.get("metadata") or {}).get("name") or "?"
        _print_outcome(f"{kind}/{name}", result)
        if result is not None and result.outcome == CaptureOutcome.FAILED:
            failed += 1

    if failed:
        raise typer.Exit(ExitCode.GENERAL_ERROR)


def delete(
    kind: str = typer.Argument(..., help="Kind of the object (e.g. configmap, Deployment)"),
    name: str = typer.Argument(..., help="Name of the object"),
    namespace: str | None = typer.Option(
        None,
        "--namespace",
        "-n",
        help="Namespace of the object (defaults to the configured namespace)",
    ),
) -> None:
    """
    Delete an object and capture it if its kind is watched.

    Examples:
        trashed delete configmap app-cfg -n ns1
    """
    config = load_config()
    ns = namespace if namespace is not None else config.namespace
    resolved_kind = DEFAULT_REGISTRY.canonical_kind(kind) or kind
    service = build_service(config)

    try:
        result = service.delete_object(resolved_kind, name, ns)
    except InvalidNameError as e:
        print_error(f"Cannot delete {resolved_kind.lower()}/{name}", reason=str(e))
        raise typer.Exit(ExitCode.USER_ERROR)
    except NotFoundError as e:
        print_error(f"Cannot delete {resolved_kind.lower()}/{name}", reason=str(e))
        raise typer.Exit(ExitCode.USER_ERROR)
    except StoreError as e:
        print_error(f"Cannot delete {resolved_kind.lower()}/{name}", reason=str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    console.print(f"{resolved_kind.lower()}/{name} deleted")
    _print_outcome(f"{resolved_kind}/{name}", result)

"""
Trashed CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands. The same
entry point is installed as ``trashed`` and as the kubectl plugin
``kubectl-trashedresources``.
"""

import typer
from rich.console import Console
from rich.table import Table

from trashed import __version__
from trashed.cli import capture, prune, records, restore
from trashed.cli.common import build_service, setup_logging
from trashed.core.kinds.registry import DEFAULT_REGISTRY

# Help panel names for command grouping
PANEL_RECORDS = "Manage TrashedResources"
PANEL_CLUSTER = "Work with Live Objects"
PANEL_INSTALL = "About"

app = typer.Typer(
    name="trashed",
    help="Trash bin for cluster resources",
    no_args_is_help=True,
    add_completion=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    Trashed Resources - restore or prune deleted cluster resources.

    Deletions of watched kinds (Deployment, Secret and ConfigMap by default)
    are kept as TrashedResources until their keepUntil deadline.

    Common Workflows:
        trashed records -n ns1                     # What was deleted
        trashed restore NAME -n ns1                # Bring it back
        trashed prune --older-than 24h -A          # Clean up old records
        trashed prune --expired -A                 # Clean up expired records
    """
    setup_logging(debug)

    ctx.obj = {"debug": debug}


# =============================================================================
# Manage TrashedResources
# =============================================================================

app.command(name="restore", rich_help_panel=PANEL_RECORDS)(restore.restore)
app.command(name="prune", rich_help_panel=PANEL_RECORDS)(prune.prune)
app.add_typer(records.app, name="records", rich_help_panel=PANEL_RECORDS)


# =============================================================================
# Work with Live Objects
# =============================================================================

app.command(name="capture", rich_help_panel=PANEL_CLUSTER)(capture.capture)
app.command(name="delete", rich_help_panel=PANEL_CLUSTER)(capture.delete)


@app.command(rich_help_panel=PANEL_CLUSTER)
def kinds() -> None:
    """Show supported kinds and which of them are currently watched."""
    watched = {w.kind for w in build_service().watch_set()}

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Kind")
    table.add_column("API Version")
    table.add_column("Watched", justify="center")

    for kind, gv in DEFAULT_REGISTRY.items():
        table.add_row(kind, gv.api_version, "[green]yes[/green]" if kind in watched else "[dim]no[/dim]")

    console.print(table)


# =============================================================================
# About
# =============================================================================


@app.command(rich_help_panel=PANEL_INSTALL)
def version() -> None:
    """Show trashed version and exit."""
    console.print(f"trashed version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]

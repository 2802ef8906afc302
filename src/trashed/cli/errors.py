"""
Standardized error handling and exit codes for the trashed CLI.

This module provides consistent error messaging with actionable guidance
and standardized exit codes across all CLI commands.
"""

from enum import IntEnum

from rich.console import Console

console = Console()


class ExitCode(IntEnum):
    """Standard exit codes for trashed CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """A store or cluster operation failed."""

    USER_ERROR = 2
    """Invalid flags or input, or a record/object that does not exist."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "TrashedResource not found: trashed-delete-secret-db-x7k2p",
        ...     reason="The record may have been restored or pruned",
        ...     solution="trashed records -n ns1",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def print_record_not_found_error(name: str, namespace: str) -> None:
    """Print error when a retained record does not exist."""
    location = f"namespace {namespace}" if namespace else "cluster scope"
    print_error(
        f"TrashedResource not found: {name} ({location})",
        reason="The record may have been restored or pruned already",
        solution=f"trashed records -n {namespace}" if namespace else "trashed records -A",
    )


def print_incompatible_flags_error(flag1: str, flag2: str, reason: str | None = None) -> None:
    """Print error when incompatible CLI flags are used together."""
    problem = f"Cannot use {flag1} with {flag2}"

    if reason:
        print_error(problem, reason=reason)
    else:
        print_error(problem, solution=f"Remove one of the flags: {flag1} or {flag2}")


__all__ = [
    "ExitCode",
    "print_error",
    "print_incompatible_flags_error",
    "print_record_not_found_error",
]

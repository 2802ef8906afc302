"""Helpers shared by CLI commands."""

import logging
import sys

from trashed.core.config.loader import load_config
from trashed.core.config.models import TrashedConfig
from trashed.core.services.trash import TrashService


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for all commands.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def build_service(config: TrashedConfig | None = None) -> TrashService:
    """Build the service from the loaded (or given) configuration."""
    if config is None:
        config = load_config()
    return TrashService.from_config(config)


def resolve_namespace(
    namespace: str | None,
    all_namespaces: bool,
    config: TrashedConfig,
) -> str | None:
    """
    Pick the namespace a command operates on.

    Returns:
        None for all namespaces, otherwise the given or configured namespace
    """
    if all_namespaces:
        return None
    if namespace is not None:
        return namespace
    return config.namespace

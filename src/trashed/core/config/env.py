"""
TRASHED_* settings from .env files.

Overrides come from three places, highest precedence first:

    1. the process environment
    2. project env files (.env, then .env.local, in the project directory)
    3. the user env file ($XDG_CONFIG_HOME/trashed/.env)

Only ``TRASHED_*`` keys are read. The files are parsed with python-dotenv and
fed to ``apply_env_overrides``; the process environment itself is never
modified.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

ENV_PREFIX = "TRASHED_"
PROJECT_ENV_FILES = (".env", ".env.local")


def get_user_env_path() -> Path:
    xdg_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(xdg_home) / "trashed" / ".env"


def get_project_env_paths(project_dir: Path | None = None) -> list[Path]:
    base = project_dir if project_dir is not None else Path.cwd()
    return [base / filename for filename in PROJECT_ENV_FILES]


def read_env_file(path: Path) -> dict[str, str]:
    """
    Read the TRASHED_* assignments of one env file.

    Keys without a value (a bare ``TRASHED_KINDS`` line) are skipped.

    Returns:
        Mapping of key to value, empty if the file does not exist
    """
    if not path.is_file():
        return {}
    values = {
        key: value
        for key, value in dotenv_values(path).items()
        if key.startswith(ENV_PREFIX) and value is not None
    }
    if values:
        logger.debug("Read %s from %s", ", ".join(sorted(values)), path)
    return values


def load_env_layers(
    project_dir: Path | None = None,
    user_env_path: Path | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> dict[str, str]:
    """
    Merge TRASHED_* values from env files and the process environment.

    Args:
        project_dir: Directory holding the project env files (defaults to cwd)
        user_env_path: Explicit user env file
        project_env_paths: Explicit project env files, lowest precedence first

    Returns:
        Effective TRASHED_* settings
    """
    if user_env_path is None:
        user_env_path = get_user_env_path()
    if project_env_paths is None:
        project_env_paths = get_project_env_paths(project_dir)

    values = read_env_file(user_env_path)
    for path in project_env_paths:
        values.update(read_env_file(path))
    values.update({k: v for k, v in os.environ.items() if k.startswith(ENV_PREFIX)})
    return values

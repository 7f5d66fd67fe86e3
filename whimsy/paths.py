"""Path utilities for locating a whimsy project and its files."""
from __future__ import annotations

from pathlib import Path
from typing import Optional


WHIMSY_DIRNAME = ".whimsy"
CONFIG_FILENAME = "config"
DB_FILENAME = "whimsy.db"
DEFAULT_MANIFEST = "whimsy.yaml"


def find_project_root(start_path: Optional[Path] = None) -> Optional[Path]:
    """Walk up from ``start_path`` to the nearest directory holding ``.whimsy/``.

    Args:
        start_path: Starting directory (defaults to current working directory)

    Returns:
        The project root, or None when no ancestor is a whimsy project

    Example:
        >>> # From PROJECT/infra/envs, finds PROJECT
        >>> find_project_root()
        PosixPath('/path/to/PROJECT')
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()
    for parent in [current] + list(current.parents):
        if (parent / WHIMSY_DIRNAME).is_dir():
            return parent
    return None


def get_project_dir(start_path: Optional[Path] = None) -> Optional[Path]:
    """The ``.whimsy`` directory of the enclosing project, if any"""
    root = find_project_root(start_path)
    if root:
        return root / WHIMSY_DIRNAME
    return None


def get_project_config_path(start_path: Optional[Path] = None) -> Optional[Path]:
    """Path to ``.whimsy/config``, or None outside a project"""
    project_dir = get_project_dir(start_path)
    if project_dir:
        return project_dir / CONFIG_FILENAME
    return None


def get_project_db_path(start_path: Optional[Path] = None) -> Optional[Path]:
    """Path to ``.whimsy/whimsy.db``, or None outside a project"""
    project_dir = get_project_dir(start_path)
    if project_dir:
        return project_dir / DB_FILENAME
    return None


def ensure_in_project(start_path: Optional[Path] = None) -> Path:
    """Return the project root.

    Raises:
        RuntimeError: If not inside a whimsy project
    """
    root = find_project_root(start_path)
    if not root:
        raise RuntimeError(
            "Not in a whimsy project. Run 'whimsy init' to initialize, "
            "or navigate to a directory within a whimsy project."
        )
    return root

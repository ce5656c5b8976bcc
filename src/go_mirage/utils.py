"""
Utility functions for module discovery and path checks.
"""

from __future__ import annotations

from pathlib import Path


def find_module_root(start_path: Path | None = None) -> Path | None:
    """
    Find the Go module root by searching for go.mod in parent directories.

    Starts from the given path (or current directory) and walks up the directory
    tree until it finds a directory containing go.mod.

    Args:
        start_path: Starting directory for the search (default: current directory)

    Returns:
        Path to the module root directory, or None if not found
    """
    if start_path is None:
        start_path = Path.cwd()

    current = Path(start_path).resolve()

    # Walk up the directory tree
    while current != current.parent:
        if file_exists(current / "go.mod"):
            return current
        current = current.parent

    # Check the root directory itself
    if file_exists(current / "go.mod"):
        return current

    return None


def file_exists(path: Path) -> bool:
    """Return True if `path` is an existing regular file."""
    try:
        return path.is_file()
    except OSError:
        return False


def is_go_package_directory(path: Path) -> bool:
    """
    Check if a directory contains Go source files.

    Args:
        path: Directory to check

    Returns:
        True if the directory contains at least one .go file
    """
    if not path.exists() or not path.is_dir():
        return False

    return any(child.is_file() for child in path.glob("*.go"))

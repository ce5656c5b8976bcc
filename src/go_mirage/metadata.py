"""
Package and module metadata collection.

The planner only talks to a MetadataProvider. GoListMetadataProvider is the
implementation backed by the Go toolchain; tests substitute in-memory ones.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .errors import CommandError, MetadataError
from .toolchain import GoToolchain
from .types import PackageInfo


class MetadataProvider(Protocol):
    """Source of package and module metadata."""

    def get_package_info(self, directory: Path) -> PackageInfo:
        """Return metadata for the package in a directory, or raise MetadataError."""
        ...

    def get_module_path(self, directory: Path) -> str:
        """Return the path of the module containing a directory, or raise MetadataError."""
        ...


class GoListMetadataProvider:
    """
    Collects metadata with `go list -json` and `go mod edit -json`.

    Attributes:
        toolchain: GoToolchain used to run the commands
    """

    def __init__(self, toolchain: GoToolchain | None = None) -> None:
        self.toolchain = toolchain or GoToolchain()

    def get_package_info(self, directory: Path) -> PackageInfo:
        if not directory.is_dir():
            raise MetadataError(f"package directory not found: {directory}", directory=directory)

        try:
            data = self.toolchain.list_package(directory)
        except CommandError as e:
            raise MetadataError(
                f"failed to list package in {directory}: {e}", directory=directory
            ) from e

        if not isinstance(data, dict):
            raise MetadataError(
                f"unexpected package info for {directory}: expected a JSON object",
                directory=directory,
            )

        package_error = data.get("Error")
        if package_error:
            detail = package_error.get("Err") if isinstance(package_error, dict) else package_error
            raise MetadataError(
                f"package in {directory} has errors: {detail}",
                directory=directory,
                import_path=data.get("ImportPath"),
            )

        try:
            return PackageInfo.from_go_list(data)
        except (KeyError, TypeError) as e:
            raise MetadataError(
                f"incomplete package info for {directory}: missing {e}", directory=directory
            ) from e

    def get_module_path(self, directory: Path) -> str:
        try:
            data = self.toolchain.mod_edit_json(directory)
        except CommandError as e:
            raise MetadataError(
                f"failed to read module in {directory}: {e}", directory=directory
            ) from e

        module_path = (data.get("Module") or {}).get("Path") if isinstance(data, dict) else None
        if not module_path:
            raise MetadataError(
                f"go.mod in {directory} declares no module path", directory=directory
            )
        return module_path

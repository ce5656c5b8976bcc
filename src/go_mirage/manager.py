"""
Extraction management functionality.

This module provides the MirrorManager class which orchestrates the whole
run: resolving the destination module, planning the dependency closure and
executing the copy plan.
"""

from __future__ import annotations

import sys
from pathlib import Path

from .config import MirageOptions, resolve_destination_module
from .executor import CopyExecutor
from .metadata import GoListMetadataProvider, MetadataProvider
from .planner import ClosurePlanner
from .rewriter import GoImportsFormatter
from .toolchain import GoToolchain
from .types import CopyPlan
from .utils import is_go_package_directory


class MirrorManager:
    """
    Manages the extraction of a package into a destination module.

    This is the main class for using the package. It coordinates metadata
    collection, closure planning and copying.

    Attributes:
        src_dir: Directory of the entry package
        dst_dir: Destination root directory
        options: Run options
        toolchain: GoToolchain used for every external command
        provider: Metadata provider used by the planner
    """

    def __init__(
        self,
        src_dir: Path,
        dst_dir: Path,
        options: MirageOptions | None = None,
        provider: MetadataProvider | None = None,
        toolchain: GoToolchain | None = None,
    ) -> None:
        """
        Initialize the manager.

        Args:
            src_dir: Directory of the entry package
            dst_dir: Destination root directory
            options: Run options (defaults apply when None)
            provider: Metadata provider (default: `go list` through the toolchain)
            toolchain: Toolchain (default: built from the options' command names)

        Raises:
            ValueError: If the source directory does not exist or is not a directory
        """
        self.options = options or MirageOptions()
        self.src_dir = Path(src_dir).resolve()
        self.dst_dir = Path(dst_dir).resolve()

        if not self.src_dir.exists():
            raise ValueError(f"Source directory not found: {self.src_dir}")

        if not self.src_dir.is_dir():
            raise ValueError(f"Source path is not a directory: {self.src_dir}")

        if self.dst_dir == self.src_dir or self.src_dir.is_relative_to(self.dst_dir):
            raise ValueError(
                f"Destination {self.dst_dir} must not contain the source package {self.src_dir}"
            )

        if not is_go_package_directory(self.src_dir):
            print(
                f"Warning: no Go source files found in {self.src_dir}",
                file=sys.stderr,
            )

        self.toolchain = toolchain or GoToolchain(
            go_command=self.options.go_command,
            goimports_command=self.options.goimports_command,
        )
        self.provider = provider or GoListMetadataProvider(self.toolchain)

    def prepare(self) -> CopyPlan:
        """
        Compute the copy plan without touching the destination.

        Returns:
            The CopyPlan for this run

        Raises:
            ConfigError: If no destination module is available
            MetadataError: If package metadata cannot be fetched
            PlanningInvariantError: If the plan would be ambiguous
        """
        print("Building work...")
        dst_module = resolve_destination_module(self.dst_dir, self.options, self.provider)
        planner = ClosurePlanner(self.provider, include_tests=self.options.include_tests)
        plan = planner.plan(self.src_dir, self.dst_dir, dst_module)
        print(
            f"Planned {len(plan.substitutions)} package(s) and "
            f"{len(plan.file_copies)} file(s) for module {dst_module}"
        )
        return plan

    def execute(self, plan: CopyPlan) -> None:
        """Materialize a previously prepared plan."""
        formatter = None
        if self.options.goimports_command:
            local_module = plan.dst_module if self.options.local_imports else None
            formatter = GoImportsFormatter(self.toolchain, local_module)

        executor = CopyExecutor(
            self.toolchain,
            formatter=formatter,
            clean=self.options.clean,
            tidy=self.options.tidy,
        )
        executor.execute(plan)
        print("Done.")

    def run(self) -> CopyPlan:
        """Plan and execute the extraction, returning the executed plan."""
        plan = self.prepare()
        self.execute(plan)
        return plan

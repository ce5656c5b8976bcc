"""
Copy plan execution.

This module provides the CopyExecutor class which materializes a CopyPlan:
cleaning the destination, preparing its go.mod, writing rewritten Go
sources, copying the remaining files and tidying the destination module.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from .errors import CommandError, CopyError
from .rewriter import ImportRewriter, SourceFormatter
from .toolchain import GoToolchain
from .types import CopyPlan

DIR_MODE = 0o755
FILE_MODE = 0o644


class CopyExecutor:
    """
    Applies a CopyPlan to the filesystem.

    The run is not transactional: a failure leaves whatever was already
    written in place, and the next run's cleanup removes it.

    Attributes:
        toolchain: GoToolchain used for go.mod editing and tidying
        formatter: Formatter run on every written Go file, or None to skip formatting
        clean: Remove existing Go sources from the destination first
        tidy: Run `go mod tidy` in the destination at the end
    """

    def __init__(
        self,
        toolchain: GoToolchain,
        formatter: SourceFormatter | None = None,
        clean: bool = True,
        tidy: bool = True,
    ) -> None:
        self.toolchain = toolchain
        self.formatter = formatter
        self.clean = clean
        self.tidy = tidy

    def execute(self, plan: CopyPlan) -> None:
        """
        Materialize the plan in its destination directory.

        Args:
            plan: Plan computed by the ClosurePlanner

        Raises:
            CopyError: If any file or destination step fails
        """
        if self.clean:
            print("Cleaning destination...")
            self.clean_destination(plan.dst_dir)
        else:
            _make_dirs(plan.dst_dir)

        print("Preparing go.mod...")
        self.prepare_go_mod(plan)

        print(f"Copying Go source files ({len(plan.go_files)})...")
        rewriter = ImportRewriter(plan.substitutions)
        for src, dst in plan.go_files.items():
            self.copy_go_file(src, dst, rewriter)

        print(f"Copying non-Go source files ({len(plan.other_files)})...")
        for src, dst in plan.other_files.items():
            self.copy_other_file(src, dst)

        if self.tidy:
            print("Tidying...")
            try:
                self.toolchain.mod_tidy(plan.dst_dir)
            except CommandError as e:
                raise CopyError(f"failed to tidy: {e}", destination=plan.dst_dir) from e

    def clean_destination(self, dst_dir: Path) -> None:
        """
        Remove Go sources and the directories they leave empty.

        Entries whose name starts with a dot are left alone, as is everything
        below a dot directory. The destination root itself is never removed.

        Args:
            dst_dir: Destination root directory
        """
        if not dst_dir.exists():
            _make_dirs(dst_dir)
            return

        try:
            for root, dirs, files in os.walk(dst_dir):
                dirs[:] = [d for d in dirs if not d.startswith(".")]
                for name in files:
                    if name.startswith(".") or not name.endswith(".go"):
                        continue
                    (Path(root) / name).unlink()

            for root, dirs, _files in os.walk(dst_dir, topdown=False):
                if any(part.startswith(".") for part in Path(root).relative_to(dst_dir).parts):
                    continue
                for name in dirs:
                    path = Path(root) / name
                    if not name.startswith(".") and path.is_dir() and not any(path.iterdir()):
                        path.rmdir()
        except OSError as e:
            raise CopyError(
                f"failed to clean destination: {e}", destination=dst_dir
            ) from e

    def prepare_go_mod(self, plan: CopyPlan) -> None:
        """Copy the source go.mod and rename the module it declares."""
        self.copy_other_file(plan.src_go_mod, plan.dst_go_mod)
        try:
            self.toolchain.set_module_path(plan.dst_dir, plan.dst_module)
        except CommandError as e:
            raise CopyError(
                f"failed to rename destination module: {e}", destination=plan.dst_go_mod
            ) from e

    def copy_go_file(self, src: Path, dst: Path, rewriter: ImportRewriter) -> None:
        """Write `src` to `dst` with import paths rewritten, then format it."""
        try:
            code = src.read_bytes().decode("utf-8")
            _make_dirs(dst.parent)
            dst.write_bytes(rewriter.rewrite(code).encode("utf-8"))
            os.chmod(dst, FILE_MODE)
        except (OSError, UnicodeDecodeError) as e:
            raise CopyError(
                f"failed to copy {src} to {dst}: {e}", source=src, destination=dst
            ) from e

        if self.formatter is not None:
            try:
                self.formatter.format(dst)
            except CommandError as e:
                raise CopyError(f"failed to format {dst}: {e}", source=src, destination=dst) from e

    def copy_other_file(self, src: Path, dst: Path) -> None:
        """Copy a file byte for byte."""
        try:
            _make_dirs(dst.parent)
            shutil.copyfile(src, dst)
            os.chmod(dst, FILE_MODE)
        except OSError as e:
            raise CopyError(
                f"failed to copy {src} to {dst}: {e}", source=src, destination=dst
            ) from e


def _make_dirs(path: Path) -> None:
    try:
        path.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
    except OSError as e:
        raise CopyError(
            f"failed to ensure destination directory exists: {e}", destination=path
        ) from e

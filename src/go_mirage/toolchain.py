"""
Go toolchain invocation.

This module wraps the external commands go-mirage relies on: `go list`,
`go mod edit`, `go mod tidy` and `goimports`. All of them run synchronously
in an explicit working directory with their output captured.
"""

from __future__ import annotations

import json
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from .errors import CommandError


class GoToolchain:
    """
    Runs Go toolchain commands.

    Attributes:
        go_command: Name or path of the go binary
        goimports_command: Name or path of the goimports binary
    """

    def __init__(self, go_command: str = "go", goimports_command: str = "goimports") -> None:
        self.go_command = go_command
        self.goimports_command = goimports_command

    def run(self, args: Sequence[str], cwd: Path) -> str:
        """
        Run a command and return its standard output.

        Args:
            args: Command and arguments
            cwd: Working directory

        Returns:
            Captured standard output

        Raises:
            CommandError: If the command cannot be started or exits non-zero
        """
        try:
            result = subprocess.run(
                list(args),
                cwd=cwd,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise CommandError(args, cwd, None, str(e)) from e

        if result.returncode != 0:
            raise CommandError(args, cwd, result.returncode, result.stderr or result.stdout)
        return result.stdout

    def run_json(self, args: Sequence[str], cwd: Path) -> Any:
        """Run a command and decode its standard output as JSON."""
        stdout = self.run(args, cwd)
        try:
            return json.loads(stdout)
        except json.JSONDecodeError as e:
            raise CommandError(args, cwd, 0, f"invalid JSON output: {e}") from e

    def list_package(self, directory: Path) -> dict[str, Any]:
        """Return `go list -json .` for the package in a directory."""
        return self.run_json([self.go_command, "list", "-json", "."], directory)

    def mod_edit_json(self, directory: Path) -> dict[str, Any]:
        """Return `go mod edit -json` for the module containing a directory."""
        return self.run_json([self.go_command, "mod", "edit", "-json"], directory)

    def set_module_path(self, directory: Path, module_path: str) -> None:
        """
        Rename the module declared by the go.mod in a directory.

        Args:
            directory: Directory holding the go.mod to edit
            module_path: New module path
        """
        self.run([self.go_command, "mod", "edit", "-module", module_path], directory)

    def mod_tidy(self, directory: Path) -> None:
        """Run `go mod tidy` in a module directory."""
        self.run([self.go_command, "mod", "tidy"], directory)

    def goimports(self, file_path: Path, local_module: str | None = None) -> None:
        """
        Rewrite a Go file in place with goimports.

        Runs in the file's directory, so only the base name is passed.

        Args:
            file_path: Go source file to format
            local_module: Module whose imports are grouped after third-party ones
        """
        args = [self.goimports_command, "-w"]
        if local_module:
            args.extend(["-local", local_module])
        args.append(file_path.name)
        self.run(args, file_path.parent)

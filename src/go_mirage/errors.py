"""
Error types raised by go-mirage.

Every failure the tool reports on purpose derives from MirageError, so the
command line can tell expected failures apart from programming errors.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class MirageError(Exception):
    """Base class for all go-mirage errors."""


class CommandError(MirageError):
    """
    An external command failed to start or exited with a non-zero status.

    Attributes:
        command: The argument list that was executed
        cwd: Working directory of the command
        returncode: Exit status, or None if the command could not be started
        output: Captured stderr (or stdout when stderr was empty)
    """

    def __init__(
        self,
        command: Sequence[str],
        cwd: Path | None,
        returncode: int | None,
        output: str = "",
    ) -> None:
        self.command = list(command)
        self.cwd = cwd
        self.returncode = returncode
        self.output = output.strip()

        where = f" in {cwd}" if cwd is not None else ""
        if returncode is None:
            message = f"could not run {' '.join(self.command)!r}{where}"
        else:
            message = f"{' '.join(self.command)!r}{where} exited with status {returncode}"
        if self.output:
            message = f"{message}: {self.output}"
        super().__init__(message)


class MetadataError(MirageError):
    """
    Fetching package or module information failed.

    Attributes:
        directory: Directory that was queried
        import_path: Import path of the package being fetched, when known
    """

    def __init__(
        self,
        message: str,
        directory: Path | None = None,
        import_path: str | None = None,
    ) -> None:
        self.directory = directory
        self.import_path = import_path
        super().__init__(message)


class PlanningInvariantError(MirageError):
    """A computed substitution or destination path is ambiguous or collides with another."""


class CopyError(MirageError):
    """
    Materializing a planned file or destination step failed.

    Attributes:
        source: Source file, when the failure concerns a single file
        destination: Destination file or directory
    """

    def __init__(
        self,
        message: str,
        source: Path | None = None,
        destination: Path | None = None,
    ) -> None:
        self.source = source
        self.destination = destination
        super().__init__(message)


class ConfigError(MirageError, ValueError):
    """Invalid configuration, or no destination module could be determined."""

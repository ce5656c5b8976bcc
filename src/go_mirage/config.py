"""
Configuration handling.

Options come from three places, later ones winning: built-in defaults, the
`[tool.go-mirage]` table of a TOML configuration file, and command-line
flags. This module also resolves the destination module path.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from .errors import ConfigError, MetadataError
from .metadata import MetadataProvider
from .utils import file_exists, find_module_root

CONFIG_FILE_NAME = ".go-mirage.toml"
CONFIG_TABLE = "go-mirage"


@dataclass(frozen=True)
class MirageOptions:
    """
    Settings for one extraction run.

    Attributes:
        dst_module: Destination module path (autodetected from the destination go.mod if None)
        local_imports: Group destination module imports as local imports with goimports
        include_tests: Copy test files and follow test-only imports
        tidy: Run `go mod tidy` in the destination after copying
        clean: Remove Go sources from the destination before copying
        go_command: go binary
        goimports_command: goimports binary; empty to skip import formatting
    """

    dst_module: str | None = None
    local_imports: bool = True
    include_tests: bool = False
    tidy: bool = True
    clean: bool = True
    go_command: str = "go"
    goimports_command: str = "goimports"

    def merged(self, **overrides: Any) -> MirageOptions:
        """Return a copy with every override that is not None applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


_KEYS: dict[str, str] = {
    "dst-module": "dst_module",
    "local-imports": "local_imports",
    "include-tests": "include_tests",
    "tidy": "tidy",
    "clean": "clean",
    "go": "go_command",
    "goimports": "goimports_command",
}


def find_config_file(dst_dir: Path, src_dir: Path | None = None) -> Path | None:
    """
    Locate the configuration file for a run.

    Looks in the destination directory first, then at the root of the
    source module.

    Args:
        dst_dir: Destination directory
        src_dir: Entry package directory

    Returns:
        Path to the configuration file, or None if there is none
    """
    candidates = [dst_dir / CONFIG_FILE_NAME]
    if src_dir is not None:
        module_root = find_module_root(src_dir)
        if module_root is not None:
            candidates.append(module_root / CONFIG_FILE_NAME)

    for candidate in candidates:
        if file_exists(candidate):
            return candidate
    return None


def load_options(config_path: Path | None) -> MirageOptions:
    """
    Read options from the `[tool.go-mirage]` table of a TOML file.

    Args:
        config_path: Configuration file, or None for defaults

    Returns:
        Options with the file's values applied over the defaults

    Raises:
        ConfigError: If the file cannot be read or holds unknown keys or wrongly typed values
    """
    if config_path is None:
        return MirageOptions()

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"could not read configuration file {config_path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid configuration file {config_path}: {e}") from e

    tool = data.get("tool", {})
    if not isinstance(tool, dict):
        raise ConfigError(f"[tool] in {config_path} must be a table")

    table = tool.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigError(f"[tool.{CONFIG_TABLE}] in {config_path} must be a table")

    types = {f.name: f.default for f in fields(MirageOptions)}
    values: dict[str, Any] = {}
    for key, value in table.items():
        if key not in _KEYS:
            valid = ", ".join(sorted(_KEYS))
            raise ConfigError(
                f"unknown option {key!r} in {config_path}. Must be one of: {valid}"
            )
        attr = _KEYS[key]
        expected = bool if isinstance(types[attr], bool) else str
        if not isinstance(value, expected):
            raise ConfigError(
                f"option {key!r} in {config_path} must be a {expected.__name__}, "
                f"got {type(value).__name__}"
            )
        values[attr] = value

    return replace(MirageOptions(), **values)


def resolve_destination_module(
    dst_dir: Path, options: MirageOptions, provider: MetadataProvider
) -> str:
    """
    Determine the module path of the destination.

    An explicit `dst_module` option wins. Otherwise the module declared by
    the destination go.mod is used. Failing to read the destination module is
    only an error when a go.mod is actually present.

    Args:
        dst_dir: Destination directory
        options: Run options
        provider: Metadata provider used to read the destination go.mod

    Returns:
        The destination module path

    Raises:
        ConfigError: If no destination module is available
        MetadataError: If the destination go.mod exists but cannot be read
    """
    detected = ""
    if dst_dir.is_dir():
        try:
            detected = provider.get_module_path(dst_dir)
        except MetadataError as e:
            if file_exists(dst_dir / "go.mod"):
                raise MetadataError(
                    f"failed to get module info for destination: {e}", directory=dst_dir
                ) from e

    if options.dst_module:
        return options.dst_module
    if detected:
        return detected
    raise ConfigError(
        "no destination module available; use --dst-module or create go.mod at the destination"
    )

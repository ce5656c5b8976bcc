"""
Type definitions for the package.

This module contains the core data structures used throughout the package
for representing Go package metadata and the copy plan computed from it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, NamedTuple

# `go list -json` keys of the file categories that belong to a package, in copy order.
FILE_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("go_files", "GoFiles"),
    ("cgo_files", "CgoFiles"),
    ("compiled_go_files", "CompiledGoFiles"),
    ("ignored_go_files", "IgnoredGoFiles"),
    ("ignored_other_files", "IgnoredOtherFiles"),
    ("c_files", "CFiles"),
    ("cxx_files", "CXXFiles"),
    ("m_files", "MFiles"),
    ("h_files", "HFiles"),
    ("f_files", "FFiles"),
    ("s_files", "SFiles"),
    ("swig_files", "SwigFiles"),
    ("swig_cxx_files", "SwigCXXFiles"),
    ("syso_files", "SysoFiles"),
    ("embed_files", "EmbedFiles"),
)

TEST_FILE_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("test_go_files", "TestGoFiles"),
    ("xtest_go_files", "XTestGoFiles"),
    ("test_embed_files", "TestEmbedFiles"),
    ("xtest_embed_files", "XTestEmbedFiles"),
)


def _unique(items: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))


@dataclass(frozen=True)
class ModuleInfo:
    """
    The Go module that owns a package.

    Attributes:
        path: Module path as declared in go.mod (e.g., "example.com/m")
        dir: Root directory of the module
        go_mod: Path to the module's go.mod file
    """

    path: str
    dir: Path
    go_mod: Path

    def contains(self, import_path: str) -> bool:
        """Return True if the import path lies strictly below this module's path."""
        return import_path.startswith(self.path + "/")

    def suffix_of(self, import_path: str) -> str | None:
        """Return the import path with the module prefix removed, or None if outside the module."""
        if not self.contains(import_path):
            return None
        return import_path[len(self.path) + 1 :]


@dataclass(frozen=True)
class PackageInfo:
    """
    Metadata about a single Go package, as reported by `go list -json`.

    File lists hold names relative to the package directory. `deps` is the
    flattened list of import paths the package depends on; the planner makes
    no distinction between direct and indirect entries.

    Attributes:
        import_path: Import path of the package
        dir: Directory holding the package sources
        module: Owning module
        deps: Import paths the package depends on
        test_imports: Import paths used by the package's internal tests
        xtest_imports: Import paths used by the package's external tests
    """

    import_path: str
    dir: Path
    module: ModuleInfo
    go_files: tuple[str, ...] = ()
    cgo_files: tuple[str, ...] = ()
    compiled_go_files: tuple[str, ...] = ()
    ignored_go_files: tuple[str, ...] = ()
    ignored_other_files: tuple[str, ...] = ()
    c_files: tuple[str, ...] = ()
    cxx_files: tuple[str, ...] = ()
    m_files: tuple[str, ...] = ()
    h_files: tuple[str, ...] = ()
    f_files: tuple[str, ...] = ()
    s_files: tuple[str, ...] = ()
    swig_files: tuple[str, ...] = ()
    swig_cxx_files: tuple[str, ...] = ()
    syso_files: tuple[str, ...] = ()
    embed_files: tuple[str, ...] = ()
    test_go_files: tuple[str, ...] = ()
    xtest_go_files: tuple[str, ...] = ()
    test_embed_files: tuple[str, ...] = ()
    xtest_embed_files: tuple[str, ...] = ()
    deps: tuple[str, ...] = ()
    test_imports: tuple[str, ...] = ()
    xtest_imports: tuple[str, ...] = ()

    @classmethod
    def from_go_list(cls, data: dict[str, Any]) -> PackageInfo:
        """
        Build a PackageInfo from the JSON object printed by `go list -json`.

        Args:
            data: Decoded JSON object for one package

        Returns:
            The corresponding PackageInfo

        Raises:
            KeyError: If the package or its module is missing a required field
        """
        module_data = data.get("Module") or {}
        module = ModuleInfo(
            path=module_data["Path"],
            dir=Path(module_data["Dir"]),
            go_mod=Path(module_data.get("GoMod") or Path(module_data["Dir"]) / "go.mod"),
        )

        files = {
            attr: tuple(data.get(key) or ())
            for attr, key in FILE_CATEGORIES + TEST_FILE_CATEGORIES
        }
        return cls(
            import_path=data["ImportPath"],
            dir=Path(data["Dir"]),
            module=module,
            deps=tuple(data.get("Deps") or ()),
            test_imports=tuple(data.get("TestImports") or ()),
            xtest_imports=tuple(data.get("XTestImports") or ()),
            **files,
        )

    def all_files(self, include_tests: bool = False) -> list[str]:
        """
        Return every file that belongs to the package.

        Covers Go sources of all build variants as well as the auxiliary
        files (C, headers, assembly, SWIG, syso objects, embedded files).
        Duplicates are dropped while keeping the first occurrence.

        Args:
            include_tests: Also return test files and their embedded files

        Returns:
            List of file names relative to the package directory
        """
        categories = FILE_CATEGORIES + (TEST_FILE_CATEGORIES if include_tests else ())
        names: list[str] = []
        for attr, _key in categories:
            names.extend(getattr(self, attr))
        return list(_unique(names))

    def dependencies(self, include_tests: bool = False) -> list[str]:
        """Return the import paths this package depends on, without duplicates."""
        paths = list(self.deps)
        if include_tests:
            paths.extend(self.test_imports)
            paths.extend(self.xtest_imports)
        return list(_unique(paths))


class Substitution(NamedTuple):
    """An import path rewrite: every quoted `old` literal becomes `new`."""

    old: str
    new: str


@dataclass
class CopyPlan:
    """
    Everything needed to materialize the destination tree.

    Built once by the planner and consumed by the copy executor.

    Attributes:
        src_dir: Directory of the entry package
        dst_dir: Destination root directory
        src_import_path: Import path of the entry package
        src_go_mod: go.mod of the source module
        dst_module: Module path of the destination
        go_files: Go sources to rewrite, source path -> destination path
        other_files: Files copied byte for byte, source path -> destination path
        substitutions: Ordered import path rewrites, entry package first
        packages: Copied in-module dependencies, import path -> metadata
    """

    src_dir: Path
    dst_dir: Path
    src_import_path: str
    src_go_mod: Path
    dst_module: str
    go_files: dict[Path, Path] = field(default_factory=dict)
    other_files: dict[Path, Path] = field(default_factory=dict)
    substitutions: list[Substitution] = field(default_factory=list)
    packages: dict[str, PackageInfo] = field(default_factory=dict)

    @property
    def dst_go_mod(self) -> Path:
        return self.dst_dir / "go.mod"

    @property
    def file_copies(self) -> dict[Path, Path]:
        """All planned copies, Go sources and other files together."""
        return {**self.go_files, **self.other_files}

    def describe(self) -> str:
        """
        Render the plan as stable, human readable text.

        Entries are sorted so two plans for the same inputs render the same.
        """
        lines = [
            f"source package: {self.src_import_path} ({self.src_dir})",
            f"destination module: {self.dst_module} ({self.dst_dir})",
            f"go.mod: {self.src_go_mod} -> {self.dst_go_mod}",
            "",
            f"substitutions ({len(self.substitutions)}):",
        ]
        lines.extend(f"  {sub.old} -> {sub.new}" for sub in self.substitutions)
        copies = self.file_copies
        lines.append("")
        lines.append(f"files ({len(copies)}):")
        lines.extend(f"  {src} -> {copies[src]}" for src in sorted(copies))
        return "\n".join(lines)

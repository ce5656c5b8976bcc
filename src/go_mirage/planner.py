"""
Dependency closure planning.

This module provides the ClosurePlanner class which is responsible for:
- Walking the dependency graph of an entry package
- Selecting the dependencies that live in the same module as the entry package
- Assigning every file of every selected package a destination path
- Producing the import path substitutions that make the copy compile

The planner performs no I/O of its own beyond metadata queries and returns
a CopyPlan value; nothing is written until the plan is executed.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath

from .errors import MetadataError, PlanningInvariantError
from .metadata import MetadataProvider
from .types import CopyPlan, PackageInfo, Substitution

INTERNAL_DIR = "internal"


class ClosurePlanner:
    """
    Computes the copy plan for an entry package and its in-module dependencies.

    The traversal is an explicit breadth-first worklist with a done set keyed
    by import path, so every package is fetched at most once whatever the
    shape of the graph (diamonds, cycles).

    Attributes:
        provider: Source of package metadata
        include_tests: Also copy test files and follow test imports
        fetch_count: Number of metadata fetches made by the last plan() call
    """

    def __init__(self, provider: MetadataProvider, include_tests: bool = False) -> None:
        self.provider = provider
        self.include_tests = include_tests
        self.fetch_count = 0

    def plan(self, entry_dir: Path, dst_dir: Path, dst_module: str) -> CopyPlan:
        """
        Plan the extraction of the package in `entry_dir`.

        Args:
            entry_dir: Directory of the entry package
            dst_dir: Destination root directory
            dst_module: Module path of the destination

        Returns:
            The complete CopyPlan

        Raises:
            MetadataError: If metadata for the entry package or any copied dependency
                cannot be fetched
            PlanningInvariantError: If two packages would be copied to the same place,
                or a dependency does not map onto a directory of the source module or
                belongs to a nested module
        """
        self.fetch_count = 0
        dst_dir = Path(dst_dir)
        dst_module = dst_module.rstrip("/")

        entry = self._fetch(Path(entry_dir))
        module = entry.module
        state = _PlanState(
            CopyPlan(
                src_dir=entry.dir,
                dst_dir=dst_dir,
                src_import_path=entry.import_path,
                src_go_mod=module.go_mod,
                dst_module=dst_module,
            )
        )

        state.add_package(entry, entry.dir, dst_dir, dst_module, self.include_tests)

        done = {entry.import_path}
        pending = set(entry.dependencies(self.include_tests))

        while pending:
            wave = pending
            pending = set()
            for import_path in sorted(wave):
                if import_path in done:
                    continue
                done.add(import_path)

                suffix = module.suffix_of(import_path)
                if suffix is None:
                    continue

                segments = _split_suffix(import_path, suffix)
                src_dir = module.dir.joinpath(*segments)
                try:
                    info = self._fetch(src_dir)
                except MetadataError as e:
                    raise MetadataError(
                        f"failed to get package info for dependency package {suffix!r}: {e}",
                        directory=src_dir,
                        import_path=import_path,
                    ) from e

                if info.import_path != import_path:
                    raise PlanningInvariantError(
                        f"dependency {import_path!r} resolved to {src_dir}, "
                        f"which holds package {info.import_path!r}"
                    )
                if info.module.path != module.path:
                    raise PlanningInvariantError(
                        f"dependency {import_path!r} belongs to module {info.module.path!r}, "
                        f"not {module.path!r}"
                    )

                pkg_dst_dir = dst_dir.joinpath(INTERNAL_DIR, *segments)
                pkg_dst_path = "/".join((dst_module, INTERNAL_DIR, *segments))
                state.add_package(info, src_dir, pkg_dst_dir, pkg_dst_path, self.include_tests)
                state.plan.packages[import_path] = info

                pending.update(
                    dep for dep in info.dependencies(self.include_tests) if dep not in done
                )

        return state.plan

    def _fetch(self, directory: Path) -> PackageInfo:
        self.fetch_count += 1
        return self.provider.get_package_info(directory)


class _PlanState:
    """Accumulates a CopyPlan while checking that nothing is assigned twice."""

    def __init__(self, plan: CopyPlan) -> None:
        self.plan = plan
        self._dst_dirs: dict[str, str] = {}
        self._src_dirs: dict[str, str] = {}
        self._new_paths: dict[str, str] = {}
        self._owners: dict[Path, Path] = {}

    def add_package(
        self,
        info: PackageInfo,
        src_dir: Path,
        dst_dir: Path,
        dst_import_path: str,
        include_tests: bool,
    ) -> None:
        self._claim(self._dst_dirs, os.path.normcase(str(dst_dir)).casefold(), info, "destination")
        self._claim(self._src_dirs, str(src_dir.resolve()), info, "source directory")
        self._add_substitution(info.import_path, dst_import_path)
        self._add_copies(src_dir, dst_dir, info.all_files(include_tests))

    def _claim(self, owners: dict[str, str], key: str, info: PackageInfo, what: str) -> None:
        owner = owners.setdefault(key, info.import_path)
        if owner != info.import_path:
            raise PlanningInvariantError(
                f"packages {owner!r} and {info.import_path!r} share the same {what}: {key}"
            )

    def _add_substitution(self, old: str, new: str) -> None:
        if any(sub.old == old for sub in self.plan.substitutions):
            raise PlanningInvariantError(f"import path {old!r} planned twice")
        previous = self._new_paths.setdefault(new, old)
        if previous != old:
            raise PlanningInvariantError(
                f"import paths {previous!r} and {old!r} both map to {new!r}"
            )
        self.plan.substitutions.append(Substitution(old, new))

    def _add_copies(self, src_dir: Path, dst_dir: Path, files: list[str]) -> None:
        for name in files:
            src = src_dir / name
            dst = dst_dir / name
            owner = self._owners.setdefault(dst, src)
            if owner != src:
                raise PlanningInvariantError(
                    f"destination file {dst} planned for both {owner} and {src}"
                )
            if dst.suffix == ".go":
                self.plan.go_files[src] = dst
            else:
                self.plan.other_files[src] = dst


def _split_suffix(import_path: str, suffix: str) -> tuple[str, ...]:
    segments = PurePosixPath(suffix).parts
    if not suffix or suffix.split("/") != list(segments) or {".", ".."} & set(segments):
        raise PlanningInvariantError(
            f"import path {import_path!r} does not map onto a module subdirectory"
        )
    return segments


def plan_copy(
    entry_dir: Path,
    dst_dir: Path,
    dst_module: str,
    provider: MetadataProvider,
    include_tests: bool = False,
) -> CopyPlan:
    """Plan the extraction of `entry_dir` into `dst_dir` under module `dst_module`."""
    planner = ClosurePlanner(provider, include_tests=include_tests)
    return planner.plan(entry_dir, dst_dir, dst_module)

"""Pytest configuration and fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from go_mirage import MetadataError, ModuleInfo, PackageInfo


class FakeMetadataProvider:
    """
    In-memory metadata provider.

    Packages are registered by import path and looked up by directory, the
    way `go list` resolves them. Every lookup is recorded in `fetched`.
    """

    def __init__(self, module_path: str, module_dir: Path) -> None:
        self.module = ModuleInfo(
            path=module_path, dir=module_dir, go_mod=module_dir / "go.mod"
        )
        self.packages: dict[Path, PackageInfo] = {}
        self.module_paths: dict[Path, str] = {}
        self.broken: set[Path] = set()
        self.fetched: list[Path] = []

    def dir_for(self, import_path: str) -> Path:
        if import_path == self.module.path:
            return self.module.dir
        suffix = import_path[len(self.module.path) + 1 :]
        return self.module.dir.joinpath(*suffix.split("/"))

    def add(
        self,
        import_path: str,
        files: tuple[str, ...] = ("a.go",),
        deps: tuple[str, ...] = (),
        directory: Path | None = None,
        module: ModuleInfo | None = None,
        **extra,
    ) -> PackageInfo:
        directory = directory or self.dir_for(import_path)
        info = PackageInfo(
            import_path=import_path,
            dir=directory,
            module=module or self.module,
            go_files=tuple(files),
            deps=tuple(deps),
            **extra,
        )
        self.packages[directory] = info
        return info

    def get_package_info(self, directory: Path) -> PackageInfo:
        self.fetched.append(directory)
        if directory in self.broken:
            raise MetadataError(f"broken package in {directory}", directory=directory)
        if not directory.is_absolute():
            directory = Path.cwd() / directory
        try:
            return self.packages[directory]
        except KeyError:
            raise MetadataError(
                f"no package in {directory}", directory=directory
            ) from None

    def get_module_path(self, directory: Path) -> str:
        try:
            return self.module_paths[directory]
        except KeyError:
            raise MetadataError(f"no go.mod for {directory}", directory=directory) from None


@pytest.fixture
def module_dir(tmp_path: Path) -> Path:
    return tmp_path / "src_module"


@pytest.fixture
def dst_dir(tmp_path: Path) -> Path:
    return tmp_path / "dst"


@pytest.fixture
def provider(module_dir: Path) -> FakeMetadataProvider:
    """Provider for the module example.com/m rooted at module_dir."""
    return FakeMetadataProvider("example.com/m", module_dir)


@pytest.fixture
def make_provider(module_dir: Path):
    """Build a provider for another module path rooted at module_dir."""

    def factory(module_path: str) -> FakeMetadataProvider:
        return FakeMetadataProvider(module_path, module_dir)

    return factory


@pytest.fixture
def go_project(tmp_path: Path) -> Path:
    """
    Create a small Go module on disk.

    example.com/m/cmd/tool imports example.com/m/internal/util and
    example.com/m/lib; lib imports util as well.
    """
    root = tmp_path / "project"
    (root / "cmd" / "tool").mkdir(parents=True)
    (root / "internal" / "util").mkdir(parents=True)
    (root / "lib").mkdir()

    (root / "go.mod").write_text("module example.com/m\n\ngo 1.21\n")
    (root / "cmd" / "tool" / "main.go").write_text(
        "package main\n"
        "\n"
        "import (\n"
        '\t"fmt"\n'
        "\n"
        '\t"example.com/m/internal/util"\n'
        '\t"example.com/m/lib"\n'
        ")\n"
        "\n"
        "func main() { fmt.Println(util.Name, lib.Name) }\n"
    )
    (root / "internal" / "util" / "util.go").write_text(
        'package util\n\nconst Name = "util"\n'
    )
    (root / "internal" / "util" / "data.txt").write_bytes(b"\x00raw\r\ndata\n")
    (root / "lib" / "lib.go").write_text(
        "package lib\n"
        "\n"
        'import "example.com/m/internal/util"\n'
        "\n"
        "const Name = util.Name\n"
    )
    return root


@pytest.fixture
def project_provider(go_project: Path) -> FakeMetadataProvider:
    """Provider describing the packages of go_project."""
    provider = FakeMetadataProvider("example.com/m", go_project.resolve())
    provider.add(
        "example.com/m/cmd/tool",
        files=("main.go",),
        deps=("fmt", "example.com/m/internal/util", "example.com/m/lib"),
    )
    provider.add("example.com/m/internal/util", files=("util.go",), embed_files=("data.txt",))
    provider.add("example.com/m/lib", files=("lib.go",), deps=("example.com/m/internal/util",))
    return provider

"""go-mirage - Extract a Go package and its in-module dependencies into another module."""

__all__ = (
    "ClosurePlanner",
    "CommandError",
    "ConfigError",
    "CopyError",
    "CopyExecutor",
    "CopyPlan",
    "GoImportsFormatter",
    "GoListMetadataProvider",
    "GoToolchain",
    "ImportRewriter",
    "MetadataError",
    "MetadataProvider",
    "MirageError",
    "MirageOptions",
    "MirrorManager",
    "ModuleInfo",
    "PackageInfo",
    "PlanningInvariantError",
    "Substitution",
    "find_module_root",
    "load_options",
    "plan_copy",
    "resolve_destination_module",
)

from .config import MirageOptions, load_options, resolve_destination_module
from .errors import (
    CommandError,
    ConfigError,
    CopyError,
    MetadataError,
    MirageError,
    PlanningInvariantError,
)
from .executor import CopyExecutor
from .manager import MirrorManager
from .metadata import GoListMetadataProvider, MetadataProvider
from .planner import ClosurePlanner, plan_copy
from .rewriter import GoImportsFormatter, ImportRewriter
from .toolchain import GoToolchain
from .types import CopyPlan, ModuleInfo, PackageInfo, Substitution
from .utils import find_module_root

"""cargograph: graph the internal dependencies of multi-package projects (library, TUI, CLI)."""

from importlib.metadata import version, PackageNotFoundError

from cargograph.api import (
    build_graph,
    collect_packages,
    discover_manifests,
    FilterContext,
    PackageNode,
)

__all__ = [
    "build_graph",
    "collect_packages",
    "discover_manifests",
    "FilterContext",
    "PackageNode",
    "__version__",
]

try:
    __version__ = version("cargograph")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed as package

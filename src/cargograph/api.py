"""Public API: use cargograph from Python or from other tools."""

from __future__ import annotations

import logging
from pathlib import Path

from cargograph.core.finder import resolve_workspace, scan_monolithic
from cargograph.core.graph import render_graph
from cargograph.core.manifest import ManifestDocument
from cargograph.core.parser import FilterContext, PackageNode, extract_packages, parse_package
from cargograph.errors import NoManifestsFoundError, RootNotFoundError

logger = logging.getLogger(__name__)


def discover_manifests(
    root: Path | str,
    *,
    monolithic: bool = False,
    filters: FilterContext | None = None,
) -> list[ManifestDocument]:
    """
    Find the manifests that belong to the project rooted at ``root``.

    Args:
        root: Project directory.
        monolithic: If True, scan every manifest under ``root`` instead of
            following workspace members and path dependencies.
        filters: Only ``ignored_path_substrings`` is used here (monolithic mode).

    Returns:
        Parsed manifests in discovery order.

    Raises:
        RootNotFoundError: if ``root`` does not exist.
    """
    root_path = Path(root)
    if not root_path.exists():
        raise RootNotFoundError(root_path)
    if monolithic:
        manifests = scan_monolithic(root_path, filters)
    else:
        manifests = resolve_workspace(root_path)
    logger.info("Discovered %d manifest(s) under %s", len(manifests), root_path)
    return manifests


def collect_packages(
    root: Path | str,
    *,
    monolithic: bool = False,
    filters: FilterContext | None = None,
) -> list[PackageNode]:
    """
    Discover manifests under ``root`` and return their filtered package nodes.

    Raises:
        RootNotFoundError: if ``root`` does not exist.
        NoManifestsFoundError: if no manifest has a package name and a
            dependency table. Filters emptying the result is not an error.
    """
    manifests = discover_manifests(root, monolithic=monolithic, filters=filters)
    if not any(parse_package(m) is not None for m in manifests):
        raise NoManifestsFoundError(Path(root))
    nodes = extract_packages(manifests, filters)
    logger.info("Extracted %d package(s)", len(nodes))
    return nodes


def build_graph(
    root: Path | str,
    *,
    monolithic: bool = False,
    filters: FilterContext | None = None,
    fmt: str = "dot",
) -> str:
    """
    Build the dependency graph text for the project rooted at ``root``.

    Args:
        root: Project directory.
        monolithic: Use the flat scan instead of workspace resolution.
        filters: Local/ignore/path filters; None means no filtering.
        fmt: Output format, ``"dot"`` or ``"mermaid"``.

    Returns:
        The serialized graph.
    """
    nodes = collect_packages(root, monolithic=monolithic, filters=filters)
    return render_graph(nodes, fmt)


__all__ = [
    "build_graph",
    "collect_packages",
    "discover_manifests",
    "FilterContext",
    "PackageNode",
]

"""Turn parsed manifests into package nodes and apply the local/ignore filters."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from cargograph.core.manifest import ManifestDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterContext:
    """Options that narrow the discovered package set. Built once per run."""

    local_only: bool = False
    ignored_names: frozenset[str] = field(default_factory=frozenset)
    # Only consulted by the monolithic scanner.
    ignored_path_substrings: tuple[str, ...] = ()

    @classmethod
    def from_options(
        cls,
        *,
        local_only: bool = False,
        ignored_names: Iterable[str] | None = None,
        ignored_path_substrings: Iterable[str] | None = None,
    ) -> FilterContext:
        """Build a context from loose option values (e.g. argparse lists that may be None)."""
        return cls(
            local_only=local_only,
            ignored_names=frozenset(ignored_names or ()),
            ignored_path_substrings=tuple(ignored_path_substrings or ()),
        )


@dataclass(frozen=True)
class PackageNode:
    """One package: its name and the names of the packages it depends on."""

    name: str
    dependencies: tuple[str, ...] = ()
    path: Path | None = field(default=None, compare=False)


def parse_package(manifest: ManifestDocument) -> PackageNode | None:
    """
    Extract a PackageNode from a manifest.

    Requires both a string ``package.name`` and a ``[dependencies]`` table; the
    dependency names are the table's keys and the version/path specifiers are
    discarded. Returns None if either field is missing.
    """
    name = manifest.get_string("package", "name")
    dependencies = manifest.get_table("dependencies")
    if name is None or dependencies is None:
        logger.debug("No package name or dependency table in %s", manifest.path)
        return None
    return PackageNode(name=name, dependencies=tuple(dependencies.keys()), path=manifest.path)


def local_package_names(manifests: Iterable[ManifestDocument]) -> set[str]:
    """Every ``package.name`` declared in the manifest set, with or without dependencies."""
    names: set[str] = set()
    for manifest in manifests:
        name = manifest.get_string("package", "name")
        if name is not None:
            names.add(name)
    return names


def filter_local(nodes: Iterable[PackageNode], local_names: set[str]) -> list[PackageNode]:
    """Keep local packages only, and only their dependencies on other local packages."""
    return [
        dataclasses.replace(node, dependencies=tuple(d for d in node.dependencies if d in local_names))
        for node in nodes
        if node.name in local_names
    ]


def filter_ignored(nodes: Iterable[PackageNode], ignored_names: frozenset[str] | set[str]) -> list[PackageNode]:
    """Drop ignored packages, and drop ignored names from the survivors' dependencies."""
    return [
        dataclasses.replace(node, dependencies=tuple(d for d in node.dependencies if d not in ignored_names))
        for node in nodes
        if node.name not in ignored_names
    ]


def extract_packages(
    manifests: list[ManifestDocument],
    filters: FilterContext | None = None,
) -> list[PackageNode]:
    """
    Convert manifests to package nodes and apply the filters in ``filters``.

    The local filter runs before the ignore filter so that an ignored name is
    never brought back by the local pass.

    Args:
        manifests: Parsed manifests, in discovery order.
        filters: Filter options; None means no filtering.

    Returns:
        One node per manifest that has a name and a dependency table and
        survives the filters, in manifest order.
    """
    nodes = [node for node in (parse_package(m) for m in manifests) if node is not None]
    if filters is None:
        return nodes
    if filters.local_only:
        nodes = filter_local(nodes, local_package_names(manifests))
    if filters.ignored_names:
        nodes = filter_ignored(nodes, filters.ignored_names)
    return nodes

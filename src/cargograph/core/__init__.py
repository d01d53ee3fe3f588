"""Core library: manifest discovery, package extraction, dependency graph building."""

from cargograph.core.finder import resolve_workspace, scan_monolithic
from cargograph.core.graph import collect_edges, generate_dot, generate_mermaid, render_graph
from cargograph.core.manifest import ManifestDocument, load_manifest, locate_manifest
from cargograph.core.parser import FilterContext, PackageNode, extract_packages, parse_package

__all__ = [
    "resolve_workspace",
    "scan_monolithic",
    "collect_edges",
    "generate_dot",
    "generate_mermaid",
    "render_graph",
    "ManifestDocument",
    "load_manifest",
    "locate_manifest",
    "FilterContext",
    "PackageNode",
    "extract_packages",
    "parse_package",
]

"""Build the deduplicated edge list and serialize it as DOT or Mermaid."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from cargograph.core.parser import PackageNode
from cargograph.errors import GraphSerializationError

logger = logging.getLogger(__name__)

GRAPH_FORMATS = ("dot", "mermaid")
DEFAULT_GRAPH_NAME = "dependencies"


def quote_name(name: str) -> str:
    """Wrap a package name in double quotes. Embedded quotes are not escaped."""
    return f'"{name}"'


def collect_edges(nodes: Iterable[PackageNode]) -> list[tuple[str, str]]:
    """
    Collect one (package, dependency) edge per dependency of every node.

    An edge seen before is dropped, so each pair appears once, in the order it
    was first seen.
    """
    seen: set[tuple[str, str]] = set()
    edges: list[tuple[str, str]] = []
    for node in nodes:
        for dependency in node.dependencies:
            key = (quote_name(node.name), quote_name(dependency))
            if key in seen:
                continue
            seen.add(key)
            edges.append((node.name, dependency))
    return edges


def generate_dot(nodes: Iterable[PackageNode], name: str = DEFAULT_GRAPH_NAME) -> str:
    """Generate compact DOT (Graphviz): ``digraph dependencies {"a" -> "b";}``."""
    statements = "".join(f"{quote_name(src)} -> {quote_name(dst)};" for src, dst in collect_edges(nodes))
    return f"digraph {name} {{{statements}}}"


def mermaid_id(name: str) -> str:
    """Convert a package name to a valid Mermaid node ID."""
    return name.replace("-", "_").replace(".", "_").replace(" ", "_")


def generate_mermaid(nodes: Iterable[PackageNode]) -> str:
    """Generate a Mermaid flowchart, one line per unique edge."""
    lines = ["graph LR"]
    for src, dst in collect_edges(nodes):
        lines.append(f"    {mermaid_id(src)}[{src}] --> {mermaid_id(dst)}[{dst}]")
    return "\n".join(lines)


def render_graph(nodes: Iterable[PackageNode], fmt: str = "dot") -> str:
    """Render nodes in one of GRAPH_FORMATS."""
    if fmt == "dot":
        return generate_dot(nodes)
    if fmt == "mermaid":
        return generate_mermaid(nodes)
    raise ValueError(f"Unknown graph format: {fmt!r} (expected one of {', '.join(GRAPH_FORMATS)})")


def encode_graph(text: str) -> bytes:
    """
    Encode rendered graph text as UTF-8.

    Raises:
        GraphSerializationError: if the text holds characters that have no
            UTF-8 encoding (lone surrogates from undecodable file names).
    """
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        logger.debug("Graph text is not valid UTF-8: %s", e)
        raise GraphSerializationError(f"Graph output is not valid text: {e}") from e

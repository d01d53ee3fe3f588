"""Tests for TUI utility functions (non-interactive parts)."""

from __future__ import annotations

from pathlib import Path

from cargograph.core.parser import PackageNode
from cargograph.tui.app import (
    format_package,
    index_packages,
    reverse_dependencies,
)


class TestIndexPackages:
    """Tests for index_packages helper."""

    def test_empty(self) -> None:
        assert index_packages([]) == {}

    def test_by_name(self) -> None:
        a = PackageNode("a", ("b",))
        b = PackageNode("b")
        assert index_packages([a, b]) == {"a": a, "b": b}

    def test_first_wins(self) -> None:
        first = PackageNode("a", ("x",))
        second = PackageNode("a", ("y",))
        assert index_packages([first, second])["a"] is first


class TestReverseDependencies:
    """Tests for reverse_dependencies helper."""

    def test_dependents_sorted(self) -> None:
        nodes = [PackageNode("z", ("core",)), PackageNode("a", ("core", "serde"))]
        assert reverse_dependencies(nodes) == {"core": ["a", "z"], "serde": ["a"]}

    def test_duplicate_edges(self) -> None:
        nodes = [PackageNode("a", ("b",)), PackageNode("a", ("b",))]
        assert reverse_dependencies(nodes) == {"b": ["a"]}


class TestFormatPackage:
    """Tests for format_package helper."""

    def test_counts(self) -> None:
        app = PackageNode("app", ("core", "serde", "log"), Path("/p/app/Cargo.toml"))
        core = PackageNode("core")
        index = index_packages([app, core])
        text = format_package(app, index, reverse_dependencies([app, core]))
        assert "app" in text
        assert "Local dependencies:     [cyan]1[/]" in text
        assert "External dependencies:  [cyan]2[/]" in text
        assert "Used by:                [cyan]0[/]" in text
        assert "/p/app/Cargo.toml" in text

    def test_used_by(self) -> None:
        app = PackageNode("app", ("core",))
        core = PackageNode("core")
        nodes = [app, core]
        text = format_package(core, index_packages(nodes), reverse_dependencies(nodes))
        assert "(app)" in text

    def test_no_path(self) -> None:
        node = PackageNode("solo")
        assert "(n/a)" in format_package(node, {"solo": node}, {})

    def test_markup_in_names_escaped(self) -> None:
        node = PackageNode("[bold]x", ("core",), Path("/p/[red]/Cargo.toml"))
        user = PackageNode("[i]user", ("[bold]x",))
        nodes = [node, user]
        text = format_package(node, index_packages(nodes), reverse_dependencies(nodes))
        assert "\\[bold]x" in text
        assert "(\\[i]user)" in text
        assert "/p/\\[red]/Cargo.toml" in text

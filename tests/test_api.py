"""Tests for cargograph.api module."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

import cargograph
from cargograph.api import build_graph, collect_packages, discover_manifests
from cargograph.core.parser import FilterContext, PackageNode
from cargograph.errors import NoManifestsFoundError, RootNotFoundError


def _write(directory: Path, content: str) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "Cargo.toml").write_text(content)


def _workspace(tmp_path: Path) -> Path:
    _write(
        tmp_path,
        '[workspace]\nmembers = ["app", "core"]\n',
    )
    _write(
        tmp_path / "app",
        '[package]\nname = "app"\n\n[dependencies]\ncore = { path = "../core" }\nserde = "1.0"\n',
    )
    _write(tmp_path / "core", '[package]\nname = "core"\n\n[dependencies]\nlog = "0.4"\n')
    _write(tmp_path / "tools" / "orphan", '[package]\nname = "orphan"\n\n[dependencies]\ncore = "*"\n')
    return tmp_path


class TestModuleExports:
    """Tests for cargograph module-level exports."""

    def test_version_is_string(self) -> None:
        assert isinstance(cargograph.__version__, str)

    def test_version_format(self) -> None:
        pattern = r"^\d+\.\d+\.\d+(\+.+)?$"
        assert re.match(pattern, cargograph.__version__), f"Invalid version: {cargograph.__version__}"

    def test_exports(self) -> None:
        assert cargograph.build_graph is build_graph
        assert cargograph.FilterContext is FilterContext


class TestDiscoverManifests:
    """Tests for discover_manifests function."""

    def test_root_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(RootNotFoundError):
            discover_manifests(tmp_path / "missing")

    def test_recursive(self, tmp_path: Path) -> None:
        manifests = discover_manifests(_workspace(tmp_path))
        # core is reached through app first; its member entry is then skipped
        assert [m.directory.name for m in manifests] == [tmp_path.name, "app", "core"]

    def test_monolithic(self, tmp_path: Path) -> None:
        manifests = discover_manifests(_workspace(tmp_path), monolithic=True)
        assert len(manifests) == 4

    def test_accepts_string_root(self, tmp_path: Path) -> None:
        assert len(discover_manifests(str(_workspace(tmp_path)))) == 3


class TestCollectPackages:
    """Tests for collect_packages function."""

    def test_recursive(self, tmp_path: Path) -> None:
        nodes = collect_packages(_workspace(tmp_path))
        assert nodes == [PackageNode("app", ("core", "serde")), PackageNode("core", ("log",))]

    def test_local_only(self, tmp_path: Path) -> None:
        nodes = collect_packages(_workspace(tmp_path), filters=FilterContext(local_only=True))
        assert nodes == [PackageNode("app", ("core",)), PackageNode("core", ())]

    def test_monolithic_includes_orphans(self, tmp_path: Path) -> None:
        names = {n.name for n in collect_packages(_workspace(tmp_path), monolithic=True)}
        assert names == {"app", "core", "orphan"}

    def test_no_manifests(self, tmp_path: Path) -> None:
        with pytest.raises(NoManifestsFoundError):
            collect_packages(tmp_path)

    def test_manifest_without_dependencies(self, tmp_path: Path) -> None:
        _write(tmp_path, '[package]\nname = "bare"\n')
        with pytest.raises(NoManifestsFoundError):
            collect_packages(tmp_path)

    def test_everything_filtered_is_not_an_error(self, tmp_path: Path) -> None:
        nodes = collect_packages(
            _workspace(tmp_path),
            filters=FilterContext(ignored_names=frozenset({"app", "core"})),
        )
        assert nodes == []


class TestBuildGraph:
    """Tests for build_graph function."""

    def test_dot(self, tmp_path: Path) -> None:
        output = build_graph(_workspace(tmp_path), filters=FilterContext(local_only=True))
        assert output == 'digraph dependencies {"app" -> "core";}'

    def test_ignore(self, tmp_path: Path) -> None:
        output = build_graph(_workspace(tmp_path), filters=FilterContext(ignored_names=frozenset({"core"})))
        assert '"core"' not in output
        assert '"app" -> "serde";' in output

    def test_mermaid(self, tmp_path: Path) -> None:
        output = build_graph(_workspace(tmp_path), fmt="mermaid")
        assert output.startswith("graph LR")
        assert "app[app] --> core[core]" in output

    def test_dedup_across_routes(self, tmp_path: Path) -> None:
        root = _workspace(tmp_path)
        # A second copy of app's manifest yields the same node twice.
        _write(root / "backup" / "app", (root / "app" / "Cargo.toml").read_text())
        output = build_graph(root, monolithic=True)
        assert output.count('"app" -> "core";') == 1
        assert '"orphan" -> "core";' in output

"""Textual TUI for browsing the package dependency graph of a project."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from rich.markup import escape

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Footer, Header, Input, Static, Tree
from textual.widgets.tree import TreeNode
from textual.worker import Worker, WorkerState

from cargograph.api import collect_packages
from cargograph.core.parser import FilterContext, PackageNode

COLOR_HEADER = "bold magenta"
COLOR_LOCAL = "bold green"
COLOR_EXTERNAL = "dim"
COLOR_STATS = "cyan"
COLOR_PATH = "dim"


def index_packages(nodes: Iterable[PackageNode]) -> dict[str, PackageNode]:
    """Map package name -> node. The first node seen for a name wins."""
    index: dict[str, PackageNode] = {}
    for node in nodes:
        index.setdefault(node.name, node)
    return index


def reverse_dependencies(nodes: Iterable[PackageNode]) -> dict[str, list[str]]:
    """Map package name -> sorted names of the packages that depend on it."""
    dependents: dict[str, set[str]] = {}
    for node in nodes:
        for dep in node.dependencies:
            dependents.setdefault(dep, set()).add(node.name)
    return {name: sorted(names) for name, names in dependents.items()}


def format_package(node: PackageNode, index: dict[str, PackageNode], dependents: dict[str, list[str]]) -> str:
    """Details panel text for one package."""
    local = [d for d in node.dependencies if d in index]
    external = [d for d in node.dependencies if d not in index]
    used_by = dependents.get(node.name, [])
    lines = [
        f"[{COLOR_HEADER}]Package[/]",
        f"  [{COLOR_LOCAL}]{escape(node.name)}[/]",
        "",
        f"[{COLOR_HEADER}]Stats[/]",
        f"  Local dependencies:     [{COLOR_STATS}]{len(local)}[/]",
        f"  External dependencies:  [{COLOR_STATS}]{len(external)}[/]",
        f"  Used by:                [{COLOR_STATS}]{len(used_by)}[/]"
        + (f" [dim]({escape(', '.join(used_by))})[/]" if used_by else ""),
        "",
        f"[{COLOR_HEADER}]Manifest[/]",
        f"  [{COLOR_PATH}]{escape(str(node.path)) if node.path else '(n/a)'}[/]",
    ]
    return "\n".join(lines)


class SearchScreen(ModalScreen[str | None]):
    """Modal to search for packages in the tree. Keyboard-only."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=True),
    ]

    DEFAULT_CSS = """
    SearchScreen {
        align: center middle;
        padding: 2 4;
    }
    SearchScreen #search_input {
        width: 60;
        margin: 1 0;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("[bold cyan]Search[/]\n\nType a package name or part of one.", markup=True)
            yield Input(placeholder="package name...", id="search_input")
            yield Static("[dim]Enter[/] = Search  ·  [dim]Escape[/] = Cancel", markup=True)

    def on_mount(self) -> None:
        self.query_one("#search_input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        value = event.value.strip()
        self.dismiss(value or None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class GraphApp(App[None]):
    """Terminal UI to explore the packages of a project and their dependencies."""

    TITLE = "cargograph"
    BINDINGS = [
        Binding("/", "search", "Search"),
        Binding("n", "next_match", "Next match", show=False),
        Binding("r", "refresh", "Refresh"),
        Binding("c", "collapse_all", "Collapse"),
        Binding("q", "quit", "Quit"),
    ]

    DEFAULT_CSS = """
    #details {
        padding: 1 2;
        border: solid $primary;
        height: auto;
        min-height: 8;
    }
    """

    def __init__(
        self,
        root: Path,
        *,
        monolithic: bool = False,
        filters: FilterContext | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._root = root
        self._monolithic = monolithic
        self._filters = filters
        self._index: dict[str, PackageNode] = {}
        self._dependents: dict[str, list[str]] = {}
        self._populated: set[int] = set()
        self._search_matches: list[TreeNode] = []
        self._search_index = 0

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        yield Tree("Packages", id="pkg_tree")
        yield Static("[dim]Loading packages...[/]", id="details", markup=True)
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = str(self._root)
        self._start_load()

    def _start_load(self) -> None:
        self.run_worker(self._load_worker, thread=True, exclusive=True, exit_on_error=False)

    def _load_worker(self) -> list[PackageNode]:
        return collect_packages(self._root, monolithic=self._monolithic, filters=self._filters)

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if event.state == WorkerState.SUCCESS:
            self._show_packages(event.worker.result or [])
        elif event.state == WorkerState.ERROR:
            self._set_details(f"[red]Error: {escape(str(event.worker.error))}[/]")

    def _show_packages(self, nodes: list[PackageNode]) -> None:
        self._index = index_packages(nodes)
        self._dependents = reverse_dependencies(nodes)
        self._populated.clear()
        tree = self.query_one("#pkg_tree", Tree)
        tree.clear()
        tree.root.label = f"[{COLOR_HEADER}]Packages ({len(self._index)})[/]"
        for name in sorted(self._index):
            self._add_package(tree.root, self._index[name])
        tree.root.expand()
        self._set_details(
            f"Total: [{COLOR_STATS}]{len(self._index)}[/] packages\n\n"
            "[dim]↑/↓[/] move  ·  [dim]Enter[/]/[dim]Space[/] expand  ·  [dim]/[/] search"
        )
        tree.focus()

    def _add_package(self, parent: TreeNode, node: PackageNode) -> None:
        if node.dependencies:
            parent.add(f"[{COLOR_LOCAL}]{escape(node.name)}[/]", data=node, expand=False)
        else:
            parent.add_leaf(f"[{COLOR_LOCAL}]{escape(node.name)}[/]", data=node)

    def on_tree_node_expanded(self, event: Tree.NodeExpanded) -> None:
        """Add dependency children the first time a package is expanded."""
        tn = event.node
        node = tn.data
        if not isinstance(node, PackageNode) or tn.id in self._populated:
            return
        self._populated.add(tn.id)
        for dep in node.dependencies:
            if dep in self._index:
                self._add_package(tn, self._index[dep])
            else:
                tn.add_leaf(f"[{COLOR_EXTERNAL}]{escape(dep)} (external)[/]", data=dep)

    def on_tree_node_highlighted(self, event: Tree.NodeHighlighted) -> None:
        node = event.node.data
        if isinstance(node, PackageNode):
            self._set_details(format_package(node, self._index, self._dependents))
        elif isinstance(node, str):
            users = self._dependents.get(node, [])
            self._set_details(
                f"[{COLOR_EXTERNAL}]{escape(node)}[/] (external)\n\n"
                f"Used by: {escape(', '.join(users)) or '-'}"
            )

    def _set_details(self, text: str) -> None:
        self.query_one("#details", Static).update(text)

    def action_refresh(self) -> None:
        self._set_details("[dim]Loading packages...[/]")
        self._start_load()

    def action_collapse_all(self) -> None:
        tree = self.query_one("#pkg_tree", Tree)
        for child in tree.root.children:
            child.collapse_all()

    def action_search(self) -> None:
        self.push_screen(SearchScreen(), self._on_search_done)

    def _on_search_done(self, query: str | None) -> None:
        if not query:
            return
        tree = self.query_one("#pkg_tree", Tree)
        needle = query.lower()
        self._search_matches = [
            tn for tn in tree.root.children if isinstance(tn.data, PackageNode) and needle in tn.data.name.lower()
        ]
        self._search_index = 0
        if not self._search_matches:
            self.notify(f"No matches for '{escape(query)}'", severity="warning", timeout=2)
            return
        self._goto_match(0)

    def _goto_match(self, index: int) -> None:
        self._search_index = index % len(self._search_matches)
        match_node = self._search_matches[self._search_index]
        tree = self.query_one("#pkg_tree", Tree)
        tree.select_node(match_node)
        tree.scroll_to_node(match_node)

    def action_next_match(self) -> None:
        if not self._search_matches:
            self.notify("No active search. Press / to search.", severity="information", timeout=2)
            return
        self._goto_match(self._search_index + 1)

"""Discover the manifests that make up a project: workspace resolution and flat scans."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from cargograph.core.manifest import ManifestDocument, is_manifest_file, load_manifest, locate_manifest
from cargograph.core.parser import FilterContext

logger = logging.getLogger(__name__)

_GLOB_CHARS = ("*", "?", "[")


def _string_entries(values: list | None) -> list[str]:
    """Keep the string entries of an optional TOML array."""
    if not values:
        return []
    return [v for v in values if isinstance(v, str)]


def workspace_member_paths(manifest: ManifestDocument) -> list[Path]:
    """
    Directories declared under ``[workspace] members``, relative paths joined onto the manifest dir.

    Entries containing glob characters (``crates/*``) are expanded to the matching
    directories in sorted order; ``[workspace] exclude`` entries are dropped.
    """
    base = manifest.directory
    members = _string_entries(manifest.get_array("workspace", "members"))
    excluded = {(base / e).resolve() for e in _string_entries(manifest.get_array("workspace", "exclude"))}

    paths: list[Path] = []
    for member in members:
        if any(c in member for c in _GLOB_CHARS):
            try:
                matches = sorted(p for p in base.glob(member) if p.is_dir())
            except (OSError, ValueError, NotImplementedError) as e:
                logger.debug("Bad member pattern %r in %s: %s", member, manifest.path, e)
                continue
            paths.extend(matches)
        else:
            paths.append(base / member)
    if excluded:
        paths = [p for p in paths if p.resolve() not in excluded]
    return paths


def path_dependency_paths(manifest: ManifestDocument) -> list[Path]:
    """Directories referenced by ``path = "..."`` entries of the ``[dependencies]`` table."""
    dependencies = manifest.get_table("dependencies")
    if not dependencies:
        return []
    paths: list[Path] = []
    for spec in dependencies.values():
        if isinstance(spec, dict) and isinstance(spec.get("path"), str):
            paths.append(manifest.directory / spec["path"])
    return paths


def child_paths(manifest: ManifestDocument) -> list[Path]:
    """Workspace members first, then path dependencies, each in declaration order."""
    return workspace_member_paths(manifest) + path_dependency_paths(manifest)


def resolve_workspace(
    directory: Path,
    *,
    _visited: set[Path] | None = None,
) -> list[ManifestDocument]:
    """
    Recursively collect the manifests reachable from the manifest in ``directory``.

    The manifest found in ``directory`` comes first, followed by the results of
    resolving each workspace member and path dependency in turn. A child whose
    directory holds no manifest contributes nothing; it never aborts the parent.

    Directories are tracked by canonical path so that cyclic path dependencies
    terminate and two paths aliasing the same directory are visited once.

    Args:
        directory: Directory holding the (root) manifest.
        _visited: Internal set of already-resolved canonical directories.

    Returns:
        Manifests in discovery order; empty if ``directory`` has no manifest.
    """
    if _visited is None:
        _visited = set()
    try:
        canonical = directory.resolve()
    except (OSError, RuntimeError):
        canonical = directory.absolute()
    if canonical in _visited:
        logger.debug("Already resolved %s, skipping", directory)
        return []

    manifest = locate_manifest(directory)
    if manifest is None:
        logger.debug("No manifest at %s, dropping branch", directory)
        return []
    _visited.add(canonical)

    children = child_paths(manifest)
    if not children:
        return [manifest]

    result = [manifest]
    for child in children:
        result.extend(resolve_workspace(child, _visited=_visited))
    return result


def _is_ignored(path: str, ignored_path_substrings: tuple[str, ...]) -> bool:
    return any(s in path for s in ignored_path_substrings)


def scan_monolithic(
    directory: Path,
    filters: FilterContext | None = None,
) -> list[ManifestDocument]:
    """
    Collect every manifest file under ``directory``, ignoring declared structure.

    Paths containing any of ``filters.ignored_path_substrings`` are skipped (an
    ignored directory is not descended into). Files that fail to parse are
    dropped silently.
    """
    ignored = filters.ignored_path_substrings if filters is not None else ()
    manifests: list[ManifestDocument] = []

    def _on_error(error: OSError) -> None:
        logger.debug("Cannot walk %s: %s", error.filename, error)

    for root, dirs, files in os.walk(directory, onerror=_on_error):
        dirs[:] = sorted(d for d in dirs if not _is_ignored(os.path.join(root, d), ignored))
        for name in sorted(files):
            file_path = Path(root) / name
            if not is_manifest_file(file_path) or _is_ignored(str(file_path), ignored):
                continue
            manifest = load_manifest(file_path)
            if manifest is not None:
                manifests.append(manifest)
    logger.info("Scanned %s: %d manifest(s)", directory, len(manifests))
    return manifests

"""Load TOML package manifests and locate the manifest inside a directory."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

MANIFEST_SUFFIX = ".toml"
# Preferred when a directory holds several .toml files (rustfmt.toml, clippy.toml, ...).
MANIFEST_NAME = "Cargo.toml"


@dataclass
class ManifestDocument:
    """A parsed manifest file: where it was found and its decoded TOML tree."""

    path: Path
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def directory(self) -> Path:
        """Directory containing the manifest; child paths are relative to it."""
        return self.path.parent

    def get_field(self, *keys: str) -> Any | None:
        """Walk nested tables by key; None as soon as a key is missing or not a table."""
        value: Any = self.data
        for key in keys:
            if not isinstance(value, dict):
                return None
            value = value.get(key)
            if value is None:
                return None
        return value

    def get_string(self, *keys: str) -> str | None:
        value = self.get_field(*keys)
        return value if isinstance(value, str) else None

    def get_table(self, *keys: str) -> dict[str, Any] | None:
        value = self.get_field(*keys)
        return value if isinstance(value, dict) else None

    def get_array(self, *keys: str) -> list[Any] | None:
        value = self.get_field(*keys)
        return value if isinstance(value, list) else None


def is_manifest_file(path: Path) -> bool:
    """True if path names a manifest (by suffix)."""
    return path.name.endswith(MANIFEST_SUFFIX)


def load_manifest(path: Path) -> ManifestDocument | None:
    """
    Read and decode one manifest file.

    Returns None if the file cannot be read, is not UTF-8, or is not valid TOML.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Skipping unreadable manifest %s: %s", path, e)
        return None
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        logger.debug("Skipping invalid manifest %s: %s", path, e)
        return None
    return ManifestDocument(path=path, data=data)


def _candidate_order(path: Path) -> tuple[bool, str]:
    return (path.name != MANIFEST_NAME, path.name)


def locate_manifest(directory: Path) -> ManifestDocument | None:
    """
    Find the manifest directly inside a directory.

    Lists the immediate entries of ``directory``, keeps files ending in ``.toml``
    and returns the first one that parses (``Cargo.toml`` is tried first, then
    the others by name). Several manifests in one directory are not an error.

    Returns:
        The parsed ManifestDocument, or None if the directory is missing or
        unreadable, has no manifest file, or none of them parses.
    """
    try:
        entries = [p for p in directory.iterdir() if is_manifest_file(p) and p.is_file()]
    except OSError as e:
        logger.debug("Cannot list %s: %s", directory, e)
        return None
    for candidate in sorted(entries, key=_candidate_order):
        manifest = load_manifest(candidate)
        if manifest is not None:
            return manifest
    logger.debug("No parseable manifest in %s", directory)
    return None

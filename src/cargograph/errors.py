"""Exceptions for the conditions that abort a cargograph run."""

from __future__ import annotations

from pathlib import Path


class CargoGraphError(Exception):
    """Base class for fatal cargograph errors."""


class RootNotFoundError(CargoGraphError):
    """The root path given on the command line does not exist."""

    def __init__(self, root: Path) -> None:
        super().__init__(f"Root path not found: {root}")
        self.root = root


class NoManifestsFoundError(CargoGraphError):
    """Discovery found no manifest that yields a package node."""

    def __init__(self, root: Path) -> None:
        super().__init__(f"No applicable manifests found under: {root}")
        self.root = root


class GraphSerializationError(CargoGraphError):
    """The rendered graph could not be encoded as valid UTF-8 text."""

"""
Exporter contract and registry.

The base class owns path handling and file lifetime; a format only
implements ``write``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path
from typing import ClassVar, TextIO

from docgraph.core.graph import DocumentGraph


class BaseExporter(ABC):
    """
    Abstract base class for graph exporters.

    Exporters write structural graphs to files for downstream stages
    such as keyword extraction or embedding.
    """

    EXPORTER_NAME: ClassVar[str] = "base"
    FILE_EXTENSION: ClassVar[str] = ""

    def export_graph(self, graph: DocumentGraph, path: Path) -> Path:
        """
        Export a single document graph.

        Args:
            graph: Graph to export
            path: Output file path; the suffix is forced to FILE_EXTENSION

        Returns:
            Path to exported file
        """
        return self._export([graph], path, single=True)

    def export_graphs(self, graphs: Iterable[DocumentGraph], path: Path) -> Path:
        """Export several graphs into one file."""
        return self._export(list(graphs), path, single=False)

    @abstractmethod
    def write(self, graphs: list[DocumentGraph], f: TextIO, single: bool) -> None:
        """Serialize ``graphs`` to an open text file."""

    def _export(self, graphs: list[DocumentGraph], path: Path, single: bool) -> Path:
        path = self._ensure_extension(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            self.write(graphs, f, single)
        return path

    def _ensure_extension(self, path: Path) -> Path:
        if path.suffix.lower() != self.FILE_EXTENSION.lower():
            return path.with_suffix(self.FILE_EXTENSION)
        return path


class ExporterRegistry:
    """Exporter classes by format name."""

    _by_name: ClassVar[dict[str, type[BaseExporter]]] = {}

    @classmethod
    def register(cls, exporter_class: type[BaseExporter]) -> type[BaseExporter]:
        cls._by_name[exporter_class.EXPORTER_NAME] = exporter_class
        return exporter_class

    @classmethod
    def get_exporter(cls, name: str) -> BaseExporter | None:
        exporter_class = cls._by_name.get(name)
        return exporter_class() if exporter_class is not None else None

    @classmethod
    def available_exporters(cls) -> list[str]:
        return sorted(cls._by_name)

    @classmethod
    def export(cls, graph: DocumentGraph, path: Path, format: str) -> Path:
        """Export a graph using the named format.

        Raises:
            ValueError: If no exporter is registered under ``format``.
        """
        exporter = cls.get_exporter(format)
        if exporter is None:
            available = ", ".join(cls.available_exporters())
            raise ValueError(f"Unknown export format: {format}. Available: {available}")
        return exporter.export_graph(graph, path)

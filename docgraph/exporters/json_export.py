"""
JSON exporter for docgraph.

Writes graphs as one JSON document with statistics, suitable for
debugging or custom integrations.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, ClassVar, TextIO

from docgraph.core.graph import DocumentGraph
from docgraph.exporters.base import BaseExporter, ExporterRegistry
from docgraph.exporters.schema import SCHEMA_VERSION


@ExporterRegistry.register
class JSONExporter(BaseExporter):
    """Export graphs as JSON with full structure.

    A single graph is written under ``graph``; several under ``graphs``.
    """

    EXPORTER_NAME: ClassVar[str] = "json"
    FILE_EXTENSION: ClassVar[str] = ".json"

    def write(self, graphs: list[DocumentGraph], f: TextIO, single: bool) -> None:
        export_data: dict[str, Any] = {
            "version": SCHEMA_VERSION,
            "exported_at": datetime.now().isoformat(),
            "exporter": "docgraph",
        }
        if single:
            export_data["graph"] = _graph_payload(graphs[0])
        else:
            export_data["graphs"] = [_graph_payload(graph) for graph in graphs]

        json.dump(export_data, f, indent=2, ensure_ascii=False)


def _graph_payload(graph: DocumentGraph) -> dict[str, Any]:
    return {**graph.to_dict(), "statistics": graph.get_statistics()}


def load_graph(path: Path) -> DocumentGraph:
    """Read a graph written by ``JSONExporter.export_graph``.

    Raises:
        ValueError: If the file holds a multi-graph export.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if "graph" not in data:
        raise ValueError(f"{path} does not contain a single exported graph")
    return DocumentGraph.from_dict(data["graph"])

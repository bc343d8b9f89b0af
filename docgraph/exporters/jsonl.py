"""
JSONL exporter for docgraph.

One record per line: every node of a graph first, then its edges, each
tagged with ``record_type`` so graph databases can bulk-load them.
"""

from __future__ import annotations

import json
from typing import ClassVar, TextIO

from docgraph.core.graph import DocumentGraph
from docgraph.exporters.base import BaseExporter, ExporterRegistry
from docgraph.exporters.schema import edge_record, node_record


@ExporterRegistry.register
class JSONLExporter(BaseExporter):
    """Export graphs as JSONL (newline-delimited JSON)."""

    EXPORTER_NAME: ClassVar[str] = "jsonl"
    FILE_EXTENSION: ClassVar[str] = ".jsonl"

    def write(self, graphs: list[DocumentGraph], f: TextIO, single: bool) -> None:
        for graph in graphs:
            for i in range(len(graph.nodes)):
                f.write(json.dumps(node_record(graph, i), ensure_ascii=False) + "\n")
            for i in range(len(graph.edges)):
                f.write(json.dumps(edge_record(graph, i), ensure_ascii=False) + "\n")

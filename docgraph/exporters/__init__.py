"""
Exporters for docgraph.

Importing this package registers every built-in exporter.
"""

from docgraph.exporters.base import BaseExporter, ExporterRegistry
from docgraph.exporters.json_export import JSONExporter, load_graph
from docgraph.exporters.jsonl import JSONLExporter
from docgraph.exporters.schema import SCHEMA_VERSION

__all__ = [
    "BaseExporter",
    "ExporterRegistry",
    "JSONExporter",
    "JSONLExporter",
    "SCHEMA_VERSION",
    "load_graph",
]

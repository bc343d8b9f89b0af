"""
Tests for docgraph exporters.
"""

import json
from pathlib import Path

import pytest

from docgraph.core.graph import DocumentGraph
from docgraph.exporters import ExporterRegistry, JSONExporter, JSONLExporter, load_graph
from docgraph.exporters.base import BaseExporter
from docgraph.exporters.schema import SCHEMA_VERSION, validate_payload
from docgraph.pipeline import StructureGraphPipeline


@pytest.fixture
def graph(sample_markdown: str) -> DocumentGraph:
    return StructureGraphPipeline().process(sample_markdown, "manual")


class TestExporterRegistry:
    """Tests for ExporterRegistry."""

    def test_available_exporters(self):
        exporters = ExporterRegistry.available_exporters()

        assert "json" in exporters
        assert "jsonl" in exporters

    def test_get_unknown_exporter(self):
        assert ExporterRegistry.get_exporter("graphml") is None

    def test_export_unknown_format(self, graph, tmp_path):
        with pytest.raises(ValueError):
            ExporterRegistry.export(graph, tmp_path / "out", "graphml")

    def test_export_by_format(self, graph, tmp_path):
        path = ExporterRegistry.export(graph, tmp_path / "out", "jsonl")
        assert path.suffix == ".jsonl"
        assert path.exists()


class TestJSONExporter:
    """Tests for JSONExporter."""

    def test_export_graph(self, graph, tmp_path):
        path = JSONExporter().export_graph(graph, tmp_path / "manual.json")

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["version"] == SCHEMA_VERSION
        assert data["exporter"] == "docgraph"
        assert data["graph"]["source_id"] == "manual"
        assert data["graph"]["statistics"]["node_count"] == len(graph.nodes)
        assert validate_payload(data) == []

    def test_extension_fixed(self, graph, tmp_path):
        path = JSONExporter().export_graph(graph, tmp_path / "manual.txt")
        assert path.name == "manual.json"

    def test_load_graph_round_trip(self, graph, tmp_path):
        path = JSONExporter().export_graph(graph, tmp_path / "manual.json")

        restored = load_graph(path)

        assert restored.to_dict() == graph.to_dict()

    def test_export_graphs(self, graph, tmp_path):
        other = StructureGraphPipeline().process("# Other\n", "other")

        path = JSONExporter().export_graphs([graph, other], tmp_path / "all.json")

        data = json.loads(path.read_text(encoding="utf-8"))
        assert [g["source_id"] for g in data["graphs"]] == ["manual", "other"]
        with pytest.raises(ValueError):
            load_graph(path)


class TestJSONLExporter:
    """Tests for JSONLExporter."""

    def test_nodes_then_edges(self, graph, tmp_path):
        path = JSONLExporter().export_graph(graph, tmp_path / "manual")

        records = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]

        assert len(records) == len(graph.nodes) + len(graph.edges)
        kinds = [r["record_type"] for r in records]
        assert kinds == ["node"] * len(graph.nodes) + ["edge"] * len(graph.edges)
        assert all(r["source_id"] == "manual" for r in records)
        assert all(r["schema_version"] == SCHEMA_VERSION for r in records)

    def test_edge_record_fields(self, graph, tmp_path):
        path = JSONLExporter().export_graph(graph, tmp_path / "manual.jsonl")

        edges = [
            json.loads(line)
            for line in path.read_text(encoding="utf-8").splitlines()
            if '"record_type": "edge"' in line
        ]
        link_edge = next(e for e in edges if e["edge"]["relationship_type"] == "LINKS_TO")
        assert link_edge["edge"]["metadata"]["url"] == "./wiring.md"

    def test_edge_endpoints_keep_document_tag(self, tmp_path):
        graph = StructureGraphPipeline().process("# A\n## B\n", "doc")

        path = JSONLExporter().export_graph(graph, tmp_path / "doc.jsonl")

        records = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
        edge = next(r for r in records if r["record_type"] == "edge")
        assert edge["source_id"] == "doc"
        assert edge["edge"]["source_id"] == "doc#0"
        assert edge["edge"]["target_id"] == "doc#1"
        node = records[0]
        assert node["source_id"] == "doc"
        assert node["node"]["id"] == "doc#0"

    def test_export_graphs(self, graph, tmp_path):
        other = StructureGraphPipeline().process("# Other\n", "other")

        path = JSONLExporter().export_graphs([graph, other], tmp_path / "all.jsonl")

        lines = path.read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["source_id"] == "other"


class TestSchema:
    """Tests for payload validation."""

    def test_unknown_version(self):
        problems = validate_payload({"version": "9.9", "graph": {"source_id": "x", "nodes": [], "edges": []}})
        assert problems == ["unknown schema version: '9.9'"]

    def test_dangling_edge(self):
        payload = {
            "version": SCHEMA_VERSION,
            "graph": {
                "source_id": "x",
                "nodes": [{"id": "x#0"}],
                "edges": [{"source_id": "x#0", "target_id": "x#9"}],
            },
        }
        assert len(validate_payload(payload)) == 1

    def test_missing_graph(self):
        assert "missing graph object" in validate_payload({"version": SCHEMA_VERSION})


class TestBaseExporter:
    """Tests for the exporter base class."""

    def test_write_is_the_only_hook(self, graph, tmp_path):
        class SourceIds(BaseExporter):
            EXPORTER_NAME = "ids"
            FILE_EXTENSION = ".out"

            def write(self, graphs, f, single):
                f.write(("one:" if single else "many:") + ",".join(g.source_id for g in graphs))

        exporter = SourceIds()
        other = StructureGraphPipeline().process("# Other\n", "other")

        path = exporter.export_graph(graph, tmp_path / "nested" / "x")
        assert path == tmp_path / "nested" / "x.out"
        assert path.read_text(encoding="utf-8") == "one:manual"

        path = exporter.export_graphs(iter([graph, other]), tmp_path / "deeper" / "all")
        assert path.read_text(encoding="utf-8") == "many:manual,other"

    def test_ensure_extension(self):
        assert JSONLExporter()._ensure_extension(Path("a/b.JSONL")) == Path("a/b.JSONL")
        assert JSONLExporter()._ensure_extension(Path("a/b")) == Path("a/b.jsonl")

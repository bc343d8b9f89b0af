"""Export schema versioning for docgraph graph files."""

from __future__ import annotations

from typing import Any

from docgraph.core.graph import DocumentGraph

# Current export schema version (semver: MAJOR.MINOR)
# Increment MAJOR on breaking changes, MINOR on additive changes.
SCHEMA_VERSION = "1.0"

# Version history for documentation and migration.
SCHEMA_HISTORY: dict[str, str] = {
    "1.0": "Initial graph export with nodes, edges and statistics",
}


def node_record(graph: DocumentGraph, index: int) -> dict[str, Any]:
    """JSONL record for the node at ``index``.

    ``source_id`` names the document; the node itself sits under ``node``.
    """
    return {
        "schema_version": SCHEMA_VERSION,
        "record_type": "node",
        "source_id": graph.source_id,
        "node": graph.nodes[index].to_dict(),
    }


def edge_record(graph: DocumentGraph, index: int) -> dict[str, Any]:
    """JSONL record for the edge at ``index``.

    The edge sits under ``edge`` so its endpoint ids never shadow the
    document's ``source_id``.
    """
    return {
        "schema_version": SCHEMA_VERSION,
        "record_type": "edge",
        "source_id": graph.source_id,
        "edge": graph.edges[index].to_dict(),
    }


def validate_payload(payload: dict[str, Any]) -> list[str]:
    """Check an exported JSON payload; returns a list of problems."""
    problems: list[str] = []
    version = payload.get("version")
    if version not in SCHEMA_HISTORY:
        problems.append(f"unknown schema version: {version!r}")

    graph = payload.get("graph")
    if not isinstance(graph, dict):
        problems.append("missing graph object")
        return problems

    for key in ("source_id", "nodes", "edges"):
        if key not in graph:
            problems.append(f"graph is missing '{key}'")

    node_ids = {node.get("id") for node in graph.get("nodes", [])}
    for edge in graph.get("edges", []):
        if edge.get("source_id") not in node_ids or edge.get("target_id") not in node_ids:
            problems.append(
                f"edge {edge.get('source_id')} -> {edge.get('target_id')} has an unknown endpoint"
            )
    return problems

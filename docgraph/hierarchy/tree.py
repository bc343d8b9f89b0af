"""
Read-only tree view over a DocumentGraph.

Legacy consumers want simple parent/child navigation. SectionTree
derives it from the graph's edge list in one pass and never stores
anything the graph does not already say.
"""

from __future__ import annotations

from collections import Counter
from typing import Any

from docgraph.core.graph import (
    HIERARCHICAL_RELATIONSHIPS,
    SECTION_RELATIONSHIPS,
    DocumentGraph,
    NodeKind,
    RelationshipType,
    StructuralNode,
)


class SectionTree:
    """
    Parent/child index derived from a graph's hierarchical edges.

    Link edges are included only when ``include_links`` is set, so by
    default the view shows sections and their content.
    """

    def __init__(self, graph: DocumentGraph, include_links: bool = False) -> None:
        self.graph = graph
        self.include_links = include_links

        relationships = set(HIERARCHICAL_RELATIONSHIPS)
        if include_links:
            relationships.add(RelationshipType.LINKS_TO)

        self._children: dict[str, list[str]] = {}
        self._parent: dict[str, str] = {}
        for edge in graph.edges:
            if edge.relationship_type not in relationships:
                continue
            self._children.setdefault(edge.source_id, []).append(edge.target_id)
            # First hierarchical parent wins; the builder never emits a second
            self._parent.setdefault(edge.target_id, edge.source_id)

        self._members = [
            node.id for node in graph.nodes if include_links or node.kind is not NodeKind.LINK
        ]

    @classmethod
    def from_graph(cls, graph: DocumentGraph, include_links: bool = False) -> SectionTree:
        return cls(graph, include_links=include_links)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def node(self, node_id: str) -> StructuralNode:
        found = self.graph.get_node(node_id)
        if found is None:
            raise KeyError(node_id)
        return found

    def roots(self) -> list[StructuralNode]:
        """Nodes in the view with no parent, in document order."""
        return [self.node(nid) for nid in self._members if nid not in self._parent]

    def children(self, node_id: str) -> list[StructuralNode]:
        return [self.node(cid) for cid in self._children.get(node_id, [])]

    def subsections(self, node_id: str) -> list[StructuralNode]:
        """Direct child sections of a heading, in document order."""
        return [
            self.node(edge.target_id)
            for edge in self.graph.edges
            if edge.source_id == node_id and edge.relationship_type in SECTION_RELATIONSHIPS
        ]

    def parent(self, node_id: str) -> StructuralNode | None:
        parent_id = self._parent.get(node_id)
        return self.node(parent_id) if parent_id is not None else None

    def ancestors(self, node_id: str) -> list[StructuralNode]:
        """Ancestors from nearest to farthest."""
        result: list[StructuralNode] = []
        current = self._parent.get(node_id)
        while current is not None:
            result.append(self.node(current))
            current = self._parent.get(current)
        return result

    def depth(self, node_id: str) -> int:
        """Depth of a node in the view (roots = 0)."""
        return len(self.ancestors(node_id))

    def is_leaf(self, node_id: str) -> bool:
        return not self._children.get(node_id)

    def hierarchy_path(self, node_id: str) -> str:
        """
        Heading chain leading to (and including) a node.

        Example: "Chapter 1 > Section 1.1 > Safety"
        """
        chain = [self.node(node_id), *self.ancestors(node_id)]
        headings = [n.content for n in reversed(chain) if n.is_heading]
        return " > ".join(headings)

    def descendants(self, node_id: str) -> list[StructuralNode]:
        """All descendants in depth-first pre-order."""
        result: list[StructuralNode] = []
        stack = list(reversed(self._children.get(node_id, [])))
        while stack:
            current = stack.pop()
            result.append(self.node(current))
            stack.extend(reversed(self._children.get(current, [])))
        return result

    def walk(self) -> list[tuple[StructuralNode, int]]:
        """Every node in the view with its depth, depth-first from the roots."""
        result: list[tuple[StructuralNode, int]] = []
        stack = [(root.id, 0) for root in reversed(self.roots())]
        while stack:
            current, depth = stack.pop()
            result.append((self.node(current), depth))
            stack.extend((cid, depth + 1) for cid in reversed(self._children.get(current, [])))
        return result

    def leaves(self) -> list[StructuralNode]:
        return [node for node, _ in self.walk() if self.is_leaf(node.id)]

    @property
    def max_depth(self) -> int:
        walked = self.walk()
        return max((depth for _, depth in walked), default=0)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def get_statistics(self) -> dict[str, Any]:
        """Get view statistics for analysis."""
        walked = self.walk()
        headings = [node for node, _ in walked if node.is_heading]
        with_content = [
            node for node in headings
            if any(not child.is_heading for child in self.children(node.id))
        ]
        return {
            "total_nodes": len(walked),
            "root_count": len(self.roots()),
            "heading_count": len(headings),
            "headings_with_content": len(with_content),
            "leaf_nodes": sum(1 for node, _ in walked if self.is_leaf(node.id)),
            "max_depth": max((depth for _, depth in walked), default=0),
            "level_distribution": dict(Counter(node.level for node in headings)),
        }

    def flatten_to_sections(self) -> list[dict[str, Any]]:
        """
        Flatten the view to one record per heading.

        Each record carries the heading, its direct non-heading content,
        and its hierarchy path.
        """
        sections = []
        for node, depth in self.walk():
            if not node.is_heading:
                continue
            kids = self.children(node.id)
            content_nodes = [child for child in kids if not child.is_heading]
            sections.append(
                {
                    "node_id": node.id,
                    "heading": node.content,
                    "level": node.level,
                    "depth": depth,
                    "content": "\n\n".join(child.content for child in content_nodes),
                    "content_node_ids": [child.id for child in content_nodes],
                    "hierarchy_path": self.hierarchy_path(node.id),
                    "child_section_count": len(self.subsections(node.id)),
                }
            )
        return sections

    def to_dict(self) -> dict[str, Any]:
        """Nested dictionary form of the view."""

        def node_dict(node_id: str) -> dict[str, Any]:
            node = self.node(node_id)
            return {
                "id": node.id,
                "kind": node.kind.value,
                "content": node.content,
                "level": node.level,
                "children": [node_dict(cid) for cid in self._children.get(node_id, [])],
            }

        return {
            "source_id": self.graph.source_id,
            "statistics": self.get_statistics(),
            "roots": [node_dict(root.id) for root in self.roots()],
        }

    def render(self, max_depth: int | None = None, preview: int = 60) -> str:
        """Indented text outline for debugging."""
        lines = []
        for node, depth in self.walk():
            if max_depth is not None and depth > max_depth:
                continue
            label = node.content.replace("\n", " ")[:preview]
            prefix = "  " * depth
            if node.is_heading:
                lines.append(f"{prefix}[h{node.level}] {label}")
            else:
                lines.append(f"{prefix}({node.kind.value}) {label}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"<SectionTree source={self.graph.source_id} "
            f"roots={len(self.roots())} depth={self.max_depth}>"
        )

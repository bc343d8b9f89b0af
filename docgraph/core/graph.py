"""
Structural graph model for docgraph.

A DocumentGraph owns an ordered list of StructuralNodes and an ordered
list of RelationshipEdges. Nodes never point at each other; all
navigation goes through edge lookups so the graph stays free of
reference cycles.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from docgraph.core.elements import ElementKind


class NodeKind(Enum):
    """Kinds of graph nodes: every element kind plus synthetic kinds."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST = "list"
    CODE_BLOCK = "code_block"
    OTHER = "other"
    LINK = "link"
    DOCUMENT = "document"

    @classmethod
    def from_element_kind(cls, kind: ElementKind) -> NodeKind:
        return cls(kind.value)


class RelationshipType(str, Enum):
    """Edge types. Values are stable wire strings."""

    HAS_SUBSECTION = "HAS_SUBSECTION"
    HAS_NESTED_SECTION = "HAS_NESTED_SECTION"
    CONTAINS = "CONTAINS"
    LINKS_TO = "LINKS_TO"
    # Reserved, not emitted by the builder except SIBLING as a fallback
    FOLLOWS = "FOLLOWS"
    PRECEDES = "PRECEDES"
    SIBLING = "SIBLING"
    PARENT_OF = "PARENT_OF"


HIERARCHICAL_RELATIONSHIPS = frozenset(
    {
        RelationshipType.HAS_SUBSECTION,
        RelationshipType.HAS_NESTED_SECTION,
        RelationshipType.CONTAINS,
    }
)

SECTION_RELATIONSHIPS = frozenset(
    {RelationshipType.HAS_SUBSECTION, RelationshipType.HAS_NESTED_SECTION}
)


@dataclass(frozen=True)
class StructuralNode:
    """A node in the structural graph."""

    id: str
    kind: NodeKind
    content: str
    level: int = 0
    start_offset: int = 0
    end_offset: int = 0
    start_line: int = 0
    end_line: int = 0
    original_text: str = ""
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def is_heading(self) -> bool:
        return self.kind is NodeKind.HEADING

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "content": self.content,
            "level": self.level,
            "start_offset": self.start_offset,
            "end_offset": self.end_offset,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "original_text": self.original_text,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StructuralNode:
        return cls(
            id=data["id"],
            kind=NodeKind(data["kind"]),
            content=data.get("content", ""),
            level=data.get("level", 0),
            start_offset=data.get("start_offset", 0),
            end_offset=data.get("end_offset", 0),
            start_line=data.get("start_line", 0),
            end_line=data.get("end_line", 0),
            original_text=data.get("original_text", ""),
            metadata=data.get("metadata", {}),
        )

    def __repr__(self) -> str:
        preview = self.content[:40]
        return f"<StructuralNode {self.id} {self.kind.value} '{preview}' level={self.level}>"


@dataclass(frozen=True)
class RelationshipEdge:
    """A typed, directed edge between two nodes."""

    source_id: str
    target_id: str
    relationship_type: RelationshipType
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def is_hierarchical(self) -> bool:
        return self.relationship_type in HIERARCHICAL_RELATIONSHIPS

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_id": self.source_id,
            "target_id": self.target_id,
            "relationship_type": self.relationship_type.value,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RelationshipEdge:
        return cls(
            source_id=data["source_id"],
            target_id=data["target_id"],
            relationship_type=RelationshipType(data["relationship_type"]),
            metadata=data.get("metadata", {}),
        )


@dataclass
class DocumentGraph:
    """
    The aggregate root: one source document's nodes and edges.

    Both collections are append-only. ``add_node`` and ``add_edge`` are
    the only mutators and are meant for the builder.
    """

    source_id: str
    nodes: list[StructuralNode] = field(default_factory=list)
    edges: list[RelationshipEdge] = field(default_factory=list)
    _index: dict[str, StructuralNode] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        for node in self.nodes:
            if node.id in self._index:
                raise ValueError(f"duplicate node id: {node.id}")
            self._index[node.id] = node

    def add_node(self, node: StructuralNode) -> StructuralNode:
        if node.id in self._index:
            raise ValueError(f"duplicate node id: {node.id}")
        self.nodes.append(node)
        self._index[node.id] = node
        return node

    def add_edge(self, edge: RelationshipEdge) -> RelationshipEdge:
        if edge.source_id not in self._index or edge.target_id not in self._index:
            raise ValueError(
                f"edge endpoints must exist: {edge.source_id} -> {edge.target_id}"
            )
        self.edges.append(edge)
        return edge

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_node(self, node_id: str) -> StructuralNode | None:
        return self._index.get(node_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def __iter__(self) -> Iterator[StructuralNode]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def nodes_of_kind(self, kind: NodeKind) -> list[StructuralNode]:
        return [node for node in self.nodes if node.kind is kind]

    def edges_of_type(self, relationship_type: RelationshipType) -> list[RelationshipEdge]:
        return [edge for edge in self.edges if edge.relationship_type is relationship_type]

    def edges_from(self, node_id: str) -> list[RelationshipEdge]:
        return [edge for edge in self.edges if edge.source_id == node_id]

    def edges_to(self, node_id: str) -> list[RelationshipEdge]:
        return [edge for edge in self.edges if edge.target_id == node_id]

    def children(self, node_id: str) -> list[StructuralNode]:
        """Hierarchical children of a node, in emission order."""
        return [
            self._index[edge.target_id]
            for edge in self.edges
            if edge.source_id == node_id and edge.is_hierarchical
        ]

    def parent(self, node_id: str) -> StructuralNode | None:
        """Hierarchical parent of a node, or None for roots."""
        for edge in self.edges:
            if edge.target_id == node_id and edge.is_hierarchical:
                return self._index[edge.source_id]
        return None

    def root_nodes(self) -> list[StructuralNode]:
        """Nodes with no inbound hierarchical or link edge."""
        targets = {
            edge.target_id
            for edge in self.edges
            if edge.is_hierarchical or edge.relationship_type is RelationshipType.LINKS_TO
        }
        return [node for node in self.nodes if node.id not in targets]

    @property
    def headings(self) -> list[StructuralNode]:
        return self.nodes_of_kind(NodeKind.HEADING)

    @property
    def link_nodes(self) -> list[StructuralNode]:
        return self.nodes_of_kind(NodeKind.LINK)

    def get_statistics(self) -> dict[str, Any]:
        """Count nodes by kind and edges by type."""
        node_counts: dict[str, int] = {}
        for node in self.nodes:
            node_counts[node.kind.value] = node_counts.get(node.kind.value, 0) + 1
        edge_counts: dict[str, int] = {}
        for edge in self.edges:
            key = edge.relationship_type.value
            edge_counts[key] = edge_counts.get(key, 0) + 1
        return {
            "node_count": len(self.nodes),
            "edge_count": len(self.edges),
            "nodes_by_kind": dict(sorted(node_counts.items())),
            "edges_by_type": dict(sorted(edge_counts.items())),
        }

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_id": self.source_id,
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DocumentGraph:
        graph = cls(
            source_id=data["source_id"],
            nodes=[StructuralNode.from_dict(n) for n in data.get("nodes", [])],
        )
        for edge_data in data.get("edges", []):
            graph.add_edge(RelationshipEdge.from_dict(edge_data))
        return graph

    def __repr__(self) -> str:
        return (
            f"<DocumentGraph source={self.source_id} "
            f"nodes={len(self.nodes)} edges={len(self.edges)}>"
        )

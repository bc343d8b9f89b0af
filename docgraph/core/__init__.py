"""Core data models for docgraph."""

from docgraph.core.elements import (
    ContentElement,
    ElementKind,
    InlineKind,
    InlineSpan,
    inline_text,
)
from docgraph.core.graph import (
    HIERARCHICAL_RELATIONSHIPS,
    SECTION_RELATIONSHIPS,
    DocumentGraph,
    NodeKind,
    RelationshipEdge,
    RelationshipType,
    StructuralNode,
)

__all__ = [
    "ContentElement",
    "DocumentGraph",
    "ElementKind",
    "HIERARCHICAL_RELATIONSHIPS",
    "InlineKind",
    "InlineSpan",
    "NodeKind",
    "RelationshipEdge",
    "RelationshipType",
    "SECTION_RELATIONSHIPS",
    "StructuralNode",
    "inline_text",
]

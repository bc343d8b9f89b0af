"""
docgraph - structural graphs from classified document elements.

Headings, paragraphs, lists, code blocks and their links become a
forest of section nodes joined by containment and cross-reference
edges.
"""

from docgraph.config import GraphBuildConfig, RootPolicy
from docgraph.core import (
    ContentElement,
    DocumentGraph,
    ElementKind,
    InlineKind,
    InlineSpan,
    NodeKind,
    RelationshipEdge,
    RelationshipType,
    StructuralNode,
)
from docgraph.exporters import ExporterRegistry
from docgraph.hierarchy import GraphBuilder, SectionTree, build_graph
from docgraph.links import DocumentLink, LinkType, classify_link, extract_links
from docgraph.loaders import LoaderError, LoaderRegistry, MarkdownLoader, PatternLoader
from docgraph.pipeline import EmptyDocumentError, StructureGraphPipeline

__version__ = "0.1.0"

__all__ = [
    "ContentElement",
    "DocumentGraph",
    "DocumentLink",
    "ElementKind",
    "EmptyDocumentError",
    "ExporterRegistry",
    "GraphBuildConfig",
    "GraphBuilder",
    "InlineKind",
    "InlineSpan",
    "LinkType",
    "LoaderError",
    "LoaderRegistry",
    "MarkdownLoader",
    "NodeKind",
    "PatternLoader",
    "RelationshipEdge",
    "RelationshipType",
    "RootPolicy",
    "SectionTree",
    "StructuralNode",
    "StructureGraphPipeline",
    "build_graph",
    "classify_link",
    "extract_links",
]

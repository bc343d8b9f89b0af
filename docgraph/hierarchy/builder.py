"""
Structural graph builder.

Builds a DocumentGraph from an ordered sequence of ContentElements in a
single forward pass.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from docgraph.config import GraphBuildConfig, RootPolicy
from docgraph.core.elements import ContentElement, ElementKind
from docgraph.core.graph import (
    DocumentGraph,
    NodeKind,
    RelationshipEdge,
    RelationshipType,
    StructuralNode,
)
from docgraph.hierarchy.classifier import classify_content, classify_heading
from docgraph.hierarchy.spans import extract_original_text
from docgraph.hierarchy.tracker import HeadingAncestryTracker
from docgraph.links.extractor import DocumentLink, extract_links

logger = logging.getLogger(__name__)


class GraphBuilder:
    """
    Builds structural graphs from classified elements.

    Strategy, per element in document order:
    1. Create its node (with line-expanded original text)
    2. Heading: open it on the ancestry tracker and link it to the
       nearest ancestor by level delta
    3. Anything else: attach it to the current heading with CONTAINS,
       then materialize its internal links as link nodes

    All working state lives in local variables of ``build``, so one
    builder can serve many documents concurrently.
    """

    def __init__(self, config: GraphBuildConfig | None = None) -> None:
        self.config = config or GraphBuildConfig()
        self.config.validate()

    def build(
        self,
        elements: Iterable[ContentElement],
        source_id: str,
        source_text: str = "",
    ) -> DocumentGraph:
        """Build the graph for one document.

        Args:
            elements: Classified elements in document order.
            source_id: Identifier of the source document.
            source_text: Original text the element offsets refer to.
                When empty, ``original_text`` stays empty.

        Returns:
            DocumentGraph with all nodes and edges.
        """
        graph = DocumentGraph(source_id=source_id)
        tracker = HeadingAncestryTracker()
        counter = _IdSequence(source_id)

        virtual_root: StructuralNode | None = None
        if self.config.root_policy is RootPolicy.VIRTUAL_ROOT:
            virtual_root = graph.add_node(
                StructuralNode(
                    id=f"{source_id}#root",
                    kind=NodeKind.DOCUMENT,
                    content=source_id,
                    end_offset=len(source_text),
                    metadata={"virtual": True},
                )
            )

        element_count = 0
        for element in elements:
            element_count += 1
            links = extract_links(element.inline_spans) if element.inline_spans else []
            node = graph.add_node(self._make_node(element, counter.next(), source_text, links))

            if element.kind is ElementKind.HEADING:
                ancestor = tracker.push(node)
                relationship = classify_heading(ancestor, node.level)
                if ancestor is not None and relationship is not None:
                    graph.add_edge(
                        RelationshipEdge(
                            source_id=ancestor.id,
                            target_id=node.id,
                            relationship_type=relationship,
                            metadata={"level_delta": node.level - ancestor.level},
                        )
                    )
            else:
                attachment = classify_content(
                    tracker.current_heading(), virtual_root, self.config.root_policy
                )
                if attachment is not None:
                    parent, relationship = attachment
                    graph.add_edge(
                        RelationshipEdge(
                            source_id=parent.id,
                            target_id=node.id,
                            relationship_type=relationship,
                        )
                    )
                # Links in headings are recorded on the node but never materialized
                self._add_link_nodes(graph, node, links, counter)

        logger.debug(
            "Built graph %s: %d elements, %d nodes, %d edges",
            source_id,
            element_count,
            len(graph.nodes),
            len(graph.edges),
        )
        return graph

    def _make_node(
        self,
        element: ContentElement,
        node_id: str,
        source_text: str,
        links: list[DocumentLink],
    ) -> StructuralNode:
        """Create the node for one element."""
        original_text = ""
        if self.config.preserve_original_text and source_text:
            original_text = extract_original_text(
                source_text, element.start_offset, element.end_offset
            )

        metadata: dict[str, Any] = dict(element.attributes)
        if self.config.record_links and links:
            metadata["links"] = [link.to_dict() for link in links]

        return StructuralNode(
            id=node_id,
            kind=NodeKind.from_element_kind(element.kind),
            content=element.text,
            level=element.level,
            start_offset=element.start_offset,
            end_offset=element.end_offset,
            start_line=element.start_line,
            end_line=element.end_line,
            original_text=original_text,
            metadata=metadata,
        )

    def _add_link_nodes(
        self,
        graph: DocumentGraph,
        owner: StructuralNode,
        links: list[DocumentLink],
        counter: _IdSequence,
    ) -> None:
        """Materialize configured link types as leaf link nodes."""
        for link in links:
            if link.type not in self.config.link_node_types:
                continue

            link_node = graph.add_node(
                StructuralNode(
                    id=counter.next(),
                    kind=NodeKind.LINK,
                    content=link.text,
                    start_offset=owner.start_offset,
                    end_offset=owner.end_offset,
                    start_line=owner.start_line,
                    end_line=owner.end_line,
                    metadata={
                        "url": link.url,
                        "title": link.title,
                        "type": link.type.value,
                    },
                )
            )
            graph.add_edge(
                RelationshipEdge(
                    source_id=owner.id,
                    target_id=link_node.id,
                    relationship_type=RelationshipType.LINKS_TO,
                    metadata={
                        "url": link.url,
                        "text": link.text,
                        "type": link.type.value,
                    },
                )
            )


class _IdSequence:
    """Deterministic node ids of the form ``<source_id>#<n>``."""

    def __init__(self, source_id: str) -> None:
        self._source_id = source_id
        self._next = 0

    def next(self) -> str:
        node_id = f"{self._source_id}#{self._next}"
        self._next += 1
        return node_id


def build_graph(
    elements: Iterable[ContentElement],
    source_id: str,
    source_text: str = "",
    config: GraphBuildConfig | None = None,
) -> DocumentGraph:
    """Build a graph with a one-off GraphBuilder."""
    return GraphBuilder(config).build(elements, source_id, source_text)

"""
Document-to-graph pipeline.

Wires a loader to the GraphBuilder, enforces the input preconditions the
graph core relies on, and fans independent documents out to a thread
pool.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from docgraph.config import GraphBuildConfig
from docgraph.core.graph import DocumentGraph
from docgraph.hierarchy.builder import GraphBuilder
from docgraph.hierarchy.tree import SectionTree
from docgraph.loaders.base import BaseLoader, LoaderRegistry, read_source
from docgraph.loaders.markdown import MarkdownLoader

logger = logging.getLogger(__name__)


class EmptyDocumentError(ValueError):
    """Raised when a document or source id is empty before graph building."""


class StructureGraphPipeline:
    """
    Turns document text into a DocumentGraph.

    Strategy:
    1. Reject empty text and empty source ids
    2. Classify text into elements with the loader
    3. Build the graph in one pass

    ``process_many`` gives every task a shallow copy of the loader so
    parse messages never mix between documents.
    """

    def __init__(
        self,
        loader: BaseLoader | None = None,
        config: GraphBuildConfig | None = None,
        max_workers: int = 4,
    ) -> None:
        if max_workers <= 0:
            raise ValueError("max_workers must be greater than 0")
        self.loader = loader or MarkdownLoader()
        self.config = config or GraphBuildConfig()
        self.builder = GraphBuilder(self.config)
        self.max_workers = max_workers

    def process(self, text: str, source_id: str) -> DocumentGraph:
        """Build the graph for one document.

        Raises:
            EmptyDocumentError: If ``text`` or ``source_id`` is blank.
        """
        return self._process_with(self.loader, text, source_id)

    def process_tree(self, text: str, source_id: str) -> tuple[DocumentGraph, SectionTree]:
        """Build the graph and its derived tree view."""
        graph = self.process(text, source_id)
        return graph, SectionTree.from_graph(graph)

    def process_file(self, path: Path, source_id: str | None = None) -> DocumentGraph:
        """Load a file with the registry's loader for its type and build its graph.

        Raises:
            LoaderError: If the file cannot be loaded.
            EmptyDocumentError: If the file is blank.
        """
        loader = LoaderRegistry.require_loader(path)
        text = read_source(path)
        return self._process_with(loader, text, source_id or path.stem)

    def process_many(
        self,
        documents: Mapping[str, str] | Iterable[tuple[str, str]],
    ) -> dict[str, DocumentGraph]:
        """Build graphs for independent documents in parallel.

        Args:
            documents: ``{source_id: text}`` or ``(source_id, text)`` pairs.

        Returns:
            Graphs keyed by source id, in input order.

        Raises:
            EmptyDocumentError: If any document or source id is blank.
            ValueError: If a source id repeats.
        """
        pairs = list(documents.items()) if isinstance(documents, Mapping) else list(documents)

        seen: set[str] = set()
        for source_id, text in pairs:
            self._check_preconditions(text, source_id)
            if source_id in seen:
                raise ValueError(f"Duplicate source id: {source_id}")
            seen.add(source_id)

        if not pairs:
            return {}

        workers = min(self.max_workers, len(pairs))
        logger.info("Building %d document graphs with %d workers", len(pairs), workers)

        def run(pair: tuple[str, str]) -> DocumentGraph:
            source_id, text = pair
            # Each task gets its own message lists; parser and rules are shared read-only
            return self._process_with(copy.copy(self.loader), text, source_id)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            graphs = list(pool.map(run, pairs))

        return {graph.source_id: graph for graph in graphs}

    def _process_with(self, loader: BaseLoader, text: str, source_id: str) -> DocumentGraph:
        self._check_preconditions(text, source_id)

        elements = loader.parse(text)
        for warning in loader.warnings:
            logger.warning("%s: %s", source_id, warning)

        graph = self.builder.build(elements, source_id, text)
        logger.info(
            "Built graph for %s: %d nodes, %d edges",
            source_id,
            len(graph.nodes),
            len(graph.edges),
        )
        return graph

    @staticmethod
    def _check_preconditions(text: str, source_id: str) -> None:
        if not text or not text.strip():
            raise EmptyDocumentError("Document text cannot be empty or whitespace")
        if not source_id or not source_id.strip():
            raise EmptyDocumentError("Source ID cannot be empty")

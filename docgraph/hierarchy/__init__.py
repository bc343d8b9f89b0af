"""
Hierarchy module - Core of docgraph's structural analysis.

Turns a flat sequence of classified elements into a structural graph and
offers a derived tree view over it.
"""

from docgraph.hierarchy.builder import GraphBuilder, build_graph
from docgraph.hierarchy.classifier import classify_content, classify_heading
from docgraph.hierarchy.spans import expand_to_line_bounds, extract_original_text
from docgraph.hierarchy.tracker import HeadingAncestryTracker
from docgraph.hierarchy.tree import SectionTree

__all__ = [
    "GraphBuilder",
    "HeadingAncestryTracker",
    "SectionTree",
    "build_graph",
    "classify_content",
    "classify_heading",
    "expand_to_line_bounds",
    "extract_original_text",
]

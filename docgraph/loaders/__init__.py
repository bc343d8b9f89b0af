"""
Element loaders for docgraph.

Importing this package registers every built-in loader.
"""

from docgraph.loaders.base import BaseLoader, LoaderError, LoaderRegistry, read_source
from docgraph.loaders.markdown import MarkdownLoader
from docgraph.loaders.patterns import HeadingRule, PatternLoader, default_heading_rules

__all__ = [
    "BaseLoader",
    "HeadingRule",
    "LoaderError",
    "LoaderRegistry",
    "MarkdownLoader",
    "PatternLoader",
    "default_heading_rules",
    "read_source",
]

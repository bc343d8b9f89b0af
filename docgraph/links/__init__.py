"""Outbound link discovery and classification."""

from docgraph.links.extractor import DocumentLink, LinkType, classify_link, extract_links

__all__ = ["DocumentLink", "LinkType", "classify_link", "extract_links"]

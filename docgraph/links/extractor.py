"""
Link discovery and classification.

Walks an element's inline spans to collect every hyperlink and sorts
each one into a LinkType bucket with a strict priority chain.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from docgraph.core.elements import InlineKind, InlineSpan


class LinkType(str, Enum):
    """Link classification vocabulary."""

    INTERNAL = "Internal"
    EXTERNAL = "External"
    EMAIL = "Email"
    ANCHOR = "Anchor"
    OTHER = "Other"


@dataclass(frozen=True)
class DocumentLink:
    """A hyperlink found inside an element.

    Args:
        url: Link destination exactly as written.
        text: Plain display text.
        type: Classification of ``url``.
        title: Optional link title attribute.
    """

    url: str
    text: str
    type: LinkType
    title: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "text": self.text,
            "type": self.type.value,
            "title": self.title,
        }


_INTERNAL_SUFFIXES = (".md", ".html")


def classify_link(url: str) -> LinkType:
    """Classify a link destination. First matching rule wins.

    Scheme prefixes and file suffixes are compared case-insensitively.

    Examples:
    "mailto:a@b.com" -> Email
    "https://x.com" -> External
    "#sec" -> Anchor
    "./doc.md", "folder/doc.html" -> Internal
    "ftp://x" -> Other
    """
    lowered = url.strip().lower()

    if lowered.startswith("mailto:"):
        return LinkType.EMAIL

    if lowered.startswith(("http://", "https://")):
        return LinkType.EXTERNAL

    if lowered.startswith("#"):
        return LinkType.ANCHOR

    if lowered.startswith(("./", "../")):
        return LinkType.INTERNAL

    if "://" not in lowered and (lowered.endswith(_INTERNAL_SUFFIXES) or "/" in lowered):
        return LinkType.INTERNAL

    return LinkType.OTHER


def extract_links(spans: Iterable[InlineSpan]) -> list[DocumentLink]:
    """Collect every link span in document order.

    Uses an explicit worklist instead of recursion so deeply nested
    inline content cannot exhaust the call stack.
    """
    links: list[DocumentLink] = []
    # Reversed so popping from the end yields document order
    worklist: list[InlineSpan] = list(reversed(tuple(spans)))

    while worklist:
        span = worklist.pop()
        if span.kind is InlineKind.LINK and span.url is not None:
            links.append(
                DocumentLink(
                    url=span.url,
                    text=span.text,
                    type=classify_link(span.url),
                    title=span.title or None,
                )
            )
        if span.children:
            worklist.extend(reversed(span.children))

    return links

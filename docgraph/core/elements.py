"""
Content element model for docgraph.

Loaders turn source text into an ordered sequence of ContentElements.
The graph builder consumes nothing else, so this module is the contract
between classification and graph construction.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class ElementKind(Enum):
    """Kinds of classified content blocks."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST = "list"
    CODE_BLOCK = "code_block"
    OTHER = "other"


class InlineKind(Enum):
    """Kinds of inline spans inside a block."""

    TEXT = "text"
    CODE = "code"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    LINK = "link"
    IMAGE = "image"
    OTHER = "other"


@dataclass(frozen=True)
class InlineSpan:
    """
    One piece of inline content.

    Container spans (emphasis, strong, link) hold their nested spans in
    ``children`` and carry the concatenated plain text in ``text``.
    """

    kind: InlineKind
    text: str = ""
    url: str | None = None
    title: str | None = None
    children: tuple[InlineSpan, ...] = ()

    @classmethod
    def plain(cls, text: str) -> InlineSpan:
        return cls(kind=InlineKind.TEXT, text=text)

    @classmethod
    def link(
        cls,
        url: str,
        text: str = "",
        title: str | None = None,
        children: Iterable[InlineSpan] | None = None,
    ) -> InlineSpan:
        kids = tuple(children) if children is not None else (cls.plain(text),) if text else ()
        return cls(kind=InlineKind.LINK, text=text, url=url, title=title, children=kids)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"kind": self.kind.value, "text": self.text}
        if self.url is not None:
            result["url"] = self.url
        if self.title is not None:
            result["title"] = self.title
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InlineSpan:
        return cls(
            kind=InlineKind(data["kind"]),
            text=data.get("text", ""),
            url=data.get("url"),
            title=data.get("title"),
            children=tuple(cls.from_dict(c) for c in data.get("children", [])),
        )


def inline_text(spans: Iterable[InlineSpan]) -> str:
    """Concatenate the plain text of top-level spans."""
    return "".join(span.text for span in spans)


@dataclass(frozen=True)
class ContentElement:
    """
    A classified block of source text.

    Offsets are character positions into the source text, half-open
    ``[start_offset, end_offset)``. Lines are 1-based and inclusive.
    ``level`` is only meaningful for headings and is 0 otherwise.
    """

    kind: ElementKind
    text: str
    level: int = 0
    inline_spans: tuple[InlineSpan, ...] = ()
    start_offset: int = 0
    end_offset: int = 0
    start_line: int = 0
    end_line: int = 0
    attributes: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if self.kind is ElementKind.HEADING and self.level <= 0:
            raise ValueError("heading level must be > 0")
        if self.kind is not ElementKind.HEADING and self.level != 0:
            raise ValueError("level is only allowed on headings")
        # Freeze loader extras so elements stay immutable once produced
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))
        object.__setattr__(self, "inline_spans", tuple(self.inline_spans))

    @property
    def is_heading(self) -> bool:
        return self.kind is ElementKind.HEADING

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "text": self.text,
            "level": self.level,
            "inline_spans": [span.to_dict() for span in self.inline_spans],
            "start_offset": self.start_offset,
            "end_offset": self.end_offset,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "attributes": dict(self.attributes),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ContentElement:
        return cls(
            kind=ElementKind(data["kind"]),
            text=data.get("text", ""),
            level=data.get("level", 0),
            inline_spans=tuple(InlineSpan.from_dict(s) for s in data.get("inline_spans", [])),
            start_offset=data.get("start_offset", 0),
            end_offset=data.get("end_offset", 0),
            start_line=data.get("start_line", 0),
            end_line=data.get("end_line", 0),
            attributes=data.get("attributes", {}),
        )

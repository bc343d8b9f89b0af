"""Regex line-pattern element loader.

Classifies plain or loosely formatted text line by line. Headings come
from an ordered list of HeadingRules; everything else is grouped into
blank-line separated blocks.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, ClassVar

from docgraph.core.elements import ContentElement, ElementKind, InlineSpan, inline_text
from docgraph.loaders.base import BaseLoader, LoaderRegistry

logger = logging.getLogger(__name__)

_LINK_PATTERN = re.compile(r'\[([^\]]*)\]\(\s*<?([^)\s>]*)>?(?:\s+"([^"]*)")?\s*\)')
_LIST_ITEM = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+")
_FENCE = re.compile(r"^\s*(```|~~~)")


@dataclass
class HeadingRule:
    """A regex rule that recognizes one heading style.

    Args:
        name: Rule identifier, recorded on matched elements.
        pattern: Compiled regex. The last capture group is the title.
        level: Fixed heading level, or None to derive it from the match.
        priority: Lower values are tried first.
    """

    name: str
    pattern: re.Pattern[str]
    level: int | None = None
    priority: int = 0

    def match(self, line: str) -> tuple[int, str] | None:
        """Return (level, title) when ``line`` is a heading of this style."""
        found = self.pattern.match(line)
        if not found:
            return None

        title = found.group(found.re.groups).strip() if found.re.groups else found.group(0).strip()
        return self._level_for(found), title

    def _level_for(self, found: re.Match[str]) -> int:
        if self.level is not None:
            return self.level
        # Numeric outlines: "1.2.3" -> 3
        if self.name == "numeric" and found.re.groups > 1:
            return found.group(1).rstrip(".").count(".") + 1
        return 1

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "pattern": self.pattern.pattern,
            "level": self.level,
            "priority": self.priority,
        }


def default_heading_rules() -> list[HeadingRule]:
    """Markdown ATX headings, numeric outlines, legal, appendix, roman and letter sections."""
    rules = [
        HeadingRule(f"markdown_h{n}", re.compile(rf"^#{{{n}}}\s+(.*?)(?:\s+#+)?\s*$"), level=n, priority=n)
        for n in range(1, 7)
    ]
    rules.extend(
        [
            HeadingRule("numeric", re.compile(r"^(\d+(?:\.\d+)*\.?)\s+(\S.*)$"), priority=10),
            HeadingRule("legal", re.compile(r"^(§\s*\d+)\s+(.*)$"), priority=20),
            HeadingRule("appendix", re.compile(r"^Appendix\s+([A-Z])[.:\-\s]+(.*)$"), priority=30),
            HeadingRule("roman", re.compile(r"^([IVX]+)\.\s+(.*)$"), priority=40),
            HeadingRule("letter", re.compile(r"^([A-Z])\.\s+(.*)$"), priority=50),
        ]
    )
    return rules


def find_inline_links(text: str) -> tuple[InlineSpan, ...]:
    """Split text into plain and link spans using ``[text](url "title")``."""
    spans: list[InlineSpan] = []
    cursor = 0
    for found in _LINK_PATTERN.finditer(text):
        if found.start() > cursor:
            spans.append(InlineSpan.plain(text[cursor : found.start()]))
        label, url, title = found.group(1), found.group(2), found.group(3)
        spans.append(InlineSpan.link(url=url, text=label, title=title))
        cursor = found.end()
    if cursor < len(text):
        spans.append(InlineSpan.plain(text[cursor:]))
    return tuple(spans)


@LoaderRegistry.register
class PatternLoader(BaseLoader):
    """
    Classify text with regex heading rules.

    Non-heading lines accumulate into blocks split on blank lines:
    - fenced regions become ``code_block``
    - blocks whose lines are all list items become ``list``
    - everything else becomes ``paragraph``
    """

    SUPPORTED_EXTENSIONS: ClassVar[list[str]] = [".txt", ".text"]
    LOADER_NAME: ClassVar[str] = "patterns"

    def __init__(self, rules: Iterable[HeadingRule] | None = None) -> None:
        super().__init__()
        self.rules = sorted(rules if rules is not None else default_heading_rules(), key=lambda r: r.priority)
        if not self.rules:
            raise ValueError("At least one heading rule must be provided")

    def parse(self, text: str) -> list[ContentElement]:
        """Classify text line by line."""
        self._reset_messages()

        elements: list[ContentElement] = []
        block: list[tuple[int, int, str]] = []  # (line index, offset, line)
        in_fence = False

        offset = 0
        for line_index, raw in enumerate(text.split("\n")):
            line = raw.rstrip("\r")
            line_offset = offset
            offset += len(raw) + 1

            if _FENCE.match(line):
                if in_fence:
                    block.append((line_index, line_offset, line))
                    elements.append(self._code_element(block))
                    block = []
                    in_fence = False
                else:
                    self._flush(block, elements)
                    block = [(line_index, line_offset, line)]
                    in_fence = True
                continue

            if in_fence:
                block.append((line_index, line_offset, line))
                continue

            heading = self._match_heading(line)
            if heading is not None:
                self._flush(block, elements)
                block = []
                elements.append(self._heading_element(heading, line_index, line_offset, line))
                continue

            if not line.strip():
                self._flush(block, elements)
                block = []
                continue

            block.append((line_index, line_offset, line))

        if in_fence:
            self._add_warning("Unterminated code fence at end of document")
            elements.append(self._code_element(block))
        else:
            self._flush(block, elements)

        logger.debug("Pattern loader produced %d elements", len(elements))
        return elements

    def _match_heading(self, line: str) -> tuple[HeadingRule, int, str] | None:
        for rule in self.rules:
            matched = rule.match(line)
            if matched is not None:
                level, title = matched
                return rule, level, title
        return None

    def _heading_element(
        self, heading: tuple[HeadingRule, int, str], line_index: int, line_offset: int, line: str
    ) -> ContentElement:
        rule, level, title = heading
        indent = len(line) - len(line.lstrip())
        spans = find_inline_links(title)
        return ContentElement(
            kind=ElementKind.HEADING,
            text=inline_text(spans),
            level=max(level, 1),
            inline_spans=spans,
            start_offset=line_offset + indent,
            end_offset=line_offset + len(line.rstrip()),
            start_line=line_index + 1,
            end_line=line_index + 1,
            attributes={"rule": rule.name, "raw_title": line.strip()},
        )

    def _flush(self, block: list[tuple[int, int, str]], elements: list[ContentElement]) -> None:
        if not block:
            return

        lines = [line for _, _, line in block]
        is_list = all(_LIST_ITEM.match(line) for line in lines)
        kind = ElementKind.LIST if is_list else ElementKind.PARAGRAPH

        if is_list:
            content = "\n".join(line.strip() for line in lines)
        else:
            content = " ".join(line.strip() for line in lines)

        attributes: dict[str, Any] = {}
        if is_list:
            attributes = {"ordered": bool(re.match(r"^\s*\d", lines[0])), "item_count": len(lines)}

        spans = find_inline_links(content)
        elements.append(self._block_element(kind, inline_text(spans), block, spans, attributes))

    def _code_element(self, block: list[tuple[int, int, str]]) -> ContentElement:
        lines = [line for _, _, line in block]
        fence = _FENCE.match(lines[0])
        language = lines[0].strip()[3:].strip() if fence else ""
        body = lines[1:-1] if len(lines) > 1 and _FENCE.match(lines[-1]) else lines[1:]
        content = "\n".join(body) + ("\n" if body else "")
        return self._block_element(
            ElementKind.CODE_BLOCK,
            content,
            block,
            (),
            {"language": language} if language else {},
        )

    def _block_element(
        self,
        kind: ElementKind,
        content: str,
        block: list[tuple[int, int, str]],
        spans: tuple[InlineSpan, ...],
        attributes: dict[str, Any],
    ) -> ContentElement:
        first_index, first_offset, first_line = block[0]
        last_index, last_offset, last_line = block[-1]
        start = first_offset + len(first_line) - len(first_line.lstrip())
        end = last_offset + len(last_line.rstrip())
        return ContentElement(
            kind=kind,
            text=content,
            inline_spans=spans,
            start_offset=start,
            end_offset=max(end, start),
            start_line=first_index + 1,
            end_line=last_index + 1,
            attributes=attributes,
        )

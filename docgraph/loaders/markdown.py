"""
Markdown element loader using markdown-it-py.

Classifies Markdown into ContentElements with character offsets, line
numbers and inline span trees for link discovery.
"""

from __future__ import annotations

import logging
import re
from typing import Any, ClassVar

from markdown_it import MarkdownIt
from markdown_it.token import Token

from docgraph.core.elements import ContentElement, ElementKind, InlineKind, InlineSpan, inline_text
from docgraph.loaders.base import BaseLoader, LoaderRegistry

logger = logging.getLogger(__name__)

_FRONTMATTER_CLOSE = re.compile(r"\n---[ \t]*(?:\r?\n|$)")

_CONTAINER_KINDS = {
    "link_open": InlineKind.LINK,
    "em_open": InlineKind.EMPHASIS,
    "strong_open": InlineKind.STRONG,
}


class _LineIndex:
    """Maps markdown-it line ranges to character offsets."""

    def __init__(self, text: str) -> None:
        self.lines = text.split("\n")
        self.starts: list[int] = []
        offset = 0
        for line in self.lines:
            self.starts.append(offset)
            offset += len(line) + 1

    def span(self, line_map: list[int] | None) -> tuple[int, int, int, int]:
        """Return (start_offset, end_offset, start_line, end_line).

        The start skips leading indentation and the end drops trailing
        whitespace and blank lines. Lines are 1-based and inclusive.
        """
        if not line_map:
            return 0, 0, 0, 0

        begin, end = line_map[0], min(line_map[1], len(self.lines))
        last = max(begin, end - 1)
        while last > begin and not self.lines[last].strip():
            last -= 1

        first_line = self.lines[begin]
        start = self.starts[begin] + len(first_line) - len(first_line.lstrip())
        stop = self.starts[last] + len(self.lines[last].rstrip())
        if stop <= start:
            stop = self.starts[begin] + len(first_line.rstrip())
        return start, max(stop, start), begin + 1, last + 1


@LoaderRegistry.register
class MarkdownLoader(BaseLoader):
    """
    Classify Markdown documents using markdown-it-py.

    Extracts:
    - Headings with levels (ATX and setext)
    - Paragraphs
    - Lists (one element per top-level list)
    - Code blocks (with language info)
    - Tables, blockquotes and HTML blocks as ``other``
    """

    SUPPORTED_EXTENSIONS: ClassVar[list[str]] = [".md", ".markdown", ".mdown"]
    LOADER_NAME: ClassVar[str] = "markdown"

    def __init__(self) -> None:
        super().__init__()
        self._md = MarkdownIt("commonmark", {"typographer": True})
        # Enable tables
        self._md.enable("table")

    def parse(self, text: str) -> list[ContentElement]:
        """Classify Markdown text into elements."""
        self._reset_messages()

        body = self._blank_frontmatter(text)
        index = _LineIndex(text)
        tokens = self._md.parse(body)

        elements: list[ContentElement] = []
        i = 0
        while i < len(tokens):
            token = tokens[i]
            element, skip = self._process_token(token, tokens, i, index)
            if element is not None:
                elements.append(element)
            i += skip + 1

        logger.debug("Parsed %d markdown elements from %d tokens", len(elements), len(tokens))
        return elements

    def _blank_frontmatter(self, text: str) -> str:
        """Replace YAML front matter with blank lines so offsets stay valid."""
        if not text.startswith("---"):
            return text

        end_match = _FRONTMATTER_CLOSE.search(text, 3)
        if not end_match:
            return text

        frontmatter = text[: end_match.end()]
        self._add_info(f"Skipped front matter ({frontmatter.count(chr(10))} lines)")
        blanked = re.sub(r"[^\n]", "", frontmatter)
        return blanked + text[end_match.end() :]

    def _process_token(
        self, token: Token, tokens: list[Token], index: int, lines: _LineIndex
    ) -> tuple[ContentElement | None, int]:
        """
        Process a top-level token into an element.

        Returns (element, tokens_to_skip).
        """
        if token.level != 0:
            return None, 0

        if token.type == "heading_open":
            return self._process_heading(tokens, index, lines)

        elif token.type == "paragraph_open":
            return self._process_paragraph(tokens, index, lines)

        elif token.type in ("fence", "code_block"):
            return self._process_code(token, lines)

        elif token.type in ("bullet_list_open", "ordered_list_open"):
            return self._process_list(tokens, index, lines)

        elif token.type == "table_open":
            return self._process_table(tokens, index, lines)

        elif token.type == "blockquote_open":
            return self._process_blockquote(tokens, index, lines)

        elif token.type == "html_block":
            return self._make_element(
                ElementKind.OTHER, token.content.strip(), token, lines, attributes={"html": True}
            ), 0

        return None, 0

    def _process_heading(
        self, tokens: list[Token], index: int, lines: _LineIndex
    ) -> tuple[ContentElement | None, int]:
        """Process a heading token group."""
        open_token = tokens[index]
        level = int(open_token.tag[1])  # h1 -> 1, h2 -> 2, etc.
        spans = self._fold_inline(tokens[index + 1].children)

        # Skip: heading_open, inline, heading_close
        return (
            self._make_element(
                ElementKind.HEADING,
                inline_text(spans).strip(),
                open_token,
                lines,
                level=level,
                spans=spans,
                attributes={"markup": open_token.markup},
            ),
            2,
        )

    def _process_paragraph(
        self, tokens: list[Token], index: int, lines: _LineIndex
    ) -> tuple[ContentElement | None, int]:
        """Process a paragraph token group."""
        spans = self._fold_inline(tokens[index + 1].children)
        content = inline_text(spans)

        if not content.strip():
            return None, 2

        # Skip: paragraph_open, inline, paragraph_close
        return self._make_element(ElementKind.PARAGRAPH, content, tokens[index], lines, spans=spans), 2

    def _process_code(self, token: Token, lines: _LineIndex) -> tuple[ContentElement | None, int]:
        """Process a fenced or indented code block."""
        language = token.info.strip() if token.info else None
        return (
            self._make_element(
                ElementKind.CODE_BLOCK,
                token.content,
                token,
                lines,
                attributes={"language": language} if language else {},
            ),
            0,
        )

    def _process_list(
        self, tokens: list[Token], index: int, lines: _LineIndex
    ) -> tuple[ContentElement | None, int]:
        """Process a list (including nested lists) into a single element."""
        open_token = tokens[index]
        ordered = open_token.type == "ordered_list_open"
        end_index = self._find_close(tokens, index)

        # One [ordered, counter] frame per open list
        frames: list[list[Any]] = []
        item_fresh = False
        text_lines: list[str] = []
        spans: list[InlineSpan] = []
        item_count = 0

        for t in tokens[index : end_index + 1]:
            if t.type in ("bullet_list_open", "ordered_list_open"):
                start = int(t.attrGet("start") or 1) if t.type == "ordered_list_open" else 1
                frames.append([t.type == "ordered_list_open", start - 1])
            elif t.type in ("bullet_list_close", "ordered_list_close"):
                frames.pop()
            elif t.type == "list_item_open" and frames:
                frames[-1][1] += 1
                item_fresh = True
                if len(frames) == 1:
                    item_count += 1
            elif t.type == "inline" and frames:
                item_spans = self._fold_inline(t.children)
                indent = "  " * (len(frames) - 1)
                if item_fresh:
                    marker = f"{frames[-1][1]}." if frames[-1][0] else "-"
                    text_lines.append(f"{indent}{marker} {inline_text(item_spans)}")
                    item_fresh = False
                else:
                    text_lines.append(f"{indent}  {inline_text(item_spans)}")
                if spans:
                    spans.append(InlineSpan.plain("\n"))
                spans.extend(item_spans)

        return (
            self._make_element(
                ElementKind.LIST,
                "\n".join(text_lines),
                open_token,
                lines,
                spans=spans,
                attributes={"ordered": ordered, "item_count": item_count},
            ),
            end_index - index,
        )

    def _process_table(
        self, tokens: list[Token], index: int, lines: _LineIndex
    ) -> tuple[ContentElement | None, int]:
        """Process a table into a single element."""
        end_index = self._find_close(tokens, index)

        rows: list[list[str]] = []
        current_row: list[str] = []
        spans: list[InlineSpan] = []

        for t in tokens[index : end_index + 1]:
            if t.type == "tr_open":
                current_row = []
            elif t.type == "tr_close":
                if current_row:
                    rows.append(current_row)
            elif t.type == "inline":
                cell_spans = self._fold_inline(t.children)
                current_row.append(inline_text(cell_spans))
                if spans:
                    spans.append(InlineSpan.plain(" "))
                spans.extend(cell_spans)

        return (
            self._make_element(
                ElementKind.OTHER,
                self._table_to_markdown(rows),
                tokens[index],
                lines,
                spans=spans,
                attributes={"table": True, "rows": len(rows), "cols": len(rows[0]) if rows else 0},
            ),
            end_index - index,
        )

    def _table_to_markdown(self, rows: list[list[str]]) -> str:
        """Convert table rows to markdown format."""
        if not rows:
            return ""

        out = []
        for i, row in enumerate(rows):
            out.append("| " + " | ".join(row) + " |")

            # Add header separator after first row
            if i == 0:
                out.append("| " + " | ".join(["---"] * len(row)) + " |")

        return "\n".join(out)

    def _process_blockquote(
        self, tokens: list[Token], index: int, lines: _LineIndex
    ) -> tuple[ContentElement | None, int]:
        """Process a blockquote into a single element."""
        end_index = self._find_close(tokens, index)
        parts: list[str] = []
        spans: list[InlineSpan] = []

        for t in tokens[index + 1 : end_index]:
            if t.type == "inline":
                part_spans = self._fold_inline(t.children)
                parts.append(inline_text(part_spans))
                if spans:
                    spans.append(InlineSpan.plain("\n"))
                spans.extend(part_spans)
            elif t.type in ("fence", "code_block"):
                parts.append(t.content.rstrip("\n"))

        return (
            self._make_element(
                ElementKind.OTHER,
                "\n".join(parts),
                tokens[index],
                lines,
                spans=spans,
                attributes={"blockquote": True},
            ),
            end_index - index,
        )

    def _find_close(self, tokens: list[Token], index: int) -> int:
        """Index of the token closing the container opened at ``index``."""
        level = tokens[index].level
        end_index = index + 1
        while end_index < len(tokens):
            t = tokens[end_index]
            if t.nesting == -1 and t.level == level:
                return end_index
            end_index += 1
        self._add_warning(f"Unclosed {tokens[index].type} at token {index}")
        return len(tokens) - 1

    def _fold_inline(self, children: list[Token] | None) -> tuple[InlineSpan, ...]:
        """Fold markdown-it's flat inline token stream into a span tree.

        Open/close pairs become container spans. An explicit frame stack
        replaces recursion.
        """
        frames: list[tuple[Token | None, list[InlineSpan]]] = [(None, [])]

        for tok in children or []:
            if tok.nesting == 1:
                frames.append((tok, []))
            elif tok.nesting == -1:
                if len(frames) == 1:
                    self._add_warning(f"Unbalanced inline close: {tok.type}")
                    continue
                open_tok, kids = frames.pop()
                frames[-1][1].append(self._container_span(open_tok, kids))
            else:
                span = self._leaf_span(tok)
                if span is not None:
                    frames[-1][1].append(span)

        while len(frames) > 1:
            open_tok, kids = frames.pop()
            self._add_warning(f"Unclosed inline {open_tok.type if open_tok else 'span'}")
            frames[-1][1].append(self._container_span(open_tok, kids))

        return tuple(frames[0][1])

    def _container_span(self, open_tok: Token | None, kids: list[InlineSpan]) -> InlineSpan:
        kind = _CONTAINER_KINDS.get(open_tok.type, InlineKind.OTHER) if open_tok else InlineKind.OTHER
        url = title = None
        if kind is InlineKind.LINK and open_tok is not None:
            href = open_tok.attrGet("href")
            url = str(href) if href is not None else ""
            raw_title = open_tok.attrGet("title")
            title = str(raw_title) if raw_title else None
        return InlineSpan(kind=kind, text=inline_text(kids), url=url, title=title, children=tuple(kids))

    def _leaf_span(self, tok: Token) -> InlineSpan | None:
        if tok.type == "text":
            # markdown-it emits empty text tokens around inline markup
            return InlineSpan.plain(tok.content) if tok.content else None
        if tok.type == "code_inline":
            return InlineSpan(kind=InlineKind.CODE, text=tok.content)
        if tok.type in ("softbreak", "hardbreak"):
            return InlineSpan.plain(" ")
        if tok.type == "image":
            src = tok.attrGet("src")
            raw_title = tok.attrGet("title")
            return InlineSpan(
                kind=InlineKind.IMAGE,
                text=tok.content,
                url=str(src) if src is not None else None,
                title=str(raw_title) if raw_title else None,
            )
        if tok.type == "html_inline":
            return InlineSpan(kind=InlineKind.OTHER, text="")
        return None

    def _make_element(
        self,
        kind: ElementKind,
        text: str,
        token: Token,
        lines: _LineIndex,
        level: int = 0,
        spans: tuple[InlineSpan, ...] | list[InlineSpan] = (),
        attributes: dict[str, Any] | None = None,
    ) -> ContentElement:
        start, end, start_line, end_line = lines.span(token.map)
        return ContentElement(
            kind=kind,
            text=text,
            level=level,
            inline_spans=tuple(spans),
            start_offset=start,
            end_offset=end,
            start_line=start_line,
            end_line=end_line,
            attributes=attributes or {},
        )

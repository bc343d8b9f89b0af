"""
Pytest configuration and fixtures for docgraph tests.
"""

from pathlib import Path

import pytest

from docgraph.core.elements import ContentElement, ElementKind, InlineSpan


def make_heading(text: str, level: int = 1, start: int = 0, line: int = 1) -> ContentElement:
    """Heading element with offsets covering its text."""
    return ContentElement(
        kind=ElementKind.HEADING,
        text=text,
        level=level,
        inline_spans=(InlineSpan.plain(text),),
        start_offset=start,
        end_offset=start + len(text),
        start_line=line,
        end_line=line,
    )


def make_paragraph(
    text: str,
    spans: tuple[InlineSpan, ...] | None = None,
    start: int = 0,
    line: int = 1,
) -> ContentElement:
    """Paragraph element; spans default to one plain span."""
    return ContentElement(
        kind=ElementKind.PARAGRAPH,
        text=text,
        inline_spans=spans if spans is not None else (InlineSpan.plain(text),),
        start_offset=start,
        end_offset=start + len(text),
        start_line=line,
        end_line=line,
    )


@pytest.fixture
def sample_markdown() -> str:
    """A small manual-style Markdown document."""
    return (
        "# Maintenance Manual\n"
        "\n"
        "Read every section before servicing the unit.\n"
        "\n"
        "## Safety\n"
        "\n"
        "Disconnect power first. See [wiring](./wiring.md) and "
        "[vendor site](https://example.com).\n"
        "\n"
        "- Wear gloves\n"
        "- Wear goggles\n"
        "\n"
        "#### Torque Values\n"
        "\n"
        "```python\n"
        "TORQUE = 12\n"
        "```\n"
        "\n"
        "## Procedures\n"
        "\n"
        "Contact [support](mailto:help@example.com).\n"
    )


@pytest.fixture
def sample_text() -> str:
    """A plain-text document with numeric outline headings."""
    return (
        "1 Introduction\n"
        "This manual covers the pump.\n"
        "\n"
        "1.1 Scope\n"
        "Applies to model [P-100](docs/p100.md).\n"
        "\n"
        "- first item\n"
        "- second item\n"
        "\n"
        "2 Operation\n"
        "Start the pump.\n"
    )


@pytest.fixture
def markdown_file(tmp_path: Path, sample_markdown: str) -> Path:
    """Sample Markdown written to a temporary file."""
    path = tmp_path / "manual.md"
    path.write_text(sample_markdown, encoding="utf-8")
    return path


@pytest.fixture
def text_file(tmp_path: Path, sample_text: str) -> Path:
    """Sample plain text written to a temporary file."""
    path = tmp_path / "pump.txt"
    path.write_text(sample_text, encoding="utf-8")
    return path

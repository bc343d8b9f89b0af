"""Tests for link extraction and classification."""

from __future__ import annotations

import pytest

from docgraph.core.elements import InlineKind, InlineSpan
from docgraph.links import DocumentLink, LinkType, classify_link, extract_links


class TestClassifyLink:
    """Tests for the link priority chain."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("./doc.md", LinkType.INTERNAL),
            ("../guide/setup.html", LinkType.INTERNAL),
            ("folder/doc.html", LinkType.INTERNAL),
            ("notes.md", LinkType.INTERNAL),
            ("https://x.com", LinkType.EXTERNAL),
            ("http://x.com/page.md", LinkType.EXTERNAL),
            ("mailto:a@b.com", LinkType.EMAIL),
            ("#sec", LinkType.ANCHOR),
            ("ftp://x", LinkType.OTHER),
            ("ftp://host/file.md", LinkType.OTHER),
            ("readme", LinkType.OTHER),
            ("", LinkType.OTHER),
        ],
    )
    def test_examples(self, url, expected):
        assert classify_link(url) is expected

    def test_scheme_is_case_insensitive(self):
        assert classify_link("HTTPS://X.COM") is LinkType.EXTERNAL
        assert classify_link("MailTo:a@b.com") is LinkType.EMAIL

    def test_suffix_is_case_insensitive(self):
        assert classify_link("README.MD") is LinkType.INTERNAL

    def test_email_wins_over_path(self):
        assert classify_link("mailto:team/ops@example.com") is LinkType.EMAIL

    def test_anchor_wins_over_path(self):
        assert classify_link("#section/one") is LinkType.ANCHOR

    def test_wire_values(self):
        assert [t.value for t in LinkType] == ["Internal", "External", "Email", "Anchor", "Other"]


class TestExtractLinks:
    """Tests for inline link discovery."""

    def test_no_links(self):
        assert extract_links((InlineSpan.plain("just text"),)) == []

    def test_single_link(self):
        spans = (
            InlineSpan.plain("See "),
            InlineSpan.link(url="./y.md", text="label", title="Why"),
        )

        links = extract_links(spans)

        assert links == [
            DocumentLink(url="./y.md", text="label", type=LinkType.INTERNAL, title="Why")
        ]

    def test_document_order(self):
        spans = (
            InlineSpan.link(url="https://a.com", text="a"),
            InlineSpan.plain(" and "),
            InlineSpan.link(url="#b", text="b"),
            InlineSpan.link(url="mailto:c@d.com", text="c"),
        )

        assert [link.text for link in extract_links(spans)] == ["a", "b", "c"]

    def test_finds_links_nested_in_emphasis(self):
        inner = InlineSpan.link(url="docs/inner.md", text="inner")
        strong = InlineSpan(
            kind=InlineKind.STRONG,
            text="before inner",
            children=(InlineSpan.plain("before "), inner),
        )
        spans = (
            InlineSpan.link(url="https://first.com", text="first"),
            strong,
            InlineSpan.link(url="#last", text="last"),
        )

        links = extract_links(spans)

        assert [link.url for link in links] == ["https://first.com", "docs/inner.md", "#last"]
        assert links[1].type is LinkType.INTERNAL

    def test_deep_nesting_does_not_recurse(self):
        span = InlineSpan.link(url="./deep.md", text="deep")
        for _ in range(5000):
            span = InlineSpan(kind=InlineKind.EMPHASIS, text="deep", children=(span,))

        links = extract_links((span,))

        assert len(links) == 1
        assert links[0].url == "./deep.md"

    def test_empty_title_becomes_none(self):
        links = extract_links((InlineSpan.link(url="#a", text="a", title=""),))
        assert links[0].title is None

    def test_to_dict(self):
        link = DocumentLink(url="#a", text="a", type=LinkType.ANCHOR)
        assert link.to_dict() == {"url": "#a", "text": "a", "type": "Anchor", "title": None}

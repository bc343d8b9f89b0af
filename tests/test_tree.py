"""Tests for the SectionTree view."""

from __future__ import annotations

import pytest

from docgraph.config import GraphBuildConfig, RootPolicy
from docgraph.core.graph import NodeKind
from docgraph.hierarchy.builder import GraphBuilder
from docgraph.hierarchy.tree import SectionTree
from docgraph.loaders.markdown import MarkdownLoader

DOC = (
    "# Guide\n"
    "\n"
    "Intro text.\n"
    "\n"
    "## Install\n"
    "\n"
    "Run the [installer](./install.md).\n"
    "\n"
    "### Linux\n"
    "\n"
    "Use the package.\n"
    "\n"
    "## Usage\n"
    "\n"
    "Start it.\n"
)


@pytest.fixture
def tree() -> SectionTree:
    graph = GraphBuilder().build(MarkdownLoader().parse(DOC), "guide", DOC)
    return SectionTree.from_graph(graph)


def _by_content(tree: SectionTree, content: str):
    return next(node for node in tree.graph.nodes if node.content == content)


class TestNavigation:
    """Tests for parent/child navigation."""

    def test_single_root(self, tree):
        assert [n.content for n in tree.roots()] == ["Guide"]

    def test_children_in_document_order(self, tree):
        guide = _by_content(tree, "Guide")
        assert [n.content for n in tree.children(guide.id)] == ["Intro text.", "Install", "Usage"]

    def test_parent_and_ancestors(self, tree):
        linux = _by_content(tree, "Linux")

        assert tree.parent(linux.id).content == "Install"
        assert [n.content for n in tree.ancestors(linux.id)] == ["Install", "Guide"]
        assert tree.depth(linux.id) == 2
        assert tree.parent(_by_content(tree, "Guide").id) is None

    def test_hierarchy_path(self, tree):
        body = _by_content(tree, "Use the package.")
        assert tree.hierarchy_path(body.id) == "Guide > Install > Linux"

    def test_descendants_preorder(self, tree):
        install = _by_content(tree, "Install")
        assert [n.content for n in tree.descendants(install.id)] == [
            "Run the installer.",
            "Linux",
            "Use the package.",
        ]

    def test_subsections(self, tree):
        guide = _by_content(tree, "Guide")
        install = _by_content(tree, "Install")

        assert [n.content for n in tree.subsections(guide.id)] == ["Install", "Usage"]
        assert [n.content for n in tree.subsections(install.id)] == ["Linux"]
        assert tree.subsections(_by_content(tree, "Linux").id) == []

    def test_subsections_follow_skipped_levels(self):
        text = "# Top\n\nBody.\n\n### Deep\n"
        graph = GraphBuilder().build(MarkdownLoader().parse(text), "skip", text)
        tree = SectionTree.from_graph(graph)

        assert [n.content for n in tree.subsections("skip#0")] == ["Deep"]

    def test_links_hidden_by_default(self, tree):
        assert all(node.kind is not NodeKind.LINK for node, _ in tree.walk())
        run = _by_content(tree, "Run the installer.")
        assert tree.is_leaf(run.id)

    def test_links_included_on_request(self, tree):
        with_links = SectionTree(tree.graph, include_links=True)
        run = _by_content(tree, "Run the installer.")

        assert [n.kind for n in with_links.children(run.id)] == [NodeKind.LINK]
        assert [n.content for n in with_links.roots()] == ["Guide"]

    def test_unknown_node(self, tree):
        with pytest.raises(KeyError):
            tree.node("guide#999")

    def test_virtual_root_becomes_single_root(self):
        text = "Preface.\n\n# A\n"
        config = GraphBuildConfig(root_policy=RootPolicy.VIRTUAL_ROOT)
        graph = GraphBuilder(config).build(MarkdownLoader().parse(text), "doc", text)

        view = SectionTree(graph)

        assert [n.id for n in view.roots()] == ["doc#root", "doc#1"]
        assert [n.content for n in view.children("doc#root")] == ["Preface."]


class TestReporting:
    """Tests for statistics and flattening."""

    def test_walk_depths(self, tree):
        assert [(n.content, d) for n, d in tree.walk()][:3] == [
            ("Guide", 0),
            ("Intro text.", 1),
            ("Install", 1),
        ]
        assert tree.max_depth == 3

    def test_leaves(self, tree):
        assert [n.content for n in tree.leaves()] == [
            "Intro text.",
            "Run the installer.",
            "Use the package.",
            "Start it.",
        ]

    def test_statistics(self, tree):
        stats = tree.get_statistics()

        assert stats["total_nodes"] == 8
        assert stats["root_count"] == 1
        assert stats["heading_count"] == 4
        assert stats["headings_with_content"] == 4
        assert stats["max_depth"] == 3
        assert stats["level_distribution"] == {1: 1, 2: 2, 3: 1}

    def test_flatten_to_sections(self, tree):
        sections = tree.flatten_to_sections()

        assert [s["heading"] for s in sections] == ["Guide", "Install", "Linux", "Usage"]
        install = sections[1]
        assert install["content"] == "Run the installer."
        assert install["hierarchy_path"] == "Guide > Install"
        assert install["child_section_count"] == 1
        assert install["depth"] == 1

    def test_to_dict(self, tree):
        data = tree.to_dict()

        assert data["source_id"] == "guide"
        assert data["roots"][0]["content"] == "Guide"
        assert len(data["roots"][0]["children"]) == 3

    def test_render(self, tree):
        lines = tree.render().splitlines()

        assert lines[0] == "[h1] Guide"
        assert lines[1] == "  (paragraph) Intro text."
        assert "    [h3] Linux" in lines

    def test_render_max_depth(self, tree):
        assert tree.render(max_depth=0) == "[h1] Guide"

    def test_view_does_not_mutate_graph(self, tree):
        before = tree.graph.to_dict()
        tree.get_statistics()
        tree.flatten_to_sections()
        assert tree.graph.to_dict() == before

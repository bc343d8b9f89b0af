"""Configuration for graph construction."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from docgraph.links.extractor import LinkType


class RootPolicy(str, Enum):
    """What to do with content that appears before the first heading.

    Attributes:
        OMIT: Emit no inbound edge; the node stays a root.
        VIRTUAL_ROOT: Attach it to a synthetic document node with CONTAINS.
    """

    OMIT = "omit"
    VIRTUAL_ROOT = "virtual_root"


def _default_link_node_types() -> frozenset[LinkType]:
    return frozenset({LinkType.INTERNAL})


@dataclass
class GraphBuildConfig:
    """Settings for GraphBuilder.

    Attributes:
        root_policy: Attachment policy for content preceding the first heading.
        link_node_types: Link types that become ``link`` nodes with a
            LINKS_TO edge. Other links are only recorded on the element.
        preserve_original_text: Fill ``original_text`` with the
            line-expanded source slice when source text is available.
        record_links: Store every discovered link on the containing
            node's ``metadata["links"]``.
    """

    root_policy: RootPolicy = RootPolicy.OMIT
    link_node_types: frozenset[LinkType] = field(default_factory=_default_link_node_types)
    preserve_original_text: bool = True
    record_links: bool = True

    def __post_init__(self) -> None:
        self.root_policy = RootPolicy(self.root_policy)
        self.link_node_types = frozenset(LinkType(t) for t in self.link_node_types)

    def validate(self) -> None:
        """Raise ValueError if any setting is unusable."""
        if not isinstance(self.root_policy, RootPolicy):
            raise ValueError(f"Invalid root_policy: {self.root_policy!r}")
        for link_type in self.link_node_types:
            if not isinstance(link_type, LinkType):
                raise ValueError(f"Invalid link type: {link_type!r}")

    def with_link_node_types(self, types: Iterable[LinkType | str]) -> GraphBuildConfig:
        """Return a copy that materializes the given link types as nodes."""
        return GraphBuildConfig(
            root_policy=self.root_policy,
            link_node_types=frozenset(LinkType(t) for t in types),
            preserve_original_text=self.preserve_original_text,
            record_links=self.record_links,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "root_policy": self.root_policy.value,
            "link_node_types": sorted(t.value for t in self.link_node_types),
            "preserve_original_text": self.preserve_original_text,
            "record_links": self.record_links,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GraphBuildConfig:
        """Build a config from a plain mapping.

        Raises:
            ValueError: On unknown keys or invalid enum values.
        """
        known = {"root_policy", "link_node_types", "preserve_original_text", "record_links"}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        kwargs: dict[str, Any] = {}
        if "root_policy" in data:
            kwargs["root_policy"] = RootPolicy(data["root_policy"])
        if "link_node_types" in data:
            kwargs["link_node_types"] = frozenset(LinkType(t) for t in data["link_node_types"])
        if "preserve_original_text" in data:
            kwargs["preserve_original_text"] = bool(data["preserve_original_text"])
        if "record_links" in data:
            kwargs["record_links"] = bool(data["record_links"])

        config = cls(**kwargs)
        config.validate()
        return config

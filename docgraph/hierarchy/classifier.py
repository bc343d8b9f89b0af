"""
Relationship classification between a new node and its ancestor.

Heading-to-heading edges are typed by level delta. Everything else is
CONTAINS, sourced from the most recently opened heading or, depending
on the root policy, from a virtual document root.
"""

from __future__ import annotations

import logging

from docgraph.config import RootPolicy
from docgraph.core.graph import RelationshipType, StructuralNode

logger = logging.getLogger(__name__)


def classify_heading(
    ancestor: StructuralNode | None,
    level: int,
) -> RelationshipType | None:
    """Edge type from ``ancestor`` to a new heading at ``level``.

    Args:
        ancestor: Nearest ancestor returned by the tracker, or None.
        level: Level of the new heading.

    Returns:
        HAS_SUBSECTION for a delta of 1, HAS_NESTED_SECTION when levels
        are skipped, None when there is no ancestor (root heading).
    """
    if ancestor is None:
        return None

    delta = level - ancestor.level
    if delta == 1:
        return RelationshipType.HAS_SUBSECTION
    if delta > 1:
        return RelationshipType.HAS_NESTED_SECTION

    # The tracker pops every entry at or below the new level before
    # returning an ancestor, so this branch is not reached by the builder.
    logger.warning(
        "Heading level %d is not deeper than ancestor %s (level %d); emitting SIBLING",
        level,
        ancestor.id,
        ancestor.level,
    )
    return RelationshipType.SIBLING


def classify_content(
    current_heading: StructuralNode | None,
    virtual_root: StructuralNode | None,
    policy: RootPolicy,
) -> tuple[StructuralNode, RelationshipType] | None:
    """Source node and edge type for a non-heading element.

    Args:
        current_heading: Most recently opened heading, if any.
        virtual_root: Document root node when the policy provides one.
        policy: Attachment policy for content before the first heading.

    Returns:
        ``(source, CONTAINS)``, or None when no edge should be emitted.
    """
    if current_heading is not None:
        return current_heading, RelationshipType.CONTAINS

    if policy is RootPolicy.VIRTUAL_ROOT:
        if virtual_root is None:
            raise ValueError("virtual_root policy requires a document root node")
        return virtual_root, RelationshipType.CONTAINS

    return None

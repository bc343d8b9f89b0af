"""Heading ancestry tracking."""

from __future__ import annotations

from docgraph.core.graph import StructuralNode


class HeadingAncestryTracker:
    """
    Tracks the chain of still-open headings during a forward scan.

    The stack is a plain list whose levels strictly increase from bottom
    to top. Each heading is pushed once and popped at most once, so a
    whole document costs O(n).
    """

    def __init__(self) -> None:
        self._stack: list[StructuralNode] = []

    def push(self, heading: StructuralNode) -> StructuralNode | None:
        """Open a heading and return its nearest ancestor.

        Entries at the same or a deeper level are closed first. The
        stack top left after that is the nearest ancestor.

        Args:
            heading: Heading node to open.

        Returns:
            The nearest ancestor heading, or None if ``heading`` is a root.
        """
        while self._stack and self._stack[-1].level >= heading.level:
            self._stack.pop()

        ancestor = self._stack[-1] if self._stack else None
        self._stack.append(heading)
        return ancestor

    def current_heading(self) -> StructuralNode | None:
        """The most recently opened heading, or None before the first one."""
        return self._stack[-1] if self._stack else None

    @property
    def depth(self) -> int:
        return len(self._stack)

    def levels(self) -> list[int]:
        return [node.level for node in self._stack]

    def clear(self) -> None:
        self._stack.clear()

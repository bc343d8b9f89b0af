"""
Line-boundary expansion for element spans.

Block spans reported by loaders may stop short of the line markers or
indentation around them. These helpers widen a span to whole source
lines so ``original_text`` always holds complete lines.
"""

from __future__ import annotations


def expand_to_line_bounds(text: str, start: int, end: int) -> tuple[int, int] | None:
    """Widen ``[start, end)`` to the enclosing line boundaries.

    Args:
        text: Full source text.
        start: Inclusive start offset.
        end: Exclusive end offset.

    Returns:
        The expanded ``(start, end)`` pair, or None for an invalid or
        inverted range. Expanding an already expanded range returns it
        unchanged.
    """
    if start < 0 or end > len(text) or start >= end:
        return None

    line_start = text.rfind("\n", 0, start) + 1

    line_end = text.find("\n", end)
    if line_end == -1:
        line_end = len(text)

    return line_start, line_end


def extract_original_text(text: str, start: int, end: int) -> str:
    """Slice the line-expanded source for a span; ``""`` when invalid."""
    bounds = expand_to_line_bounds(text, start, end)
    if bounds is None:
        return ""
    line_start, line_end = bounds
    return text[line_start:line_end]

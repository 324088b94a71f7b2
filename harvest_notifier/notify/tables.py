"""
Fixed-width boxed tables for chat code blocks.

Output uses double-line outer borders and single-line inner rules:

    ╔════════════╤════╗
    ║ strategies │ 10 ║
    ╟────────────┼────╢
    ║  harvested │ 8  ║
    ╚════════════╧════╝
"""

from typing import Any, Callable, List, Optional, Sequence

ALIGN_LEFT = "left"
ALIGN_RIGHT = "right"
ALIGN_CENTER = "center"

HorizontalLinePredicate = Callable[[int, int], bool]


def all_lines(line_index: int, row_count: int) -> bool:
    return True


def header_and_footer_lines(line_index: int, row_count: int) -> bool:
    """Outer border, rule under the first row, rule above the last row."""
    return line_index in (0, 1, row_count - 1, row_count)


def _align(text: str, width: int, alignment: str) -> str:
    if alignment == ALIGN_RIGHT:
        return text.rjust(width)
    if alignment == ALIGN_CENTER:
        return text.center(width)
    return text.ljust(width)


def render_table(
    rows: Sequence[Sequence[Any]],
    alignments: Optional[Sequence[str]] = None,
    horizontal_lines: HorizontalLinePredicate = all_lines
) -> str:
    """
    Render rows as a boxed table.

    Args:
        rows: Cells are str()'d; every row must have the same length
        alignments: Per-column left/right/center (default: left)
        horizontal_lines: (line_index, row_count) -> draw the rule above
            row line_index (row_count means the bottom border)
    """
    if not rows:
        return ""

    cells = [[str(c) for c in row] for row in rows]
    column_count = len(cells[0])
    if any(len(row) != column_count for row in cells):
        raise ValueError("all table rows must have the same number of cells")

    aligns = list(alignments or [])
    aligns += [ALIGN_LEFT] * (column_count - len(aligns))
    widths = [max(len(row[i]) for row in cells) for i in range(column_count)]

    def rule(left: str, fill: str, joint: str, right: str) -> str:
        return left + joint.join(fill * (w + 2) for w in widths) + right

    row_count = len(cells)
    lines = []  # type: List[str]
    for index, row in enumerate(cells):
        if horizontal_lines(index, row_count):
            if index == 0:
                lines.append(rule("╔", "═", "╤", "╗"))
            else:
                lines.append(rule("╟", "─", "┼", "╢"))
        padded = [" " + _align(cell, widths[i], aligns[i]) + " " for i, cell in enumerate(row)]
        lines.append("║" + "│".join(padded) + "║")

    if horizontal_lines(row_count, row_count):
        lines.append(rule("╚", "═", "╧", "╝"))

    return "\n".join(lines)


__all__ = [
    "ALIGN_LEFT",
    "ALIGN_RIGHT",
    "ALIGN_CENTER",
    "all_lines",
    "header_and_footer_lines",
    "render_table",
]

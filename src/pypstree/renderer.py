"""ASCII rendering of process trees.

A node with one child is joined to it by ``-----``, a node with several
children by ``--+--``. The ``+`` sits on the node's branch column; every
further child starts a new line carrying ``|--`` at that column, and ``|`` at
the branch column of each ancestor that still has children left to print::

    kernel--+--init--+--cron
            |        |--sshd-----bash
            |--kthreadd
"""

from __future__ import annotations

from pypstree.models import Node

SINGLE = "-----"
FORK = "--+--"
CONTINUE = "|--"
RAIL = "|"

# offset of the branch glyph inside the connector
BRANCH_OFFSET = 2


def render(root: Node, show_pids: bool = False) -> str:
    """Render the tree below ``root`` as a multi-line string."""
    return "\n".join(_render_lines(root, show_pids))


def branch_column(start: int, label: str) -> int:
    """Column of the branch glyph for a label printed at ``start``."""
    return start + len(label) + BRANCH_OFFSET


def _rails(columns: tuple[int, ...], width: int) -> str:
    """Spaces up to ``width`` with a rail at each open ancestor column."""
    line = [" "] * width
    for column in columns:
        line[column] = RAIL
    return "".join(line)


def _render_lines(root: Node, show_pids: bool) -> list[str]:
    """
    Lay out the tree below ``root`` line by line.

    Each stack frame is ``(node, start, open_columns, child_index)``: the
    node, the column its label starts at, the branch columns of the ancestors
    that still have children to print below it, and the next child to visit.
    A frame is pushed back under its child so it resumes once that child's
    subtree is done, which keeps deep chains off the interpreter stack.
    """
    lines: list[str] = []
    parts: list[str] = []
    stack: list[tuple[Node, int, tuple[int, ...], int]] = [(root, 0, (), 0)]
    while stack:
        node, start, open_columns, index = stack.pop()
        children = node.children
        label = node.display_label(show_pids)
        column = branch_column(start, label)

        if index == 0:
            parts.append(label)
            if children:
                parts.append(FORK if len(children) > 1 else SINGLE)
        elif index < len(children):
            lines.append("".join(parts))
            parts = [_rails(open_columns, column), CONTINUE]

        if index < len(children):
            rails = open_columns + (column,) if index < len(children) - 1 else open_columns
            stack.append((node, start, open_columns, index + 1))
            stack.append((children[index], column + len(CONTINUE), rails, 0))

    lines.append("".join(parts))
    return lines

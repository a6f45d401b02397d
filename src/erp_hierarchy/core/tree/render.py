"""Render forests as indented markdown."""

import io
from collections.abc import Sequence
from typing import Any

from erp_hierarchy.core.tree.cascade import PendingActiveMap
from erp_hierarchy.core.tree.expand import ExpandState
from erp_hierarchy.models.node import TreeNode


def render_forest(
    forest: Sequence[TreeNode[Any]],
    *,
    expanded: ExpandState | None = None,
    overlay: PendingActiveMap | None = None,
    max_depth: int | None = None,
) -> str:
    """Render the forest as a markdown bullet list.

    Args:
        forest: Top-level nodes in display order.
        expanded: When given, children of collapsed nodes are summarised.
        overlay: Optimistic active flags that win over the nodes' own.
        max_depth: Max levels to include (None = unlimited).

    Returns:
        Markdown with ``- [x]`` for active and ``- [ ]`` for inactive nodes.
    """
    out = io.StringIO()
    stack: list[tuple[TreeNode[Any], int]] = [(node, 1) for node in reversed(forest)]
    while stack:
        node, level = stack.pop()
        indent = "    " * (level - 1)

        is_active = overlay.effective(node) if overlay is not None else node.is_active
        prefix = "- [x] " if is_active else "- [ ] "
        suffix = "(virtual)" if node.id is None else f"(id={node.id})"
        out.write(f"{indent}{prefix}{node.name} {suffix}\n")

        if not node.children:
            continue

        # Truncation indicator when children are hidden
        hidden = max_depth is not None and level >= max_depth
        if expanded is not None and node.id is not None and not expanded.is_expanded(node.id):
            hidden = True
        if hidden:
            count = len(node.children)
            noun = "child" if count == 1 else "children"
            out.write(f"{indent}    - ... ({count} more {noun})\n")
            continue

        stack.extend((child, level + 1) for child in reversed(node.children))

    return out.getvalue()

"""Tree navigation: lookup, sibling groups, ancestors, flattening, name search.

All functions are pure and walk the forest with explicit stacks, so deep
inputs cannot exhaust the interpreter's recursion limit.
"""

from collections.abc import Iterator, Sequence
from typing import TypeVar

from erp_hierarchy.models.node import FlatEntry, SearchHit, TreeNode

P = TypeVar("P")


def iter_preorder(forest: Sequence[TreeNode[P]]) -> Iterator[tuple[TreeNode[P], int]]:
    """Yield ``(node, level)`` in display order, ``level`` counting from 1."""
    stack: list[tuple[TreeNode[P], int]] = [(node, 1) for node in reversed(forest)]
    while stack:
        node, level = stack.pop()
        yield node, level
        stack.extend((child, level + 1) for child in reversed(node.children))


def find_node(node_id: int | None, forest: Sequence[TreeNode[P]]) -> TreeNode[P] | None:
    """Return the first node with ``node_id`` in depth-first order, or None."""
    if node_id is None:
        return None
    for node, _level in iter_preorder(forest):
        if node.id == node_id:
            return node
    return None


def find_sibling_group(
    target_id: int | None,
    forest: Sequence[TreeNode[P]],
) -> tuple[TreeNode[P] | None, tuple[TreeNode[P], ...]] | None:
    """Locate the sibling group that contains ``target_id``.

    Returns ``(parent, siblings)`` where ``parent`` is the owning node (None
    for the top level, which tells it apart from a virtual parent) and
    ``siblings`` is the full ordered group, the target included. Returns None
    when the id is absent or None.
    """
    if target_id is None:
        return None

    groups: list[tuple[TreeNode[P] | None, tuple[TreeNode[P], ...]]] = [(None, tuple(forest))]
    while groups:
        parent, siblings = groups.pop()
        if any(node.id == target_id for node in siblings):
            return parent, siblings
        groups.extend((node, node.children) for node in reversed(siblings) if node.children)
    return None


def find_parent_and_siblings(
    target_id: int | None,
    forest: Sequence[TreeNode[P]],
) -> tuple[int | None, tuple[TreeNode[P], ...]] | None:
    """Like ``find_sibling_group`` but returns the parent's id (None at top level)."""
    group = find_sibling_group(target_id, forest)
    if group is None:
        return None
    parent, siblings = group
    return (parent.id if parent is not None else None), siblings


def find_ancestors(target_id: int | None, forest: Sequence[TreeNode[P]]) -> tuple[TreeNode[P], ...]:
    """Return the ancestors of ``target_id``, root first (empty if top-level or absent)."""
    if target_id is None:
        return ()

    stack: list[tuple[TreeNode[P], tuple[TreeNode[P], ...]]] = [
        (node, ()) for node in reversed(forest)
    ]
    while stack:
        node, ancestors = stack.pop()
        if node.id == target_id:
            return ancestors
        chain = (*ancestors, node)
        stack.extend((child, chain) for child in reversed(node.children))
    return ()


def collect_ids(forest: Sequence[TreeNode[P]]) -> list[int]:
    """Collect every non-null id at every level, in display order."""
    return [node.id for node, _level in iter_preorder(forest) if node.id is not None]


def count_nodes(forest: Sequence[TreeNode[P]]) -> int:
    return sum(1 for _ in iter_preorder(forest))


def flatten_with_indent(forest: Sequence[TreeNode[P]]) -> list[FlatEntry[P]]:
    """Flatten the forest for pickers, prefixing one dash per level below the top.

    A fresh list is built on every call.
    """
    entries: list[FlatEntry[P]] = []
    for node, level in iter_preorder(forest):
        prefix = f"{'-' * (level - 1)} " if level > 1 else ""
        entries.append(FlatEntry(node=node, depth=level, label=f"{prefix}{node.name}"))
    return entries


def search_by_name(forest: Sequence[TreeNode[P]], keyword: str) -> list[SearchHit]:
    """Case-insensitive substring search over names at every depth.

    Each hit carries the names from the root down to the matching node.
    Virtual nodes never match, but their names still show up in paths.
    """
    needle = keyword.strip().lower()
    if not needle:
        return []

    hits: list[SearchHit] = []
    stack: list[tuple[TreeNode[P], tuple[str, ...]]] = [(node, ()) for node in reversed(forest)]
    while stack:
        node, parent_path = stack.pop()
        path = (*parent_path, node.name)
        if node.id is not None and needle in node.name.lower():
            hits.append(SearchHit(node_id=node.id, path=path))
        stack.extend((child, path) for child in reversed(node.children))
    return hits

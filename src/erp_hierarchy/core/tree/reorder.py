"""Drag-and-drop reordering restricted to a single sibling group."""

import dataclasses
from collections.abc import Sequence
from typing import TypeVar

from loguru import logger

from erp_hierarchy.core.tree.navigation import find_sibling_group
from erp_hierarchy.models.node import ReorderResult, SortOrderEntry, TreeNode

P = TypeVar("P")
T = TypeVar("T")


def array_move(items: Sequence[T], old_index: int, new_index: int) -> tuple[T, ...]:
    """Remove the item at ``old_index`` and reinsert it at ``new_index``."""
    moved = list(items)
    moved.insert(new_index, moved.pop(old_index))
    return tuple(moved)


def reorder(
    forest: Sequence[TreeNode[P]],
    active_id: int | None,
    target_id: int | None,
) -> ReorderResult[P] | None:
    """Compute the sibling order after dropping ``active_id`` onto ``target_id``.

    Returns None for every move that has no effect: no target, dropping a
    node on itself, virtual (null id) nodes, children of a virtual parent,
    unknown ids, and drops onto a node under a different parent. Only
    same-parent moves are legal.
    """
    if active_id is None or target_id is None or active_id == target_id:
        return None

    context = find_sibling_group(active_id, forest)
    if context is None:
        return None
    parent, siblings = context
    if parent is not None and parent.id is None:
        # The group has no persisted owner to reorder under.
        logger.debug("Ignoring drop of {} under a virtual parent", active_id)
        return None
    parent_id = parent.id if parent is not None else None

    ids = [node.id for node in siblings]
    if target_id not in ids:
        logger.debug("Ignoring cross-parent drop of {} onto {}", active_id, target_id)
        return None

    old_index = ids.index(active_id)
    new_index = ids.index(target_id)
    if old_index == new_index:
        return None

    return ReorderResult(parent_id=parent_id, siblings=array_move(siblings, old_index, new_index))


def build_sort_orders(scope_id: int | None, siblings: Sequence[TreeNode[P]]) -> list[SortOrderEntry]:
    """Number every persisted sibling ``1..K`` in its new order.

    Virtual nodes are skipped before numbering. Duplicate ids mean the local
    snapshot is corrupt, so nothing is numbered and ValueError is raised.
    """
    persisted = [node for node in siblings if node.id is not None]
    ids = [node.id for node in persisted]
    if len(set(ids)) != len(ids):
        msg = f"Duplicate ids in sibling group: {ids!r}"
        raise ValueError(msg)
    return [
        SortOrderEntry(scope_id=scope_id, node_id=node.id, sort_order=index + 1)
        for index, node in enumerate(persisted)
        if node.id is not None
    ]


def apply_reorder(
    forest: Sequence[TreeNode[P]],
    parent_id: int | None,
    siblings: Sequence[TreeNode[P]],
) -> tuple[TreeNode[P], ...]:
    """Return a copy of ``forest`` with ``parent_id``'s children replaced by ``siblings``.

    Local sort orders are renumbered to match the new positions. Nodes off
    the path to the parent are shared with the input; the input is unchanged.
    """
    renumbered = tuple(
        dataclasses.replace(node, sort_order=index + 1) for index, node in enumerate(siblings)
    )
    if parent_id is None:
        return renumbered

    # Find the path of indices from the top level down to the parent.
    path: list[int] | None = None
    stack: list[tuple[TreeNode[P], list[int]]] = [
        (node, [i]) for i, node in reversed(list(enumerate(forest)))
    ]
    while stack:
        node, indices = stack.pop()
        if node.id == parent_id:
            path = indices
            break
        stack.extend(
            (child, [*indices, i]) for i, child in reversed(list(enumerate(node.children)))
        )
    if path is None:
        return tuple(forest)

    # Rebuild the spine bottom-up.
    spine: list[TreeNode[P]] = []
    level: Sequence[TreeNode[P]] = forest
    for index in path:
        spine.append(level[index])
        level = level[index].children

    replacement = dataclasses.replace(spine[-1], children=renumbered)
    for depth in range(len(path) - 1, 0, -1):
        holder = spine[depth - 1]
        children = list(holder.children)
        children[path[depth]] = replacement
        replacement = dataclasses.replace(holder, children=tuple(children))

    top = list(forest)
    top[path[0]] = replacement
    return tuple(top)

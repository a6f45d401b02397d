"""Activation toggling that cascades from a node to its direct children."""

import threading
from collections.abc import Iterable, Sequence
from typing import TypeVar

from erp_hierarchy.core.tree.navigation import iter_preorder
from erp_hierarchy.models.node import CascadeRequest, TreeNode

P = TypeVar("P")


class PendingActiveMap:
    """Optimistic overlay of active flags, keyed by node id.

    Values written here win over the node's own flag until fresh server
    data is reconciled in.
    """

    def __init__(self) -> None:
        self._values: dict[int, bool] = {}
        self._lock = threading.Lock()

    def set_many(self, node_ids: Iterable[int], value: bool) -> None:
        with self._lock:
            for node_id in node_ids:
                self._values[node_id] = value

    def get(self, node_id: int) -> bool | None:
        with self._lock:
            return self._values.get(node_id)

    def effective(self, node: TreeNode[P]) -> bool:
        """The flag to display: the overlay value if any, else the node's own."""
        if node.id is None:
            return node.is_active
        value = self.get(node.id)
        return node.is_active if value is None else value

    def reconcile(self, forest: Sequence[TreeNode[P]]) -> None:
        """Overwrite the overlay with the server's flags at every depth."""
        fresh = {node.id: node.is_active for node, _level in iter_preorder(forest) if node.id is not None}
        with self._lock:
            self._values = fresh

    def __contains__(self, node_id: object) -> bool:
        with self._lock:
            return node_id in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)


def cascade_targets(node: TreeNode[P]) -> tuple[int, ...]:
    """The node's id followed by its direct children's ids, nulls dropped."""
    ids = [node.id, *(child.id for child in node.children)]
    return tuple(node_id for node_id in ids if node_id is not None)


def toggle_active(
    node: TreeNode[P],
    overlay: PendingActiveMap,
    *,
    scope_id: int | None = None,
) -> CascadeRequest | None:
    """Flip ``node``'s displayed flag and force its direct children to match.

    The overlay is updated immediately; the returned request describes the
    single network call the caller should send. Virtual nodes yield None.
    """
    if node.id is None:
        return None

    new_value = not overlay.effective(node)
    targets = cascade_targets(node)
    overlay.set_many(targets, new_value)
    return CascadeRequest(scope_id=scope_id, node_ids=targets, is_active=new_value)

"""Expand/collapse state for a rendered tree."""

import threading
from collections.abc import Hashable, Sequence
from typing import Any

from erp_hierarchy.core.tree.navigation import collect_ids
from erp_hierarchy.models.node import TreeNode


class ExpandState:
    """Set of expanded node ids, independent of the tree data.

    Seeded with the top-level ids whenever a different dataset is loaded,
    so state from an earlier search never leaks onto unrelated nodes that
    happen to share an id. Safe to update from mutation callbacks running
    on worker threads.
    """

    def __init__(self) -> None:
        self._open: set[int] = set()
        self._dataset_key: Hashable | None = None
        self._loaded = False
        self._lock = threading.Lock()

    @property
    def ids(self) -> frozenset[int]:
        with self._lock:
            return frozenset(self._open)

    def load(self, forest: Sequence[TreeNode[Any]], dataset_key: Hashable) -> bool:
        """Seed from ``forest`` if ``dataset_key`` differs from the last load.

        Returns True when the state was reseeded.
        """
        seeded = {node.id for node in forest if node.id is not None}
        with self._lock:
            if self._loaded and dataset_key == self._dataset_key:
                return False
            self._dataset_key = dataset_key
            self._loaded = True
            self._open = seeded
            return True

    def toggle(self, node_id: int) -> None:
        with self._lock:
            if node_id in self._open:
                self._open.discard(node_id)
            else:
                self._open.add(node_id)

    def expand(self, node_id: int) -> None:
        with self._lock:
            self._open.add(node_id)

    def expand_all(self, forest: Sequence[TreeNode[Any]]) -> None:
        every_id = set(collect_ids(forest))
        with self._lock:
            self._open = every_id

    def collapse_all(self) -> None:
        with self._lock:
            self._open.clear()

    def is_expanded(self, node_id: int | None) -> bool:
        if node_id is None:
            return False
        with self._lock:
            return node_id in self._open

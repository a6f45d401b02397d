"""Screen controller that owns one tree and its optimistic overlays.

Local state changes happen synchronously on the calling thread; the network
call describing each change is submitted to an executor and its Future is
returned. Failures are reported through ``notify`` and optimistic state is
never rolled back: the next refetch brings the tree back in line with the
server.
"""

import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any

from loguru import logger

from erp_hierarchy.api import ApiError
from erp_hierarchy.config import MUTATION_WORKERS
from erp_hierarchy.core.cache import CacheKey, ListCache, list_key
from erp_hierarchy.core.tree.cascade import PendingActiveMap, toggle_active
from erp_hierarchy.core.tree.domains import TreeDomain
from erp_hierarchy.core.tree.expand import ExpandState
from erp_hierarchy.core.tree.navigation import count_nodes, find_node
from erp_hierarchy.core.tree.reorder import apply_reorder, build_sort_orders, reorder
from erp_hierarchy.core.write.client import (
    create_node,
    delete_node,
    fetch_tree,
    reorder_nodes,
    update_node,
    update_operation_status,
)
from erp_hierarchy.core.write.forms import can_add_child
from erp_hierarchy.models.node import TreeNode
from erp_hierarchy.protocols import ApiProtocol

Notifier = Callable[[str], None]

RETRY_MESSAGE = "The tree is out of date. Refresh and try again."


def _log_notice(message: str) -> None:
    logger.warning(message)


def _completed(result: dict[str, Any]) -> "Future[dict[str, Any]]":
    future: Future[dict[str, Any]] = Future()
    future.set_result(result)
    return future


class TreeScreen:
    """One hierarchy screen: a forest, its expand state and its active overlay."""

    def __init__(
        self,
        api: ApiProtocol,
        domain: TreeDomain,
        *,
        scope_id: int | None = None,
        executor: Executor | None = None,
        notify: Notifier | None = None,
        cache: ListCache | None = None,
    ) -> None:
        self.api = api
        self.domain = domain
        self.scope_id = scope_id
        self.notify: Notifier = notify or _log_notice
        self.cache = cache if cache is not None else ListCache()
        self.expand_state = ExpandState()
        self.overlay = PendingActiveMap()

        self._owns_executor = executor is None
        self._executor: Executor = executor or ThreadPoolExecutor(
            max_workers=MUTATION_WORKERS, thread_name_prefix=f"{domain.name}-sync"
        )
        self._forest: tuple[TreeNode[Any], ...] = ()
        self._params: dict[str, Any] | None = None
        self._key: CacheKey | None = None
        self._stale = threading.Event()
        self._closed = False

    def __enter__(self) -> "TreeScreen":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def forest(self) -> tuple[TreeNode[Any], ...]:
        return self._forest

    @property
    def stale(self) -> bool:
        """True once a mutation succeeded and the list should be refetched."""
        return self._stale.is_set()

    @property
    def result_count(self) -> int:
        return count_nodes(self._forest)

    # --- Loading ---

    def search(self, **filters: Any) -> tuple[TreeNode[Any], ...]:
        """Run a new search; expand state is reseeded when the filters changed."""
        self._params = self.domain.search_params(scope_id=self.scope_id, **filters)
        return self._load(self._params)

    def refresh(self) -> tuple[TreeNode[Any], ...]:
        """Refetch with the last search filters (cached lists are reused while fresh)."""
        if self._params is None:
            return self._forest
        return self._load(self._params)

    def _load(self, params: dict[str, Any]) -> tuple[TreeNode[Any], ...]:
        key = list_key(self.domain.name, params)
        forest = self.cache.get(key)
        fetched = forest is None
        if forest is None:
            try:
                forest = fetch_tree(self.api, self.domain, params)
            except (ApiError, ValueError) as e:
                self.notify(f"Failed to load the {self.domain.name} tree: {e}")
                return self._forest
            self.cache.put(key, forest)

        new_dataset = key != self._key
        self._forest = forest
        self._key = key
        self._stale.clear()
        if fetched or new_dataset:
            self.overlay.reconcile(forest)
        if self.expand_state.load(forest, key) and self.domain.expand_all_on_load:
            self.expand_state.expand_all(forest)
        return forest

    # --- Display state ---

    def effective_active(self, node: TreeNode[Any]) -> bool:
        return self.overlay.effective(node)

    def is_expanded(self, node_id: int | None) -> bool:
        return self.expand_state.is_expanded(node_id)

    def toggle_expanded(self, node_id: int) -> None:
        self.expand_state.toggle(node_id)

    def collapse_all(self) -> None:
        self.expand_state.collapse_all()

    def expand_all(self) -> None:
        self.expand_state.expand_all(self._forest)

    def can_add_child(self, node: TreeNode[Any] | None) -> bool:
        return can_add_child(node, self.domain.max_depth)

    # --- Mutations ---

    def on_drag_end(self, active_id: int | None, target_id: int | None) -> "Future[dict[str, Any]] | None":
        """Apply a finished drag locally and persist the renumbered sibling group.

        Returns None when the drop has no effect.
        """
        result = reorder(self._forest, active_id, target_id)
        if result is None:
            return None
        if not self._check_scope():
            return None
        if self.domain.strict_sibling_ids and any(node.id is None for node in result.siblings):
            logger.debug("Refusing reorder: virtual sibling under {}", result.parent_id)
            self.notify(RETRY_MESSAGE)
            return None
        try:
            entries = build_sort_orders(self.scope_id, result.siblings)
        except ValueError as e:
            logger.debug("Refusing reorder: {}", e)
            self.notify(RETRY_MESSAGE)
            return None

        self._forest = apply_reorder(self._forest, result.parent_id, result.siblings)
        return self._submit(
            "reorder",
            reorder_nodes,
            self.api,
            self.domain,
            parent_id=result.parent_id,
            entries=entries,
        )

    def toggle_active(self, node_id: int | None) -> "Future[dict[str, Any]] | None":
        """Flip a node's active flag, cascading to its direct children."""
        if not self.domain.supports_cascade:
            self.notify(f"{self.domain.name.capitalize()} entries have no operation status.")
            return None
        node = find_node(node_id, self._forest)
        if node is None or not self._check_scope():
            return None
        request = toggle_active(node, self.overlay, scope_id=self.scope_id)
        if request is None:
            return None
        return self._submit("change the operation status", update_operation_status, self.api, self.domain, request)

    def create(self, parent_id: int | None = None, **form: Any) -> "Future[dict[str, Any]]":
        """Create a node under ``parent_id`` (None = top level)."""
        errors = self.domain.validate(**form)
        if errors:
            return _completed({"success": False, "errors": errors})

        parent: TreeNode[Any] | None = None
        siblings: Sequence[TreeNode[Any]] = self._forest
        if parent_id is not None:
            parent = find_node(parent_id, self._forest)
            if parent is None:
                return _completed({"success": False, "errors": {"parent_id": f"Unknown parent {parent_id}."}})
            if not self.can_add_child(parent):
                return _completed(
                    {"success": False, "errors": {"parent_id": "Children cannot be added at this level."}}
                )
            siblings = parent.children
        if not self._check_scope():
            return _completed({"success": False, "error": "No organization selected."})

        payload = self.domain.create_payload(
            parent=parent, siblings=siblings, scope_id=self.scope_id, **form
        )

        def _open_parent(_result: dict[str, Any]) -> None:
            if parent_id is not None:
                self.expand_state.expand(parent_id)

        return self._submit("create", create_node, self.api, self.domain, payload=payload, on_success=_open_parent)

    def update(self, node_id: int, **form: Any) -> "Future[dict[str, Any]]":
        """Update a node's name and active flag; structure is never changed."""
        errors = self.domain.validate(**form)
        if errors:
            return _completed({"success": False, "errors": errors})
        if find_node(node_id, self._forest) is None:
            return _completed({"success": False, "error": f"Unknown node {node_id}."})
        if not self._check_scope():
            return _completed({"success": False, "error": "No organization selected."})

        payload = self.domain.update_payload(node_id=node_id, scope_id=self.scope_id, **form)
        return self._submit("update", update_node, self.api, self.domain, node_id=node_id, payload=payload)

    def delete(self, node_id: int, confirm: Callable[[str], bool]) -> "Future[dict[str, Any]] | None":
        """Delete a node after ``confirm(name)`` agrees; declining is a silent abort.

        The node stays in the local tree until the next refetch.
        """
        node = find_node(node_id, self._forest)
        if node is None or node.id is None:
            return None
        if not confirm(node.name):
            return None
        return self._submit("delete", delete_node, self.api, self.domain, node_id=node.id)

    # --- Plumbing ---

    def _check_scope(self) -> bool:
        if self.domain.requires_scope and self.scope_id is None:
            self.notify("Select an organization first.")
            return False
        return True

    def _submit(
        self,
        action: str,
        fn: Callable[..., dict[str, Any]],
        *args: Any,
        on_success: Callable[[dict[str, Any]], None] | None = None,
        **kwargs: Any,
    ) -> "Future[dict[str, Any]]":
        if self._closed:
            msg = "TreeScreen is closed"
            raise RuntimeError(msg)

        future = self._executor.submit(fn, *args, **kwargs)

        def _done(f: "Future[dict[str, Any]]") -> None:
            if f.cancelled() or self._closed:
                return
            exc = f.exception()
            if exc is not None:
                logger.opt(exception=exc).debug("{} {} raised", self.domain.name, action)
                self.notify(f"Failed to {action} ({self.domain.name}): {exc}")
                return
            result = f.result()
            if not result.get("success"):
                self.notify(f"Failed to {action} ({self.domain.name}): {result.get('error')}")
                return
            self.cache.invalidate((self.domain.name,))
            self._stale.set()
            if on_success is not None:
                on_success(result)

        future.add_done_callback(_done)
        return future

    def close(self, *, wait: bool = False) -> None:
        """Stop reacting to completions and cancel requests not yet started."""
        self._closed = True
        if self._owns_executor:
            self._executor.shutdown(wait=wait, cancel_futures=True)

"""Remote operations on a tree, parameterised by its domain."""

from collections.abc import Sequence
from typing import Any

from loguru import logger

from erp_hierarchy.api import ApiError
from erp_hierarchy.core.tree.domains import TreeDomain
from erp_hierarchy.models.node import CascadeRequest, SortOrderEntry, TreeNode
from erp_hierarchy.protocols import ApiProtocol


def fetch_tree(
    api: ApiProtocol,
    domain: TreeDomain,
    params: dict[str, Any] | None = None,
) -> tuple[TreeNode[Any], ...]:
    """Fetch and parse the forest for ``params``.

    Raises ApiError on transport/backend failure and ValueError on a
    malformed response, so callers can keep their previous snapshot.
    """
    result = api.call("GET", domain.list_path, params=params)
    forest = domain.parse_forest(result.get("data") or [])
    logger.debug("Fetched {} {} roots", len(forest), domain.name)
    return forest


def create_node(api: ApiProtocol, domain: TreeDomain, *, payload: dict[str, Any]) -> dict[str, Any]:
    """Create a node; the result carries the server-assigned id and the parsed node."""
    try:
        result = api.call("POST", domain.list_path, body=payload)
    except ApiError as e:
        return {"success": False, "error": str(e)}

    output: dict[str, Any] = {"success": True}
    data = result.get("data")
    if data:
        try:
            node = domain.parse_node(data)
        except ValueError as e:
            logger.warning("Created {} but could not parse the response: {}", domain.name, e)
        else:
            output["node_id"] = node.id
            output["node"] = node
    logger.info("Created {} {!r}", domain.name, payload.get("name") or payload.get("categoryName"))
    return output


def update_node(
    api: ApiProtocol,
    domain: TreeDomain,
    *,
    node_id: int,
    payload: dict[str, Any],
) -> dict[str, Any]:
    """Update name/active flag of an existing node."""
    try:
        result = api.call("PUT", domain.node_path(node_id), body=payload)
    except ApiError as e:
        return {"success": False, "error": str(e)}

    output: dict[str, Any] = {"success": True, "node_id": node_id}
    data = result.get("data")
    if data:
        try:
            output["node"] = domain.parse_node(data)
        except ValueError as e:
            logger.warning("Updated {} {} but could not parse the response: {}", domain.name, node_id, e)
    logger.info("Updated {} {}", domain.name, node_id)
    return output


def delete_node(api: ApiProtocol, domain: TreeDomain, *, node_id: int) -> dict[str, Any]:
    try:
        api.call("DELETE", domain.node_path(node_id))
    except ApiError as e:
        return {"success": False, "error": str(e)}
    logger.info("Deleted {} {}", domain.name, node_id)
    return {"success": True, "node_id": node_id}


def update_operation_status(
    api: ApiProtocol,
    domain: TreeDomain,
    request: CascadeRequest,
) -> dict[str, Any]:
    """Send one cascade-activation request covering every target id."""
    if domain.status_request is None:
        return {"success": False, "error": f"{domain.name} nodes have no operation status."}

    method, path, body = domain.status_request(request)
    try:
        api.call(method, path, body=body)
    except ApiError as e:
        return {"success": False, "error": str(e)}
    logger.info(
        "Set {} {} to {}",
        domain.name,
        list(request.node_ids),
        "active" if request.is_active else "inactive",
    )
    return {"success": True, "node_ids": list(request.node_ids), "is_active": request.is_active}


def reorder_nodes(
    api: ApiProtocol,
    domain: TreeDomain,
    *,
    parent_id: int | None,
    entries: Sequence[SortOrderEntry],
) -> dict[str, Any]:
    """Persist a renumbered sibling group in one batch call."""
    if not entries:
        return {"success": False, "error": "No fields to update."}

    method, path, body = domain.reorder_request(parent_id, entries)
    try:
        api.call(method, path, body=body)
    except ApiError as e:
        return {"success": False, "error": str(e)}
    logger.info("Reordered {} children of {}", len(entries), parent_id)
    return {
        "success": True,
        "parent_id": parent_id,
        "orders": [{"node_id": e.node_id, "sort_order": e.sort_order} for e in entries],
    }

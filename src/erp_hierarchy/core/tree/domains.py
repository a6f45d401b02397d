"""The two hierarchies edited with the tree engine and their backend contracts."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from erp_hierarchy.config import CATEGORY_MAX_DEPTH, PROGRAM_MAX_DEPTH
from erp_hierarchy.core.importer.json_reader import (
    parse_category,
    parse_category_forest,
    parse_program,
    parse_program_forest,
)
from erp_hierarchy.core.write import forms
from erp_hierarchy.models.node import CascadeRequest, SortOrderEntry, TreeNode

# (method, path, body)
RequestSpec = tuple[str, str, Any]


@dataclass(frozen=True)
class TreeDomain:
    """Everything that differs between the category and program trees."""

    name: str
    list_path: str
    item_path: str
    parse_forest: Callable[[Any], tuple[TreeNode[Any], ...]]
    parse_node: Callable[[Any], TreeNode[Any]]
    max_depth: int
    validate: Callable[..., dict[str, str]]
    create_payload: Callable[..., dict[str, Any]]
    update_payload: Callable[..., dict[str, Any]]
    reorder_request: Callable[[int | None, Sequence[SortOrderEntry]], RequestSpec]
    search_params: Callable[..., dict[str, Any]]
    status_request: Callable[[CascadeRequest], RequestSpec] | None = None
    expand_all_on_load: bool = False
    requires_scope: bool = False
    # Refuse to reorder a group that contains virtual siblings.
    strict_sibling_ids: bool = False

    @property
    def supports_cascade(self) -> bool:
        return self.status_request is not None

    def node_path(self, node_id: int) -> str:
        return self.item_path.format(node_id=node_id)


# --- Categories ---

_CATEGORY_BASE = "/api/master/category/master"


def category_search_params(
    *,
    scope_id: int | None = None,
    franchise_id: int | None = None,
    name: str | None = None,
    depth: int = 1,
    is_active: bool | None = None,
    created_from: str | None = None,
    created_to: str | None = None,
    **_: Any,
) -> dict[str, Any]:
    """Category list filters. Depth 2 lists minor categories, anything else majors."""
    return {
        "bpId": scope_id,
        "franchiseId": franchise_id,
        "categoryName": name or None,
        "depth": 2 if depth == 2 else 1,
        "isActive": is_active,
        "createdAtFrom": created_from,
        "createdAtTo": created_to,
    }


def _category_reorder(parent_id: int | None, entries: Sequence[SortOrderEntry]) -> RequestSpec:
    body = [
        {"bpId": e.scope_id, "categoryId": e.node_id, "sortOrder": e.sort_order} for e in entries
    ]
    return "PATCH", f"{_CATEGORY_BASE}/sort-orders", body


def _category_status(request: CascadeRequest) -> RequestSpec:
    body = {
        "bpId": request.scope_id,
        "categoryIds": list(request.node_ids),
        "isActive": request.is_active,
    }
    return "PATCH", f"{_CATEGORY_BASE}/operation-status", body


CATEGORY_DOMAIN = TreeDomain(
    name="category",
    list_path=_CATEGORY_BASE,
    item_path=_CATEGORY_BASE + "/{node_id}",
    parse_forest=parse_category_forest,
    parse_node=parse_category,
    max_depth=CATEGORY_MAX_DEPTH,
    validate=forms.validate_category_form,
    create_payload=forms.category_create_payload,
    update_payload=forms.category_update_payload,
    reorder_request=_category_reorder,
    search_params=category_search_params,
    status_request=_category_status,
    requires_scope=True,
)


# --- Programs ---

_PROGRAM_BASE = "/api/system/programs"


def program_search_params(*, menu_kind: str | None = None, **_: Any) -> dict[str, Any]:
    return {"menu_kind": menu_kind}


def _program_reorder(parent_id: int | None, entries: Sequence[SortOrderEntry]) -> RequestSpec:
    body = {
        "parent_id": parent_id,
        "orders": [{"id": e.node_id, "order_index": e.sort_order} for e in entries],
    }
    return "PATCH", f"{_PROGRAM_BASE}/reorder", body


PROGRAM_DOMAIN = TreeDomain(
    name="program",
    list_path=_PROGRAM_BASE,
    item_path=_PROGRAM_BASE + "/{node_id}",
    parse_forest=parse_program_forest,
    parse_node=parse_program,
    max_depth=PROGRAM_MAX_DEPTH,
    validate=forms.validate_program_form,
    create_payload=forms.program_create_payload,
    update_payload=forms.program_update_payload,
    reorder_request=_program_reorder,
    search_params=program_search_params,
    expand_all_on_load=True,
    strict_sibling_ids=True,
)

DOMAINS: dict[str, TreeDomain] = {d.name: d for d in (CATEGORY_DOMAIN, PROGRAM_DOMAIN)}

"""Tests for the category and program backend contracts."""

from erp_hierarchy.core.tree.domains import (
    CATEGORY_DOMAIN,
    DOMAINS,
    PROGRAM_DOMAIN,
    category_search_params,
    program_search_params,
)
from erp_hierarchy.models.node import CascadeRequest, SortOrderEntry


def test_registry_holds_both_domains() -> None:
    assert DOMAINS == {"category": CATEGORY_DOMAIN, "program": PROGRAM_DOMAIN}


def test_category_reorder_request() -> None:
    entries = [SortOrderEntry(7, 2, 1), SortOrderEntry(7, 1, 2)]

    method, path, body = CATEGORY_DOMAIN.reorder_request(None, entries)

    assert method == "PATCH"
    assert path == "/api/master/category/master/sort-orders"
    assert body == [
        {"bpId": 7, "categoryId": 2, "sortOrder": 1},
        {"bpId": 7, "categoryId": 1, "sortOrder": 2},
    ]


def test_program_reorder_request_names_the_parent() -> None:
    entries = [SortOrderEntry(None, 120, 1), SortOrderEntry(None, 110, 2)]

    method, path, body = PROGRAM_DOMAIN.reorder_request(100, entries)

    assert (method, path) == ("PATCH", "/api/system/programs/reorder")
    assert body == {
        "parent_id": 100,
        "orders": [{"id": 120, "order_index": 1}, {"id": 110, "order_index": 2}],
    }


def test_category_status_request() -> None:
    assert CATEGORY_DOMAIN.status_request is not None
    method, path, body = CATEGORY_DOMAIN.status_request(
        CascadeRequest(scope_id=7, node_ids=(10, 11, 12), is_active=False)
    )
    assert (method, path) == ("PATCH", "/api/master/category/master/operation-status")
    assert body == {"bpId": 7, "categoryIds": [10, 11, 12], "isActive": False}


def test_only_categories_cascade() -> None:
    assert CATEGORY_DOMAIN.supports_cascade
    assert not PROGRAM_DOMAIN.supports_cascade


def test_node_path() -> None:
    assert CATEGORY_DOMAIN.node_path(11) == "/api/master/category/master/11"
    assert PROGRAM_DOMAIN.node_path(110) == "/api/system/programs/110"


def test_category_search_params() -> None:
    params = category_search_params(scope_id=7, name="", depth=3, is_active=True)
    assert params["bpId"] == 7
    assert params["categoryName"] is None
    assert params["depth"] == 1
    assert params["isActive"] is True

    assert category_search_params(scope_id=7, depth=2)["depth"] == 2


def test_program_search_params_ignore_category_filters() -> None:
    assert program_search_params(menu_kind="ADMIN", depth=2, name="x") == {"menu_kind": "ADMIN"}

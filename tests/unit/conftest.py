"""Shared test fixtures."""

import copy
from typing import Any

import pytest

from erp_hierarchy.core.importer.json_reader import parse_category_forest, parse_program_forest
from erp_hierarchy.models.node import Category, Program, TreeNode


def _category(
    node_id: int,
    name: str,
    *,
    depth: int = 1,
    sort_order: int = 1,
    is_active: bool = True,
    parent_id: int | None = None,
    children: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return {
        "id": node_id,
        "bpId": 7,
        "companyName": "Acme Coffee",
        "categoryCode": f"C{node_id:03d}",
        "categoryName": name,
        "depth": depth,
        "parentCategoryId": parent_id,
        "isFixed": False,
        "isActive": is_active,
        "isDeleted": False,
        "sortOrder": sort_order,
        "createdBy": 1,
        "updatedBy": 1,
        "createdAt": "2025-03-01T09:00:00",
        "updatedAt": "2025-03-02T09:00:00",
        "children": children or [],
    }


def _program(
    node_id: int | None,
    name: str,
    *,
    level: int = 1,
    order_index: int = 1,
    is_active: bool = True,
    parent_id: int | None = None,
    path: str | None = None,
    children: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return {
        "id": node_id,
        "name": name,
        "path": path,
        "menu_kind": "ADMIN",
        "level": level,
        "order_index": order_index,
        "is_active": is_active,
        "parent_id": parent_id,
        "created_by_name": "admin",
        "updated_by_name": "admin",
        "created_at": "2025-03-01",
        "updated_at": "2025-03-02",
        "children": children or [],
    }


# Coffee(1) > Espresso(11), Drip(12, inactive); Tea(2) > Green(21); Bakery(3, inactive)
CATEGORY_DATA: list[dict[str, Any]] = [
    _category(
        1,
        "Coffee",
        sort_order=1,
        children=[
            _category(11, "Espresso", depth=2, sort_order=1, parent_id=1),
            _category(12, "Drip", depth=2, sort_order=2, parent_id=1, is_active=False),
        ],
    ),
    _category(
        2,
        "Tea",
        sort_order=2,
        children=[_category(21, "Green", depth=2, sort_order=1, parent_id=2)],
    ),
    _category(3, "Bakery", sort_order=3, is_active=False),
]

# Employees(100) > Info(110) > Career(111); Employees > Payroll(120)
# System(200) > Programs(210); Ungrouped(virtual) > Holiday(300)
PROGRAM_DATA: list[dict[str, Any]] = [
    _program(
        100,
        "Employees",
        order_index=1,
        children=[
            _program(
                110,
                "Info",
                level=2,
                order_index=1,
                parent_id=100,
                path="/employee/info",
                children=[
                    _program(111, "Career", level=3, order_index=1, parent_id=110, path="/employee/career")
                ],
            ),
            _program(120, "Payroll", level=2, order_index=2, parent_id=100, path="/employee/payroll"),
        ],
    ),
    _program(
        200,
        "System",
        order_index=2,
        children=[_program(210, "Programs", level=2, order_index=1, parent_id=200, path="/system/programs")],
    ),
    _program(
        None,
        "Ungrouped",
        order_index=3,
        children=[_program(300, "Holiday", level=2, order_index=1, path="/holiday")],
    ),
]


@pytest.fixture
def category_data() -> list[dict[str, Any]]:
    """Raw category list, as found in the ``data`` of the envelope."""
    return copy.deepcopy(CATEGORY_DATA)


@pytest.fixture
def program_data() -> list[dict[str, Any]]:
    """Raw program list, as found in the ``data`` of the envelope."""
    return copy.deepcopy(PROGRAM_DATA)


@pytest.fixture
def category_forest() -> tuple[TreeNode[Category], ...]:
    return parse_category_forest(copy.deepcopy(CATEGORY_DATA))


@pytest.fixture
def program_forest() -> tuple[TreeNode[Program], ...]:
    return parse_program_forest(copy.deepcopy(PROGRAM_DATA))

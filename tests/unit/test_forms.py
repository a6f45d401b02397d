"""Tests for form validation and request payloads."""

from typing import Any

import pytest

from erp_hierarchy.core.write.forms import (
    REQUIRED_MESSAGE,
    can_add_child,
    category_create_payload,
    category_update_payload,
    next_sort_order,
    normalize_path,
    program_create_payload,
    program_update_payload,
    validate_category_form,
    validate_program_form,
)
from erp_hierarchy.models.node import TreeNode
from tests.unit.fakes import make_node


@pytest.mark.parametrize("name", ["", "   ", "\t"])
def test_blank_name_is_required(name: str) -> None:
    assert validate_category_form(name=name) == {"name": REQUIRED_MESSAGE}
    assert validate_program_form(name=name, path="/x") == {"name": REQUIRED_MESSAGE}


def test_valid_forms_have_no_errors() -> None:
    assert validate_category_form(name="Coffee", is_active=False, path=None) == {}
    assert validate_program_form(name="Payroll") == {}


def test_next_sort_order_uses_maximum() -> None:
    siblings = (make_node(1, sort_order=1), make_node(2, sort_order=5), make_node(3, sort_order=3))
    assert next_sort_order(siblings) == 6
    assert next_sort_order(()) == 1


def test_normalize_path() -> None:
    assert normalize_path("  /employee/info ") == "/employee/info"
    assert normalize_path("   ") is None
    assert normalize_path(None) is None


def test_can_add_child_respects_max_depth() -> None:
    assert can_add_child(None, 2)
    assert can_add_child(make_node(1, depth=1), 2)
    assert not can_add_child(make_node(11, depth=2), 2)
    assert can_add_child(make_node(110, depth=2), 3)


def test_category_child_payload(category_forest: tuple[TreeNode[Any], ...]) -> None:
    coffee = category_forest[0]

    payload = category_create_payload(
        parent=coffee, siblings=coffee.children, scope_id=7, name="  Cold Brew ", is_active=True
    )

    assert payload == {
        "parentCategoryId": 1,
        "categoryName": "Cold Brew",
        "depth": 2,
        "sortOrder": 3,
        "isActive": True,
        "isFixed": True,
        "bpId": 7,
    }


def test_category_top_level_payload(category_forest: tuple[TreeNode[Any], ...]) -> None:
    payload = category_create_payload(parent=None, siblings=category_forest, scope_id=7, name="Juice")
    assert payload["parentCategoryId"] is None
    assert payload["depth"] == 1
    assert payload["sortOrder"] == 4


def test_category_update_payload_leaves_structure_alone() -> None:
    payload = category_update_payload(node_id=11, scope_id=7, name="Ristretto", is_active=False)
    assert payload == {
        "id": 11,
        "bpId": 7,
        "categoryName": "Ristretto",
        "isActive": False,
        "isFixed": True,
    }


def test_program_payloads_normalize_path() -> None:
    parent = make_node(100)
    created = program_create_payload(
        parent=parent, siblings=(), scope_id=None, name="Leave", path=" /leave ", is_active=False
    )
    assert created == {"parent_id": 100, "name": "Leave", "path": "/leave", "is_active": False}

    updated = program_update_payload(node_id=110, scope_id=None, name="Info", path="")
    assert updated == {"name": "Info", "path": None, "is_active": True}

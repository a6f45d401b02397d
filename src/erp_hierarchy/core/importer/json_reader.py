"""Parse backend tree responses into domain models."""

from collections.abc import Callable
from typing import Any, TypeVar

from erp_hierarchy.models.node import Category, Program, TreeNode

P = TypeVar("P")

NodeFactory = Callable[[dict[str, Any], int, tuple[TreeNode[P], ...]], TreeNode[P]]


def _require(raw: dict[str, Any], key: str) -> Any:
    if key not in raw:
        msg = f"Tree node is missing field {key!r}: {sorted(raw)!r}"
        raise ValueError(msg)
    return raw[key]


def _build_forest(raw_items: Any, make_node: NodeFactory[P]) -> tuple[TreeNode[P], ...]:
    """Build frozen nodes bottom-up from nested raw dicts.

    Uses an explicit stack: each raw node is visited once on the way down
    (to schedule its children) and once on the way up (to build it).
    """
    if not isinstance(raw_items, list):
        msg = f"Expected a list of tree nodes, got {type(raw_items).__name__}"
        raise ValueError(msg)

    built: dict[int, TreeNode[P]] = {}
    stack: list[tuple[dict[str, Any], int, bool]] = [(raw, 1, False) for raw in reversed(raw_items)]
    while stack:
        raw, depth, children_done = stack.pop()
        if not isinstance(raw, dict):
            msg = f"Expected a tree node object, got {type(raw).__name__}"
            raise ValueError(msg)
        raw_children = raw.get("children") or []
        if children_done:
            children = tuple(built.pop(id(child)) for child in raw_children)
            built[id(raw)] = make_node(raw, depth, children)
            continue
        stack.append((raw, depth, True))
        stack.extend((child, depth + 1, False) for child in reversed(raw_children))

    return tuple(built.pop(id(raw)) for raw in raw_items)


def _make_category(
    raw: dict[str, Any], depth: int, children: tuple[TreeNode[Category], ...]
) -> TreeNode[Category]:
    payload = Category(
        name=_require(raw, "categoryName"),
        bp_id=_require(raw, "bpId"),
        code=raw.get("categoryCode"),
        company_name=raw.get("companyName", ""),
        is_fixed=bool(raw.get("isFixed", False)),
        is_deleted=bool(raw.get("isDeleted", False)),
        created_by=raw.get("createdBy"),
        updated_by=raw.get("updatedBy"),
        created_at=raw.get("createdAt", ""),
        updated_at=raw.get("updatedAt", ""),
    )
    return TreeNode(
        id=_require(raw, "id"),
        depth=raw.get("depth", depth),
        sort_order=_require(raw, "sortOrder"),
        is_active=bool(_require(raw, "isActive")),
        payload=payload,
        parent_id=raw.get("parentCategoryId"),
        children=children,
    )


def _make_program(
    raw: dict[str, Any], depth: int, children: tuple[TreeNode[Program], ...]
) -> TreeNode[Program]:
    payload = Program(
        name=_require(raw, "name"),
        path=raw.get("path"),
        menu_kind=raw.get("menu_kind"),
        created_by_name=raw.get("created_by_name"),
        updated_by_name=raw.get("updated_by_name"),
        created_at=raw.get("created_at", ""),
        updated_at=raw.get("updated_at", ""),
    )
    return TreeNode(
        id=_require(raw, "id"),
        depth=raw.get("level", depth),
        sort_order=_require(raw, "order_index"),
        is_active=bool(_require(raw, "is_active")),
        payload=payload,
        parent_id=raw.get("parent_id"),
        children=children,
    )


def parse_category_forest(data: Any) -> tuple[TreeNode[Category], ...]:
    """Parse the category list response (``data`` of the envelope)."""
    return _build_forest(data, _make_category)


def parse_program_forest(data: Any) -> tuple[TreeNode[Program], ...]:
    """Parse the program list response (``data`` of the envelope)."""
    return _build_forest(data, _make_program)


def parse_category(data: Any) -> TreeNode[Category]:
    return _build_forest([data], _make_category)[0]


def parse_program(data: Any) -> TreeNode[Program]:
    return _build_forest([data], _make_program)[0]

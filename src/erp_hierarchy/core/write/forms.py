"""Form validation and request payloads for creating and editing tree nodes."""

from collections.abc import Sequence
from typing import Any

from erp_hierarchy.models.node import TreeNode

REQUIRED_MESSAGE = "Required field."


def validate_category_form(
    *, name: str, is_active: bool = True, is_fixed: bool = True, **_: Any
) -> dict[str, str]:
    """Validate the category dialog. Returns field -> message; empty when valid."""
    errors: dict[str, str] = {}
    if not name.strip():
        errors["name"] = REQUIRED_MESSAGE
    return errors


def validate_program_form(
    *, name: str, path: str | None = None, is_active: bool = True, **_: Any
) -> dict[str, str]:
    """Validate the program dialog. Returns field -> message; empty when valid."""
    errors: dict[str, str] = {}
    if not name.strip():
        errors["name"] = REQUIRED_MESSAGE
    return errors


def normalize_path(path: str | None) -> str | None:
    """Trim a program path; blank becomes None."""
    if path is None:
        return None
    trimmed = path.strip()
    return trimmed or None


def next_sort_order(siblings: Sequence[TreeNode[Any]]) -> int:
    """One past the largest sort order among ``siblings``.

    Gaps and ties are tolerated; only the maximum matters.
    """
    return max((node.sort_order for node in siblings), default=0) + 1


def can_add_child(node: TreeNode[Any] | None, max_depth: int) -> bool:
    """Whether a child may be created under ``node`` (None = top level)."""
    if node is None:
        return True
    return node.depth < max_depth


def category_create_payload(
    *,
    parent: TreeNode[Any] | None,
    siblings: Sequence[TreeNode[Any]],
    scope_id: int | None,
    name: str,
    is_active: bool = True,
    is_fixed: bool = True,
    **_: Any,
) -> dict[str, Any]:
    return {
        "parentCategoryId": parent.id if parent is not None else None,
        "categoryName": name.strip(),
        "depth": parent.depth + 1 if parent is not None else 1,
        "sortOrder": next_sort_order(siblings),
        "isActive": is_active,
        "isFixed": is_fixed,
        "bpId": scope_id,
    }


def category_update_payload(
    *,
    node_id: int,
    scope_id: int | None,
    name: str,
    is_active: bool = True,
    is_fixed: bool = True,
    **_: Any,
) -> dict[str, Any]:
    return {
        "id": node_id,
        "bpId": scope_id,
        "categoryName": name.strip(),
        "isActive": is_active,
        "isFixed": is_fixed,
    }


def program_create_payload(
    *,
    parent: TreeNode[Any] | None,
    siblings: Sequence[TreeNode[Any]],
    scope_id: int | None,
    name: str,
    path: str | None = None,
    is_active: bool = True,
    **_: Any,
) -> dict[str, Any]:
    # Programs are appended by the backend; sort order is not sent.
    return {
        "parent_id": parent.id if parent is not None else None,
        "name": name.strip(),
        "path": normalize_path(path),
        "is_active": is_active,
    }


def program_update_payload(
    *,
    node_id: int,
    scope_id: int | None,
    name: str,
    path: str | None = None,
    is_active: bool = True,
    **_: Any,
) -> dict[str, Any]:
    return {
        "name": name.strip(),
        "path": normalize_path(path),
        "is_active": is_active,
    }

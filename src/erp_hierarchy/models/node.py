"""Domain models for the category and program hierarchies."""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

P = TypeVar("P")


@dataclass(frozen=True)
class Category:
    """A master category row (depth 1 = major, depth 2 = minor)."""

    name: str
    bp_id: int
    code: str | None = None
    company_name: str = ""
    is_fixed: bool = False
    is_deleted: bool = False
    created_by: int | None = None
    updated_by: int | None = None
    created_at: str = ""
    updated_at: str = ""


@dataclass(frozen=True)
class Program:
    """A menu/program entry in the permission hierarchy."""

    name: str
    path: str | None = None
    menu_kind: str | None = None
    created_by_name: str | None = None
    updated_by_name: str | None = None
    created_at: str = ""
    updated_at: str = ""


@dataclass(frozen=True)
class TreeNode(Generic[P]):
    """A single node of an ordered forest.

    Only the structural fields are read by the tree engine; everything
    domain-specific lives in ``payload``. A node whose ``id`` is None is a
    virtual grouping row: it is rendered, but never dragged, selected or
    cascaded.
    """

    id: int | None
    depth: int
    sort_order: int
    is_active: bool
    payload: P
    parent_id: int | None = None
    children: tuple["TreeNode[P]", ...] = ()

    @property
    def is_virtual(self) -> bool:
        return self.id is None

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def name(self) -> str:
        return str(getattr(self.payload, "name", ""))


@dataclass(frozen=True)
class SortOrderEntry:
    """New persisted position of one sibling."""

    scope_id: int | None
    node_id: int
    sort_order: int


@dataclass(frozen=True)
class ReorderResult(Generic[P]):
    """Outcome of a legal drag: the owning parent and its new child order."""

    parent_id: int | None
    siblings: tuple[TreeNode[P], ...]


@dataclass(frozen=True)
class CascadeRequest:
    """One activation change covering a node and its direct children."""

    scope_id: int | None
    node_ids: tuple[int, ...]
    is_active: bool


@dataclass(frozen=True)
class FlatEntry(Generic[P]):
    """A node in a flattened, indented listing."""

    node: TreeNode[P]
    depth: int
    label: str


@dataclass(frozen=True)
class SearchHit:
    """A name match with the chain of names leading to it."""

    node_id: int
    path: tuple[str, ...] = field(default_factory=tuple)

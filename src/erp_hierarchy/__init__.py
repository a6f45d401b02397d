"""Ordered category and program tree editing for the ERP backend."""

from erp_hierarchy.api import ApiError, ErpApi
from erp_hierarchy.core.tree.domains import CATEGORY_DOMAIN, PROGRAM_DOMAIN, TreeDomain
from erp_hierarchy.core.tree.screen import TreeScreen
from erp_hierarchy.models.node import TreeNode
from erp_hierarchy.protocols import ApiProtocol

__all__ = [
    "CATEGORY_DOMAIN",
    "PROGRAM_DOMAIN",
    "ApiError",
    "ApiProtocol",
    "ErpApi",
    "TreeDomain",
    "TreeNode",
    "TreeScreen",
]

"""
模型档位目录。

- registry.py: ModelCatalog（只读注册表 + 通配回退）
- holder.py: CatalogHolder（整体替换式热更新）
- defaults.py: 内置默认目录
"""

from doc_budget.catalog.defaults import DEFAULT_TIER_ENTRIES, default_catalog
from doc_budget.catalog.holder import CatalogHolder
from doc_budget.catalog.registry import ModelCatalog

__all__ = [
    "DEFAULT_TIER_ENTRIES",
    "CatalogHolder",
    "ModelCatalog",
    "default_catalog",
]

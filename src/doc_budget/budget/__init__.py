"""
预算分配模块。

模块结构：

- **allocator.py**: BudgetAllocator 编排器（对外唯一入口）
- **baseline.py**: 最小预算 / 最大预算计算
- **tiers.py**: 两步档位升级
- **upgrade.py**: IMPORTANT 文档贪心升级
- **validator.py**: 分配结果后置校验
- **summary.py**: 分配摘要

基本用法::

    from doc_budget.budget import BudgetAllocator
    from doc_budget.catalog import default_catalog

    allocator = BudgetAllocator()
    result = allocator.allocate(documents, "en", default_catalog())

    print(result.selected_tier.value, result.selected_model_id)
    print(f"{result.total_tokens:,} / {result.tier_ceiling_tokens:,} tokens")
"""

from doc_budget.budget.allocator import (
    BudgetAllocator,
    allocate_budget,
    allocate_with_language_fallback,
    escalate_to_large_tier,
    with_fallback_model,
)
from doc_budget.budget.baseline import (
    BaselineCost,
    calculate_maximum_tokens,
    calculate_minimum_tokens,
    compute_baseline,
)
from doc_budget.budget.summary import AllocationSummary, get_allocation_summary
from doc_budget.budget.tiers import ensure_fits, select_tier
from doc_budget.budget.upgrade import RankedDocument, UpgradeOutcome, greedy_upgrade, rank_important
from doc_budget.budget.validator import collect_violations, validate_allocation

__all__ = [
    # 主入口
    "BudgetAllocator",
    "allocate_budget",
    "allocate_with_language_fallback",
    "escalate_to_large_tier",
    "with_fallback_model",
    # 基线与档位
    "BaselineCost",
    "calculate_maximum_tokens",
    "calculate_minimum_tokens",
    "compute_baseline",
    "ensure_fits",
    "select_tier",
    # 贪心升级
    "RankedDocument",
    "UpgradeOutcome",
    "greedy_upgrade",
    "rank_important",
    # 校验与摘要
    "AllocationSummary",
    "collect_violations",
    "get_allocation_summary",
    "validate_allocation",
]

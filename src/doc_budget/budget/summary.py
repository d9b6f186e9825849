"""
分配结果摘要，用于日志、CLI 展示和 API 响应。
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from doc_budget.budget.baseline import calculate_maximum_tokens
from doc_budget.models.allocation import AllocationBreakdown, AllocationResult
from doc_budget.models.catalog import TierName
from doc_budget.models.document import Document


class ModelSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    tier: TierName
    ceiling_tokens: int
    caching_enabled: bool
    uses_fallback: bool


class UsageSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_tokens: int
    minimal_budget: int
    max_possible_tokens: int
    utilization_percent: int
    savings_percent: int


class AllocationSummary(BaseModel):
    """
    分配摘要。

    属性:
        model: 模型与档位信息
        usage: 使用量、利用率（占档位上限）、相对全部全文的节省比例
        breakdown: 按优先级汇总
    """

    model_config = ConfigDict(frozen=True)

    model: ModelSummary
    usage: UsageSummary
    breakdown: AllocationBreakdown


def get_allocation_summary(
    result: AllocationResult,
    documents: Sequence[Document],
) -> AllocationSummary:
    """
    生成分配摘要。

    百分比四舍五入为整数；分母为 0 时记为 0。

    示例::

        summary = get_allocation_summary(result, documents)
        summary.usage.utilization_percent  # 65
        summary.usage.savings_percent      # 35
    """
    max_possible = calculate_maximum_tokens(documents)
    total = result.total_tokens

    utilization = _percent(total, result.tier_ceiling_tokens)
    savings = _percent(max_possible - total, max_possible)

    return AllocationSummary(
        model=ModelSummary(
            id=result.selected_model_id,
            tier=result.selected_tier,
            ceiling_tokens=result.tier_ceiling_tokens,
            caching_enabled=result.caching_enabled,
            uses_fallback=result.uses_fallback_model,
        ),
        usage=UsageSummary(
            total_tokens=total,
            minimal_budget=result.minimal_budget,
            max_possible_tokens=max_possible,
            utilization_percent=utilization,
            savings_percent=savings,
        ),
        breakdown=result.breakdown,
    )


def _percent(numerator: int, denominator: int) -> int:
    if denominator <= 0:
        return 0
    return round(numerator / denominator * 100)

"""
基线成本计算。

最小预算 = CORE 全文 + 全部 SUPPLEMENTARY 摘要 + 全部 IMPORTANT 摘要。
这是满足固定约束（CORE 全文、SUPPLEMENTARY 只用摘要）所需的最小 Token 数，
尚未包含任何可选的全文升级。
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from doc_budget.models.document import Document, PriorityTier


@dataclass(frozen=True)
class BaselineCost:
    """
    批次的基线成本。

    属性:
        core_full: CORE 文档全文 Token 数（没有 CORE 时为 0）
        supplementary_summary: SUPPLEMENTARY 摘要 Token 总数
        important_summary_total: IMPORTANT 摘要 Token 总数
    """

    core_full: int
    supplementary_summary: int
    important_summary_total: int

    @property
    def minimal_budget(self) -> int:
        return self.core_full + self.supplementary_summary + self.important_summary_total


def compute_baseline(documents: Sequence[Document]) -> BaselineCost:
    """
    计算批次的基线成本。

    调用前应已校验批次中至多一个 CORE 文档。
    """
    core_full = sum(
        d.full_text_tokens for d in documents if d.priority_tier == PriorityTier.CORE
    )
    supplementary_summary = sum(
        d.summary_tokens for d in documents if d.priority_tier == PriorityTier.SUPPLEMENTARY
    )
    important_summary_total = sum(
        d.summary_tokens for d in documents if d.priority_tier == PriorityTier.IMPORTANT
    )
    return BaselineCost(
        core_full=core_full,
        supplementary_summary=supplementary_summary,
        important_summary_total=important_summary_total,
    )


def calculate_minimum_tokens(documents: Sequence[Document]) -> int:
    """最小预算：CORE 全文 + 全部摘要。"""
    return compute_baseline(documents).minimal_budget


def calculate_maximum_tokens(documents: Sequence[Document]) -> int:
    """所有文档都使用全文时的 Token 总数，用于日志和容量规划。"""
    return sum(d.full_text_tokens for d in documents)

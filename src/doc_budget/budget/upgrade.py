"""
IMPORTANT 文档的贪心升级。

排序规则：importance_score 降序；分数相同时按输入位置升序（稳定、可复现）。
按顺序逐个尝试：升级成本 = 全文 - 摘要，不超过剩余预算就升级并扣减，
否则保持摘要并继续尝试下一个（不会提前终止）。

这是对背包问题的有意简化：O(n log n)、确定性、优先保障高重要性文档，
但在升级成本差异很大时不保证 Token 利用率最大。
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from doc_budget.models.document import Document, PriorityTier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedDocument:
    """
    参与升级的候选文档。

    属性:
        position: 文档在原始输入中的位置
        document: 文档
    """

    position: int
    document: Document


@dataclass(frozen=True)
class UpgradeOutcome:
    """
    贪心升级的结果。

    属性:
        upgraded_ids: 升级为全文的文档 ID
        order: 候选文档的尝试顺序
        initial_budget: 升级预算
        remaining_budget: 升级结束后剩余的预算
    """

    upgraded_ids: frozenset[str]
    order: tuple[str, ...]
    initial_budget: int
    remaining_budget: int

    @property
    def spent(self) -> int:
        return self.initial_budget - self.remaining_budget


def rank_important(documents: Sequence[Document]) -> list[RankedDocument]:
    """IMPORTANT 文档按 (分数降序, 输入位置升序) 排序。"""
    candidates = [
        RankedDocument(position=index, document=doc)
        for index, doc in enumerate(documents)
        if doc.priority_tier == PriorityTier.IMPORTANT
    ]
    return sorted(candidates, key=lambda c: (-c.document.importance_score, c.position))


def greedy_upgrade(ranked: Sequence[RankedDocument], upgrade_budget: int) -> UpgradeOutcome:
    """
    在升级预算内依次把候选文档升级为全文。

    参数:
        ranked: rank_important() 的输出
        upgrade_budget: 可用于升级的 Token 数

    返回:
        UpgradeOutcome
    """
    remaining = upgrade_budget
    upgraded: set[str] = set()

    for candidate in ranked:
        doc = candidate.document
        cost = doc.upgrade_cost
        if cost <= remaining:
            upgraded.add(doc.document_id)
            remaining -= cost
        elif logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "[GreedyUpgrade] %s 升级成本 %d > 剩余 %d，保持摘要",
                doc.document_id,
                cost,
                remaining,
            )

    return UpgradeOutcome(
        upgraded_ids=frozenset(upgraded),
        order=tuple(c.document.document_id for c in ranked),
        initial_budget=upgrade_budget,
        remaining_budget=remaining,
    )

"""
档位选择。

两步升级：

1. 最小预算 ≤ 小档位 ceiling → 小档位
2. 否则最小预算 ≤ 大档位 hard ceiling → 大档位
3. 否则 BudgetExceededError（致命，不重试）
"""

from __future__ import annotations

import logging

from doc_budget.catalog.registry import ModelCatalog
from doc_budget.errors.exceptions import BudgetExceededError
from doc_budget.models.catalog import ModelTierConfig, TierName

logger = logging.getLogger(__name__)


def select_tier(minimal_budget: int, language: str, catalog: ModelCatalog) -> ModelTierConfig:
    """
    根据最小预算选择档位。

    参数:
        minimal_budget: CORE 全文 + 全部摘要
        language: 批次语言
        catalog: 本次调用使用的目录快照

    返回:
        选中档位的配置

    异常:
        UnsupportedLanguageError: 目录中找不到需要的档位
        BudgetExceededError: 大档位硬上限也无法容纳最小预算
    """
    small = catalog.lookup(language, TierName.STANDARD)
    if minimal_budget <= small.ceiling_tokens:
        return small

    large = catalog.lookup(language, TierName.EXTENDED)
    logger.info(
        "[TierSelection] 最小预算 %d 超出 %s 档位上限 %d，升级到 %s 档位（硬上限 %d）",
        minimal_budget,
        small.tier_name.value,
        small.ceiling_tokens,
        large.tier_name.value,
        large.hard_ceiling_tokens,
    )
    ensure_fits(minimal_budget, large)
    return large


def ensure_fits(minimal_budget: int, tier: ModelTierConfig) -> None:
    """
    确认最小预算不超过档位的生效上限。

    异常:
        BudgetExceededError: 超出上限
    """
    ceiling = tier.applicable_ceiling
    if minimal_budget <= ceiling:
        return

    raise BudgetExceededError(
        what=f"最小预算 {minimal_budget:,} tokens 超出 {tier.tier_name.value} 档位"
             f"（language='{tier.language}'）上限 {ceiling:,} tokens。",
        why="最小预算 = CORE 全文 + 所有 IMPORTANT / SUPPLEMENTARY 摘要，"
            "这是任何分配方案都无法再压缩的部分，通常是 CORE 文档全文过大。",
        how="请在上游拆分或重新分块过大的文档后重新提交；分配器不会截断内容。",
        required_tokens=minimal_budget,
        budget_tokens=ceiling,
        tier_name=tier.tier_name.value,
        language=tier.language,
    )

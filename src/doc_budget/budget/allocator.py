"""
BudgetAllocator — 文档表示方式与模型档位的决策引擎。

核心流程：

1. **输入校验**：ID 唯一、至多一个 CORE、summary_tokens ≤ full_text_tokens
2. **基线成本**（baseline.py）：最小预算 = CORE 全文 + 全部摘要
3. **档位选择**（tiers.py）：小档位 ceiling → 大档位 hard ceiling → BudgetExceededError
4. **贪心升级**（upgrade.py）：在剩余预算内按重要性把 IMPORTANT 文档升级为全文
5. **结果组装**：逐文档决策、总量、缓存开关、主 / 备用模型
6. **后置校验**（validator.py，可关闭）

分配器是纯函数：无 I/O、无共享可变状态、不缓存决策，可在任意线程或协程中并发调用。
目录作为参数显式传入，热更新时调用方通过 CatalogHolder 取快照。

基本用法::

    from doc_budget.budget import allocate_budget
    from doc_budget.catalog import default_catalog

    result = allocate_budget(documents, "en", default_catalog())
    for decision in result.decisions:
        print(decision.document_id, decision.representation_mode.value)
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from typing import Any

from doc_budget.budget.baseline import BaselineCost, compute_baseline
from doc_budget.budget.tiers import ensure_fits, select_tier
from doc_budget.budget.upgrade import greedy_upgrade, rank_important
from doc_budget.budget.validator import validate_allocation
from doc_budget.catalog.registry import ModelCatalog
from doc_budget.errors.exceptions import (
    CatalogConfigurationError,
    InvalidInputError,
    UnsupportedLanguageError,
)
from doc_budget.models.allocation import (
    AllocationBreakdown,
    AllocationDecision,
    AllocationResult,
)
from doc_budget.models.catalog import (
    WILDCARD_LANGUAGE,
    ModelTierConfig,
    TierName,
    normalize_language,
)
from doc_budget.models.document import Document, PriorityTier, RepresentationMode
from doc_budget.models.request import parse_documents

logger = logging.getLogger(__name__)

DocumentInput = Document | Mapping[str, Any]


class BudgetAllocator:
    """
    文档预算与模型档位分配器。

    用法::

        allocator = BudgetAllocator()
        result = allocator.allocate(documents, "ru", catalog)

        # 主模型不可用：同档位换备用模型，决策不重新计算
        result = allocator.allocate(documents, "ru", catalog, primary_model_unavailable=True)

        # 下游遇到上下文溢出后，强制使用大档位重新分配
        result = allocator.allocate_on_large_tier(documents, "ru", catalog)
    """

    def __init__(self, validate_results: bool = True) -> None:
        """
        参数:
            validate_results: 返回前是否用 Validator 复核结果
        """
        self.validate_results = validate_results

    def allocate(
        self,
        documents: Sequence[DocumentInput],
        language: str,
        catalog: ModelCatalog,
        primary_model_unavailable: bool = False,
    ) -> AllocationResult:
        """
        为一个批次执行完整的分配流程。

        参数:
            documents: 文档（Document 或原始字典记录），保持输入顺序
            language: 批次语言
            catalog: 本次调用使用的目录快照
            primary_model_unavailable: 主模型不可用时改用档位备用模型

        返回:
            AllocationResult

        异常:
            InvalidInputError: 输入批次不合法
            UnsupportedLanguageError: 目录中找不到档位
            BudgetExceededError: 大档位硬上限也无法容纳最小预算
        """
        docs = self.prepare(documents)
        baseline = compute_baseline(docs)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "[BudgetAllocator] %d 个文档，语言 '%s'：CORE 全文 %d + SUPPLEMENTARY 摘要 %d "
                "+ IMPORTANT 摘要 %d = 最小预算 %d",
                len(docs),
                language,
                baseline.core_full,
                baseline.supplementary_summary,
                baseline.important_summary_total,
                baseline.minimal_budget,
            )

        tier = select_tier(baseline.minimal_budget, language, catalog)
        return self._allocate_on_tier(docs, language, tier, baseline, primary_model_unavailable)

    def allocate_on_large_tier(
        self,
        documents: Sequence[DocumentInput],
        language: str,
        catalog: ModelCatalog,
        primary_model_unavailable: bool = False,
    ) -> AllocationResult:
        """
        跳过小档位，直接在大档位上分配。

        用于下游模型调用报告上下文溢出之后的重新计算；仍然遵守大档位硬上限。

        异常:
            InvalidInputError / UnsupportedLanguageError / BudgetExceededError
        """
        docs = self.prepare(documents)
        baseline = compute_baseline(docs)
        tier = catalog.lookup(language, TierName.EXTENDED)
        ensure_fits(baseline.minimal_budget, tier)

        logger.info(
            "[BudgetAllocator] 强制使用 %s 档位重新分配（最小预算 %d，硬上限 %d）",
            tier.tier_name.value,
            baseline.minimal_budget,
            tier.hard_ceiling_tokens,
        )
        return self._allocate_on_tier(docs, language, tier, baseline, primary_model_unavailable)

    def prepare(self, documents: Sequence[DocumentInput]) -> list[Document]:
        """
        解析并校验输入批次。

        单条记录的字段与 summary_tokens ≤ full_text_tokens 由 Document 自身校验，
        这里只检查批次级约束。

        异常:
            InvalidInputError: 记录不合法、ID 重复、多个 CORE 文档
        """
        docs = parse_documents(documents)

        counts = Counter(d.document_id for d in docs)
        duplicated = sorted(doc_id for doc_id, count in counts.items() if count > 1)
        if duplicated:
            raise InvalidInputError(
                what=f"批次中存在重复的 document_id：{', '.join(duplicated)}。",
                why="document_id 必须在批次内唯一，否则无法一一对应分配决策。",
                how="在上游去重，或为重复文档分配不同的 ID。",
                document_id=duplicated[0],
                field_path="document_id",
            )

        core_ids = [d.document_id for d in docs if d.priority_tier == PriorityTier.CORE]
        if len(core_ids) > 1:
            raise InvalidInputError(
                what=f"批次中有 {len(core_ids)} 个 CORE 文档，至多允许 1 个。",
                why=f"CORE 文档：{', '.join(core_ids)}。",
                how="重新分类，只保留一个 CORE 文档，其余标记为 IMPORTANT。",
                document_id=core_ids[1],
                field_path="priority_tier",
                core_document_ids=core_ids,
            )

        return docs

    def _allocate_on_tier(
        self,
        docs: list[Document],
        language: str,
        tier: ModelTierConfig,
        baseline: BaselineCost,
        primary_model_unavailable: bool,
    ) -> AllocationResult:
        ceiling = tier.applicable_ceiling
        upgrade_budget = ceiling - baseline.minimal_budget
        outcome = greedy_upgrade(rank_important(docs), upgrade_budget)

        decisions = tuple(_decide(doc, outcome.upgraded_ids) for doc in docs)
        total_tokens = sum(d.tokens_used for d in decisions)

        if primary_model_unavailable:
            selected_model_id = tier.fallback_model_id
            logger.info(
                "[BudgetAllocator] 主模型 %s 不可用，改用备用模型 %s",
                tier.primary_model_id,
                tier.fallback_model_id,
            )
        else:
            selected_model_id = tier.primary_model_id

        result = AllocationResult(
            selected_tier=tier.tier_name,
            selected_model_id=selected_model_id,
            primary_model_id=tier.primary_model_id,
            fallback_model_id=tier.fallback_model_id,
            caching_enabled=tier.caching_supported,
            decisions=decisions,
            total_tokens=total_tokens,
            minimal_budget=baseline.minimal_budget,
            tier_ceiling_tokens=ceiling,
            language=normalize_language(language),
            breakdown=AllocationBreakdown.from_decisions(decisions),
        )

        if tier.is_large and total_tokens > tier.ceiling_tokens:
            logger.warning(
                "[BudgetAllocator] %s 档位使用 %d tokens，超过软上限 %d（硬上限 %d）",
                tier.tier_name.value,
                total_tokens,
                tier.ceiling_tokens,
                tier.hard_ceiling_tokens,
            )

        if self.validate_results:
            validate_allocation(result, docs, tier)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "[BudgetAllocator] 分配完成：档位 %s，模型 %s，%d / %d tokens，"
                "升级 %d 个 IMPORTANT 文档（剩余升级预算 %d）",
                tier.tier_name.value,
                selected_model_id,
                total_tokens,
                ceiling,
                len(outcome.upgraded_ids),
                outcome.remaining_budget,
            )

        return result


def _decide(doc: Document, upgraded_ids: frozenset[str]) -> AllocationDecision:
    if doc.priority_tier == PriorityTier.CORE or doc.document_id in upgraded_ids:
        mode = RepresentationMode.FULL_TEXT
    else:
        mode = RepresentationMode.SUMMARY
    return AllocationDecision(
        document_id=doc.document_id,
        priority_tier=doc.priority_tier,
        representation_mode=mode,
        tokens_used=doc.tokens_for(mode),
    )


def allocate_budget(
    documents: Sequence[DocumentInput],
    language: str,
    catalog: ModelCatalog,
    primary_model_unavailable: bool = False,
    validate: bool = True,
) -> AllocationResult:
    """BudgetAllocator.allocate() 的函数式入口。"""
    return BudgetAllocator(validate_results=validate).allocate(
        documents,
        language,
        catalog,
        primary_model_unavailable=primary_model_unavailable,
    )


def escalate_to_large_tier(
    documents: Sequence[DocumentInput],
    language: str,
    catalog: ModelCatalog,
    primary_model_unavailable: bool = False,
) -> AllocationResult:
    """
    下游上下文溢出后，在大档位上重新分配。

    升级预算按大档位硬上限重新计算，因此 IMPORTANT 文档可能获得更多全文升级。
    """
    return BudgetAllocator().allocate_on_large_tier(
        documents,
        language,
        catalog,
        primary_model_unavailable=primary_model_unavailable,
    )


def allocate_with_language_fallback(
    documents: Sequence[DocumentInput],
    language: str,
    catalog: ModelCatalog,
    primary_model_unavailable: bool = False,
    allocator: BudgetAllocator | None = None,
) -> AllocationResult:
    """
    分配失败于 UnsupportedLanguageError 时，显式使用 "any" 重试一次。

    重试仍然失败说明目录缺少通配条目，升级为 CatalogConfigurationError 交给运维处理。

    异常:
        CatalogConfigurationError: 通配语言也无法找到档位
        InvalidInputError / BudgetExceededError: 与 allocate() 相同
    """
    allocator = allocator or BudgetAllocator()
    try:
        return allocator.allocate(
            documents, language, catalog, primary_model_unavailable=primary_model_unavailable
        )
    except UnsupportedLanguageError as e:
        if normalize_language(language) == WILDCARD_LANGUAGE:
            raise _catalog_misconfigured(e) from e
        logger.warning(
            "[BudgetAllocator] 语言 '%s' 没有可用档位（%s），使用 '%s' 重试",
            language,
            e.tier_name,
            WILDCARD_LANGUAGE,
        )

    try:
        return allocator.allocate(
            documents,
            WILDCARD_LANGUAGE,
            catalog,
            primary_model_unavailable=primary_model_unavailable,
        )
    except UnsupportedLanguageError as e:
        raise _catalog_misconfigured(e) from e


def _catalog_misconfigured(error: UnsupportedLanguageError) -> CatalogConfigurationError:
    return CatalogConfigurationError(
        what=f"模型目录缺少 '{WILDCARD_LANGUAGE}' 通配的 {error.tier_name} 档位配置。",
        why=error.what,
        how=f"请在配置的 catalog 段中添加 language='{WILDCARD_LANGUAGE}' 的条目。",
        details=dict(error.details),
    )


def with_fallback_model(result: AllocationResult) -> AllocationResult:
    """把已有结果的模型切换为档位备用模型，不重新计算任何决策。"""
    return result.model_copy(update={"selected_model_id": result.fallback_model_id})

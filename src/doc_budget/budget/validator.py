"""
AllocationResult 后置条件校验。

既用作生产环境中交给 Prompt Assembler 之前的运行时防线，
也是属性测试的主要断言工具。

检查项：
- 每个输入文档恰好一条决策，ID 集合完全相等
- 至多一个 CORE 文档，且其决策为 FULL_TEXT
- 所有 SUPPLEMENTARY 文档的决策为 SUMMARY
- 每条决策的 tokens_used 与其表示方式一致
- total_tokens == Σ tokens_used，且与 breakdown 一致
- total_tokens 不超过所选档位的生效上限

任何违反都说明分配器有缺陷，而不是合法的运行时状况。
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence
from typing import Any

from doc_budget.errors.exceptions import InvalidInputError
from doc_budget.models.allocation import AllocationResult
from doc_budget.models.catalog import ModelTierConfig
from doc_budget.models.document import Document, PriorityTier, RepresentationMode
from doc_budget.models.request import parse_documents


def collect_violations(
    result: AllocationResult,
    documents: Sequence[Document | Mapping[str, Any]],
    tier: ModelTierConfig | None = None,
) -> list[str]:
    """
    收集所有违反的不变量，违反项本身不会触发异常。

    参数:
        result: 分配结果
        documents: 原始输入文档（Document 或字典记录）
        tier: 所选档位配置（提供时额外核对上限与档位是否一致）

    返回:
        违反项描述列表（空列表表示全部通过）

    异常:
        InvalidInputError: 输入记录本身不合法
    """
    docs = parse_documents(documents)
    violations: list[str] = []

    decision_counts = Counter(d.document_id for d in result.decisions)
    duplicated = sorted(doc_id for doc_id, count in decision_counts.items() if count > 1)
    if duplicated:
        violations.append(f"决策中存在重复文档：{duplicated}")

    input_ids = {d.document_id for d in docs}
    decision_ids = set(decision_counts)
    missing = sorted(input_ids - decision_ids)
    extra = sorted(decision_ids - input_ids)
    if missing:
        violations.append(f"缺少决策的文档：{missing}")
    if extra:
        violations.append(f"决策中出现未知文档：{extra}")

    core_docs = [d for d in docs if d.priority_tier == PriorityTier.CORE]
    if len(core_docs) > 1:
        violations.append(f"批次中有 {len(core_docs)} 个 CORE 文档，至多允许 1 个")

    by_id = {d.document_id: d for d in docs}
    for decision in result.decisions:
        doc = by_id.get(decision.document_id)
        if doc is None:
            continue
        if decision.priority_tier != doc.priority_tier:
            violations.append(
                f"{doc.document_id} 的决策优先级 {decision.priority_tier.value} "
                f"与输入 {doc.priority_tier.value} 不一致"
            )
        if (
            doc.priority_tier == PriorityTier.CORE
            and decision.representation_mode != RepresentationMode.FULL_TEXT
        ):
            violations.append(f"CORE 文档 {doc.document_id} 未使用全文")
        if (
            doc.priority_tier == PriorityTier.SUPPLEMENTARY
            and decision.representation_mode != RepresentationMode.SUMMARY
        ):
            violations.append(f"SUPPLEMENTARY 文档 {doc.document_id} 未使用摘要")
        expected = doc.tokens_for(decision.representation_mode)
        if decision.tokens_used != expected:
            violations.append(
                f"{doc.document_id} 的 tokens_used={decision.tokens_used}，"
                f"按 {decision.representation_mode.value} 应为 {expected}"
            )

    summed = sum(d.tokens_used for d in result.decisions)
    if result.total_tokens != summed:
        violations.append(f"total_tokens={result.total_tokens} 与决策之和 {summed} 不一致")
    if result.breakdown.total_tokens != result.total_tokens:
        violations.append(
            f"breakdown 合计 {result.breakdown.total_tokens} 与 total_tokens "
            f"{result.total_tokens} 不一致"
        )

    if result.total_tokens > result.tier_ceiling_tokens:
        violations.append(
            f"total_tokens={result.total_tokens} 超出 {result.selected_tier.value} "
            f"档位上限 {result.tier_ceiling_tokens}"
        )

    if tier is not None:
        if tier.tier_name != result.selected_tier:
            violations.append(
                f"结果档位 {result.selected_tier.value} 与配置档位 {tier.tier_name.value} 不一致"
            )
        if result.tier_ceiling_tokens != tier.applicable_ceiling:
            violations.append(
                f"结果记录的上限 {result.tier_ceiling_tokens} 与档位生效上限 "
                f"{tier.applicable_ceiling} 不一致"
            )
        if result.selected_model_id not in (tier.primary_model_id, tier.fallback_model_id):
            violations.append(f"模型 {result.selected_model_id} 不属于所选档位")

    return violations


def validate_allocation(
    result: AllocationResult,
    documents: Sequence[Document | Mapping[str, Any]],
    tier: ModelTierConfig | None = None,
) -> None:
    """
    校验分配结果，违反任一不变量即抛出异常。

    异常:
        InvalidInputError: 输入记录不合法，或分配结果违反不变量
    """
    violations = collect_violations(result, documents, tier)
    if violations:
        raise InvalidInputError(
            what=f"分配结果违反 {len(violations)} 项不变量。",
            why="\n".join(f"  - {v}" for v in violations),
            how="这表示分配器实现存在缺陷，请附上输入批次和目录快照报告问题。",
            violations=violations,
        )

"""
doc-budget 快速上手示例。

演示最基本的用法：一个批次、一个语言、一次分配。

运行方式：
    python examples/quickstart.py

无需任何配置文件，使用内置默认目录。
"""

from doc_budget import DocBudget
from doc_budget.budget import escalate_to_large_tier


def main() -> None:
    planner = DocBudget()

    documents = [
        {
            "document_id": "contract",
            "priority_tier": "CORE",
            "full_text_tokens": 50_000,
            "summary_tokens": 6_000,
        },
        {
            "document_id": "annex_a",
            "priority_tier": "IMPORTANT",
            "full_text_tokens": 40_000,
            "summary_tokens": 8_000,
            "importance_score": 0.9,
        },
        {
            "documentId": "annex_b",
            "priorityTier": "IMPORTANT",
            "fullTextTokens": 160_000,
            "summaryTokens": 12_000,
            "importanceScore": 0.5,
        },
        {
            "document_id": "glossary",
            "priority_tier": "SUPPLEMENTARY",
            "full_text_tokens": 30_000,
            "summary_tokens": 2_000,
        },
    ]

    # ===== 场景 1：默认档位 =====
    print("=" * 60)
    print("场景 1：小档位分配")
    print("=" * 60)

    result = planner.allocate(documents, language="en")
    print(f"\n档位：{result.selected_tier.value}（模型 {result.selected_model_id}）")
    print(f"总 Token：{result.total_tokens:,} / {result.tier_ceiling_tokens:,}")
    for decision in result.decisions:
        print(f"  {decision.document_id:<10} {decision.representation_mode.value:<10} "
              f"{decision.tokens_used:>8,}")

    summary = planner.summarize(result, documents)
    print(f"\n利用率：{summary.usage.utilization_percent}%")

    # ===== 场景 2：下游上下文溢出后升级 =====
    print("\n" + "=" * 60)
    print("场景 2：在大档位上重新分配")
    print("=" * 60)

    escalated = escalate_to_large_tier(documents, "en", planner.catalog)
    print(f"\n档位：{escalated.selected_tier.value}（缓存 {escalated.caching_enabled}）")
    print(f"总 Token：{escalated.total_tokens:,}，升级文档 {escalated.upgrade_count} 篇")

    # ===== 场景 3：契约输出 =====
    print("\n" + "=" * 60)
    print("场景 3：交给下游的契约格式")
    print("=" * 60)
    print(result.to_contract())


if __name__ == "__main__":
    main()

"""
分配摘要单元测试。

覆盖范围:
- budget/summary.py: get_allocation_summary
"""

from __future__ import annotations

from doc_budget.budget import allocate_budget, get_allocation_summary, with_fallback_model
from doc_budget.models import TierName


class TestAllocationSummary:
    """get_allocation_summary 测试。"""

    def test_full_utilization(self, scenario_documents, en_catalog) -> None:
        result = allocate_budget(scenario_documents, "en", en_catalog)
        summary = get_allocation_summary(result, scenario_documents)

        assert summary.model.tier == TierName.STANDARD
        assert summary.model.ceiling_tokens == 150_000
        assert summary.usage.total_tokens == 150_000
        assert summary.usage.minimal_budget == 70_000
        assert summary.usage.max_possible_tokens == 150_000
        assert summary.usage.utilization_percent == 100
        assert summary.usage.savings_percent == 0

    def test_savings_when_summaries_used(self, scenario_documents, tight_catalog) -> None:
        result = allocate_budget(scenario_documents, "en", tight_catalog)
        summary = get_allocation_summary(result, scenario_documents)

        assert summary.usage.total_tokens == 70_000
        assert summary.usage.utilization_percent == 70
        # (150,000 - 70,000) / 150,000 = 53.3%
        assert summary.usage.savings_percent == 53
        assert summary.breakdown.important.summary_count == 2

    def test_fallback_flag(self, scenario_documents, en_catalog) -> None:
        result = with_fallback_model(allocate_budget(scenario_documents, "en", en_catalog))
        summary = get_allocation_summary(result, scenario_documents)
        assert summary.model.uses_fallback is True
        assert summary.model.id == "en-standard-fallback"

    def test_empty_batch(self, en_catalog) -> None:
        result = allocate_budget([], "en", en_catalog)
        summary = get_allocation_summary(result, [])
        assert summary.usage.max_possible_tokens == 0
        assert summary.usage.utilization_percent == 0
        assert summary.usage.savings_percent == 0

    def test_serializable(self, scenario_documents, en_catalog) -> None:
        result = allocate_budget(scenario_documents, "en", en_catalog)
        data = get_allocation_summary(result, scenario_documents).model_dump(mode="json")
        assert data["model"]["tier"] == "standard"
        assert data["breakdown"]["core"]["tokens"] == 50_000

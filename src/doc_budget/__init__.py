"""
doc_budget — 文档预算与模型档位分配器。

为一批已分类、已摘要的文档决定每个文档以全文还是摘要进入 Prompt，
并选择能够容纳该批次的模型档位（标准 / 扩展上下文）。

快速上手::

    from doc_budget import DocBudget

    planner = DocBudget()
    result = planner.allocate(documents, language="en")
    payload = result.to_contract()  # → 交给 Prompt Assembler

纯函数用法::

    from doc_budget import allocate_budget, default_catalog

    result = allocate_budget(documents, "en", default_catalog())
"""

from doc_budget.budget import (
    AllocationSummary,
    BudgetAllocator,
    allocate_budget,
    allocate_with_language_fallback,
    calculate_maximum_tokens,
    calculate_minimum_tokens,
    escalate_to_large_tier,
    get_allocation_summary,
    validate_allocation,
    with_fallback_model,
)
from doc_budget.catalog import CatalogHolder, ModelCatalog, default_catalog
from doc_budget.config import AllocatorConfig, load_config
from doc_budget.errors import (
    BudgetExceededError,
    CatalogConfigurationError,
    ConfigLoadError,
    ConfigValidationError,
    DocBudgetError,
    InvalidInputError,
    UnsupportedLanguageError,
)
from doc_budget.facade import DocBudget
from doc_budget.models import (
    AllocationBreakdown,
    AllocationDecision,
    AllocationResult,
    Document,
    ModelTierConfig,
    PriorityTier,
    RepresentationMode,
    TierName,
)
from doc_budget.observability import MetricsCollector

__version__ = "0.1.0"

__all__ = [
    # 顶层入口
    "DocBudget",
    # 数据模型
    "AllocationBreakdown",
    "AllocationDecision",
    "AllocationResult",
    "Document",
    "ModelTierConfig",
    "PriorityTier",
    "RepresentationMode",
    "TierName",
    # 分配
    "AllocationSummary",
    "BudgetAllocator",
    "allocate_budget",
    "allocate_with_language_fallback",
    "calculate_maximum_tokens",
    "calculate_minimum_tokens",
    "escalate_to_large_tier",
    "get_allocation_summary",
    "validate_allocation",
    "with_fallback_model",
    # 目录与配置
    "AllocatorConfig",
    "CatalogHolder",
    "ModelCatalog",
    "default_catalog",
    "load_config",
    # 可观测性
    "MetricsCollector",
    # 异常
    "BudgetExceededError",
    "CatalogConfigurationError",
    "ConfigLoadError",
    "ConfigValidationError",
    "DocBudgetError",
    "InvalidInputError",
    "UnsupportedLanguageError",
]

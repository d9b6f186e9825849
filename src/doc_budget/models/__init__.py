"""
doc_budget 数据模型。

- document.py: Document, PriorityTier, RepresentationMode
- catalog.py: ModelTierConfig, TierName, WILDCARD_LANGUAGE
- allocation.py: AllocationDecision, AllocationResult, AllocationBreakdown
- request.py: AllocationRequest 与输入契约适配
"""

from doc_budget.models.allocation import (
    AllocationBreakdown,
    AllocationDecision,
    AllocationResult,
    CoreBreakdown,
    ImportantBreakdown,
    SupplementaryBreakdown,
)
from doc_budget.models.catalog import (
    WILDCARD_LANGUAGE,
    ModelTierConfig,
    TierName,
    normalize_language,
)
from doc_budget.models.document import Document, PriorityTier, RepresentationMode
from doc_budget.models.request import AllocationRequest, parse_documents, parse_request

__all__ = [
    "WILDCARD_LANGUAGE",
    "AllocationBreakdown",
    "AllocationDecision",
    "AllocationRequest",
    "AllocationResult",
    "CoreBreakdown",
    "Document",
    "ImportantBreakdown",
    "ModelTierConfig",
    "PriorityTier",
    "RepresentationMode",
    "SupplementaryBreakdown",
    "TierName",
    "normalize_language",
    "parse_documents",
    "parse_request",
]

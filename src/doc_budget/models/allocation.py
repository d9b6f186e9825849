"""
分配结果模型。

AllocationResult 是分配器唯一的成功输出，交给下游的 Prompt Assembler 使用。
所有模型都是 frozen 的，decisions 使用 tuple 存储，结果一旦生成就不可修改。
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from doc_budget.models.catalog import TierName
from doc_budget.models.document import PriorityTier, RepresentationMode


class AllocationDecision(BaseModel):
    """
    单个文档的分配决策。

    属性:
        document_id: 文档 ID
        priority_tier: 文档优先级（便于下游和报表按优先级分组）
        representation_mode: 全文 / 摘要
        tokens_used: 该文档在批次中占用的 Token 数
    """

    model_config = ConfigDict(frozen=True)

    document_id: str
    priority_tier: PriorityTier
    representation_mode: RepresentationMode
    tokens_used: int = Field(ge=0)

    @property
    def is_full_text(self) -> bool:
        return self.representation_mode == RepresentationMode.FULL_TEXT


class CoreBreakdown(BaseModel):
    """CORE 文档统计。"""

    model_config = ConfigDict(frozen=True)

    count: int = 0
    tokens: int = 0


class ImportantBreakdown(BaseModel):
    """IMPORTANT 文档统计。"""

    model_config = ConfigDict(frozen=True)

    count: int = 0
    full_text_count: int = 0
    summary_count: int = 0
    tokens: int = 0


class SupplementaryBreakdown(BaseModel):
    """SUPPLEMENTARY 文档统计。"""

    model_config = ConfigDict(frozen=True)

    count: int = 0
    tokens: int = 0


class AllocationBreakdown(BaseModel):
    """按优先级汇总的 Token 使用情况。"""

    model_config = ConfigDict(frozen=True)

    core: CoreBreakdown = Field(default_factory=CoreBreakdown)
    important: ImportantBreakdown = Field(default_factory=ImportantBreakdown)
    supplementary: SupplementaryBreakdown = Field(default_factory=SupplementaryBreakdown)

    @property
    def total_tokens(self) -> int:
        return self.core.tokens + self.important.tokens + self.supplementary.tokens

    @classmethod
    def from_decisions(cls, decisions: tuple[AllocationDecision, ...]) -> AllocationBreakdown:
        """根据决策列表计算统计。"""
        core = [d for d in decisions if d.priority_tier == PriorityTier.CORE]
        important = [d for d in decisions if d.priority_tier == PriorityTier.IMPORTANT]
        supplementary = [d for d in decisions if d.priority_tier == PriorityTier.SUPPLEMENTARY]
        full_text_count = sum(1 for d in important if d.is_full_text)

        return cls(
            core=CoreBreakdown(
                count=len(core),
                tokens=sum(d.tokens_used for d in core),
            ),
            important=ImportantBreakdown(
                count=len(important),
                full_text_count=full_text_count,
                summary_count=len(important) - full_text_count,
                tokens=sum(d.tokens_used for d in important),
            ),
            supplementary=SupplementaryBreakdown(
                count=len(supplementary),
                tokens=sum(d.tokens_used for d in supplementary),
            ),
        )


class AllocationResult(BaseModel):
    """
    一个批次的完整分配结果。

    用法::

        result = allocate_budget(documents, "en", catalog)
        result.selected_model_id
        result.decision_for("doc_001").representation_mode

        # 下游契约（camelCase）
        payload = result.to_contract()

    属性:
        selected_tier: 选中的档位
        selected_model_id: 实际使用的模型 ID（主模型或备用模型）
        primary_model_id: 档位主模型 ID
        fallback_model_id: 档位备用模型 ID
        caching_enabled: 是否启用缓存读取
        decisions: 每个输入文档一条决策，顺序与输入一致
        total_tokens: 所有决策 tokens_used 之和
        minimal_budget: CORE 全文 + 全部摘要
        tier_ceiling_tokens: 本次分配生效的上限
        language: 批次语言
        breakdown: 按优先级汇总
    """

    model_config = ConfigDict(frozen=True)

    selected_tier: TierName
    selected_model_id: str
    primary_model_id: str
    fallback_model_id: str
    caching_enabled: bool
    decisions: tuple[AllocationDecision, ...]
    total_tokens: int = Field(ge=0)
    minimal_budget: int = Field(ge=0)
    tier_ceiling_tokens: int = Field(gt=0)
    language: str = ""
    breakdown: AllocationBreakdown = Field(default_factory=AllocationBreakdown)

    @property
    def uses_fallback_model(self) -> bool:
        return self.selected_model_id != self.primary_model_id

    @property
    def remaining_tokens(self) -> int:
        return self.tier_ceiling_tokens - self.total_tokens

    @property
    def upgrade_count(self) -> int:
        """从摘要升级为全文的 IMPORTANT 文档数量。"""
        return self.breakdown.important.full_text_count

    def decision_for(self, document_id: str) -> AllocationDecision:
        """
        按 ID 查找决策。

        异常:
            KeyError: 批次中没有该文档
        """
        for decision in self.decisions:
            if decision.document_id == document_id:
                return decision
        raise KeyError(document_id)

    def full_text_ids(self) -> list[str]:
        return [d.document_id for d in self.decisions if d.is_full_text]

    def to_contract(self) -> dict[str, Any]:
        """导出为下游 Prompt Assembler 约定的 camelCase 格式。"""
        return {
            "selectedTier": self.selected_tier.value,
            "selectedModelId": self.selected_model_id,
            "cachingEnabled": self.caching_enabled,
            "decisions": [
                {
                    "documentId": d.document_id,
                    "representationMode": d.representation_mode.value,
                    "tokensUsed": d.tokens_used,
                }
                for d in self.decisions
            ],
            "totalTokens": self.total_tokens,
        }

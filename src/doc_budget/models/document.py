"""
Document — 分配器的输入单元。

每个 Document 代表一份已经完成分类和摘要的源文档。分配器只看 Token 计数和
优先级标签，从不读取文档内容。

优先级是封闭的三值枚举：

- CORE：批次中最重要的文档（每批至多一份），始终使用全文
- IMPORTANT：关键支撑材料，预算允许时升级为全文，否则使用摘要
- SUPPLEMENTARY：补充材料，始终使用摘要
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PriorityTier(str, Enum):
    """文档优先级。"""

    CORE = "CORE"
    IMPORTANT = "IMPORTANT"
    SUPPLEMENTARY = "SUPPLEMENTARY"


class RepresentationMode(str, Enum):
    """文档在批次中的表示方式。"""

    FULL_TEXT = "FULL_TEXT"
    SUMMARY = "SUMMARY"


class Document(BaseModel):
    """
    一份待分配的源文档。

    字段同时接受 snake_case 与上游契约中的 camelCase 写法
    （如 ``documentId`` / ``fullTextTokens``）。

    用法::

        doc = Document(
            document_id="doc_001",
            priority_tier=PriorityTier.IMPORTANT,
            full_text_tokens=40_000,
            summary_tokens=8_000,
            importance_score=0.9,
        )
        doc.upgrade_cost  # → 32000

    属性:
        document_id: 批次内唯一的文档标识
        priority_tier: 优先级
        full_text_tokens: 全文 Token 数
        summary_tokens: 摘要 Token 数（不大于全文）
        importance_score: 重要性分数，仅用于 IMPORTANT 文档排序
        language_hint: 上游给出的语言提示（分配器不使用）
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    document_id: str = Field(alias="documentId", min_length=1)
    priority_tier: PriorityTier = Field(alias="priorityTier")
    full_text_tokens: int = Field(alias="fullTextTokens", ge=0)
    summary_tokens: int = Field(alias="summaryTokens", ge=0)
    importance_score: float = Field(default=0.0, alias="importanceScore", allow_inf_nan=False)
    language_hint: str | None = Field(default=None, alias="languageHint")

    @model_validator(mode="after")
    def _check_summary_not_larger(self) -> Document:
        if self.summary_tokens > self.full_text_tokens:
            raise ValueError(
                f"summary_tokens ({self.summary_tokens}) 大于 "
                f"full_text_tokens ({self.full_text_tokens})"
            )
        return self

    @property
    def upgrade_cost(self) -> int:
        """从摘要升级为全文需要额外消耗的 Token 数。"""
        return self.full_text_tokens - self.summary_tokens

    def tokens_for(self, mode: RepresentationMode) -> int:
        """给定表示方式下该文档占用的 Token 数。"""
        if mode == RepresentationMode.FULL_TEXT:
            return self.full_text_tokens
        return self.summary_tokens

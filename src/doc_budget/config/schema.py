"""
配置文件的 Schema 定义与校验。

配置文件是 YAML，根结构对应 AllocatorConfig。catalog 段一旦给出就整体替换
内置默认目录（列表不做深度合并）。

YAML 文件示例::

    version: "1.0"
    name: production
    default_language: en
    validate_results: true
    catalog:
      - language: en
        tier_name: standard
        ceiling_tokens: 150000
        hard_ceiling_tokens: 150000
        primary_model_id: x-ai/grok-4.1-fast
        fallback_model_id: moonshotai/kimi-k2-0905
      - language: any
        tier_name: extended
        ceiling_tokens: 500000
        hard_ceiling_tokens: 700000
        primary_model_id: google/gemini-2.5-flash-preview-09-2025
        fallback_model_id: qwen/qwen-plus-2025-07-28
        caching_supported: true
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from doc_budget.catalog.defaults import DEFAULT_TIER_ENTRIES
from doc_budget.catalog.registry import ModelCatalog
from doc_budget.models.catalog import WILDCARD_LANGUAGE, ModelTierConfig, normalize_language


class MetricsConfig(BaseModel):
    """指标收集配置。"""

    enabled: bool = Field(default=True, description="是否收集分配指标")
    max_points: int = Field(default=10_000, description="每个指标保留的数据点数量", gt=0)


class AllocatorConfig(BaseModel):
    """
    完整的分配器配置。

    每个字段都有合理的默认值；不提供配置文件时使用内置目录。
    """

    version: str = Field(default="1.0", description="配置版本")
    name: str = Field(default="default", description="配置名称")
    description: str = Field(default="", description="配置描述")

    default_language: str = Field(
        default=WILDCARD_LANGUAGE,
        description="请求未指定语言时使用的语言",
        min_length=1,
    )
    validate_results: bool = Field(
        default=True,
        description="返回前是否用 Validator 复核分配结果",
    )
    catalog: list[ModelTierConfig] = Field(
        default_factory=lambda: list(DEFAULT_TIER_ENTRIES),
        description="模型档位目录",
    )
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    @field_validator("default_language")
    @classmethod
    def _normalize_default_language(cls, value: str) -> str:
        return normalize_language(value)

    @model_validator(mode="after")
    def _check_catalog(self) -> AllocatorConfig:
        if not self.catalog:
            raise ValueError("catalog 不能为空，至少需要一条档位配置。")

        seen: set[tuple[str, str]] = set()
        for entry in self.catalog:
            key = (entry.language, entry.tier_name.value)
            if key in seen:
                raise ValueError(
                    f"catalog 中存在重复条目：language='{key[0]}', tier='{key[1]}'。"
                )
            seen.add(key)
        return self

    def to_catalog(self) -> ModelCatalog:
        """将 catalog 段转换为 ModelCatalog。"""
        return ModelCatalog(self.catalog)

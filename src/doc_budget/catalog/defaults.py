"""
内置默认模型目录。

standard 档位：260K 上限，ceiling == hard ceiling。
extended 档位：1M 窗口的模型，但单次调用从不超过 700K tokens（硬上限），
500K 为软上限，超过时只记录警告。

🏭 生产提示：模型 ID 和上限会随供应商调整而变化，
建议通过 YAML 配置文件的 catalog 段覆盖默认值。
"""

from __future__ import annotations

from doc_budget.catalog.registry import ModelCatalog
from doc_budget.models.catalog import WILDCARD_LANGUAGE, ModelTierConfig, TierName

STANDARD_CEILING_TOKENS = 260_000
EXTENDED_CEILING_TOKENS = 500_000
EXTENDED_HARD_CEILING_TOKENS = 700_000

DEFAULT_TIER_ENTRIES: tuple[ModelTierConfig, ...] = (
    # --- ru ---
    ModelTierConfig(
        language="ru",
        tier_name=TierName.STANDARD,
        ceiling_tokens=STANDARD_CEILING_TOKENS,
        hard_ceiling_tokens=STANDARD_CEILING_TOKENS,
        primary_model_id="qwen/qwen3-235b-a22b-2507",
        fallback_model_id="moonshotai/kimi-k2-0905",
        caching_supported=False,
    ),
    ModelTierConfig(
        language="ru",
        tier_name=TierName.EXTENDED,
        ceiling_tokens=EXTENDED_CEILING_TOKENS,
        hard_ceiling_tokens=EXTENDED_HARD_CEILING_TOKENS,
        primary_model_id="google/gemini-2.5-flash-preview-09-2025",
        fallback_model_id="qwen/qwen-plus-2025-07-28",
        caching_supported=True,
    ),
    # --- en ---
    ModelTierConfig(
        language="en",
        tier_name=TierName.STANDARD,
        ceiling_tokens=STANDARD_CEILING_TOKENS,
        hard_ceiling_tokens=STANDARD_CEILING_TOKENS,
        primary_model_id="x-ai/grok-4.1-fast",
        fallback_model_id="moonshotai/kimi-k2-0905",
        caching_supported=False,
    ),
    ModelTierConfig(
        language="en",
        tier_name=TierName.EXTENDED,
        ceiling_tokens=EXTENDED_CEILING_TOKENS,
        hard_ceiling_tokens=EXTENDED_HARD_CEILING_TOKENS,
        primary_model_id="x-ai/grok-4.1-fast",
        fallback_model_id="moonshotai/kimi-linear-48b-a3b-instruct",
        caching_supported=False,
    ),
    # --- 通配 ---
    ModelTierConfig(
        language=WILDCARD_LANGUAGE,
        tier_name=TierName.STANDARD,
        ceiling_tokens=STANDARD_CEILING_TOKENS,
        hard_ceiling_tokens=STANDARD_CEILING_TOKENS,
        primary_model_id="moonshotai/kimi-k2-0905",
        fallback_model_id="qwen/qwen3-235b-a22b-2507",
        caching_supported=False,
    ),
    ModelTierConfig(
        language=WILDCARD_LANGUAGE,
        tier_name=TierName.EXTENDED,
        ceiling_tokens=EXTENDED_CEILING_TOKENS,
        hard_ceiling_tokens=EXTENDED_HARD_CEILING_TOKENS,
        primary_model_id="google/gemini-2.5-flash-preview-09-2025",
        fallback_model_id="qwen/qwen-plus-2025-07-28",
        caching_supported=True,
    ),
)


def default_catalog() -> ModelCatalog:
    """返回基于内置条目的目录。"""
    return ModelCatalog(DEFAULT_TIER_ENTRIES)

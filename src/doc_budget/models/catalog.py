"""
模型档位配置。

每个 (language, tier) 组合对应一条 ModelTierConfig。目录中共有两种档位：

- standard（小档位）：按 ``ceiling_tokens`` 计算预算，通常 ceiling == hard ceiling
- extended（大档位）：升级后按 ``hard_ceiling_tokens`` 计算预算
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

WILDCARD_LANGUAGE = "any"


class TierName(str, Enum):
    """模型容量档位。"""

    STANDARD = "standard"
    EXTENDED = "extended"

    @classmethod
    def parse(cls, value: str | TierName) -> TierName:
        """
        解析档位名，兼容 small / large 别名。

        异常:
            ValueError: 无法识别的档位名
        """
        if isinstance(value, TierName):
            return value
        normalized = str(value).strip().lower()
        normalized = _TIER_ALIASES.get(normalized, normalized)
        return cls(normalized)


_TIER_ALIASES = {
    "small": TierName.STANDARD.value,
    "large": TierName.EXTENDED.value,
}


def normalize_language(language: str) -> str:
    """语言代码统一为去空白的小写形式。"""
    return language.strip().lower()


class ModelTierConfig(BaseModel):
    """
    单个 (language, tier) 的档位配置。

    属性:
        language: 语言代码，或通配符 "any"
        tier_name: 档位名（standard / extended）
        ceiling_tokens: 软预算上限
        hard_ceiling_tokens: 绝对上限（不小于 ceiling_tokens）
        primary_model_id: 主模型 ID
        fallback_model_id: 主模型不可用时的备用模型 ID
        caching_supported: 该档位模型是否支持缓存读取
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    language: str = Field(min_length=1)
    tier_name: TierName = Field(alias="tierName")
    ceiling_tokens: int = Field(alias="ceilingTokens", gt=0)
    hard_ceiling_tokens: int = Field(alias="hardCeilingTokens", gt=0)
    primary_model_id: str = Field(alias="primaryModelId", min_length=1)
    fallback_model_id: str = Field(alias="fallbackModelId", min_length=1)
    caching_supported: bool = Field(default=False, alias="cachingSupported")

    @field_validator("language", mode="before")
    @classmethod
    def _normalize_language(cls, value: Any) -> Any:
        if isinstance(value, str):
            return normalize_language(value)
        return value

    @field_validator("tier_name", mode="before")
    @classmethod
    def _parse_tier_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return TierName.parse(value)
        return value

    @model_validator(mode="after")
    def _check_hard_ceiling(self) -> ModelTierConfig:
        if self.hard_ceiling_tokens < self.ceiling_tokens:
            raise ValueError(
                f"hard_ceiling_tokens ({self.hard_ceiling_tokens}) 小于 "
                f"ceiling_tokens ({self.ceiling_tokens})"
            )
        return self

    @property
    def is_large(self) -> bool:
        return self.tier_name == TierName.EXTENDED

    @property
    def applicable_ceiling(self) -> int:
        """分配时实际生效的上限：小档位用软上限，大档位用硬上限。"""
        if self.is_large:
            return self.hard_ceiling_tokens
        return self.ceiling_tokens

    def to_record(self) -> dict[str, Any]:
        """导出为配置存储的记录格式。"""
        return self.model_dump(mode="json")

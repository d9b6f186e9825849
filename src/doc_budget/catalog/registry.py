"""
ModelCatalog — (language, tier) 到档位配置的只读注册表。

查找优先级：

1. 该语言的专用条目
2. 通配符 "any" 条目
3. 都没有 → UnsupportedLanguageError

目录对象创建后不可修改。运行时更新配置时，构造一个新的 ModelCatalog，
再通过 CatalogHolder 整体替换引用。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from doc_budget.errors.exceptions import (
    CatalogConfigurationError,
    ConfigValidationError,
    UnsupportedLanguageError,
)
from doc_budget.models.catalog import (
    WILDCARD_LANGUAGE,
    ModelTierConfig,
    TierName,
    normalize_language,
)

logger = logging.getLogger(__name__)


class ModelCatalog:
    """
    模型档位目录。

    用法::

        catalog = ModelCatalog([
            ModelTierConfig(language="en", tier_name="standard", ...),
            ModelTierConfig(language="any", tier_name="extended", ...),
        ])
        small = catalog.lookup("en", TierName.STANDARD)
        large = catalog.lookup("en", TierName.EXTENDED)  # → "any" 条目
    """

    def __init__(self, entries: Iterable[ModelTierConfig]) -> None:
        table: dict[tuple[str, TierName], ModelTierConfig] = {}
        for entry in entries:
            key = (entry.language, entry.tier_name)
            if key in table:
                raise CatalogConfigurationError(
                    what=f"模型目录中存在重复条目：language='{entry.language}', "
                         f"tier='{entry.tier_name.value}'。",
                    why="每个 (language, tier) 组合只能对应一条档位配置。",
                    how="删除或合并重复的目录条目。",
                    details={"language": entry.language, "tier_name": entry.tier_name.value},
                )
            table[key] = entry
        self._entries: Mapping[tuple[str, TierName], ModelTierConfig] = MappingProxyType(table)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> ModelCatalog:
        """
        从配置存储的记录构造目录。

        异常:
            ConfigValidationError: 记录字段不合法
            CatalogConfigurationError: 存在重复条目
        """
        entries = []
        for index, record in enumerate(records):
            try:
                entries.append(ModelTierConfig.model_validate(record))
            except ValidationError as e:
                details = "; ".join(
                    f"字段 '{' → '.join(str(loc) for loc in err['loc'])}': {err['msg']}"
                    for err in e.errors()
                )
                raise ConfigValidationError(
                    what=f"第 {index} 条目录记录校验失败。",
                    why=details,
                    how="每条记录需要 language, tier_name, ceiling_tokens, "
                        "hard_ceiling_tokens, primary_model_id, fallback_model_id。",
                    field_path=f"catalog[{index}]",
                ) from e
        return cls(entries)

    def lookup(self, language: str, tier: TierName | str) -> ModelTierConfig:
        """
        查找档位配置。

        参数:
            language: 批次语言
            tier: 档位名

        返回:
            专用条目，否则 "any" 通配条目

        异常:
            UnsupportedLanguageError: 专用条目与通配条目都不存在
        """
        tier_name = TierName.parse(tier)
        lang = normalize_language(language)

        entry = self._entries.get((lang, tier_name))
        if entry is not None:
            return entry

        entry = self._entries.get((WILDCARD_LANGUAGE, tier_name))
        if entry is not None:
            if lang != WILDCARD_LANGUAGE and logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "[ModelCatalog] 语言 '%s' 没有 %s 档位专用条目，使用 '%s' 通配条目",
                    lang,
                    tier_name.value,
                    WILDCARD_LANGUAGE,
                )
            return entry

        raise UnsupportedLanguageError(
            what=f"模型目录中没有语言 '{lang}' 的 {tier_name.value} 档位配置。",
            why=f"既没有 '{lang}' 专用条目，也没有 '{WILDCARD_LANGUAGE}' 通配条目。",
            how=f"在目录中为该语言添加条目，或添加 language='{WILDCARD_LANGUAGE}' 的通配条目。",
            language=lang,
            tier_name=tier_name.value,
            available_languages=self.languages,
        )

    def has_entry(self, language: str, tier: TierName | str) -> bool:
        """是否存在该语言的专用条目（不考虑通配）。"""
        return (normalize_language(language), TierName.parse(tier)) in self._entries

    @property
    def languages(self) -> list[str]:
        return sorted({language for language, _ in self._entries})

    @property
    def entries(self) -> tuple[ModelTierConfig, ...]:
        return tuple(
            self._entries[key]
            for key in sorted(self._entries, key=lambda k: (k[0], k[1].value))
        )

    def to_records(self) -> list[dict[str, Any]]:
        return [entry.to_record() for entry in self.entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ModelTierConfig]:
        return iter(self.entries)

    def __repr__(self) -> str:
        return f"ModelCatalog(entries={len(self)}, languages={self.languages})"

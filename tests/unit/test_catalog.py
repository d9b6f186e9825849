"""
模型目录单元测试。

覆盖范围:
- catalog/registry.py: ModelCatalog 查找与通配回退
- catalog/defaults.py: 内置默认目录
- catalog/holder.py: CatalogHolder 整体替换与热更新
"""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from doc_budget.catalog import DEFAULT_TIER_ENTRIES, CatalogHolder, ModelCatalog, default_catalog
from doc_budget.catalog.defaults import (
    EXTENDED_CEILING_TOKENS,
    EXTENDED_HARD_CEILING_TOKENS,
    STANDARD_CEILING_TOKENS,
)
from doc_budget.errors import (
    CatalogConfigurationError,
    ConfigLoadError,
    ConfigValidationError,
    UnsupportedLanguageError,
)
from doc_budget.models.catalog import TierName


class TestModelCatalog:
    """ModelCatalog 测试。"""

    def test_lookup_dedicated_entry(self, en_catalog: ModelCatalog) -> None:
        small = en_catalog.lookup("en", TierName.STANDARD)
        assert small.ceiling_tokens == 150_000
        large = en_catalog.lookup("en", "extended")
        assert large.hard_ceiling_tokens == 700_000

    def test_lookup_normalizes_language(self, en_catalog: ModelCatalog) -> None:
        assert en_catalog.lookup(" EN ", "small").language == "en"

    def test_lookup_falls_back_to_wildcard(self, tier_factory) -> None:
        catalog = ModelCatalog([
            tier_factory("en", TierName.STANDARD, 150_000),
            tier_factory("any", TierName.STANDARD, 100_000),
        ])
        assert catalog.lookup("de", TierName.STANDARD).language == "any"
        assert catalog.lookup("en", TierName.STANDARD).language == "en"

    def test_missing_language_and_wildcard(self, en_catalog: ModelCatalog) -> None:
        with pytest.raises(UnsupportedLanguageError) as exc_info:
            en_catalog.lookup("de", TierName.STANDARD)

        error = exc_info.value
        assert error.language == "de"
        assert error.tier_name == "standard"
        assert error.details["available_languages"] == ["en"]

    def test_partial_language_falls_back_per_tier(self, tier_factory) -> None:
        """专用条目只覆盖小档位时，大档位使用通配条目。"""
        catalog = ModelCatalog([
            tier_factory("ru", TierName.STANDARD, 150_000),
            tier_factory("any", TierName.EXTENDED, 500_000, 700_000),
        ])
        assert catalog.lookup("ru", TierName.STANDARD).language == "ru"
        assert catalog.lookup("ru", TierName.EXTENDED).language == "any"

    def test_duplicate_entries_rejected(self, tier_factory) -> None:
        with pytest.raises(CatalogConfigurationError, match="重复"):
            ModelCatalog([
                tier_factory("en", TierName.STANDARD, 150_000),
                tier_factory("EN", TierName.STANDARD, 120_000),
            ])

    def test_from_records(self, en_catalog: ModelCatalog) -> None:
        rebuilt = ModelCatalog.from_records(en_catalog.to_records())
        assert rebuilt.entries == en_catalog.entries

    def test_from_records_invalid(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            ModelCatalog.from_records([{"language": "en", "tier_name": "standard"}])
        assert exc_info.value.field_path == "catalog[0]"

    def test_has_entry_ignores_wildcard(self, wildcard_catalog: ModelCatalog) -> None:
        assert wildcard_catalog.has_entry("any", TierName.STANDARD)
        assert not wildcard_catalog.has_entry("en", TierName.STANDARD)

    def test_container_protocol(self, en_catalog: ModelCatalog) -> None:
        assert len(en_catalog) == 2
        assert [e.tier_name for e in en_catalog] == [TierName.EXTENDED, TierName.STANDARD]
        assert en_catalog.languages == ["en"]
        assert "entries=2" in repr(en_catalog)


class TestDefaultCatalog:
    """内置默认目录测试。"""

    def test_languages(self) -> None:
        catalog = default_catalog()
        assert catalog.languages == ["any", "en", "ru"]
        assert len(catalog) == len(DEFAULT_TIER_ENTRIES) == 6

    def test_ceilings(self) -> None:
        catalog = default_catalog()
        for language in catalog.languages:
            small = catalog.lookup(language, TierName.STANDARD)
            large = catalog.lookup(language, TierName.EXTENDED)
            assert small.ceiling_tokens == small.hard_ceiling_tokens == STANDARD_CEILING_TOKENS
            assert large.ceiling_tokens == EXTENDED_CEILING_TOKENS
            assert large.hard_ceiling_tokens == EXTENDED_HARD_CEILING_TOKENS

    def test_unknown_language_uses_wildcard(self) -> None:
        entry = default_catalog().lookup("de", TierName.EXTENDED)
        assert entry.language == "any"
        assert entry.caching_supported is True


class TestCatalogHolder:
    """CatalogHolder 测试。"""

    def test_snapshot_and_swap(self, en_catalog, wildcard_catalog) -> None:
        holder = CatalogHolder(en_catalog)
        assert holder.snapshot() is en_catalog
        assert holder.version == 1

        previous = holder.swap(wildcard_catalog)
        assert previous is en_catalog
        assert holder.snapshot() is wildcard_catalog
        assert holder.version == 2

    def test_snapshot_unaffected_by_later_swap(self, en_catalog, wildcard_catalog) -> None:
        """调用开始时取得的快照不受之后的替换影响。"""
        holder = CatalogHolder(en_catalog)
        snapshot = holder.snapshot()
        holder.swap(wildcard_catalog)
        assert snapshot.lookup("en", TierName.STANDARD).language == "en"

    def test_swap_rejects_non_catalog(self, en_catalog) -> None:
        holder = CatalogHolder(en_catalog)
        with pytest.raises(TypeError):
            holder.swap([])  # type: ignore[arg-type]
        assert holder.version == 1

    def test_concurrent_swaps_count_versions(self, en_catalog, wildcard_catalog) -> None:
        holder = CatalogHolder(en_catalog)

        def worker() -> None:
            for _ in range(50):
                holder.swap(wildcard_catalog)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert holder.version == 1 + 4 * 50

    def test_reload_from_file(self, config_file: Path) -> None:
        holder = CatalogHolder(default_catalog())
        holder.reload_from(config_file)
        assert holder.snapshot().languages == ["en"]
        assert holder.version == 2

    def test_reload_from_invalid_file_keeps_catalog(self, tmp_path: Path) -> None:
        original = default_catalog()
        holder = CatalogHolder(original)

        with pytest.raises(ConfigLoadError):
            holder.reload_from(tmp_path / "missing.yaml")

        assert holder.snapshot() is original
        assert holder.version == 1

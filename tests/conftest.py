"""
测试套件共享 Fixtures 和辅助函数。

目录 fixture 使用单一语言 "en"：小档位上限 150,000，大档位软上限 500,000、
硬上限 700,000，与文档中的示例场景一致。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from doc_budget.catalog.registry import ModelCatalog
from doc_budget.models.catalog import ModelTierConfig, TierName
from doc_budget.models.document import Document, PriorityTier

SMALL_CEILING = 150_000
LARGE_CEILING = 500_000
LARGE_HARD_CEILING = 700_000


# === 辅助函数 ===


def make_doc(
    document_id: str,
    tier: PriorityTier | str,
    full: int,
    summary: int,
    score: float = 0.0,
) -> Document:
    """快速构造 Document。"""
    return Document(
        document_id=document_id,
        priority_tier=PriorityTier(tier),
        full_text_tokens=full,
        summary_tokens=summary,
        importance_score=score,
    )


def make_tier(
    language: str = "en",
    tier_name: TierName = TierName.STANDARD,
    ceiling: int = SMALL_CEILING,
    hard_ceiling: int | None = None,
    primary: str | None = None,
    fallback: str | None = None,
    caching: bool = False,
) -> ModelTierConfig:
    """快速构造 ModelTierConfig。"""
    return ModelTierConfig(
        language=language,
        tier_name=tier_name,
        ceiling_tokens=ceiling,
        hard_ceiling_tokens=hard_ceiling if hard_ceiling is not None else ceiling,
        primary_model_id=primary or f"{language}-{tier_name.value}-primary",
        fallback_model_id=fallback or f"{language}-{tier_name.value}-fallback",
        caching_supported=caching,
    )


def make_catalog(
    small_ceiling: int = SMALL_CEILING,
    large_ceiling: int = LARGE_CEILING,
    large_hard_ceiling: int = LARGE_HARD_CEILING,
    language: str = "en",
) -> ModelCatalog:
    """单语言双档位目录。"""
    return ModelCatalog([
        make_tier(language, TierName.STANDARD, small_ceiling),
        make_tier(
            language,
            TierName.EXTENDED,
            large_ceiling,
            large_hard_ceiling,
            caching=True,
        ),
    ])


def catalog_records(catalog: ModelCatalog) -> list[dict[str, Any]]:
    return catalog.to_records()


# === 工厂 Fixtures ===


@pytest.fixture
def doc_factory():
    """返回 make_doc(document_id, tier, full, summary, score=0.0)。"""
    return make_doc


@pytest.fixture
def tier_factory():
    """返回 make_tier(language, tier_name, ceiling, hard_ceiling, ...)。"""
    return make_tier


@pytest.fixture
def catalog_factory():
    """返回 make_catalog(small_ceiling, large_ceiling, large_hard_ceiling, language)。"""
    return make_catalog


# === 目录 Fixtures ===


@pytest.fixture
def en_catalog() -> ModelCatalog:
    """en 目录：小档位 150K，大档位 500K / 700K。"""
    return make_catalog()


@pytest.fixture
def tight_catalog() -> ModelCatalog:
    """小档位上限降为 100K 的 en 目录。"""
    return make_catalog(small_ceiling=100_000)


@pytest.fixture
def wildcard_catalog() -> ModelCatalog:
    """只有 "any" 通配条目的目录。"""
    return make_catalog(language="any")


# === 文档 Fixtures ===


@pytest.fixture
def scenario_documents() -> list[Document]:
    """CORE 50K + IMPORTANT A(40K/8K, 0.9) + IMPORTANT B(60K/12K, 0.5)。"""
    return [
        make_doc("core", PriorityTier.CORE, 50_000, 6_000),
        make_doc("a", PriorityTier.IMPORTANT, 40_000, 8_000, 0.9),
        make_doc("b", PriorityTier.IMPORTANT, 60_000, 12_000, 0.5),
    ]


@pytest.fixture
def mixed_documents() -> list[Document]:
    """包含三种优先级的批次。"""
    return [
        make_doc("supp_1", PriorityTier.SUPPLEMENTARY, 30_000, 3_000),
        make_doc("core", PriorityTier.CORE, 40_000, 5_000),
        make_doc("imp_low", PriorityTier.IMPORTANT, 20_000, 2_000, 0.2),
        make_doc("imp_high", PriorityTier.IMPORTANT, 25_000, 4_000, 0.95),
        make_doc("supp_2", PriorityTier.SUPPLEMENTARY, 10_000, 1_000),
    ]


@pytest.fixture
def scenario_records() -> list[dict[str, Any]]:
    """与 scenario_documents 相同的原始记录（camelCase 与 snake_case 混用）。"""
    return [
        {"documentId": "core", "priorityTier": "CORE",
         "fullTextTokens": 50_000, "summaryTokens": 6_000},
        {"document_id": "a", "priority_tier": "IMPORTANT",
         "full_text_tokens": 40_000, "summary_tokens": 8_000, "importance_score": 0.9},
        {"document_id": "b", "priority_tier": "IMPORTANT",
         "full_text_tokens": 60_000, "summary_tokens": 12_000, "importance_score": 0.5},
    ]


# === 配置文件 Fixtures ===


@pytest.fixture
def config_file(tmp_path: Path, en_catalog: ModelCatalog) -> Path:
    """写入 en 目录的 YAML 配置文件。"""
    path = tmp_path / "doc_budget.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "version": "1.0",
                "name": "test",
                "default_language": "en",
                "catalog": catalog_records(en_catalog),
            },
            allow_unicode=True,
            sort_keys=False,
        ),
        encoding="utf-8",
    )
    return path

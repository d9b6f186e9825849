"""
DocBudget — 顶层 Facade API。

把配置加载、目录热更新、分配器和指标收集组合成一个对象，
供 CLI、HTTP 服务和上层作业编排使用。

最简用法::

    from doc_budget import DocBudget

    planner = DocBudget()
    result = planner.allocate(
        documents=[
            {"document_id": "core", "priority_tier": "CORE",
             "full_text_tokens": 50_000, "summary_tokens": 6_000},
            {"document_id": "a", "priority_tier": "IMPORTANT",
             "full_text_tokens": 40_000, "summary_tokens": 8_000, "importance_score": 0.9},
        ],
        language="en",
    )
    result.to_contract()  # → 交给 Prompt Assembler

带配置文件与热更新::

    planner = DocBudget(config_path="configs/doc_budget.yaml")
    planner.reload_catalog()  # 管理员修改文件后整体替换目录
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from doc_budget.budget.allocator import (
    BudgetAllocator,
    DocumentInput,
    allocate_with_language_fallback,
)
from doc_budget.budget.summary import AllocationSummary, get_allocation_summary
from doc_budget.catalog.holder import CatalogHolder
from doc_budget.catalog.registry import ModelCatalog
from doc_budget.config.loader import load_config
from doc_budget.config.schema import AllocatorConfig
from doc_budget.models.allocation import AllocationResult
from doc_budget.models.request import parse_documents, parse_request
from doc_budget.observability.metrics import MetricsCollector

logger = logging.getLogger(__name__)


class DocBudget:
    """
    doc_budget 顶层入口。

    参数:
        config_path: YAML 配置文件路径。None 时自动搜索，找不到则使用内置默认配置。
        config: 直接传入的配置对象（优先于 config_path）
        overrides: 运行时覆盖的配置项
        debug: 是否输出 DEBUG 日志
        metrics_collector: 自定义指标收集器
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        config: AllocatorConfig | None = None,
        overrides: dict[str, Any] | None = None,
        debug: bool = False,
        metrics_collector: MetricsCollector | None = None,
    ) -> None:
        if config is None:
            config = load_config(config_path, overrides=overrides)

        self._config = config
        self._config_path = Path(config_path) if config_path else None
        self._overrides = overrides
        self._catalog_holder = CatalogHolder(config.to_catalog())
        self._allocator = BudgetAllocator(validate_results=config.validate_results)

        if metrics_collector is not None:
            self._metrics: MetricsCollector | None = metrics_collector
        elif config.metrics.enabled:
            self._metrics = MetricsCollector(max_points=config.metrics.max_points)
        else:
            self._metrics = None

        if debug:
            logging.basicConfig(level=logging.DEBUG)
            logger.debug(
                "DocBudget 初始化完成：config=%s, 目录 %d 条（%s），default_language=%s",
                config.name,
                len(self.catalog),
                ", ".join(self.catalog.languages),
                config.default_language,
            )

    @property
    def config(self) -> AllocatorConfig:
        return self._config

    @property
    def catalog(self) -> ModelCatalog:
        """当前目录快照。"""
        return self._catalog_holder.snapshot()

    @property
    def catalog_holder(self) -> CatalogHolder:
        return self._catalog_holder

    @property
    def metrics(self) -> MetricsCollector | None:
        return self._metrics

    def allocate(
        self,
        documents: Sequence[DocumentInput],
        language: str | None = None,
        primary_model_unavailable: bool = False,
    ) -> AllocationResult:
        """
        为一个批次分配预算。

        目录在调用开始时取一次快照；语言没有档位时自动用 "any" 重试一次。

        参数:
            documents: 文档（Document 或字典记录）
            language: 批次语言，None 时使用配置的 default_language
            primary_model_unavailable: 主模型不可用时改用备用模型

        异常:
            InvalidInputError / BudgetExceededError / CatalogConfigurationError
        """
        catalog = self._catalog_holder.snapshot()
        result = allocate_with_language_fallback(
            documents,
            language or self._config.default_language,
            catalog,
            primary_model_unavailable=primary_model_unavailable,
            allocator=self._allocator,
        )
        if self._metrics is not None:
            self._metrics.collect_from_result(result)
        return result

    def allocate_request(self, data: Mapping[str, Any]) -> AllocationResult:
        """按输入契约（{"language", "documents", "primary_model_unavailable"}）分配。"""
        request = parse_request(data)
        return self.allocate(
            request.documents,
            language=request.language,
            primary_model_unavailable=request.primary_model_unavailable,
        )

    def summarize(
        self,
        result: AllocationResult,
        documents: Sequence[DocumentInput],
    ) -> AllocationSummary:
        """生成分配摘要。"""
        return get_allocation_summary(result, parse_documents(documents))

    def reload_catalog(self, config_path: str | Path | None = None) -> ModelCatalog:
        """
        重新加载配置文件，整体替换目录并应用新配置。

        default_language、validate_results 与 metrics 设置一并生效；
        初始化时传入的 overrides 仍然叠加在新文件之上。已有的指标数据保留，
        新配置关闭 metrics 时停止收集。

        参数:
            config_path: 配置文件路径，None 时使用初始化时的路径

        返回:
            新目录

        异常:
            ValueError: 没有可用的配置文件路径
            ConfigLoadError / ConfigValidationError: 新配置无效（当前目录保持不变）
        """
        path = Path(config_path) if config_path else self._config_path
        if path is None:
            raise ValueError("没有可重新加载的配置文件路径，请显式传入 config_path。")

        config = load_config(path, overrides=self._overrides)
        self._catalog_holder.swap(config.to_catalog())

        self._config = config
        self._config_path = path
        self._allocator = BudgetAllocator(validate_results=config.validate_results)
        if not config.metrics.enabled:
            self._metrics = None
        elif self._metrics is None:
            self._metrics = MetricsCollector(max_points=config.metrics.max_points)

        logger.info(
            "DocBudget 已重新加载配置 %s（default_language=%s，validate_results=%s）",
            path,
            config.default_language,
            config.validate_results,
        )
        return self._catalog_holder.snapshot()

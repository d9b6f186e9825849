"""
MetricsCollector — 分配指标收集与统计。

在内存中的循环缓冲区（deque with maxlen）里记录每次分配的关键指标，
无需外部依赖即可得到百分位统计：

- total_tokens: 批次实际使用的 Token 数
- tier_utilization: 使用量 / 档位生效上限
- full_text_count / summary_count: 全文与摘要文档数
- upgrade_count: 升级为全文的 IMPORTANT 文档数
- fallback_model_used: 是否使用了备用模型（0 / 1）
"""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any

from doc_budget.models.allocation import AllocationResult


@dataclass
class MetricPoint:
    """
    单个指标数据点。

    属性:
        name: 指标名称
        value: 指标值
        timestamp: 时间戳
        tags: 标签（用于分组和过滤）
    """

    name: str
    value: float
    timestamp: float = field(default_factory=time.time)
    tags: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class MetricsSummary:
    """指标汇总统计。"""

    metric_name: str
    count: int
    min: float
    max: float
    mean: float
    p50: float
    p95: float
    p99: float


class MetricsCollector:
    """
    指标收集器。

    基本用法::

        collector = MetricsCollector(max_points=10000)
        collector.collect_from_result(result)

        summary = collector.summary("tier_utilization", tags={"tier": "standard"})
        print(f"P95 利用率: {summary.p95:.1%}")
    """

    def __init__(self, max_points: int = 10000) -> None:
        """
        参数:
            max_points: 每个指标保留的最大数据点数量（循环缓冲区大小）
        """
        self.max_points = max_points
        self.metrics: dict[str, deque[MetricPoint]] = {}
        self._lock = threading.Lock()

    def record(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """记录一个指标数据点。"""
        point = MetricPoint(name=name, value=value, tags=tags or {})
        with self._lock:
            if name not in self.metrics:
                self.metrics[name] = deque(maxlen=self.max_points)
            self.metrics[name].append(point)

    def collect_from_result(self, result: AllocationResult) -> None:
        """从 AllocationResult 提取并记录指标。"""
        tags = {
            "tier": result.selected_tier.value,
            "language": result.language or "unknown",
        }
        full_text_count = sum(1 for d in result.decisions if d.is_full_text)

        self.record("total_tokens", float(result.total_tokens), tags=tags)
        self.record(
            "tier_utilization",
            result.total_tokens / result.tier_ceiling_tokens,
            tags=tags,
        )
        self.record("full_text_count", float(full_text_count), tags=tags)
        self.record("summary_count", float(len(result.decisions) - full_text_count), tags=tags)
        self.record("upgrade_count", float(result.upgrade_count), tags=tags)
        self.record("fallback_model_used", 1.0 if result.uses_fallback_model else 0.0, tags=tags)

    def summary(
        self,
        name: str,
        tags: dict[str, str] | None = None,
    ) -> MetricsSummary | None:
        """
        获取指标的汇总统计。

        参数:
            name: 指标名称
            tags: 标签过滤条件（只统计匹配的数据点）

        返回:
            MetricsSummary，指标不存在或过滤后为空时返回 None
        """
        with self._lock:
            points = list(self.metrics.get(name, ()))
        if tags:
            points = [p for p in points if self._match_tags(p.tags, tags)]
        if not points:
            return None

        values = sorted(p.value for p in points)
        count = len(values)

        return MetricsSummary(
            metric_name=name,
            count=count,
            min=values[0],
            max=values[-1],
            mean=sum(values) / count,
            p50=self._percentile(values, 0.50),
            p95=self._percentile(values, 0.95),
            p99=self._percentile(values, 0.99),
        )

    def export(self) -> dict[str, list[dict[str, Any]]]:
        """导出所有指标数据（指标名 -> 数据点列表）。"""
        with self._lock:
            snapshot = {name: list(points) for name, points in self.metrics.items()}
        return {
            name: [{"value": p.value, "timestamp": p.timestamp, "tags": p.tags} for p in points]
            for name, points in snapshot.items()
        }

    def reset(self) -> None:
        """清空所有指标数据。"""
        with self._lock:
            self.metrics.clear()

    def get_metric_names(self) -> list[str]:
        return list(self.metrics.keys())

    def get_point_count(self, name: str) -> int:
        if name not in self.metrics:
            return 0
        return len(self.metrics[name])

    # --- 内部方法 ---

    def _percentile(self, values: list[float], p: float) -> float:
        """线性插值计算百分位数（values 已排序）。"""
        if not values:
            return 0.0
        if p <= 0:
            return values[0]
        if p >= 1:
            return values[-1]

        index = p * (len(values) - 1)
        lower_index = int(index)
        upper_index = lower_index + 1

        if upper_index >= len(values):
            return values[lower_index]

        fraction = index - lower_index
        return values[lower_index] * (1 - fraction) + values[upper_index] * fraction

    def _match_tags(self, point_tags: dict[str, str], filter_tags: dict[str, str]) -> bool:
        return all(point_tags.get(k) == v for k, v in filter_tags.items())

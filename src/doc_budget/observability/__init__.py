"""
可观测性：分配指标收集。
"""

from doc_budget.observability.metrics import MetricPoint, MetricsCollector, MetricsSummary

__all__ = [
    "MetricPoint",
    "MetricsCollector",
    "MetricsSummary",
]

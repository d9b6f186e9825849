"""
doc_budget 配置模块。

提供 YAML 配置加载、Schema 校验和目录转换。
"""

from doc_budget.config.loader import load_config, validate_config_file
from doc_budget.config.schema import AllocatorConfig, MetricsConfig

__all__ = [
    "AllocatorConfig",
    "MetricsConfig",
    "load_config",
    "validate_config_file",
]

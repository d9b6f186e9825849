"""
CatalogHolder — 支持热更新的目录引用。

管理员修改档位上限或模型 ID 时，新配置以完整 ModelCatalog 的形式整体替换旧引用
（copy-on-write），从不就地修改单个条目。正在执行的分配调用持有的是调用开始时的
快照，因此不会看到新旧配置混合的中间状态。
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from doc_budget.catalog.registry import ModelCatalog

logger = logging.getLogger(__name__)


class CatalogHolder:
    """
    当前生效目录的持有者。

    用法::

        holder = CatalogHolder(default_catalog())

        # 每次分配前取快照，并显式传给分配器
        catalog = holder.snapshot()
        result = allocate_budget(documents, "en", catalog)

        # 热更新：整体替换
        holder.swap(new_catalog)
    """

    def __init__(self, catalog: ModelCatalog) -> None:
        self._catalog = catalog
        self._lock = threading.Lock()
        self._version = 1

    def snapshot(self) -> ModelCatalog:
        """当前目录的不可变快照。"""
        return self._catalog

    @property
    def version(self) -> int:
        """每次 swap 递增。"""
        return self._version

    def swap(self, catalog: ModelCatalog) -> ModelCatalog:
        """
        整体替换目录。

        参数:
            catalog: 新目录

        返回:
            被替换掉的旧目录
        """
        if not isinstance(catalog, ModelCatalog):
            raise TypeError(f"catalog 必须是 ModelCatalog，实际为 {type(catalog).__name__}")

        with self._lock:
            previous = self._catalog
            self._catalog = catalog
            self._version += 1
            version = self._version

        logger.info(
            "[CatalogHolder] 目录已替换为版本 %d（%d 条，语言：%s）",
            version,
            len(catalog),
            ", ".join(catalog.languages),
        )
        return previous

    def reload_from(self, path: str | Path) -> ModelCatalog:
        """
        从 YAML 配置文件加载目录并整体替换。

        配置加载或校验失败时抛出异常，当前目录保持不变。

        返回:
            被替换掉的旧目录
        """
        from doc_budget.config.loader import load_config

        catalog = load_config(path).to_catalog()
        return self.swap(catalog)

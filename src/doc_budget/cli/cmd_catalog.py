"""
catalog 命令 — 显示当前生效的模型目录。
"""

from __future__ import annotations

import json

from doc_budget.cli.utils import (
    create_catalog_table,
    create_console,
    handle_doc_budget_error,
    print_error,
)
from doc_budget.config.loader import load_config
from doc_budget.errors import DocBudgetError

console = create_console()


def catalog_command(config: str | None = None, format: str = "rich") -> None:
    """输出目录；未指定配置文件时按默认路径搜索，找不到则显示内置目录。"""
    if format not in ("rich", "json"):
        print_error(f"不支持的输出格式：{format}（可选：rich, json）")

    try:
        catalog = load_config(config).to_catalog()
    except DocBudgetError as e:
        handle_doc_budget_error(e)

    if format == "json":
        console.print_json(json.dumps(catalog.to_records(), ensure_ascii=False))
        return

    console.print(create_catalog_table(catalog))
    console.print(f"[dim]语言：{', '.join(catalog.languages)}[/dim]")

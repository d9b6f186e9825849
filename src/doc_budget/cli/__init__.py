"""
doc-budget CLI — 命令行工具。

- allocate: 为批次分配预算
- validate: 校验配置文件和输入文件
- catalog: 查看当前目录
- serve: HTTP API 服务器
"""

from doc_budget.cli.app import app, main

__all__ = ["app", "main"]

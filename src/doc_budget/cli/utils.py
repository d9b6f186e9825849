"""
CLI 工具函数 — Rich 美化、文件加载、通用辅助。

提供 CLI 各子命令共用的实用函数，包括：
- Rich Console 输出
- JSON/YAML 文件加载
- 错误 / 成功信息统一格式
- 分配决策表格与摘要面板
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, NoReturn

import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from doc_budget.budget.summary import AllocationSummary
from doc_budget.catalog.registry import ModelCatalog
from doc_budget.errors import DocBudgetError
from doc_budget.models.allocation import AllocationResult

# 全局 Console 实例
_console: Console | None = None


def create_console() -> Console:
    """创建或获取全局 Rich Console 实例。"""
    global _console
    if _console is None:
        _console = Console()
    return _console


def print_error(message: str, exit_code: int = 1) -> NoReturn:
    """
    打印错误信息并退出程序。

    参数:
        message: 错误信息
        exit_code: 退出码（默认 1）
    """
    console = create_console()
    console.print(f"[bold red]X 错误：[/bold red]{message}")
    sys.exit(exit_code)


def print_success(message: str) -> None:
    console = create_console()
    console.print(f"[bold green]OK[/bold green] {message}")


def print_warning(message: str) -> None:
    console = create_console()
    console.print(f"[bold yellow]![/bold yellow] {message}")


def format_token_count(count: int) -> str:
    """
    格式化 Token 数字为带千分位分隔符的字符串。

    示例::

        >>> format_token_count(260000)
        '260,000'
    """
    return f"{count:,}"


def load_json_or_yaml(file_path: str | Path) -> Any:
    """
    从文件加载 JSON 或 YAML 数据。

    根据文件扩展名判断格式；未知扩展名先尝试 JSON 再尝试 YAML。

    参数:
        file_path: 文件路径

    返回:
        解析后的数据（字典或列表）

    异常:
        FileNotFoundError: 文件不存在
        ValueError: 文件格式无效
    """
    path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"文件不存在：{path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ValueError(f"无法读取文件 {path}: {e}") from e

    suffix = path.suffix.lower()

    try:
        if suffix == ".json":
            return json.loads(content)
        if suffix in (".yaml", ".yml"):
            return yaml.safe_load(content)
        try:
            return json.loads(content)
        except json.JSONDecodeError:
            return yaml.safe_load(content)
    except json.JSONDecodeError as e:
        raise ValueError(f"JSON 格式错误：{e}") from e
    except yaml.YAMLError as e:
        raise ValueError(f"YAML 格式错误：{e}") from e


def load_batch_file(file_path: str | Path) -> dict[str, Any]:
    """
    加载批次输入文件。

    支持两种形式：
    - 完整请求：{"language": "en", "documents": [...]}
    - 仅文档列表：[{...}, {...}]

    异常:
        FileNotFoundError / ValueError: 文件不存在或结构无效
    """
    data = load_json_or_yaml(file_path)
    if isinstance(data, list):
        return {"documents": data}
    if not isinstance(data, dict):
        raise ValueError(
            f"输入文件根元素必须是对象或文档列表，实际为 {type(data).__name__}"
        )
    return data


def create_decision_table(result: AllocationResult) -> Table:
    """创建逐文档分配决策表格。"""
    table = Table(title="分配决策", show_header=True, header_style="bold magenta")
    table.add_column("文档 ID", style="white")
    table.add_column("优先级", style="yellow")
    table.add_column("表示方式", style="cyan")
    table.add_column("Token", justify="right", style="blue")

    for decision in result.decisions:
        mode_style = "green" if decision.is_full_text else "dim"
        table.add_row(
            decision.document_id,
            decision.priority_tier.value,
            f"[{mode_style}]{decision.representation_mode.value}[/{mode_style}]",
            format_token_count(decision.tokens_used),
        )

    return table


def create_summary_panel(summary: AllocationSummary) -> Panel:
    """创建分配摘要面板。"""
    model = summary.model
    usage = summary.usage
    breakdown = summary.breakdown

    model_line = model.id
    if model.uses_fallback:
        model_line += " [yellow](备用模型)[/yellow]"

    lines = [
        f"[bold]档位:[/bold] {model.tier.value}",
        f"[bold]模型:[/bold] {model_line}",
        f"[bold]缓存读取:[/bold] {'启用' if model.caching_enabled else '关闭'}",
        f"[bold]Token 使用:[/bold] {format_token_count(usage.total_tokens)} / "
        f"{format_token_count(model.ceiling_tokens)} ({usage.utilization_percent}%)",
        f"[bold]最小预算:[/bold] {format_token_count(usage.minimal_budget)}",
        f"[bold]全部全文:[/bold] {format_token_count(usage.max_possible_tokens)} "
        f"(节省 {usage.savings_percent}%)",
        f"[bold]CORE:[/bold] {breakdown.core.count} 个，"
        f"{format_token_count(breakdown.core.tokens)} tokens",
        f"[bold]IMPORTANT:[/bold] {breakdown.important.count} 个"
        f"（全文 {breakdown.important.full_text_count} / 摘要 {breakdown.important.summary_count}），"
        f"{format_token_count(breakdown.important.tokens)} tokens",
        f"[bold]SUPPLEMENTARY:[/bold] {breakdown.supplementary.count} 个，"
        f"{format_token_count(breakdown.supplementary.tokens)} tokens",
    ]

    return Panel(
        "\n".join(lines),
        title="分配摘要",
        border_style="blue",
        expand=False,
    )


def create_catalog_table(catalog: ModelCatalog) -> Table:
    """创建模型目录表格。"""
    table = Table(title="模型目录", show_header=True, header_style="bold cyan")
    table.add_column("语言", style="white")
    table.add_column("档位", style="yellow")
    table.add_column("上限", justify="right", style="blue")
    table.add_column("硬上限", justify="right", style="blue")
    table.add_column("主模型", style="green")
    table.add_column("备用模型", style="dim")
    table.add_column("缓存", justify="center")

    for entry in catalog.entries:
        table.add_row(
            entry.language,
            entry.tier_name.value,
            format_token_count(entry.ceiling_tokens),
            format_token_count(entry.hard_ceiling_tokens),
            entry.primary_model_id,
            entry.fallback_model_id,
            "Y" if entry.caching_supported else "-",
        )

    return table


def handle_doc_budget_error(error: DocBudgetError) -> NoReturn:
    """
    统一处理 DocBudgetError：直接输出三段式 full_message 并以退出码 1 退出。
    """
    console = create_console()
    console.print(f"\n[bold red]X {type(error).__name__}[/bold red]\n")
    console.print(error.full_message, markup=False)
    sys.exit(1)

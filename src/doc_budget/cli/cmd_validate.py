"""
validate 命令 — 校验配置文件或批次输入文件。

- YAML 文件且不含 documents 字段：按分配器配置校验（目录条目、上限关系、重复条目）
- JSON 文件，或含 documents 字段的 YAML：按批次输入契约校验
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from rich.panel import Panel

from doc_budget.budget.allocator import BudgetAllocator
from doc_budget.cli.utils import (
    create_console,
    load_batch_file,
    load_json_or_yaml,
    print_error,
    print_success,
)
from doc_budget.config.loader import validate_config_file
from doc_budget.errors import InvalidInputError
from doc_budget.models.document import PriorityTier
from doc_budget.models.request import parse_request

console = create_console()


def validate_command(path: str, strict: bool = False) -> None:
    """
    校验文件，失败时以退出码 1 退出。

    使用 --strict 时警告也视为错误（CI 流程中推荐）。
    """
    path_obj = Path(path)

    if not path_obj.exists():
        print_error(f"文件不存在：{path}")

    if _looks_like_batch(path_obj):
        _validate_batch(path, strict)
    else:
        _validate_config(path)


def _looks_like_batch(path: Path) -> bool:
    if path.suffix.lower() == ".json":
        return True
    try:
        data = load_json_or_yaml(path)
    except ValueError:
        return False
    return isinstance(data, list) or (isinstance(data, dict) and "documents" in data)


def _validate_config(path: str) -> None:
    console.print(f"[bold]校验配置文件：[/bold] {path}\n")

    errors = validate_config_file(path)
    if errors:
        console.print(Panel(
            "\n\n".join(errors),
            title=f"[bold red]校验失败（{len(errors)} 个错误）[/bold red]",
            border_style="red",
        ))
        sys.exit(1)

    print_success(f"{path} 校验通过")


def _validate_batch(path: str, strict: bool) -> None:
    console.print(f"[bold]校验输入文件：[/bold] {path}\n")

    try:
        data = load_batch_file(path)
        request = parse_request(data)
        BudgetAllocator().prepare(request.documents)
    except (FileNotFoundError, ValueError) as e:
        print_error(f"加载输入文件失败：{e}")
    except InvalidInputError as e:
        console.print(Panel(
            e.full_message,
            title="[bold red]校验失败[/bold red]",
            border_style="red",
        ))
        sys.exit(1)

    warnings = _collect_warnings(data, request.documents)
    if warnings:
        console.print(Panel(
            "\n".join(f"[yellow]![/yellow] {w}" for w in warnings),
            title=f"[bold yellow]警告（{len(warnings)} 条）[/bold yellow]",
            border_style="yellow",
        ))
        if strict:
            console.print("\n[bold red]严格模式下警告视为错误。[/bold red]")
            sys.exit(1)

    print_success(f"{path} 校验通过（{len(request.documents)} 个文档）")


def _collect_warnings(data: dict[str, Any], documents: tuple[Any, ...]) -> list[str]:
    warnings: list[str] = []

    if not documents:
        warnings.append("批次为空，将直接选择 standard 档位且总量为 0")
    elif not any(d.priority_tier == PriorityTier.CORE for d in documents):
        warnings.append("批次中没有 CORE 文档")

    if not data.get("language"):
        warnings.append("未指定 language，将使用配置的 default_language")

    return warnings

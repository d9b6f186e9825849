"""
allocate 命令 — 从文件读取批次并输出分配结果。

输入文件格式示例::

    {
      "language": "en",
      "primary_model_unavailable": false,
      "documents": [
        {"document_id": "main", "priority_tier": "CORE",
         "full_text_tokens": 50000, "summary_tokens": 6000},
        {"document_id": "a", "priority_tier": "IMPORTANT",
         "full_text_tokens": 40000, "summary_tokens": 8000, "importance_score": 0.9}
      ]
    }
"""

from __future__ import annotations

import json
from pathlib import Path

from doc_budget.budget.summary import AllocationSummary
from doc_budget.cli.utils import (
    create_console,
    create_decision_table,
    create_summary_panel,
    format_token_count,
    handle_doc_budget_error,
    load_batch_file,
    print_error,
    print_success,
)
from doc_budget.errors import DocBudgetError
from doc_budget.facade import DocBudget
from doc_budget.models.allocation import AllocationResult

console = create_console()

_FORMATS = ("rich", "json", "text")


def allocate_command(
    input_file: str,
    config: str | None = None,
    language: str | None = None,
    primary_unavailable: bool = False,
    format: str = "rich",
    output: str | None = None,
    verbose: bool = False,
) -> None:
    """
    执行一次分配。

    --language / --primary-unavailable 会覆盖输入文件中的同名字段。
    """
    if format not in _FORMATS:
        print_error(f"不支持的输出格式：{format}（可选：{', '.join(_FORMATS)}）")

    try:
        data = load_batch_file(input_file)
    except (FileNotFoundError, ValueError) as e:
        print_error(f"加载输入文件失败：{e}")

    if language:
        data["language"] = language
    if primary_unavailable:
        data["primary_model_unavailable"] = True

    try:
        planner = DocBudget(config_path=config, debug=verbose)
        result = planner.allocate_request(data)
        summary = planner.summarize(result, data["documents"])
    except DocBudgetError as e:
        handle_doc_budget_error(e)

    if format == "json":
        _output_json(result, summary, output)
    elif format == "text":
        _output_text(result, output)
    else:
        _output_rich(result, summary)


def _output_json(
    result: AllocationResult,
    summary: AllocationSummary,
    output_path: str | None,
) -> None:
    payload = {
        "result": result.to_contract(),
        "summary": summary.model_dump(mode="json"),
    }
    text = json.dumps(payload, ensure_ascii=False, indent=2)

    if output_path:
        Path(output_path).write_text(text, encoding="utf-8")
        print_success(f"已保存到 {output_path}")
    else:
        console.print_json(text)


def _output_text(result: AllocationResult, output_path: str | None) -> None:
    lines = [
        f"tier: {result.selected_tier.value}",
        f"model: {result.selected_model_id}",
        f"caching: {'on' if result.caching_enabled else 'off'}",
        f"tokens: {result.total_tokens} / {result.tier_ceiling_tokens}",
    ]
    lines.extend(
        f"{d.document_id}\t{d.representation_mode.value}\t{d.tokens_used}"
        for d in result.decisions
    )
    text = "\n".join(lines)

    if output_path:
        Path(output_path).write_text(text + "\n", encoding="utf-8")
        print_success(f"已保存到 {output_path}")
    else:
        console.print(text, markup=False, highlight=False)


def _output_rich(result: AllocationResult, summary: AllocationSummary) -> None:
    console.print(create_summary_panel(summary))
    console.print(create_decision_table(result))
    console.print(
        f"\n[dim]剩余 {format_token_count(result.remaining_tokens)} tokens，"
        f"升级 {result.upgrade_count} 个 IMPORTANT 文档[/dim]"
    )

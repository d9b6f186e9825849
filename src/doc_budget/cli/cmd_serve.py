"""
serve 命令 — 启动 HTTP API 服务器。
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.panel import Panel
from rich.table import Table

from doc_budget.cli.utils import create_console

console = create_console()


def serve_command(
    host: str = "127.0.0.1",
    port: int = 8000,
    config: str | None = None,
    cors: bool = False,
) -> None:
    """
    启动 HTTP API 服务器。

    示例:

        doc-budget serve
        doc-budget serve --port 8080 --config configs/doc_budget.yaml
    """
    from doc_budget import __version__

    console.print("\n[bold cyan]doc-budget HTTP API Server[/bold cyan]")
    console.print(f"[dim]Version: {__version__}[/dim]\n")

    if config and not Path(config).exists():
        console.print(f"[red]错误: 配置文件不存在: {config}[/red]")
        raise typer.Exit(1)

    config_table = Table(show_header=False, box=None, padding=(0, 2))
    config_table.add_column("Key", style="cyan")
    config_table.add_column("Value", style="yellow")
    config_table.add_row("监听地址", f"{host}:{port}")
    config_table.add_row("配置文件", config or "[dim]自动搜索 / 内置默认目录[/dim]")
    config_table.add_row("CORS", "已启用" if cors else "已禁用")
    console.print(Panel(config_table, title="[bold]配置信息[/bold]", border_style="blue"))

    endpoints_table = Table(show_header=True, box=None)
    endpoints_table.add_column("方法", style="green", width=8)
    endpoints_table.add_column("路径", style="cyan")
    endpoints_table.add_column("说明", style="white")
    for method, path, description in (
        ("POST", "/allocate", "为一个批次分配预算"),
        ("GET", "/catalog", "查看当前目录"),
        ("POST", "/catalog/reload", "重新加载配置并替换目录"),
        ("GET", "/metrics", "查看分配指标"),
        ("GET", "/health", "健康检查"),
        ("GET", "/docs", "OpenAPI 文档"),
    ):
        endpoints_table.add_row(method, path, description)
    console.print(Panel(endpoints_table, title="[bold]可用端点[/bold]", border_style="green"))

    console.print("\n[bold green]服务器正在启动...[/bold green]\n")

    try:
        import uvicorn

        from doc_budget.cli.server import create_app

        app = create_app(config_path=config, enable_cors=cors)
        uvicorn.run(app, host=host, port=port, log_level="info")
    except KeyboardInterrupt:
        console.print("\n[yellow]服务器已停止[/yellow]")
        raise typer.Exit(0) from None

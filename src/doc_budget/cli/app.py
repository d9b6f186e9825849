"""
doc-budget CLI — 命令行工具入口。

提供 allocate / validate / catalog / serve / version 子命令。

用法::

    doc-budget --help
    doc-budget allocate --input batch.json --language en
    doc-budget validate configs/doc_budget.yaml
    doc-budget catalog --format json
    doc-budget serve --port 8080
"""

from __future__ import annotations

import typer

from doc_budget.cli.utils import create_console

app = typer.Typer(
    name="doc-budget",
    help="doc-budget — 文档预算与模型档位分配 CLI",
    add_completion=False,
    no_args_is_help=True,
)

console = create_console()


# ============================================================
# 子命令注册
# ============================================================

@app.command(name="allocate")
def allocate(
    input_file: str = typer.Option(
        ...,
        "--input",
        "-i",
        help="批次输入文件（JSON 或 YAML）",
    ),
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="配置文件路径（默认自动搜索）",
    ),
    language: str | None = typer.Option(
        None,
        "--language",
        "-l",
        help="批次语言（覆盖输入文件中的 language）",
    ),
    primary_unavailable: bool = typer.Option(
        False,
        "--primary-unavailable",
        help="主模型不可用，改用档位备用模型",
    ),
    format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="输出格式：rich / json / text",
    ),
    output: str | None = typer.Option(
        None,
        "--output",
        "-o",
        help="输出文件路径（仅 json / text 格式）",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="输出 DEBUG 日志",
    ),
) -> None:
    """为一个批次选择模型档位，并决定每个文档以全文还是摘要呈现。"""
    from doc_budget.cli.cmd_allocate import allocate_command
    allocate_command(
        input_file=input_file,
        config=config,
        language=language,
        primary_unavailable=primary_unavailable,
        format=format,
        output=output,
        verbose=verbose,
    )


@app.command(name="validate")
def validate(
    path: str = typer.Argument(
        "doc_budget.yaml",
        help="配置文件或批次输入文件路径",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="严格模式：将警告视为错误",
    ),
) -> None:
    """校验配置文件或批次输入文件。"""
    from doc_budget.cli.cmd_validate import validate_command
    validate_command(path=path, strict=strict)


@app.command(name="catalog")
def catalog(
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="配置文件路径（默认自动搜索）",
    ),
    format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="输出格式：rich / json",
    ),
) -> None:
    """显示当前生效的模型目录。"""
    from doc_budget.cli.cmd_catalog import catalog_command
    catalog_command(config=config, format=format)


@app.command(name="serve")
def serve(
    host: str = typer.Option(
        "127.0.0.1",
        "--host",
        "-h",
        help="监听地址",
    ),
    port: int = typer.Option(
        8000,
        "--port",
        "-p",
        help="监听端口",
    ),
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="配置文件路径",
    ),
    cors: bool = typer.Option(
        False,
        "--cors",
        help="启用 CORS",
    ),
) -> None:
    """启动 HTTP API 服务器。"""
    from doc_budget.cli.cmd_serve import serve_command
    serve_command(host=host, port=port, config=config, cors=cors)


@app.command(name="version")
def version() -> None:
    """显示版本信息。"""
    from doc_budget import __version__
    console.print(f"doc-budget v{__version__}")


# ============================================================
# CLI 入口点
# ============================================================

def main() -> None:
    """CLI 入口点。"""
    app()


if __name__ == "__main__":
    main()

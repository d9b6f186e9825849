"""
FastAPI HTTP 服务器实现。

端点：
- POST /allocate — 为一个批次分配预算
- GET /catalog — 查看当前目录
- POST /catalog/reload — 重新加载配置文件并整体替换目录
- GET /metrics — 查看分配指标汇总
- GET /health — 健康检查

所有响应遵循统一格式：
{
    "success": bool,
    "data": {...} | null,
    "error": str | null,
    "metadata": {...}
}

DocBudgetError 返回 400，BudgetExceededError 返回 422；
metadata 中附带异常的 to_dict()，便于上游工具拆分文档后重试。
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from doc_budget.errors.exceptions import BudgetExceededError, DocBudgetError
from doc_budget.facade import DocBudget

# ============================================================
# Request/Response 模型（Pydantic）
# ============================================================


class AllocateRequest(BaseModel):
    """分配请求模型。"""

    documents: list[dict[str, Any]] = Field(description="批次文档（输入契约记录）")
    language: str | None = Field(default=None, description="批次语言，缺省使用配置的 default_language")
    primary_model_unavailable: bool = Field(default=False, description="主模型不可用时改用备用模型")


class ReloadRequest(BaseModel):
    """目录重新加载请求。"""

    config_path: str | None = Field(default=None, description="配置文件路径，缺省使用启动时的路径")


class ApiResponse(BaseModel):
    """统一响应模型。"""

    success: bool
    data: Any = None
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


def _error_response(status_code: int, error: str, metadata: dict[str, Any]) -> JSONResponse:
    metadata.setdefault("timestamp", datetime.now().isoformat())
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "data": None,
            "error": error,
            "metadata": metadata,
        },
    )


# ============================================================
# FastAPI 应用
# ============================================================


def create_app(
    config_path: str | None = None,
    enable_cors: bool = False,
    planner: DocBudget | None = None,
) -> FastAPI:
    """
    创建 FastAPI 应用实例。

    参数:
        config_path: 配置文件路径，None 时自动搜索 / 使用内置默认配置
        enable_cors: 是否启用 CORS
        planner: 预先构造好的 DocBudget（测试或嵌入式部署时使用）

    返回:
        FastAPI 应用实例
    """
    from doc_budget import __version__

    app = FastAPI(
        title="doc-budget API",
        description="文档预算与模型档位分配 HTTP API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(BudgetExceededError)
    async def budget_exceeded_handler(request: Request, exc: BudgetExceededError) -> JSONResponse:
        """最小预算超出硬上限：请求本身合法但无法满足。"""
        return _error_response(422, str(exc), exc.to_dict())

    @app.exception_handler(DocBudgetError)
    async def doc_budget_error_handler(request: Request, exc: DocBudgetError) -> JSONResponse:
        """处理 doc_budget 异常，返回三段式错误信息。"""
        return _error_response(400, str(exc), exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(
            422,
            "请求体校验失败",
            {"error_type": "RequestValidationError", "errors": _jsonable_errors(exc)},
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail), {"status_code": exc.status_code})

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        return _error_response(
            500,
            f"服务器内部错误: {exc!s}",
            {"error_type": type(exc).__name__},
        )

    planner_instance: DocBudget | None = planner

    def get_planner() -> DocBudget:
        nonlocal planner_instance
        if planner_instance is None:
            planner_instance = DocBudget(config_path=config_path)
        return planner_instance

    # ============================================================
    # API 端点
    # ============================================================

    @app.post("/allocate", response_model=ApiResponse, summary="分配文档预算")
    async def allocate(request: AllocateRequest) -> ApiResponse:
        """为一个批次选择档位与模型，并决定每个文档的表示方式。"""
        doc_budget = get_planner()
        result = doc_budget.allocate(
            request.documents,
            language=request.language,
            primary_model_unavailable=request.primary_model_unavailable,
        )
        summary = doc_budget.summarize(result, request.documents)

        return ApiResponse(
            success=True,
            data=result.to_contract(),
            metadata={
                "timestamp": datetime.now().isoformat(),
                "language": result.language,
                "summary": summary.model_dump(mode="json"),
            },
        )

    @app.get("/catalog", response_model=ApiResponse, summary="查看当前目录")
    async def get_catalog() -> ApiResponse:
        doc_budget = get_planner()
        catalog = doc_budget.catalog
        return ApiResponse(
            success=True,
            data=catalog.to_records(),
            metadata={
                "version": doc_budget.catalog_holder.version,
                "languages": catalog.languages,
            },
        )

    @app.post("/catalog/reload", response_model=ApiResponse, summary="重新加载目录")
    async def reload_catalog(request: ReloadRequest | None = None) -> ApiResponse:
        """重新读取配置文件；新配置无效时当前目录保持不变。"""
        doc_budget = get_planner()
        path = request.config_path if request else None
        try:
            catalog = doc_budget.reload_catalog(path)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        return ApiResponse(
            success=True,
            data=catalog.to_records(),
            metadata={
                "version": doc_budget.catalog_holder.version,
                "timestamp": datetime.now().isoformat(),
            },
        )

    @app.get("/metrics", response_model=ApiResponse, summary="查看分配指标")
    async def get_metrics() -> ApiResponse:
        collector = get_planner().metrics
        if collector is None:
            return ApiResponse(success=True, data={}, metadata={"enabled": False})

        data: dict[str, Any] = {}
        for name in collector.get_metric_names():
            summary = collector.summary(name)
            if summary is not None:
                data[name] = asdict(summary)

        return ApiResponse(success=True, data=data, metadata={"enabled": True})

    @app.get("/health", response_model=ApiResponse, summary="健康检查")
    async def health_check() -> ApiResponse:
        return ApiResponse(
            success=True,
            data={
                "status": "healthy",
                "version": __version__,
                "timestamp": datetime.now().isoformat(),
            },
        )

    return app


def _jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """把请求校验错误转换为可 JSON 序列化的列表。"""
    return [
        {
            "loc": [str(loc) for loc in err.get("loc", ())],
            "msg": str(err.get("msg", "")),
        }
        for err in exc.errors()
    ]

"""
输入契约适配。

上游（分类器 / 摘要器）以字典列表的形式提交批次。这里把原始记录转换为
Document，并把 Pydantic 的校验错误翻译为 InvalidInputError，保证分配器对外
只暴露约定的失败类型。
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from doc_budget.errors.exceptions import InvalidInputError
from doc_budget.models.document import Document


class AllocationRequest(BaseModel):
    """
    一次分配请求。

    属性:
        documents: 批次中的文档（保持输入顺序）
        language: 批次语言（None 表示交给调用方使用默认语言）
        primary_model_unavailable: 调用方标记主模型不可用
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    documents: tuple[Document, ...]
    language: str | None = Field(default=None, min_length=1)
    primary_model_unavailable: bool = Field(default=False, alias="primaryModelUnavailable")


def parse_documents(records: Iterable[Mapping[str, Any] | Document]) -> list[Document]:
    """
    把原始记录转换为 Document 列表。

    参数:
        records: 字典记录或已构造好的 Document

    返回:
        Document 列表（顺序不变）

    异常:
        InvalidInputError: 任一记录缺字段、类型错误或 summary_tokens > full_text_tokens
    """
    documents: list[Document] = []
    for index, record in enumerate(records):
        if isinstance(record, Document):
            documents.append(record)
            continue
        if not isinstance(record, Mapping):
            raise InvalidInputError(
                what=f"第 {index} 条文档记录不是字典。",
                why=f"实际类型为 {type(record).__name__}。",
                how="每条文档记录必须是包含 document_id / priority_tier 等字段的对象。",
                field_path=f"documents[{index}]",
            )
        try:
            documents.append(Document.model_validate(record))
        except ValidationError as e:
            raise _translate(e, index, record) from e
    return documents


def parse_request(data: Mapping[str, Any]) -> AllocationRequest:
    """
    从 JSON / YAML 解析得到的字典构造 AllocationRequest。

    异常:
        InvalidInputError: 请求结构或任一文档记录不合法
    """
    raw_documents = data.get("documents")
    if not isinstance(raw_documents, list):
        raise InvalidInputError(
            what="请求缺少 documents 列表。",
            why=f"documents 字段的类型为 {type(raw_documents).__name__}。",
            how='请提供形如 {"language": "en", "documents": [...]} 的请求体。',
            field_path="documents",
        )

    documents = parse_documents(raw_documents)
    unavailable = data.get(
        "primary_model_unavailable",
        data.get("primaryModelUnavailable", False),
    )
    try:
        return AllocationRequest(
            documents=tuple(documents),
            language=data.get("language") or None,
            primary_model_unavailable=unavailable,
        )
    except ValidationError as e:
        raise InvalidInputError(
            what="分配请求校验失败。",
            why=_format_errors(e),
            how="检查 language 与 primary_model_unavailable 字段。",
        ) from e


def _translate(error: ValidationError, index: int, record: Mapping[str, Any]) -> InvalidInputError:
    document_id = record.get("document_id") or record.get("documentId") or ""
    first = error.errors()[0]
    field_path = ".".join(str(loc) for loc in first["loc"]) or "__root__"
    return InvalidInputError(
        what=f"第 {index} 条文档记录不合法（document_id={document_id or '<缺失>'}）。",
        why=_format_errors(error),
        how="对照输入契约检查字段：document_id, priority_tier, full_text_tokens, "
            "summary_tokens (≤ full_text_tokens), importance_score。",
        document_id=str(document_id),
        field_path=f"documents[{index}].{field_path}",
    )


def _format_errors(error: ValidationError) -> str:
    lines = []
    for err in error.errors():
        field_path = " → ".join(str(loc) for loc in err["loc"]) or "<记录>"
        lines.append(f"字段 '{field_path}': {err['msg']}")
    return "; ".join(lines)

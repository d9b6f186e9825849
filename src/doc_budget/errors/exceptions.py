"""
结构化异常体系 — 错误信息即文档。

每条异常遵循"三段式"规范：
1. What went wrong（发生了什么）
2. Why it happened（为什么发生）
3. How to fix it（怎么修）

分配器对外只抛出三类失败：

- InvalidInputError：输入批次不合法（字段缺失、摘要大于全文、ID 重复、多个 CORE）
- UnsupportedLanguageError：目录中既没有该语言也没有 "any" 通配条目
- BudgetExceededError：即使大档位的硬上限也装不下最小预算

其余异常（配置加载 / 配置校验 / 目录配置错误）属于外围设施。

示例::

    BudgetExceededError(
        what="最小预算 800,000 tokens 超出 extended 档位硬上限 700,000 tokens。",
        why="CORE 文档全文单独占用 800,000 tokens。",
        how="请在上游拆分或重新分块该 CORE 文档后再提交。",
        required_tokens=800_000,
        budget_tokens=700_000,
    )
"""

from __future__ import annotations

from typing import Any


class DocBudgetError(Exception):
    """
    doc_budget 异常基类。

    所有 doc_budget 异常都继承自此类，支持三段式错误消息。

    属性:
        what: 发生了什么
        why: 为什么发生
        how: 怎么修复
        details: 额外的上下文信息（用于调试和 API 响应）
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        self.what = what
        self.why = why
        self.how = how
        self.details = details or {}

        parts = [what]
        if why:
            parts.append(f"→ 原因：{why}")
        if how:
            parts.append(f"→ 修复建议：{how}")

        self.full_message = "\n".join(parts)
        super().__init__(self.full_message)

    def __str__(self) -> str:
        return self.full_message

    def to_dict(self) -> dict[str, Any]:
        """转换为字典格式，用于 JSON API 响应。"""
        result: dict[str, Any] = {
            "error_type": type(self).__name__,
            "what": self.what,
        }
        if self.why:
            result["why"] = self.why
        if self.how:
            result["how"] = self.how
        if self.details:
            result["details"] = self.details
        return result


# === 分配器失败 ===


class InvalidInputError(DocBudgetError):
    """
    输入批次不合法。

    在任何模型调用之前拒绝整个批次，分配器不会重试。
    Validator 发现分配结果违反不变量时也抛出此异常（此时意味着分配器存在缺陷）。

    示例::

        raise InvalidInputError(
            what="文档 'doc_7' 的 summary_tokens 大于 full_text_tokens。",
            why="summary_tokens=1200，full_text_tokens=800。",
            how="检查上游摘要器的 Token 计数。",
            document_id="doc_7",
            field_path="summary_tokens",
        )
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        document_id: str = "",
        field_path: str = "",
        **kwargs: Any,
    ) -> None:
        details: dict[str, Any] = {}
        if document_id:
            details["document_id"] = document_id
        if field_path:
            details["field_path"] = field_path
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.document_id = document_id
        self.field_path = field_path


class UnsupportedLanguageError(DocBudgetError):
    """
    目录中找不到语言对应的档位配置，且没有 "any" 通配条目。

    可恢复：上一层调用方可以显式使用 "any" 重试
    （见 ``doc_budget.budget.allocator.allocate_with_language_fallback``）。
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        language: str = "",
        tier_name: str = "",
        available_languages: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        details: dict[str, Any] = {"language": language, "tier_name": tier_name}
        if available_languages:
            details["available_languages"] = available_languages
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.language = language
        self.tier_name = tier_name


class BudgetExceededError(DocBudgetError):
    """
    预算超限异常。

    最小预算（CORE 全文 + 全部摘要）超出大档位硬上限时抛出。
    这是致命错误：相同输入重试只会得到相同结果，分配器也从不截断内容。
    上游工具可根据 ``minimal_budget`` 与 ``hard_ceiling_tokens`` 决定如何拆分文档。
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        required_tokens: int = 0,
        budget_tokens: int = 0,
        **kwargs: Any,
    ) -> None:
        details = {
            "required_tokens": required_tokens,
            "budget_tokens": budget_tokens,
            "overflow_tokens": required_tokens - budget_tokens,
        }
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.required_tokens = required_tokens
        self.budget_tokens = budget_tokens

    @property
    def minimal_budget(self) -> int:
        return self.required_tokens

    @property
    def hard_ceiling_tokens(self) -> int:
        return self.budget_tokens


# === 配置相关异常 ===


class CatalogConfigurationError(DocBudgetError):
    """
    模型目录配置错误。

    目录条目重复，或者显式回退到 "any" 之后仍然找不到档位时抛出，
    需要运维人员修正配置。
    """

    pass


class ConfigValidationError(DocBudgetError):
    """
    配置校验异常。

    当 YAML 配置文件格式错误或字段不合法时抛出。

    示例::

        raise ConfigValidationError(
            what="配置 'doc_budget.yaml' 校验失败。",
            why="字段 'catalog → 1 → hard_ceiling_tokens' 小于 ceiling_tokens。",
            how="确保 hard_ceiling_tokens >= ceiling_tokens。",
            config_path="doc_budget.yaml",
        )
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        config_path: str = "",
        field_path: str = "",
        **kwargs: Any,
    ) -> None:
        details = {
            "config_path": config_path,
            "field_path": field_path,
        }
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.config_path = config_path
        self.field_path = field_path


class ConfigLoadError(DocBudgetError):
    """
    配置加载异常。

    当配置文件不存在、无法读取或 YAML 无法解析时抛出。
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        file_path: str = "",
        **kwargs: Any,
    ) -> None:
        details = {"file_path": file_path}
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.file_path = file_path

"""
错误处理单元测试。

覆盖范围:
- errors/exceptions.py: 全部 7 种异常
- 三段式错误信息（What / Why / How）
- to_dict() 序列化与 details 字段
"""

from __future__ import annotations

import pytest

from doc_budget.errors import (
    BudgetExceededError,
    CatalogConfigurationError,
    ConfigLoadError,
    ConfigValidationError,
    DocBudgetError,
    InvalidInputError,
    UnsupportedLanguageError,
)


class TestDocBudgetError:
    """DocBudgetError 基类测试。"""

    def test_error_has_three_segments(self) -> None:
        error = DocBudgetError(
            what="发生了错误",
            why="因为某个原因",
            how="请这样修复",
        )
        text = str(error)
        assert "发生了错误" in text
        assert "→ 原因：因为某个原因" in text
        assert "→ 修复建议：请这样修复" in text
        assert text == error.full_message

    def test_what_only(self) -> None:
        error = DocBudgetError(what="只有描述")
        assert str(error) == "只有描述"
        assert error.details == {}

    def test_to_dict_omits_empty_parts(self) -> None:
        data = DocBudgetError(what="w").to_dict()
        assert data == {"error_type": "DocBudgetError", "what": "w"}

    def test_to_dict_full(self) -> None:
        data = DocBudgetError(what="w", why="y", how="h", details={"k": 1}).to_dict()
        assert data["why"] == "y"
        assert data["how"] == "h"
        assert data["details"] == {"k": 1}

    @pytest.mark.parametrize(
        "error",
        [
            InvalidInputError("", "", ""),
            UnsupportedLanguageError("", "", ""),
            BudgetExceededError("", "", ""),
            CatalogConfigurationError("", "", ""),
            ConfigValidationError("", "", ""),
            ConfigLoadError("", "", ""),
        ],
    )
    def test_inheritance(self, error: DocBudgetError) -> None:
        assert isinstance(error, DocBudgetError)
        assert isinstance(error, Exception)


class TestInvalidInputError:
    """InvalidInputError 测试。"""

    def test_details(self) -> None:
        error = InvalidInputError(
            what="文档 'doc_7' 的 summary_tokens 大于 full_text_tokens。",
            document_id="doc_7",
            field_path="summary_tokens",
        )
        assert error.document_id == "doc_7"
        assert error.details == {"document_id": "doc_7", "field_path": "summary_tokens"}

    def test_extra_details(self) -> None:
        error = InvalidInputError(what="x", violations=["a", "b"])
        assert error.details["violations"] == ["a", "b"]
        assert "document_id" not in error.details


class TestUnsupportedLanguageError:
    """UnsupportedLanguageError 测试。"""

    def test_attributes(self) -> None:
        error = UnsupportedLanguageError(
            what="没有档位",
            language="de",
            tier_name="standard",
            available_languages=["en", "ru"],
        )
        assert error.language == "de"
        assert error.tier_name == "standard"
        assert error.details["language"] == "de"
        assert error.details["available_languages"] == ["en", "ru"]


class TestBudgetExceededError:
    """BudgetExceededError 测试。"""

    def test_overflow_details(self) -> None:
        error = BudgetExceededError(
            what="最小预算超出硬上限",
            required_tokens=800_000,
            budget_tokens=700_000,
            tier_name="extended",
        )
        assert error.minimal_budget == 800_000
        assert error.hard_ceiling_tokens == 700_000
        assert error.details["overflow_tokens"] == 100_000
        assert error.details["tier_name"] == "extended"

    def test_to_dict_contains_budget_numbers(self) -> None:
        data = BudgetExceededError(
            what="超限",
            required_tokens=10,
            budget_tokens=5,
        ).to_dict()
        assert data["error_type"] == "BudgetExceededError"
        assert data["details"]["required_tokens"] == 10
        assert data["details"]["budget_tokens"] == 5


class TestConfigErrors:
    """配置相关异常测试。"""

    def test_config_validation_error(self) -> None:
        error = ConfigValidationError(
            what="配置校验失败",
            config_path="doc_budget.yaml",
            field_path="catalog → 0 → ceiling_tokens",
        )
        assert error.config_path == "doc_budget.yaml"
        assert error.details["field_path"] == "catalog → 0 → ceiling_tokens"

    def test_config_load_error(self) -> None:
        error = ConfigLoadError(what="文件不存在", file_path="missing.yaml")
        assert error.file_path == "missing.yaml"
        assert error.to_dict()["details"] == {"file_path": "missing.yaml"}

"""
doc_budget 结构化异常体系。

所有异常遵循"三段式"规范：What / Why / How to fix。
"""

from doc_budget.errors.exceptions import (
    BudgetExceededError,
    CatalogConfigurationError,
    ConfigLoadError,
    ConfigValidationError,
    DocBudgetError,
    InvalidInputError,
    UnsupportedLanguageError,
)

__all__ = [
    "BudgetExceededError",
    "CatalogConfigurationError",
    "ConfigLoadError",
    "ConfigValidationError",
    "DocBudgetError",
    "InvalidInputError",
    "UnsupportedLanguageError",
]

"""Structured error types for entitywire."""

from __future__ import annotations

from typing import Any


class EntityWireError(Exception):
    """Base error for all entitywire errors."""


class MalformedKeyError(EntityWireError):
    """Raised when a key is missing its kind or an ancestor lacks an identifier."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class UnsupportedValueError(EntityWireError):
    """Raised when a native value has no protocol property representation."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Unsupported field value, {value!r}, is provided.")


class UnsupportedOperatorError(EntityWireError):
    """Raised when a query filter operator or sort sign has no protocol code."""

    def __init__(self, operator: str, valid: list[str]) -> None:
        self.operator = operator
        self.valid = valid
        super().__init__(
            f"Unsupported operator '{operator}'. Valid operators: {', '.join(valid)}"
        )


class InvalidFilterError(EntityWireError):
    """Raised when a filter expression string cannot be parsed."""

    def __init__(self, expression: str) -> None:
        self.expression = expression
        super().__init__(
            f"Invalid filter expression '{expression}': expected 'PROPERTY' or 'PROPERTY OP'"
        )


class InvalidCursorError(EntityWireError):
    """Raised when a query cursor is not valid base64."""

    def __init__(self, cursor: str) -> None:
        self.cursor = cursor
        super().__init__(f"Invalid cursor '{cursor}': expected base64 text")

"""
expression/errors.py

Exceptions raised by the expression builder.

FilterArgumentError — a primitive argument failed validation
FilterStateError    — group() / end() called with nothing to finalise
"""

from __future__ import annotations

from typing import Any


class FilterExpressionError(Exception):
    """Base class for every error raised while building a filter expression."""


class FilterArgumentError(FilterExpressionError, ValueError):
    """
    Raised by host(), port() and port_range() when an argument is rejected.

    Attributes:
        kind:  which check failed: 'direction', 'protocol', 'ip', 'port'
               or 'port range'
        value: the offending value as passed by the caller
    """

    def __init__(self, kind: str, value: Any, message: str) -> None:
        super().__init__(f"expression error: {message}")
        self.kind = kind
        self.value = value


class FilterStateError(FilterExpressionError, RuntimeError):
    """Raised when the in-progress expression is empty but must not be."""

"""
expression/__init__.py

Public API for the expression sub-package.
"""

from .builder import FilterExpression
from .errors import FilterArgumentError, FilterExpressionError, FilterStateError
from .validators import (
    is_valid_direction,
    is_valid_ip,
    is_valid_port_number,
    is_valid_protocol,
)

__all__ = [
    "FilterExpression",
    "FilterExpressionError",
    "FilterArgumentError",
    "FilterStateError",
    "is_valid_ip",
    "is_valid_direction",
    "is_valid_protocol",
    "is_valid_port_number",
]

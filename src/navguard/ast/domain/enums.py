"""
AST domain enums.
"""

from enum import Enum


class ParseStatus(str, Enum):
    """Outcome of a parse."""

    SUCCESS = "success"
    FAILED = "failed"

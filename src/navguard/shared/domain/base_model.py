"""
Base domain model with camelCase JSON serialization.

All domain models that leave the process (HTTP, CLI --json) inherit from
BaseDomainModel.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict


def to_camel_case(snake_str: str) -> str:
    """
    Convert snake_case to camelCase.

    Examples:
        >>> to_camel_case("removed_count")
        'removedCount'
        >>> to_camel_case("code")
        'code'
    """
    components = snake_str.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


def _serialize(value: Any) -> Any:
    if isinstance(value, BaseDomainModel):
        return value.to_json()
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, list):
        return [_serialize(item) for item in value]
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    return value


@dataclass
class BaseDomainModel:
    """
    Base class for serializable domain models.

    - to_json() serializes to camelCase keys
    - Enum values are serialized by value
    - Dates are serialized as ISO 8601 strings
    - Nested models and records exposing to_dict() are serialized recursively
    """

    def to_json(self) -> Dict[str, Any]:
        """
        Serialize to JSON-compatible dictionary (camelCase).

        Returns:
            Dictionary with camelCase keys
        """
        return {
            to_camel_case(field.name): _serialize(getattr(self, field.name))
            for field in fields(self)
        }

    def __str__(self) -> str:
        """String representation for logging."""
        field_strs = [f"{field.name}={getattr(self, field.name)!r}" for field in fields(self)]
        return f"{self.__class__.__name__}({', '.join(field_strs)})"

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return self.__str__()

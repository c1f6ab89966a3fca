"""
Sanitization domain models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Optional

from navguard.ast.domain.models import ParseError, SourceLocation
from navguard.sanitization.domain.enums import (
    LocationPropertyPolicy,
    SanitizeOutcome,
    TargetKind,
)
from navguard.shared.domain.base_model import BaseDomainModel

MEMBER_KINDS = frozenset(
    {TargetKind.STATIC_MEMBER, TargetKind.COMPUTED_LITERAL, TargetKind.COMPUTED_EXPRESSION}
)


@dataclass(frozen=True)
class TargetDescriptor:
    """
    Syntactic shape of an assignment's left-hand side.

    For member kinds ``name`` is the resolved property name (None when the
    computed property is not a literal) and ``object`` describes the object
    sub-expression. For IDENTIFIER, ``name`` is the identifier.
    """

    kind: TargetKind
    name: Optional[str] = None
    object: Optional[TargetDescriptor] = None

    @property
    def is_member(self) -> bool:
        return self.kind in MEMBER_KINDS

    def is_identifier(self, name: str) -> bool:
        return self.kind == TargetKind.IDENTIFIER and self.name == name


@dataclass(frozen=True)
class NavigationRules:
    """
    What counts as a navigation write.

    Attributes:
        global_names: Identifiers treated as the global navigation object
        location_name: Name of the navigation object and property
        property_policy: Which properties of ``location`` are covered
    """

    global_names: FrozenSet[str] = frozenset({"window"})
    location_name: str = "location"
    property_policy: LocationPropertyPolicy = LocationPropertyPolicy.ANY_PROPERTY

    @classmethod
    def from_settings(cls, settings: Any) -> NavigationRules:
        """Build rules from application settings."""
        return cls(
            global_names=frozenset(settings.global_object_names),
            property_policy=LocationPropertyPolicy(settings.location_property_policy),
        )


@dataclass
class Hazard:
    """A navigation write found in a tree, with the statement that holds it."""

    target: str
    statement_type: str
    location: SourceLocation | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "target": self.target,
            "statement_type": self.statement_type,
            "location": self.location.to_dict() if self.location else None,
        }


@dataclass
class SanitizeReport(BaseDomainModel):
    """
    Result of one sanitize call.

    ``code`` is what callers receive. A REJECTED report's code is the
    fail-safe value and must not be treated as sanitized.
    """

    code: str
    outcome: SanitizeOutcome
    removed_count: int = 0
    errors: list[ParseError] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def is_rejected(self) -> bool:
        return self.outcome == SanitizeOutcome.REJECTED

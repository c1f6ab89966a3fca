"""
Sanitization domain enums.
"""

from enum import Enum


class FailSafePolicy(str, Enum):
    """Result returned when the input cannot be parsed."""

    EMPTY = "empty"  # reject: return ""
    PASSTHROUGH = "passthrough"  # return the input, caller must treat it as unsanitized


class LocationPropertyPolicy(str, Enum):
    """Which properties of the location object count as navigation writes."""

    ANY_PROPERTY = "any_property"  # location.<anything> = ...
    HREF_ONLY = "href_only"  # only location.href = ...


class SanitizeOutcome(str, Enum):
    """Terminal outcome of one sanitize call."""

    UNCHANGED = "unchanged"
    SANITIZED = "sanitized"
    REJECTED = "rejected"


class TargetKind(str, Enum):
    """Syntactic shape of an assignment target."""

    IDENTIFIER = "identifier"
    SELF = "self"
    STATIC_MEMBER = "static_member"
    COMPUTED_LITERAL = "computed_literal"
    COMPUTED_EXPRESSION = "computed_expression"
    OTHER = "other"

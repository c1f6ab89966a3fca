"""
Assignment target classifier.

Decides from syntax alone whether the left-hand side of an assignment writes
the page's navigation location. Nothing here evaluates an expression:
resolving a computed property by evaluation would run attacker-controlled
code, so computed properties only resolve when they are literals.
"""

from __future__ import annotations

from typing import Optional

from navguard.ast.domain.models import SyntaxNode
from navguard.sanitization.domain.enums import LocationPropertyPolicy, TargetKind
from navguard.sanitization.domain.models import NavigationRules, TargetDescriptor

ASSIGNMENT_TYPES = frozenset({"assignment_expression", "augmented_assignment_expression"})

STRING_DELIMITERS = frozenset({'"', "'", "`"})

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}

_LINE_CONTINUATIONS = ("\r\n", "\n", "\r", "\u2028", "\u2029")

# Depth needed by window.location.<prop>
DESCRIBE_DEPTH = 2


def unwrap_parentheses(node: SyntaxNode) -> SyntaxNode:
    """Strip any number of enclosing parenthesized_expression nodes."""
    while node.type == "parenthesized_expression":
        inner = node.named_children
        if len(inner) != 1:
            break
        node = inner[0]
    return node


def decode_escape(raw: str) -> Optional[str]:
    """
    Decode one JavaScript escape sequence statically.

    Returns:
        The cooked text, or None if the sequence is malformed
    """
    body = raw[1:]
    if not body:
        return None
    if body in _LINE_CONTINUATIONS:
        return ""
    try:
        if body.startswith("u{") and body.endswith("}"):
            return chr(int(body[2:-1], 16))
        if body[0] == "u" and len(body) == 5:
            return chr(int(body[1:], 16))
        if body[0] == "x" and len(body) == 3:
            return chr(int(body[1:], 16))
        if body.isdigit():
            # "\0" and legacy octal escapes
            return chr(int(body, 8))
    except ValueError:
        return None
    return _SIMPLE_ESCAPES.get(body, body)


def literal_string_value(node: SyntaxNode) -> Optional[str]:
    """
    Value of a string literal or substitution-free template literal.

    Returns:
        The cooked string, or None when ``node`` is not a static literal
    """
    if node.type not in ("string", "template_string"):
        return None

    parts = []
    for child in node.children:
        parts.append(child.leading.decode("utf-8"))
        if not child.is_named and child.type in STRING_DELIMITERS:
            continue
        if child.type == "string_fragment":
            parts.append(child.text)
        elif child.type == "escape_sequence":
            cooked = decode_escape(child.text)
            if cooked is None:
                return None
            parts.append(cooked)
        else:
            # template_substitution or anything the grammar adds later
            return None
    parts.append(node.trailing.decode("utf-8"))
    return "".join(parts)


def describe_target(node: SyntaxNode, depth: int = DESCRIBE_DEPTH) -> TargetDescriptor:
    """
    Describe the shape of an assignment target.

    Args:
        node: Left-hand side node
        depth: How many levels of member objects to describe

    Returns:
        TargetDescriptor tagged with the target's kind
    """
    node = unwrap_parentheses(node)

    if node.type == "identifier":
        return TargetDescriptor(kind=TargetKind.IDENTIFIER, name=node.text)
    if node.type == "this":
        return TargetDescriptor(kind=TargetKind.SELF)

    if node.type == "member_expression":
        obj = node.child_by_field("object")
        prop = node.child_by_field("property")
        return TargetDescriptor(
            kind=TargetKind.STATIC_MEMBER,
            name=prop.text if prop is not None and prop.is_leaf else None,
            object=_describe_object(obj, depth),
        )

    if node.type == "subscript_expression":
        obj = node.child_by_field("object")
        index = node.child_by_field("index")
        value = literal_string_value(unwrap_parentheses(index)) if index is not None else None
        return TargetDescriptor(
            kind=TargetKind.COMPUTED_EXPRESSION if value is None else TargetKind.COMPUTED_LITERAL,
            name=value,
            object=_describe_object(obj, depth),
        )

    return TargetDescriptor(kind=TargetKind.OTHER)


def _describe_object(obj: Optional[SyntaxNode], depth: int) -> Optional[TargetDescriptor]:
    if obj is None or depth <= 0:
        return None
    return describe_target(obj, depth - 1)


class AssignmentTargetClassifier:
    """
    Classify assignment targets as navigation writes.

    Rules, any match flags the assignment:
        1. ``location = ...``
        2. ``window.location = ...``, ``this["location"] = ...``
        3. ``location.<prop> = ...``
        4. ``window.location.<prop> = ...``

    Rules 3 and 4 follow ``NavigationRules.property_policy``. A computed
    property that is not a literal never resolves, so ``window[prop] = ...``
    is not flagged.
    """

    def __init__(self, rules: Optional[NavigationRules] = None) -> None:
        self.rules = rules or NavigationRules()

    def describe(self, left: SyntaxNode) -> TargetDescriptor:
        return describe_target(left)

    def matches(self, left: SyntaxNode) -> bool:
        """Check whether an assignment's left-hand side is a navigation write."""
        return self.classify(describe_target(left))

    def matches_assignment(self, node: SyntaxNode) -> bool:
        """Check whether ``node`` is an assignment that writes the location."""
        if node.type not in ASSIGNMENT_TYPES:
            return False
        left = node.child_by_field("left")
        return left is not None and self.matches(left)

    def classify(self, target: TargetDescriptor) -> bool:
        location = self.rules.location_name

        if target.is_identifier(location):
            return True

        if not target.is_member or target.object is None:
            return False

        obj = target.object

        if self._is_global(obj) and target.name == location:
            return True

        if obj.is_identifier(location):
            return self._property_covered(target)

        if obj.is_member and obj.object is not None:
            if self._is_global(obj.object) and obj.name == location:
                return self._property_covered(target)

        return False

    def _is_global(self, target: TargetDescriptor) -> bool:
        if target.kind == TargetKind.SELF:
            return True
        return target.kind == TargetKind.IDENTIFIER and target.name in self.rules.global_names

    def _property_covered(self, target: TargetDescriptor) -> bool:
        if self.rules.property_policy == LocationPropertyPolicy.HREF_ONLY:
            return target.name == "href"
        return True

"""Shared test fixtures for the navguard test suite."""

import pytest

from navguard.ast.generator import CodeGenerator
from navguard.ast.providers.tree_sitter_provider import TreeSitterJavaScriptProvider
from navguard.sanitization.classifier import ASSIGNMENT_TYPES
from navguard.sanitization.domain.enums import FailSafePolicy
from navguard.sanitization.domain.models import NavigationRules
from navguard.sanitization.sanitizer import NavigationSanitizer


@pytest.fixture
def provider():
    """Fresh JavaScript parser provider."""
    return TreeSitterJavaScriptProvider()


@pytest.fixture
def generator():
    return CodeGenerator()


@pytest.fixture
def parse(provider):
    """Parse JavaScript that is expected to be valid and return its tree."""

    def _parse(code: str):
        result = provider.parse(code)
        assert result.is_success(), result.errors
        return result.tree

    return _parse


@pytest.fixture
def first_left(parse):
    """Left-hand side of the first assignment in a snippet."""

    def _first_left(code: str):
        tree = parse(code)
        assignment = next(node for node in tree.walk() if node.type in ASSIGNMENT_TYPES)
        return assignment.child_by_field("left")

    return _first_left


@pytest.fixture
def sanitizer():
    """Sanitizer with default rules, independent of the environment."""
    return NavigationSanitizer(rules=NavigationRules(), fail_safe=FailSafePolicy.EMPTY)

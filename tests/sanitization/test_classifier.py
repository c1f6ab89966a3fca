"""Tests for the assignment target classifier.

Classification is purely syntactic: computed properties resolve only when
they are literals, nothing is ever evaluated.
"""

import pytest

from navguard.sanitization.classifier import (
    AssignmentTargetClassifier,
    decode_escape,
    describe_target,
    literal_string_value,
)
from navguard.sanitization.domain.enums import LocationPropertyPolicy, TargetKind
from navguard.sanitization.domain.models import NavigationRules


@pytest.fixture
def classifier():
    return AssignmentTargetClassifier(NavigationRules())


@pytest.fixture
def href_only():
    return AssignmentTargetClassifier(
        NavigationRules(property_policy=LocationPropertyPolicy.HREF_ONLY)
    )


# ---------------------------------------------------------------------------
# Target descriptors
# ---------------------------------------------------------------------------


class TestDescribeTarget:
    def test_identifier(self, first_left):
        target = describe_target(first_left("location = x;"))

        assert target.kind == TargetKind.IDENTIFIER
        assert target.name == "location"

    def test_static_member_on_this(self, first_left):
        target = describe_target(first_left("this.location = x;"))

        assert target.kind == TargetKind.STATIC_MEMBER
        assert target.name == "location"
        assert target.object.kind == TargetKind.SELF

    def test_computed_literal(self, first_left):
        target = describe_target(first_left('window["location"] = x;'))

        assert target.kind == TargetKind.COMPUTED_LITERAL
        assert target.name == "location"
        assert target.object.is_identifier("window")

    def test_computed_expression_does_not_resolve(self, first_left):
        target = describe_target(first_left("window[prop] = x;"))

        assert target.kind == TargetKind.COMPUTED_EXPRESSION
        assert target.name is None

    def test_nested_member(self, first_left):
        target = describe_target(first_left("window.location.href = x;"))

        assert target.name == "href"
        assert target.object.name == "location"
        assert target.object.object.is_identifier("window")

    def test_parentheses_are_unwrapped(self, first_left):
        target = describe_target(first_left("(location) = x;"))

        assert target.is_identifier("location")

    def test_call_result_is_other(self, first_left):
        target = describe_target(first_left("getWindow().location = x;"))

        assert target.kind == TargetKind.STATIC_MEMBER
        assert target.object.kind == TargetKind.OTHER


class TestLiterals:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (r"\x61", "a"),
            (r"\u{61}", "a"),
            (r"\n", "\n"),
            (r"\0", "\x00"),
            (r"\'", "'"),
            ("\\\n", ""),
        ],
    )
    def test_decode_escape(self, raw, expected):
        assert decode_escape(raw) == expected

    def test_malformed_escape(self):
        assert decode_escape(r"\u{zz}") is None

    def test_string_with_escapes(self, parse):
        tree = parse(r'"loc\x61tion";')

        string = next(node for node in tree.walk() if node.type == "string")
        assert literal_string_value(string) == "location"

    def test_template_without_substitution(self, parse):
        tree = parse("`location`;")

        template = next(node for node in tree.walk() if node.type == "template_string")
        assert literal_string_value(template) == "location"

    def test_template_with_substitution(self, parse):
        tree = parse("`loc${suffix}`;")

        template = next(node for node in tree.walk() if node.type == "template_string")
        assert literal_string_value(template) is None


# ---------------------------------------------------------------------------
# Matching rules
# ---------------------------------------------------------------------------


class TestMatchingRules:
    @pytest.mark.parametrize(
        "code",
        [
            'location = "https://evil.com";',
            '(location) = "https://evil.com";',
            'location += "#hash";',
            'window.location = "https://evil.com";',
            'this.location = "https://evil.com";',
            'window["location"] = "https://evil.com";',
            "window['loc\\x61tion'] = 'https://evil.com';",
            'window[`location`] = "https://evil.com";',
            '(window).location = "https://evil.com";',
            'location.href = "https://evil.com";',
            'location["href"] = "https://evil.com";',
            'location[key] = "https://evil.com";',
            'location.assign = hijack;',
            'window.location.href = "https://evil.com";',
            'this["location"].pathname = "/evil";',
        ],
    )
    def test_navigation_writes_match(self, classifier, first_left, code):
        assert classifier.matches(first_left(code))

    @pytest.mark.parametrize(
        "code",
        [
            "window[prop] = 'https://evil.com';",
            "window[loc][h] = 'https://evil.com';",
            "window.myVar = 'safe';",
            "document.title = 'New Title';",
            "obj.location = 'x';",
            "Object.prototype.location = 'x';",
            "myObj['key'] = data;",
            "locationHref = 'x';",
            "window.location2 = 'x';",
        ],
    )
    def test_other_writes_do_not_match(self, classifier, first_left, code):
        assert not classifier.matches(first_left(code))

    def test_href_only_policy(self, href_only, first_left):
        assert href_only.matches(first_left("location.href = x;"))
        assert href_only.matches(first_left('location["href"] = x;'))
        assert href_only.matches(first_left("window.location.href = x;"))
        assert href_only.matches(first_left("window.location = x;"))
        assert href_only.matches(first_left("location = x;"))
        assert not href_only.matches(first_left("location.hash = x;"))
        assert not href_only.matches(first_left("location[key] = x;"))
        assert not href_only.matches(first_left("window.location.search = x;"))

    def test_custom_global_names(self, first_left):
        classifier = AssignmentTargetClassifier(
            NavigationRules(global_names=frozenset({"window", "document", "top"}))
        )

        assert classifier.matches(first_left("document.location = x;"))
        assert classifier.matches(first_left("top.location.href = x;"))
        assert not classifier.matches(first_left("parent.location = x;"))

    def test_matches_assignment_ignores_other_nodes(self, classifier, parse):
        tree = parse("const location = 'x'; go(location);")

        assert not any(classifier.matches_assignment(node) for node in tree.walk())

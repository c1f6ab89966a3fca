"""Tests for the code generator and tree mutation primitives."""

from navguard.ast.domain.models import SyntaxNode


class TestCodeGenerator:
    def test_generate_node_skips_leading_whitespace(self, parse, generator):
        tree = parse("a();\n    window.location.href = next;")

        member = next(node for node in tree.walk() if node.type == "member_expression")
        while member.parent.type == "member_expression":
            member = member.parent

        assert generator.generate_node(member) == "window.location.href"

    def test_detached_statement_disappears(self, parse, generator):
        tree = parse("a();\nb();\nc();\n")

        tree.root.named_children[1].detach()

        assert generator.generate(tree) == "a();\nc();\n"

    def test_detach_keeps_following_code_off_comment_line(self, parse, generator):
        tree = parse("// note\ngo(); run();")

        go = tree.root.named_children[1]
        go.detach()

        assert generator.generate(tree) == "// note\nrun();"

    def test_vacate_renders_empty_statement(self, parse, generator):
        tree = parse("while (busy) tick();")

        body = tree.root.named_children[0].child_by_field("body")
        body.vacate()

        assert generator.generate(tree) == "while (busy) ;"
        assert body.type == "empty_statement"


class TestSyntaxNode:
    def test_detach_returns_index_and_unlinks(self):
        parent = SyntaxNode(type="program")
        first, second = SyntaxNode(type="a", token=b"a"), SyntaxNode(type="b", token=b"b")
        parent.append(first)
        parent.append(second)

        assert second.detach() == 1
        assert second.parent is None
        assert parent.children == [first]
        assert not second.is_attached_to(parent)

    def test_detach_without_parent_raises(self):
        node = SyntaxNode(type="orphan")

        try:
            node.detach()
        except ValueError as e:
            assert "orphan" in str(e)
        else:
            raise AssertionError("detach() should fail on an unattached node")

    def test_vacate_unlinks_children(self, parse):
        tree = parse("if (a) { b(); }")

        block = tree.root.named_children[0].child_by_field("consequence")
        call = next(node for node in block.walk() if node.type == "call_expression")
        block.vacate()

        assert not call.is_attached_to(tree.root)

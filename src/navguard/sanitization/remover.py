"""
Statement remover.

Deletes, directly on the tree, the nearest enclosing statement of every
assignment the classifier flags. Deletion always takes a whole statement;
expressions are never partially rewritten.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

import structlog

from navguard.ast.domain.models import SyntaxNode, SyntaxTree
from navguard.ast.generator import CodeGenerator
from navguard.sanitization.classifier import AssignmentTargetClassifier
from navguard.sanitization.domain.models import Hazard
from navguard.shared.domain.exceptions import SanitizationError

logger = structlog.get_logger(__name__)

# Parent type -> grammar field its statements never fill
STATEMENT_LISTS = {
    "program": None,
    "statement_block": None,
    "switch_case": "value",
    "switch_default": None,
}

# Parent type -> fields holding exactly one statement
STATEMENT_SLOTS = {
    "if_statement": ("consequence",),
    "else_clause": (None,),
    "for_statement": ("body",),
    "for_in_statement": ("body",),
    "while_statement": ("body",),
    "do_statement": ("body",),
    "with_statement": ("body",),
    "labeled_statement": ("body",),
}

NON_STATEMENT_CHILDREN = frozenset({"comment", "hash_bang_line"})

# Nodes whose closing ``}`` also ends the statement they belong to
BLOCK_OWNERS = frozenset(
    {
        "statement_block",
        "class_body",
        "switch_body",
        "function_declaration",
        "generator_function_declaration",
        "class_declaration",
        "if_statement",
        "else_clause",
        "for_statement",
        "for_in_statement",
        "while_statement",
        "with_statement",
        "try_statement",
        "catch_clause",
        "finally_clause",
        "switch_statement",
        "labeled_statement",
        "export_statement",
    }
)

# First bytes that let a statement continue the expression before it
CONTINUATION_STARTS = frozenset(b"([`+-*/%,.?<>=&|^")


def _in_statement_list(node: SyntaxNode, parent: SyntaxNode) -> bool:
    if parent.type not in STATEMENT_LISTS or not node.is_named:
        return False
    if node.type in NON_STATEMENT_CHILDREN:
        return False
    excluded = STATEMENT_LISTS[parent.type]
    return excluded is None or node.field_name != excluded


def _in_statement_slot(node: SyntaxNode, parent: SyntaxNode) -> bool:
    return node.is_named and node.field_name in STATEMENT_SLOTS.get(parent.type, ())


def _edge_leaf(node: SyntaxNode, last: bool) -> SyntaxNode:
    while not node.is_leaf:
        children = [child for child in node.children if child.type not in NON_STATEMENT_CHILDREN]
        if not children:
            break
        node = children[-1] if last else children[0]
    return node


def _is_terminated(statement: SyntaxNode) -> bool:
    """Check whether ``statement`` ends with an explicit ``;`` or a closing block."""
    leaf = _edge_leaf(statement, last=True)
    if leaf.token == b";":
        return True
    if leaf.token != b"}":
        return False
    node = leaf.parent
    while node is not None and node is not statement:
        if node.type not in BLOCK_OWNERS:
            return False
        node = node.parent
    return True


def _joins_neighbours(statement: SyntaxNode, parent: SyntaxNode) -> bool:
    """
    Check whether deleting ``statement`` would merge the statements around it.

    ``const a = f`` followed by ``(run)()`` only stays two statements while
    something sits between them; automatic semicolon insertion does not
    apply once they are adjacent.
    """
    siblings = [
        child
        for child in parent.children
        if child is statement or _in_statement_list(child, parent)
    ]
    index = next(i for i, sibling in enumerate(siblings) if sibling is statement)
    if index == 0 or index == len(siblings) - 1:
        return False
    if _is_terminated(siblings[index - 1]):
        return False
    following = _edge_leaf(siblings[index + 1], last=False).token
    return bool(following) and following[0] in CONTINUATION_STARTS


def enclosing_statement(node: SyntaxNode) -> Optional[SyntaxNode]:
    """
    Find the nearest statement holding ``node``.

    A statement is a node that sits in a statement list or fills a
    single-statement slot. Anything else on the way up (a ``for``
    initializer, an arrow function body, a declaration under ``export``)
    keeps climbing.
    """
    current = node
    while current.parent is not None:
        parent = current.parent
        if _in_statement_list(current, parent) or _in_statement_slot(current, parent):
            return current
        current = parent
    return None


class StatementRemover:
    """Remove statements that contain navigation writes."""

    def __init__(
        self,
        classifier: Optional[AssignmentTargetClassifier] = None,
        generator: Optional[CodeGenerator] = None,
    ) -> None:
        self.classifier = classifier or AssignmentTargetClassifier()
        self.generator = generator or CodeGenerator()

    def _matches(self, tree: SyntaxTree) -> Iterator[Tuple[SyntaxNode, SyntaxNode]]:
        for node in tree.walk():
            if not self.classifier.matches_assignment(node):
                continue
            statement = enclosing_statement(node)
            if statement is None:
                raise SanitizationError(
                    "Navigation write outside any statement",
                    context={"node_type": node.type, "location": node.location},
                )
            yield node, statement

    def find_hazards(self, tree: SyntaxTree) -> List[Hazard]:
        """
        List navigation writes without touching the tree.

        Args:
            tree: Parsed syntax tree

        Returns:
            One Hazard per flagged assignment, in source order
        """
        return [
            Hazard(
                target=self.generator.generate_node(assignment.child_by_field("left")),
                statement_type=statement.type,
                location=assignment.location,
            )
            for assignment, statement in self._matches(tree)
        ]

    def remove(self, tree: SyntaxTree) -> int:
        """
        Delete every statement holding a navigation write.

        Statements in a list are removed from the parent's child list. A
        statement filling a single-statement slot, or one whose removal would
        let its neighbours run together, is vacated to ``;``.

        Args:
            tree: Parsed syntax tree, mutated in place

        Returns:
            Number of statements removed

        Raises:
            SanitizationError: If a flagged assignment has no enclosing statement
        """
        statements = [statement for _, statement in self._matches(tree)]
        handled: set[int] = set()
        removed = 0

        for statement in statements:
            if id(statement) in handled or not statement.is_attached_to(tree.root):
                continue
            handled.add(id(statement))

            parent = statement.parent
            statement_type = statement.type
            line = statement.location.start_line if statement.location else None

            if _in_statement_slot(statement, parent) or _joins_neighbours(statement, parent):
                statement.vacate()
                logger.info(
                    "statement_vacated",
                    statement_type=statement_type,
                    parent_type=parent.type,
                    line=line,
                )
            else:
                statement.detach()
                logger.info(
                    "statement_removed",
                    statement_type=statement_type,
                    parent_type=parent.type,
                    line=line,
                )
            removed += 1

        return removed

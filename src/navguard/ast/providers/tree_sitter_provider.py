"""
Tree-sitter JavaScript provider.

Parses JavaScript with the tree-sitter-javascript grammar and converts the
result into the owned SyntaxTree. The grammar is permissive by construction:
module syntax, import/export anywhere, top-level await/return/super and
undeclared exports all parse, which suits arbitrary script fragments.
Parsing never executes the input.
"""

import time
from typing import Any, Optional

import structlog
import tree_sitter_javascript as tsjs
from tree_sitter import Language, Parser

from navguard.ast.domain.enums import ParseStatus
from navguard.ast.domain.models import (
    ParseError,
    ParseResult,
    SourceLocation,
    SyntaxNode,
    SyntaxTree,
)

logger = structlog.get_logger(__name__)

JS_LANGUAGE = Language(tsjs.language())


def _location(node: Any) -> SourceLocation:
    return SourceLocation(
        start_line=node.start_point.row + 1,
        start_column=node.start_point.column + 1,
        end_line=node.end_point.row + 1,
        end_column=node.end_point.column + 1,
    )


class TreeSitterJavaScriptProvider:
    """
    JavaScript parser backed by tree-sitter.

    tree-sitter recovers from syntax errors by inserting ERROR and MISSING
    nodes. Any such node turns the parse into a failure: a sanitizer must
    not reason about a tree the grammar could not account for.
    JSX, which the grammar accepts as an extension, fails the same way.

    A new tree_sitter.Parser is created for every call, so one provider can
    serve concurrent callers.

    Example:
        ```python
        provider = TreeSitterJavaScriptProvider()
        result = provider.parse('location = "https://example.com";')

        if result.is_success():
            print([node.type for node in result.tree.root.named_children])
        ```
    """

    name = "tree-sitter-javascript"

    def parse(self, source_code: str) -> ParseResult:
        """
        Parse JavaScript source code.

        Args:
            source_code: JavaScript source text, possibly invalid

        Returns:
            ParseResult with the owned tree, or FAILED with errors
        """
        start_time = time.time()

        try:
            source = source_code.encode("utf-8")
        except UnicodeEncodeError as e:
            return ParseResult(
                status=ParseStatus.FAILED,
                errors=[ParseError(message=f"Source is not encodable as UTF-8: {e.reason}")],
                parse_time_ms=(time.time() - start_time) * 1000,
            )

        parser = Parser(JS_LANGUAGE)
        ts_tree = parser.parse(source)
        root = ts_tree.root_node

        error = self._first_error(root) if root.has_error else self._first_jsx(root)
        if error is not None:
            parse_time_ms = (time.time() - start_time) * 1000
            logger.debug(
                "javascript_parse_failed",
                message=error.message,
                line=error.location.start_line if error.location else None,
                code_length=len(source),
            )
            return ParseResult(
                status=ParseStatus.FAILED,
                errors=[error],
                parse_time_ms=parse_time_ms,
            )

        tree = SyntaxTree(root=self._convert(root, source))
        parse_time_ms = (time.time() - start_time) * 1000

        logger.debug(
            "javascript_parse_completed",
            code_length=len(source),
            parse_time_ms=round(parse_time_ms, 3),
        )

        return ParseResult(
            status=ParseStatus.SUCCESS,
            tree=tree,
            parse_time_ms=parse_time_ms,
        )

    def _first_error(self, root: Any) -> ParseError:
        """Locate the first ERROR or MISSING node in document order."""
        stack = [root]
        while stack:
            node = stack.pop()
            if node.is_missing:
                return ParseError(message=f"Missing '{node.type}'", location=_location(node))
            if node.is_error:
                return ParseError(message="Syntax error", location=_location(node))
            stack.extend(
                child for child in reversed(node.children) if child.has_error or child.is_missing
            )
        return ParseError(message="Syntax error", location=_location(root))

    def _first_jsx(self, root: Any) -> Optional[ParseError]:
        """Locate the first JSX node; JSX is not part of plain JavaScript."""
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type.startswith("jsx_"):
                return ParseError(message="JSX is not supported", location=_location(node))
            stack.extend(reversed(node.children))
        return None

    def _convert(self, root: Any, source: bytes) -> SyntaxNode:
        """
        Convert the tree-sitter tree to an owned SyntaxNode tree.

        Anonymous tokens (punctuation, keywords) are kept so the tree renders
        back to its exact source. Bytes between siblings become the next
        sibling's ``leading``.
        """
        program = SyntaxNode(
            type=root.type,
            location=_location(root),
            leading=source[: root.start_byte],
        )
        pending = [(root, program)]

        while pending:
            ts_node, node = pending.pop()
            cursor = ts_node.start_byte

            for index, ts_child in enumerate(ts_node.children):
                child = SyntaxNode(
                    type=ts_child.type,
                    is_named=ts_child.is_named,
                    field_name=ts_node.field_name_for_child(index),
                    location=_location(ts_child),
                    leading=source[cursor : ts_child.start_byte],
                )
                if ts_child.child_count == 0:
                    child.token = source[ts_child.start_byte : ts_child.end_byte]
                else:
                    pending.append((ts_child, child))
                node.append(child)
                cursor = ts_child.end_byte

            if ts_node is root:
                node.trailing = source[cursor:]
            else:
                node.trailing = source[cursor : ts_node.end_byte]

        return program

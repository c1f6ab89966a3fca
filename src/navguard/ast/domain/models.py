"""
AST domain models.

Owned, mutable syntax tree mirroring the tree-sitter JavaScript grammar.
Every node keeps the raw bytes it was parsed from, so a tree renders back to
its exact source until it is mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from navguard.ast.domain.enums import ParseStatus
from navguard.shared.domain.base_model import BaseDomainModel


@dataclass
class SourceLocation:
    """
    Source code location information.

    Lines and columns are 1-based, columns count bytes.
    """

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "start_line": self.start_line,
            "start_column": self.start_column,
            "end_line": self.end_line,
            "end_column": self.end_column,
        }


@dataclass(eq=False)
class SyntaxNode:
    """
    One node of the owned syntax tree.

    Leaves hold their source bytes in ``token``; interior nodes hold ordered
    ``children``. ``leading`` is the whitespace that separated the node from
    its previous sibling (or from its parent's start). Nodes compare by
    identity.
    """

    type: str
    is_named: bool = True
    field_name: str | None = None
    location: SourceLocation | None = None
    leading: bytes = b""
    token: bytes | None = None
    trailing: bytes = b""
    children: list[SyntaxNode] = field(default_factory=list)
    parent: SyntaxNode | None = field(default=None, repr=False)

    @property
    def is_leaf(self) -> bool:
        return self.token is not None

    @property
    def text(self) -> str:
        """Decoded token of a leaf node, empty for interior nodes."""
        return self.token.decode("utf-8") if self.token is not None else ""

    @property
    def named_children(self) -> list[SyntaxNode]:
        return [child for child in self.children if child.is_named]

    def append(self, child: SyntaxNode) -> None:
        """Attach a child at the end of the child list."""
        child.parent = self
        self.children.append(child)

    def child_by_field(self, name: str) -> SyntaxNode | None:
        """Return the first child filling grammar field ``name``."""
        for child in self.children:
            if child.field_name == name:
                return child
        return None

    def walk(self) -> Iterator[SyntaxNode]:
        """Iterate over this subtree in preorder, without recursion."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def ancestors(self) -> Iterator[SyntaxNode]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def is_attached_to(self, root: SyntaxNode) -> bool:
        """Check whether the parent chain still reaches ``root``."""
        if self is root:
            return True
        for ancestor in self.ancestors():
            if ancestor is root:
                return True
        return False

    def detach(self) -> int:
        """
        Remove this node from its parent's child list.

        When the node started its line, whatever followed it on the same line
        takes over its leading whitespace, so removing ``go()`` from
        ``// note\\ngo(); run();`` leaves ``run();`` at the start of the next
        line instead of on the comment line.

        Returns:
            Index the node occupied in the parent

        Raises:
            ValueError: If the node has no parent
        """
        parent = self.parent
        if parent is None:
            raise ValueError(f"{self.type} node is not attached")
        siblings = parent.children
        index = next(i for i, sibling in enumerate(siblings) if sibling is self)
        del siblings[index]

        starts_line = b"\n" in self.leading or (index == 0 and parent.parent is None)
        if starts_line:
            if index < len(siblings):
                following = siblings[index]
                if b"\n" not in following.leading:
                    following.leading = self.leading
            elif b"\n" not in parent.trailing:
                parent.trailing = self.leading + parent.trailing

        self.parent = None
        return index

    def vacate(self) -> None:
        """
        Turn this node into an empty statement in place.

        Used for statements that fill a slot the grammar requires
        (``while (x) <statement>``), where deleting would change the meaning
        of the code that follows.
        """
        for child in self.children:
            child.parent = None
        self.type = "empty_statement"
        self.is_named = True
        self.children = []
        self.token = b";"
        self.trailing = b""


@dataclass
class SyntaxTree:
    """Syntax tree owned by a single sanitize call."""

    root: SyntaxNode

    def walk(self) -> Iterator[SyntaxNode]:
        return self.root.walk()


@dataclass
class ParseError:
    """
    Parse error information.

    Captures the first syntax error tree-sitter recovered from.
    """

    message: str
    location: SourceLocation | None = None
    severity: str = "error"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "message": self.message,
            "location": self.location.to_dict() if self.location else None,
            "severity": self.severity,
        }


@dataclass
class ParseResult(BaseDomainModel):
    """
    Result of a parsing operation.

    Contains the owned tree on success, errors otherwise.
    """

    status: ParseStatus
    tree: SyntaxTree | None = None
    errors: list[ParseError] = field(default_factory=list)
    parse_time_ms: float = 0.0

    def is_success(self) -> bool:
        """Check if parsing was successful."""
        return self.status == ParseStatus.SUCCESS

    def has_errors(self) -> bool:
        """Check if there are any errors."""
        return len(self.errors) > 0

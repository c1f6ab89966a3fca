"""
Code generator for the owned syntax tree.

Re-emits every surviving node's original bytes, so untouched statements keep
their text, comments and line breaks.
"""

from typing import List, Union

from navguard.ast.domain.models import SyntaxNode, SyntaxTree


class CodeGenerator:
    """Render a SyntaxTree (or one subtree) back to source text."""

    def generate(self, tree: SyntaxTree) -> str:
        """
        Render the whole tree, including leading and trailing whitespace.

        Args:
            tree: Possibly mutated syntax tree

        Returns:
            JavaScript source text
        """
        return self._render(tree.root, include_leading=True)

    def generate_node(self, node: SyntaxNode) -> str:
        """Render a single subtree without the whitespace preceding it."""
        return self._render(node, include_leading=False)

    def _render(self, node: SyntaxNode, include_leading: bool) -> str:
        parts: List[bytes] = []
        stack: List[Union[SyntaxNode, bytes]] = [node]
        first = True

        while stack:
            item = stack.pop()
            if isinstance(item, bytes):
                parts.append(item)
                continue

            if include_leading or not first:
                parts.append(item.leading)
            first = False

            if item.is_leaf:
                parts.append(item.token)
                continue

            stack.append(item.trailing)
            stack.extend(reversed(item.children))

        return b"".join(parts).decode("utf-8")

"""
Output normalizer.
"""


def drop_blank_lines(text: str) -> str:
    """Remove lines that are empty after trimming whitespace."""
    return "\n".join(line for line in text.split("\n") if line.strip())


def normalize_output(original: str, generated: str, removed_count: int) -> str:
    """
    Choose and tidy the text handed back to the caller.

    Safe input comes back byte-identical; otherwise the generated code loses
    the blank lines left behind by removed statements.

    Args:
        original: Input source text
        generated: Code generator output for the mutated tree
        removed_count: Statements removed from the tree

    Returns:
        Final sanitized text
    """
    if removed_count == 0:
        return original
    return drop_blank_lines(generated)

"""Text layout helpers for generated Python source.

Rendered expressions are always produced at column zero. A parent that embeds
a multi-line child re-indents every line after the first, so a cached
rendering can be reused at any nesting depth.
"""

from __future__ import annotations

import ast
from collections.abc import Sequence

from snapgen.errors import GenerationFailure


def indent(text: str, prefix: str) -> str:
    """Prefix every line of text after the first."""
    first, *rest = text.split("\n")
    return "\n".join([first, *(f"{prefix}{line}" if line else line for line in rest)])


def bracket(
    open_: str,
    items: Sequence[str],
    close: str,
    indent_width: int = 4,
    line_width: int = 88,
    trailing_comma_single: bool = False,
) -> str:
    """Lay out a bracketed, comma-separated list of rendered items.

    Short lists of single-line items stay on one line. Anything else is
    broken one item per line with a trailing comma.
    """
    if not items:
        return f"{open_}{close}"

    if all("\n" not in item for item in items):
        inner = ", ".join(items)
        if trailing_comma_single and len(items) == 1:
            inner += ","
        one_line = f"{open_}{inner}{close}"
        if len(one_line) <= line_width:
            return one_line

    pad = " " * indent_width
    lines = [open_]
    for item in items:
        lines.append(f"{pad}{indent(item, pad)},")
    lines.append(close)
    return "\n".join(lines)


def finalize(text: str) -> str:
    """Check that text is a complete Python expression and return it.

    Raises:
        GenerationFailure: If the text does not parse
    """
    try:
        ast.parse(text, mode="eval")
    except SyntaxError as e:
        raise GenerationFailure(
            f"Generated code is not a valid expression: {e.msg} (line {e.lineno})\n{text}"
        ) from e
    return text

from __future__ import annotations

from typing import List, Sequence

TAB = "    "


def normalize_indent(text: str) -> str:
    """De-indent a block comment.

    Tabs become four spaces, trailing blank space and leading blank lines are
    dropped and the indentation shared by every non-empty line is removed.
    A line that is only spaces counts as unindented.
    """
    text = text.replace("\t", TAB)
    lines = text.rstrip(" \n").split("\n")

    n = 0
    while n < len(lines) and lines[n].strip() == "":
        n += 1
    lines = lines[n:]

    min_indent = None
    for line in lines:
        if line == "":
            continue
        rest = line.lstrip(" ")
        indent = len(line) - len(rest) if rest else 0
        if indent == 0:
            min_indent = 0
            break
        if min_indent is None or indent < min_indent:
            min_indent = indent

    if not min_indent:
        return "\n".join(lines)

    return "\n".join(line[min_indent:] if line else line for line in lines)


def join_comments(sep: str, *sets: Sequence[str]) -> str:
    """Join each non-empty list with ``sep``, then join the results the same way."""
    parts: List[str] = [sep.join(s) for s in sets if s]
    return sep.join(parts)

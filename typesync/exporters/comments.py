"""
Documentation comment rendering.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..config import CommentStyle
from ..datatype import Deprecated


def deprecation_line(deprecated: Deprecated) -> str:
    """`@deprecated`, followed by the note and version when present."""
    line = "@deprecated"
    if deprecated.note:
        line += f" {deprecated.note.strip()}"
    if deprecated.since:
        line += f" since {deprecated.since.strip()}"
    return line


def comment_lines(docs: Sequence[str], deprecated: Deprecated | None) -> list[str]:
    lines = []
    for doc in docs:
        lines.extend(line.rstrip() for line in doc.split("\n"))
    if deprecated is not None:
        lines.append(deprecation_line(deprecated))
    return lines


def render_comment(
    docs: Sequence[str],
    deprecated: Deprecated | None,
    style: CommentStyle,
    indent: str = "",
) -> str:
    """
    Render documentation as a comment block placed above a declaration.

    Args:
        docs: Documentation lines
        deprecated: Deprecation marker, rendered as a `@deprecated` tag
        style: Comment style
        indent: Prefix for every emitted line

    Returns:
        The comment including its trailing newline, or "" when there is nothing to render
    """
    lines = comment_lines(docs, deprecated)
    if not lines or style is CommentStyle.NONE:
        return ""

    if style is CommentStyle.LINE:
        return "".join(f"{indent}// {line}".rstrip() + "\n" for line in lines)

    body = "".join(f"{indent} * {escape_jsdoc(line)}".rstrip() + "\n" for line in lines)
    return f"{indent}/**\n{body}{indent} */\n"


def render_inline_comment(docs: Sequence[str], deprecated: Deprecated | None, style: CommentStyle) -> str:
    """Single-line JSDoc placed before a field, or "" for other styles."""
    lines = comment_lines(docs, deprecated)
    if not lines or style is not CommentStyle.JSDOC:
        return ""
    return f"/** {escape_jsdoc(' '.join(line.strip() for line in lines if line.strip()))} */ "


def escape_jsdoc(text: str) -> str:
    """Keep user text from closing the comment early."""
    return text.replace("*/", "*\\/")

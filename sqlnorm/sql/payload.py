"""
SQL payloads: the unit handed from the builders to a connection.

A payload is a mutable text buffer tagged with the table it targets and the
dialect it was rendered for. Dialect trailers are appended in place; the
connection refuses payloads rendered for another dialect.
"""
from __future__ import annotations

from typing import List, Optional

from sqlnorm.sql.dialects import Dialect, profile_for


def split_statements(text: str, backslash_escapes: bool = False) -> List[str]:
    """
    Split ``text`` on semicolons that sit outside single-quoted literals.

    With ``backslash_escapes`` (MySQL's default lexer) a backslash inside a
    literal escapes the next character, so ``\\'`` does not close it. Empty
    statements are dropped; the terminating semicolon is not kept.
    """
    statements: List[str] = []
    current: List[str] = []
    in_literal = False
    escaped = False
    for char in text:
        if escaped:
            escaped = False
            current.append(char)
            continue
        if in_literal and backslash_escapes and char == "\\":
            escaped = True
            current.append(char)
            continue
        if char == "'":
            # A doubled quote inside a literal toggles twice and stays inside.
            in_literal = not in_literal
        if char == ";" and not in_literal:
            statement = "".join(current).strip()
            if statement:
                statements.append(statement)
            current = []
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail:
        statements.append(tail)
    return statements


class SqlPayload:
    """Mutable SQL text plus immutable table and dialect tags."""

    __slots__ = ("_text", "_table", "_dialect")

    def __init__(self, text: str, table: Optional[str], dialect: Dialect) -> None:
        self._text = text
        self._table = table
        self._dialect = dialect

    @property
    def text(self) -> str:
        return self._text

    @property
    def table(self) -> Optional[str]:
        return self._table

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    def append(self, raw_text: str) -> "SqlPayload":
        """Append raw SQL and return self for chaining."""
        self._text += raw_text
        return self

    def replace_text(self, text: str) -> "SqlPayload":
        self._text = text
        return self

    def statements(self) -> List[str]:
        return split_statements(self._text, profile_for(self._dialect).backslash_escapes)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"SqlPayload(dialect={self._dialect.value!r}, table={self._table!r}, text={self._text!r})"


__all__ = ["SqlPayload", "split_statements"]

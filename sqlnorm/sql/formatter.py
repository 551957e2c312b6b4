"""
Value formatter: render python values as inline SQL literals.

Values are inlined rather than bound, so every rule here is part of the
observable SQL. Timestamps are the only dialect-dependent case.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlnorm.sql.dialects import Dialect, profile_for


def quote_text(text: str, dialect: Optional[Dialect] = None) -> str:
    """
    Single-quote ``text`` with the escaping rules of ``dialect``.

    Embedded single quotes are always doubled; MySQL also escapes backslashes.
    Without a dialect only quotes are doubled.
    """
    if dialect is None:
        return "'" + text.replace("'", "''") + "'"
    return "'" + profile_for(dialect).escape_text(text) + "'"


def format_value(value: Any, dialect: Dialect) -> str:
    """
    Render ``value`` as a SQL literal for ``dialect``.

    Examples
    --------
    >>> format_value(None, Dialect.SQLITE)
    'NULL'
    >>> format_value("O'Hara", Dialect.MYSQL)
    "'O''Hara'"
    >>> format_value(True, Dialect.SQLITE)
    '1'
    >>> format_value("C:\\\\temp", Dialect.MYSQL)
    "'C:\\\\\\\\temp'"
    """
    if value is None:
        return "NULL"
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, str):
        return quote_text(value, dialect)
    if isinstance(value, datetime):
        return quote_text(profile_for(dialect).format_timestamp(value), dialect)
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, Decimal):
        return format(value, "f")
    return quote_text(str(value), dialect)


def parse_timestamp(raw: Any, dialect: Dialect) -> datetime:
    """Read a stored timestamp back into a datetime for ``dialect``."""
    return profile_for(dialect).parse_timestamp(raw)


__all__ = ["quote_text", "format_value", "parse_timestamp"]

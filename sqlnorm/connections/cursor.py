"""
Row cursor returned by NormConnection.execute_query.

Rows are materialized when the statement runs, so the driver cursor is already
closed by the time callers read from this one.
"""
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Sequence


class RowCursor:
    """Forward-only cursor over ``{column: value}`` rows."""

    def __init__(self, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
        self._columns = list(columns)
        self._rows = list(rows)
        self._position = 0
        self._closed = False

    @property
    def columns(self) -> List[str]:
        return list(self._columns)

    @property
    def rowcount(self) -> int:
        return len(self._rows)

    def fetchone(self) -> Optional[Dict[str, Any]]:
        """Next row as a dict, or None once exhausted."""
        if self._closed or self._position >= len(self._rows):
            return None
        row = self._rows[self._position]
        self._position += 1
        return dict(zip(self._columns, row))

    def fetchall(self) -> List[Dict[str, Any]]:
        return list(self)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        while True:
            row = self.fetchone()
            if row is None:
                return
            yield row

    def close(self) -> None:
        self._closed = True

    def __enter__(self) -> "RowCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["RowCursor"]

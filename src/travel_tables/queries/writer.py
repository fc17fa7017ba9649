"""Output of query results in record or compact style."""

from __future__ import annotations

import io
from typing import Any, Iterable, TextIO


class QueryWriter:
    """Writes the records produced by one query instance.

    Record style (``formatted``) emits a ``--- n ---`` header and one
    ``key: value`` line per field, with a blank line between records.
    Compact style emits one ``;``-separated line per record. Without a
    stream, output is kept in memory.
    """

    def __init__(self, stream: TextIO | None = None, formatted: bool = False) -> None:
        self.formatted = formatted
        self._in_memory = stream is None
        self._stream: TextIO = io.StringIO() if stream is None else stream
        self._records = 0
        self._fields = 0

    @property
    def record_count(self) -> int:
        return self._records

    def begin_record(self) -> None:
        if self.formatted:
            if self._records:
                self._stream.write("\n")
            self._stream.write(f"--- {self._records + 1} ---\n")
        self._records += 1
        self._fields = 0

    def write_field(self, key: str, value: Any) -> None:
        if self.formatted:
            self._stream.write(f"{key}: {value}\n")
        else:
            if self._fields:
                self._stream.write(";")
            self._stream.write(str(value))
        self._fields += 1

    def end_record(self) -> None:
        if not self.formatted:
            self._stream.write("\n")

    def write_record(self, fields: Iterable[tuple[str, Any]]) -> None:
        """Write a whole record from ``(key, value)`` pairs."""
        self.begin_record()
        for key, value in fields:
            self.write_field(key, value)
        self.end_record()

    def write_line(self, text: str) -> None:
        self._stream.write(text + "\n")

    def getvalue(self) -> str:
        """Return everything written so far (in-memory writers only)."""
        if not self._in_memory:
            raise ValueError("Only in-memory writers keep their output")
        return self._stream.getvalue()  # type: ignore[attr-defined]

    @property
    def lines(self) -> list[str]:
        """Return the output lines (in-memory writers only)."""
        return self.getvalue().splitlines()

    def close(self) -> None:
        """Flush the stream. Streams passed in stay open for their owner."""
        if not self._stream.closed:
            self._stream.flush()

    def __enter__(self) -> QueryWriter:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

"""Fixed-arity delimited line parsing."""

from __future__ import annotations

from typing import Any, Callable, Iterator, Sequence, TextIO

from travel_tables.errors import DelimitedErrorKind, DelimitedParseError

# A token callback receives (user_data, token, token_index) and raises
# ParseError when the token is invalid.
TokenCallback = Callable[[Any, str, int], None]


class FixedDelimParser:
    """Splits a line into exactly ``n`` tokens and feeds each to its callback."""

    def __init__(self, delimiter: str, callbacks: Sequence[TokenCallback]) -> None:
        if len(delimiter) != 1:
            raise ValueError(f"Delimiter must be a single character, got {delimiter!r}")
        if not callbacks:
            raise ValueError("At least one token callback is required")
        self.delimiter = delimiter
        self.callbacks = tuple(callbacks)

    @property
    def token_count(self) -> int:
        return len(self.callbacks)

    def split(self, line: str) -> list[str]:
        """Split a line, enforcing the exact token count.

        Raises:
            DelimitedParseError: With kind TOO_MANY or NOT_ENOUGH.
        """
        n = len(self.callbacks)
        # At most n + 1 pieces are needed to detect an extra token
        tokens = line.split(self.delimiter, n)
        if len(tokens) > n:
            found = len(line.split(self.delimiter))
            raise DelimitedParseError(DelimitedErrorKind.TOO_MANY, n, found)
        if len(tokens) < n:
            raise DelimitedParseError(DelimitedErrorKind.NOT_ENOUGH, n, len(tokens))
        return tokens

    def parse(self, line: str, user_data: Any = None) -> None:
        """Parse a line, invoking every callback in order.

        The first callback error propagates unchanged and stops parsing.
        """
        for index, (callback, token) in enumerate(zip(self.callbacks, self.split(line))):
            callback(user_data, token, index)


class LineTokenizer:
    """Iterates over the lines of a text stream without their terminators."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self.line_number = 0

    def __iter__(self) -> Iterator[str]:
        for raw in self.stream:
            self.line_number += 1
            line = raw[:-1] if raw.endswith("\n") else raw
            if line.endswith("\r"):
                line = line[:-1]
            yield line

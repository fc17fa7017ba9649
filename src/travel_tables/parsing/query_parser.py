"""Parser for query file lines: ``[F]<type>[F] [argument]*``."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

import ply.yacc as yacc

from travel_tables.parsing.query_lexer import QueryLexer

_COMMAND_RE = re.compile(r"(F?)([0-9]+)(F?)")


@dataclass
class QueryLine:
    """A syntactically valid query line."""

    type_number: int
    formatted: bool = False  # Record style output
    arguments: list[str] = field(default_factory=list)


class QueryParser:
    """Parser for query lines."""

    tokens = QueryLexer.tokens

    def __init__(self) -> None:
        self.lexer = QueryLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_line(self, p: yacc.YaccProduction) -> None:
        """line : WORD arguments"""
        p[0] = (p[1], p[2])

    def p_arguments_list(self, p: yacc.YaccProduction) -> None:
        """arguments : arguments argument"""
        p[0] = p[1] + [p[2]]

    def p_arguments_empty(self, p: yacc.YaccProduction) -> None:
        """arguments : empty"""
        p[0] = []

    def p_argument(self, p: yacc.YaccProduction) -> None:
        """argument : WORD
                    | STRING"""
        p[0] = p[1]

    def p_empty(self, p: yacc.YaccProduction) -> None:
        """empty :"""
        pass

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, start="line", **kwargs)

    def parse(self, data: str) -> QueryLine:
        """Parse a query line.

        Raises:
            SyntaxError: If the line is not a well-formed query line.
        """
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        command, arguments = self.parser.parse(data, lexer=self.lexer.lexer)
        match = _COMMAND_RE.fullmatch(command)
        if match is None:
            raise SyntaxError(f"Invalid query type '{command}'")
        leading, number, trailing = match.groups()
        if leading and trailing:
            raise SyntaxError(f"Format flag given twice in '{command}'")
        return QueryLine(
            type_number=int(number),
            formatted=bool(leading or trailing),
            arguments=arguments,
        )

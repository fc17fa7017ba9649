"""Lexer for query file lines."""

import ply.lex as lex


class QueryLexer:
    """Lexer for tokenizing a query line into words and quoted strings."""

    tokens = [
        "WORD",
        "STRING",
    ]

    # Spaces separate arguments
    t_ignore = " \t\r"

    def __init__(self) -> None:
        self.lexer: lex.LexToken = None  # type: ignore

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r'"[^"\n]*"'
        t.value = t.value[1:-1]  # Strip the quotes
        return t

    def t_WORD(self, t: lex.LexToken) -> lex.LexToken:
        r'[^\s"]+'
        return t

    def t_newline(self, t: lex.LexToken) -> None:
        r"\n+"
        t.lexer.lineno += len(t.value)

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' at position {t.lexpos}")

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        """Return the next token."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens

"""Lexer for TypeScript call signatures such as ``(this: D, a: string) => boolean``."""

import ply.lex as lex


class SignatureLexer:
    """Lexer for tokenizing function signature strings."""

    # Reserved keywords
    reserved = {
        "this": "THIS",
    }

    # Token list
    tokens = [
        "ARROW",
        "STRING",
        "IDENTIFIER",
        "NUMBER",
        "LPAREN",
        "RPAREN",
        "LBRACKET",
        "RBRACKET",
        "LBRACE",
        "RBRACE",
        "LANGLE",
        "RANGLE",
        "COLON",
        "COMMA",
        "SYMBOL",
    ] + list(reserved.values())

    # Simple tokens
    t_LPAREN = r"\("
    t_RPAREN = r"\)"
    t_LBRACKET = r"\["
    t_RBRACKET = r"\]"
    t_LBRACE = r"\{"
    t_RBRACE = r"\}"
    t_LANGLE = r"<"
    t_RANGLE = r">"
    t_COLON = r":"
    t_COMMA = r","
    t_SYMBOL = r"[.|&?!=;*+\-/%^~@#]"

    # Ignored characters (spaces, tabs, and newlines)
    t_ignore = " \t\r\n"

    def __init__(self) -> None:
        self.lexer: lex.LexToken = None  # type: ignore

    # Function rules are tried in definition order, before the string rules,
    # so "=>" wins over "=" and ">".
    def t_ARROW(self, t: lex.LexToken) -> lex.LexToken:
        r"=>"
        return t

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\"|`(?:[^`\\]|\\.)*`"
        return t

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"[a-zA-Z_$][a-zA-Z0-9_$]*"
        t.type = self.reserved.get(t.value, "IDENTIFIER")
        return t

    def t_NUMBER(self, t: lex.LexToken) -> lex.LexToken:
        r"\d+(?:\.\d+)?"
        return t

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

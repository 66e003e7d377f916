"""Parser for TypeScript call signatures."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import ply.yacc as yacc

from schema_tsgen.parsing.signature_lexer import SignatureLexer

# (start, end) offsets of a piece of the signature text
Span = tuple[int, int]


@dataclass(frozen=True)
class Signature:
    """A parsed ``(params) => return_type`` signature."""

    params: str
    return_type: str


class SignatureParser:
    """Parser for call signatures produced by a signature-inference tool.

    Only the outer shape is parsed: an optional type parameter list, the
    parameter list, the arrow that follows it, and everything after the
    arrow as the return type. Bracketed groups are matched but their
    contents are kept as written. A leading explicit ``this`` parameter is
    dropped, since the generated declarations bind ``this`` themselves.

    Grammar rules produce spans of the input rather than values, so the
    parameters and return type come back exactly as they were written.
    """

    tokens = SignatureLexer.tokens
    start = "signature"

    def __init__(self) -> None:
        self.lexer = SignatureLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_signature(self, p: yacc.YaccProduction) -> None:
        """signature : LPAREN params RPAREN ARROW any_seq"""
        p[0] = (p[2], p[5])

    def p_signature_generic(self, p: yacc.YaccProduction) -> None:
        """signature : LANGLE any_seq_opt RANGLE LPAREN params RPAREN ARROW any_seq"""
        p[0] = (p[5], p[8])

    def p_params_empty(self, p: yacc.YaccProduction) -> None:
        """params : empty"""
        p[0] = None

    def p_params(self, p: yacc.YaccProduction) -> None:
        """params : param_seq"""
        p[0] = p[1]

    def p_params_this(self, p: yacc.YaccProduction) -> None:
        """params : THIS COLON type_seq"""
        p[0] = None

    def p_params_this_rest(self, p: yacc.YaccProduction) -> None:
        """params : THIS COLON type_seq COMMA param_seq"""
        p[0] = p[5]

    def p_param_seq(self, p: yacc.YaccProduction) -> None:
        """param_seq : param_item
                     | param_seq param_item"""
        p[0] = _join(p)

    def p_type_seq(self, p: yacc.YaccProduction) -> None:
        """type_seq : type_item
                    | type_seq type_item"""
        p[0] = _join(p)

    def p_any_seq(self, p: yacc.YaccProduction) -> None:
        """any_seq : any_item
                   | any_seq any_item"""
        p[0] = _join(p)

    def p_any_seq_opt(self, p: yacc.YaccProduction) -> None:
        """any_seq_opt : any_seq
                       | empty"""
        p[0] = p[1]

    # A type ends at the first top-level comma
    def p_type_item(self, p: yacc.YaccProduction) -> None:
        """type_item : IDENTIFIER
                     | STRING
                     | NUMBER
                     | SYMBOL
                     | COLON
                     | ARROW"""
        p[0] = _token_span(p, 1)

    def p_type_item_group(self, p: yacc.YaccProduction) -> None:
        """type_item : group"""
        p[0] = p[1]

    def p_param_item(self, p: yacc.YaccProduction) -> None:
        """param_item : type_item"""
        p[0] = p[1]

    def p_param_item_comma(self, p: yacc.YaccProduction) -> None:
        """param_item : COMMA"""
        p[0] = _token_span(p, 1)

    def p_any_item(self, p: yacc.YaccProduction) -> None:
        """any_item : param_item"""
        p[0] = p[1]

    def p_any_item_this(self, p: yacc.YaccProduction) -> None:
        """any_item : THIS"""
        p[0] = _token_span(p, 1)

    def p_group(self, p: yacc.YaccProduction) -> None:
        """group : LPAREN any_seq_opt RPAREN
                 | LBRACKET any_seq_opt RBRACKET
                 | LBRACE any_seq_opt RBRACE
                 | LANGLE any_seq_opt RANGLE"""
        p[0] = (p.lexpos(1), p.lexpos(3) + 1)

    def p_empty(self, p: yacc.YaccProduction) -> None:
        """empty :"""
        p[0] = None

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, text: str) -> Signature | None:
        """Parse a signature, returning None when it is not of the expected shape."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        try:
            result = self.parser.parse(text, lexer=self.lexer.lexer)
        except SyntaxError:
            return None
        if result is None:
            return None

        params_span, return_span = result
        params = text[params_span[0]:params_span[1]] if params_span else ""
        return Signature(params=params, return_type=text[return_span[0]:return_span[1]])


def _token_span(p: yacc.YaccProduction, n: int) -> Span:
    start = p.lexpos(n)
    return (start, start + len(p[n]))


def _join(p: yacc.YaccProduction) -> Span:
    """Span of a sequence rule: one item, or a sequence extended by an item."""
    if len(p) == 2:
        return p[1]
    return (p[1][0], p[2][1])

"""Parsing module for function signature strings."""

from schema_tsgen.parsing.signature_lexer import SignatureLexer
from schema_tsgen.parsing.signature_parser import Signature, SignatureParser

__all__ = [
    "Signature",
    "SignatureLexer",
    "SignatureParser",
]

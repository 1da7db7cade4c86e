"""Parser for field type expressions."""

from __future__ import annotations

from typing import Any

import ply.yacc as yacc

from slot_layout.errors import InvalidLiteralError, MalformedTypeError
from slot_layout.parsing.type_lexer import TypeLexer
from slot_layout.types import (
    ELEMENTARY_TYPES,
    AddressType,
    ArrayType,
    FixedArrayType,
    MappingType,
    SolType,
    StructRefType,
)


class TypeParser:
    """Parser turning a type expression such as ``mapping(address => uint8[4])``
    into a SolType.

    Elementary keywords resolve through ELEMENTARY_TYPES. Any other identifier
    becomes a StructRefType; whether the struct exists is only checked when a
    layout is computed.
    """

    tokens = TypeLexer.tokens

    def __init__(self) -> None:
        self.lexer = TypeLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore
        self._text = ""

    def p_type_expr_named(self, p: yacc.YaccProduction) -> None:
        """type_expr : IDENTIFIER"""
        p[0] = ELEMENTARY_TYPES.get(p[1]) or StructRefType(name=p[1])

    def p_type_expr_payable(self, p: yacc.YaccProduction) -> None:
        """type_expr : IDENTIFIER PAYABLE"""
        if p[1] != "address":
            raise MalformedTypeError(self._text, f"'{p[1]}' cannot be payable")
        p[0] = AddressType(payable=True)

    def p_type_expr_mapping(self, p: yacc.YaccProduction) -> None:
        """type_expr : MAPPING LPAREN type_expr opt_name ARROW type_expr opt_name RPAREN"""
        p[0] = MappingType(key=p[3], value=p[6])

    def p_type_expr_array(self, p: yacc.YaccProduction) -> None:
        """type_expr : type_expr LBRACKET RBRACKET"""
        p[0] = ArrayType(element=p[1])

    def p_type_expr_fixed_array(self, p: yacc.YaccProduction) -> None:
        """type_expr : type_expr LBRACKET INTEGER RBRACKET"""
        p[0] = FixedArrayType(element=p[1], length=p[3])

    def p_type_expr_symbolic_length(self, p: yacc.YaccProduction) -> None:
        """type_expr : type_expr LBRACKET IDENTIFIER RBRACKET"""
        raise InvalidLiteralError(p[3], "array length must be an integer literal")

    def p_opt_name(self, p: yacc.YaccProduction) -> None:
        """opt_name : IDENTIFIER
                    | empty"""
        p[0] = p[1]

    def p_empty(self, p: yacc.YaccProduction) -> None:
        """empty :"""
        p[0] = None

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise MalformedTypeError(self._text, f"unexpected '{p.value}' at position {p.lexpos}")
        else:
            raise MalformedTypeError(self._text, "unexpected end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str) -> SolType:
        """Parse a single type expression and return its SolType."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        self._text = data.strip()
        if not self._text:
            raise MalformedTypeError(data, "empty type expression")

        return self.parser.parse(self._text, lexer=self.lexer.lexer)


_default_parser: TypeParser | None = None


def parse_type(text: str) -> SolType:
    """Parse a type expression with a shared TypeParser instance."""
    global _default_parser
    if _default_parser is None:
        _default_parser = TypeParser()
    return _default_parser.parse(text)

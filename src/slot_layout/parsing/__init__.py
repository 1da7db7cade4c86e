"""Parsing module for type expressions and struct source text."""

from slot_layout.parsing.source import (
    StructSource,
    parse_source,
    parse_struct_source,
    split_structs,
)
from slot_layout.parsing.type_parser import TypeParser, parse_type

__all__ = [
    "StructSource",
    "TypeParser",
    "parse_source",
    "parse_struct_source",
    "parse_type",
    "split_structs",
]

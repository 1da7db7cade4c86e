"""Scanning of struct source text into names and raw field declarations."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from slot_layout.errors import MalformedStructError

_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT = re.compile(r"//[^\n]*")
_STRUCT = re.compile(r"\bstruct\s+(?P<name>[A-Za-z_$][\w$]*)\s*\{(?P<body>[^{}]*)\}")
_FIELD = re.compile(r"^(?P<type>.+?)\s+(?P<name>[A-Za-z_$][\w$]*)$", re.DOTALL)


@dataclass
class StructSource:
    """A struct as written: its name and (field name, type text) pairs."""

    name: str
    fields: list[tuple[str, str]] = field(default_factory=list)
    text: str = ""


def strip_comments(text: str) -> str:
    """Remove ``/* */`` and ``//`` comments, keeping line structure."""
    text = _BLOCK_COMMENT.sub(lambda m: "\n" * m.group(0).count("\n"), text)
    return _LINE_COMMENT.sub("", text)


def split_structs(text: str) -> list[str]:
    """Cut source text into one chunk per struct definition.

    Anything other than whitespace between definitions is an error.
    """
    text = strip_comments(text)
    chunks: list[str] = []
    pos = 0
    for match in _STRUCT.finditer(text):
        _check_blank(text[pos:match.start()])
        chunks.append(match.group(0))
        pos = match.end()
    _check_blank(text[pos:])
    return chunks


def _check_blank(between: str) -> None:
    for line in between.splitlines():
        if line.strip():
            raise MalformedStructError(line.strip(), "expected a struct definition")


def parse_struct_source(chunk: str) -> StructSource:
    """Split a single struct definition into its name and field declarations."""
    match = _STRUCT.search(strip_comments(chunk))
    if match is None:
        raise MalformedStructError(" ".join(chunk.split()), "expected 'struct Name { ... }'")

    *declarations, tail = match.group("body").split(";")
    if tail.strip():
        raise MalformedStructError(" ".join(tail.split()), "missing ';'")

    fields: list[tuple[str, str]] = []
    for declaration in declarations:
        declaration = " ".join(declaration.split())
        if not declaration:
            continue
        field_match = _FIELD.match(declaration)
        if field_match is None:
            raise MalformedStructError(declaration, "expected '<type> <name>;'")
        fields.append((field_match.group("name"), field_match.group("type")))

    return StructSource(name=match.group("name"), fields=fields, text=chunk)


def parse_source(text: str) -> list[StructSource]:
    """Parse every struct definition in source text, in declaration order."""
    return [parse_struct_source(chunk) for chunk in split_structs(text)]

"""Exceptions raised while parsing struct definitions and computing layouts."""

from __future__ import annotations


class LayoutError(Exception):
    """Base class for all slot_layout errors."""


class MalformedTypeError(LayoutError):
    """A type expression matches none of the recognized grammars."""

    def __init__(self, fragment: str, detail: str | None = None) -> None:
        self.fragment = fragment
        self.detail = detail
        message = f"Malformed type '{fragment}'"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class InvalidLiteralError(LayoutError):
    """A numeric literal in a type expression is not a valid size."""

    def __init__(self, literal: str, detail: str | None = None) -> None:
        self.literal = literal
        message = f"Invalid literal '{literal}'"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class UnresolvedReferenceError(LayoutError):
    """A named struct reference is not in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Struct '{name}' not found")


class RecursionLimitExceededError(LayoutError):
    """Struct nesting went deeper than the configured bound.

    Raised for self-referencing or mutually referencing structs, which
    would otherwise recurse forever.
    """

    def __init__(self, depth: int, chain: tuple[str, ...]) -> None:
        self.depth = depth
        self.chain = chain
        path = " -> ".join(chain) if chain else "<anonymous>"
        super().__init__(f"Nesting deeper than {depth} levels: {path}")


class MalformedStructError(LayoutError):
    """A line of struct source text cannot be understood."""

    def __init__(self, line: str, detail: str | None = None) -> None:
        self.line = line
        message = f"Invalid line '{line}'"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class DuplicateStructError(LayoutError):
    """Two structs with the same name were registered together."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Struct '{name}' is already defined")

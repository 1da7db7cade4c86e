"""Configuration for layout computation and output."""

from __future__ import annotations

from dataclasses import dataclass

# Deepest struct nesting followed before giving up
DEFAULT_MAX_DEPTH = 64

OUTPUT_FORMATS = ("text", "json")


@dataclass
class LayoutConfig:
    """Settings shared by the layout engine and the command line driver."""

    max_depth: int = DEFAULT_MAX_DEPTH
    show_fields: bool = False
    output_format: str = "text"

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unknown output format '{self.output_format}' "
                f"(expected one of {', '.join(OUTPUT_FORMATS)})"
            )

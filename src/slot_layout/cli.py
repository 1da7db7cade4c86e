"""Command line tool printing the storage slot usage of struct definitions."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, TextIO

from slot_layout.config import DEFAULT_MAX_DEPTH, OUTPUT_FORMATS, LayoutConfig
from slot_layout.errors import LayoutError
from slot_layout.schema import Schema, StructResult


def read_sources(paths: list[Path], stdin: TextIO | None = None) -> str:
    """Concatenate the given files; ``-`` or no paths at all reads stdin."""
    stdin = stdin or sys.stdin
    if not paths:
        return stdin.read()

    parts = []
    for path in paths:
        if str(path) == "-":
            parts.append(stdin.read())
        else:
            parts.append(path.read_text(encoding="utf-8"))
    return "\n".join(parts)


def format_result(result: StructResult) -> str:
    """Render one struct result as text."""
    lines = [f"{result.name}:", "-" * (len(result.name) + 1)]
    if result.placements:
        for p in result.placements:
            lines.append(
                f"{p.name}: {p.sol_type} "
                f"(slot {p.slot}, offset {p.offset_bits}, {p.size_bits} bits)"
            )
    else:
        for f in result.fields:
            lines.append(f"{f.name}: {f.sol_type}")

    if result.ok:
        lines.append(f"{result.name}: {result.slots} [{result.bits}]")
    else:
        lines.append(f"{result.name}: error: {result.error}")
    return "\n".join(lines)


def result_to_dict(result: StructResult) -> dict[str, Any]:
    """Convert a struct result to a JSON-serializable dict."""
    data: dict[str, Any] = {
        "name": result.name,
        "fields": [{"name": f.name, "type": str(f.sol_type)} for f in result.fields],
    }
    if result.placements:
        data["fields"] = [
            {
                "name": p.name,
                "type": str(p.sol_type),
                "slot": p.slot,
                "offset": p.offset_bits,
                "bits": p.size_bits,
            }
            for p in result.placements
        ]
    if result.ok:
        data["slots"] = result.slots
        data["bits"] = result.bits
    else:
        data["error"] = result.error
    return data


def print_results(results: list[StructResult], config: LayoutConfig) -> None:
    """Print struct results in the configured output format."""
    if config.output_format == "json":
        print(json.dumps([result_to_dict(r) for r in results], indent=2))
        return

    for i, result in enumerate(results):
        if i:
            print()
        print(format_result(result))


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        description="Compute the storage slots used by Solidity struct definitions"
    )
    arg_parser.add_argument(
        "files",
        type=Path,
        nargs="*",
        help="Files holding struct definitions (default: read stdin, '-' also means stdin)",
    )
    arg_parser.add_argument(
        "--fields",
        action="store_true",
        help="Show the slot and bit offset of every field",
    )
    arg_parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format (default: text)",
    )
    arg_parser.add_argument(
        "--json",
        dest="format",
        action="store_const",
        const="json",
        help="Shorthand for --format json",
    )
    arg_parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Deepest struct nesting to follow (default: {DEFAULT_MAX_DEPTH})",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = arg_parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    for path in args.files:
        if str(path) != "-" and not path.exists():
            print(f"Error: File not found: {path}", file=sys.stderr)
            return 1

    try:
        config = LayoutConfig(
            max_depth=args.max_depth,
            show_fields=args.fields,
            output_format=args.format,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        source = read_sources(args.files)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: Cannot read input: {e}", file=sys.stderr)
        return 1

    try:
        schema = Schema.parse(source, config)
    except LayoutError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    results = schema.results()
    print_results(results, config)

    failed = [r for r in results if not r.ok]
    for result in failed:
        print(f"Error: {result.name}: {result.error}", file=sys.stderr)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())

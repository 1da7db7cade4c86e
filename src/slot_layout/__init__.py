"""Slot Layout - storage slot usage of Solidity-style struct definitions."""

from slot_layout.config import LayoutConfig
from slot_layout.errors import (
    DuplicateStructError,
    InvalidLiteralError,
    LayoutError,
    MalformedStructError,
    MalformedTypeError,
    RecursionLimitExceededError,
    UnresolvedReferenceError,
)
from slot_layout.layout import (
    FieldPlacement,
    SlotState,
    StorageLayout,
    compute_size,
    round_up_to_slot,
    slot_count,
)
from slot_layout.parsing import TypeParser, parse_type
from slot_layout.schema import Schema, StructResult
from slot_layout.types import (
    AddressType,
    ArrayType,
    BoolType,
    BytesType,
    FieldDefinition,
    FixedArrayType,
    FixedBytesType,
    InlineStructType,
    IntType,
    MappingType,
    SolType,
    StringType,
    StructDefinition,
    StructRefType,
    StructRegistry,
    UintType,
    ValueType,
)

__all__ = [
    # Main API
    "Schema",
    "StructResult",
    "LayoutConfig",
    "TypeParser",
    "parse_type",
    "compute_size",
    # Layout
    "StorageLayout",
    "SlotState",
    "FieldPlacement",
    "round_up_to_slot",
    "slot_count",
    # Type values
    "SolType",
    "ValueType",
    "UintType",
    "IntType",
    "AddressType",
    "BoolType",
    "FixedBytesType",
    "BytesType",
    "StringType",
    "MappingType",
    "ArrayType",
    "FixedArrayType",
    "StructRefType",
    "InlineStructType",
    # Structs
    "FieldDefinition",
    "StructDefinition",
    "StructRegistry",
    # Errors
    "LayoutError",
    "MalformedTypeError",
    "InvalidLiteralError",
    "UnresolvedReferenceError",
    "RecursionLimitExceededError",
    "MalformedStructError",
    "DuplicateStructError",
]

__version__ = "0.1.0"

"""Type definitions for the slot_layout library."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Iterator

from slot_layout.errors import (
    DuplicateStructError,
    InvalidLiteralError,
    UnresolvedReferenceError,
)

logger = logging.getLogger(__name__)


# Width of one storage slot in bits
SLOT_BITS = 256

# Width of an address value in bits (20 bytes)
ADDRESS_BITS = 160


@dataclass(frozen=True)
class SolType:
    """Base class for all type values."""

    @property
    def is_value_type(self) -> bool:
        """Return whether values of this type pack alongside each other in a slot."""
        return False

    @property
    def is_dynamic(self) -> bool:
        """Return whether this type always takes exactly one whole slot."""
        return False

    @property
    def is_struct(self) -> bool:
        """Return whether this type is a struct, named or inline."""
        return False

    @property
    def is_fixed_array(self) -> bool:
        """Return whether this type is a fixed-length array."""
        return False


@dataclass(frozen=True)
class ValueType(SolType):
    """A type with a fixed, sub-slot bit width."""

    @property
    def bit_width(self) -> int:
        """Return the number of bits a value of this type uses."""
        raise NotImplementedError

    @property
    def is_value_type(self) -> bool:
        return True


def _check_int_bits(bits: int) -> None:
    if not 8 <= bits <= SLOT_BITS or bits % 8:
        raise InvalidLiteralError(str(bits), "integer width must be a multiple of 8 in 8..256")


@dataclass(frozen=True)
class UintType(ValueType):
    """Unsigned integer of a given bit width."""

    bits: int = SLOT_BITS

    def __post_init__(self) -> None:
        _check_int_bits(self.bits)

    @property
    def bit_width(self) -> int:
        return self.bits

    def __str__(self) -> str:
        return f"uint{self.bits}"


@dataclass(frozen=True)
class IntType(ValueType):
    """Signed integer of a given bit width."""

    bits: int = SLOT_BITS

    def __post_init__(self) -> None:
        _check_int_bits(self.bits)

    @property
    def bit_width(self) -> int:
        return self.bits

    def __str__(self) -> str:
        return f"int{self.bits}"


@dataclass(frozen=True)
class AddressType(ValueType):
    """A 160-bit account address."""

    payable: bool = False

    @property
    def bit_width(self) -> int:
        return ADDRESS_BITS

    def __str__(self) -> str:
        return "address payable" if self.payable else "address"


@dataclass(frozen=True)
class BoolType(ValueType):
    """A boolean, stored in a single bit."""

    @property
    def bit_width(self) -> int:
        return 1

    def __str__(self) -> str:
        return "bool"


@dataclass(frozen=True)
class FixedBytesType(ValueType):
    """A byte sequence of fixed length (bytes1 .. bytes32)."""

    length: int

    def __post_init__(self) -> None:
        if not 1 <= self.length <= 32:
            raise InvalidLiteralError(str(self.length), "fixed bytes length must be in 1..32")

    @property
    def bit_width(self) -> int:
        return self.length * 8

    def __str__(self) -> str:
        return f"bytes{self.length}"


@dataclass(frozen=True)
class BytesType(SolType):
    """Arbitrary-length byte sequence."""

    @property
    def is_dynamic(self) -> bool:
        return True

    def __str__(self) -> str:
        return "bytes"


@dataclass(frozen=True)
class StringType(BytesType):
    """Built-in string type, laid out exactly like bytes."""

    def __str__(self) -> str:
        return "string"


@dataclass(frozen=True)
class MappingType(SolType):
    """Key/value container."""

    key: SolType
    value: SolType

    @property
    def is_dynamic(self) -> bool:
        return True

    def __str__(self) -> str:
        return f"mapping({self.key} => {self.value})"


@dataclass(frozen=True)
class ArrayType(SolType):
    """Dynamic-length array (e.g., uint8[])."""

    element: SolType

    @property
    def is_dynamic(self) -> bool:
        return True

    def __str__(self) -> str:
        return f"{self.element}[]"


@dataclass(frozen=True)
class FixedArrayType(SolType):
    """Fixed-length array with a literal element count (e.g., uint8[4])."""

    element: SolType
    length: int

    def __post_init__(self) -> None:
        if self.length < 1:
            raise InvalidLiteralError(str(self.length), "array length must be positive")

    @property
    def is_fixed_array(self) -> bool:
        return True

    def __str__(self) -> str:
        return f"{self.element}[{self.length}]"


@dataclass(frozen=True)
class StructRefType(SolType):
    """Reference to a struct by name, resolved against a StructRegistry."""

    name: str

    @property
    def is_struct(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class InlineStructType(SolType):
    """A struct whose fields are already known."""

    struct: StructDefinition

    @property
    def is_struct(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.struct.name


def _elementary_types() -> dict[str, SolType]:
    names: dict[str, SolType] = {
        "uint": UintType(),
        "int": IntType(),
        "address": AddressType(),
        "bool": BoolType(),
        "bytes": BytesType(),
        "string": StringType(),
    }
    for bits in range(8, SLOT_BITS + 1, 8):
        names[f"uint{bits}"] = UintType(bits)
        names[f"int{bits}"] = IntType(bits)
    for length in range(1, 33):
        names[f"bytes{length}"] = FixedBytesType(length)
    return names


# Mapping from elementary keyword to its type value
ELEMENTARY_TYPES: dict[str, SolType] = _elementary_types()


@dataclass(frozen=True)
class FieldDefinition:
    """Definition of a field within a struct."""

    name: str
    sol_type: SolType


@dataclass(frozen=True)
class StructDefinition:
    """A named struct with its fields in declaration order."""

    name: str
    fields: tuple[FieldDefinition, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))

    def get_field(self, name: str) -> FieldDefinition | None:
        """Get a field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None


class StructRegistry:
    """Read-only registry of struct definitions, keyed by name.

    All structs are registered at construction time, so references may point
    forward or backward in declaration order.
    """

    def __init__(self, structs: Iterable[StructDefinition] = ()) -> None:
        registered: dict[str, StructDefinition] = {}
        for struct in structs:
            if struct.name in registered:
                raise DuplicateStructError(struct.name)
            registered[struct.name] = struct
            logger.debug("registered struct %s with %d fields", struct.name, len(struct.fields))
        self._structs = MappingProxyType(registered)

    def get(self, name: str) -> StructDefinition | None:
        """Get a struct by name."""
        return self._structs.get(name)

    def get_or_raise(self, name: str) -> StructDefinition:
        """Get a struct by name, raising if not found."""
        struct = self._structs.get(name)
        if struct is None:
            raise UnresolvedReferenceError(name)
        return struct

    def list_structs(self) -> list[str]:
        """List all registered struct names in declaration order."""
        return list(self._structs.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._structs

    def __iter__(self) -> Iterator[StructDefinition]:
        return iter(self._structs.values())

    def __len__(self) -> int:
        return len(self._structs)

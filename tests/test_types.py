"""Tests for the type system."""

import pytest

from slot_layout.errors import (
    DuplicateStructError,
    InvalidLiteralError,
    UnresolvedReferenceError,
)
from slot_layout.types import (
    ELEMENTARY_TYPES,
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
    StringType,
    StructDefinition,
    StructRefType,
    StructRegistry,
    UintType,
)


class TestValueTypes:
    """Tests for value type widths and validation."""

    def test_bit_widths(self):
        """Test bit_width for every value type."""
        assert UintType(8).bit_width == 8
        assert UintType().bit_width == 256
        assert IntType(64).bit_width == 64
        assert AddressType().bit_width == 160
        assert AddressType(payable=True).bit_width == 160
        assert BoolType().bit_width == 1
        assert FixedBytesType(1).bit_width == 8
        assert FixedBytesType(32).bit_width == 256

    def test_invalid_int_width(self):
        """Test that widths outside 8..256 or not multiples of 8 are rejected."""
        with pytest.raises(InvalidLiteralError):
            UintType(12)
        with pytest.raises(InvalidLiteralError):
            IntType(264)
        with pytest.raises(InvalidLiteralError):
            UintType(0)

    def test_invalid_fixed_bytes_length(self):
        """Test that fixed bytes lengths outside 1..32 are rejected."""
        with pytest.raises(InvalidLiteralError):
            FixedBytesType(0)
        with pytest.raises(InvalidLiteralError):
            FixedBytesType(33)

    def test_predicates(self):
        """Test classification properties."""
        assert UintType(8).is_value_type is True
        assert UintType(8).is_dynamic is False
        assert BytesType().is_dynamic is True
        assert BytesType().is_value_type is False
        assert MappingType(AddressType(), UintType()).is_dynamic is True
        assert ArrayType(UintType(8)).is_dynamic is True
        assert FixedArrayType(UintType(8), 2).is_fixed_array is True
        assert FixedArrayType(UintType(8), 2).is_dynamic is False
        assert StructRefType("Foo").is_struct is True
        assert InlineStructType(StructDefinition("Foo")).is_struct is True

    def test_signed_and_unsigned_differ(self):
        """Test that equal widths of different signedness are different types."""
        assert UintType(8) != IntType(8)
        assert StringType() != BytesType()
        assert isinstance(StringType(), BytesType)


class TestContainerTypes:
    """Tests for container type values."""

    def test_fixed_array_length_must_be_positive(self):
        """Test that a zero-length fixed array is rejected."""
        with pytest.raises(InvalidLiteralError):
            FixedArrayType(UintType(8), 0)

    def test_str(self):
        """Test canonical rendering of type values."""
        assert str(UintType(32)) == "uint32"
        assert str(AddressType(payable=True)) == "address payable"
        assert str(MappingType(AddressType(), UintType())) == "mapping(address => uint256)"
        assert str(ArrayType(FixedArrayType(BoolType(), 3))) == "bool[3][]"
        assert str(StructRefType("Position")) == "Position"

    def test_types_are_immutable(self):
        """Test that type values cannot be modified."""
        t = UintType(8)
        with pytest.raises(AttributeError):
            t.bits = 16  # type: ignore[misc]


class TestElementaryTypes:
    """Tests for the elementary keyword table."""

    def test_keywords(self):
        """Test that the table covers every elementary keyword."""
        assert ELEMENTARY_TYPES["uint"] == UintType(256)
        assert ELEMENTARY_TYPES["int"] == IntType(256)
        assert ELEMENTARY_TYPES["address"] == AddressType()
        assert ELEMENTARY_TYPES["bool"] == BoolType()
        assert ELEMENTARY_TYPES["bytes"] == BytesType()
        assert ELEMENTARY_TYPES["string"] == StringType()

    def test_sized_keywords(self):
        """Test the sized integer and fixed bytes keywords."""
        for bits in range(8, 257, 8):
            assert ELEMENTARY_TYPES[f"uint{bits}"] == UintType(bits)
            assert ELEMENTARY_TYPES[f"int{bits}"] == IntType(bits)
        for length in range(1, 33):
            assert ELEMENTARY_TYPES[f"bytes{length}"] == FixedBytesType(length)
        assert "uint7" not in ELEMENTARY_TYPES
        assert "bytes33" not in ELEMENTARY_TYPES


class TestStructDefinition:
    """Tests for StructDefinition."""

    def test_fields_keep_order(self):
        """Test that fields are kept in declaration order as a tuple."""
        struct = StructDefinition(
            name="Point",
            fields=[
                FieldDefinition(name="y", sol_type=UintType(8)),
                FieldDefinition(name="x", sol_type=UintType(16)),
            ],
        )
        assert isinstance(struct.fields, tuple)
        assert [f.name for f in struct.fields] == ["y", "x"]

    def test_get_field(self):
        """Test getting a field by name."""
        struct = StructDefinition(
            name="Point", fields=[FieldDefinition(name="x", sol_type=UintType(8))]
        )
        assert struct.get_field("x").sol_type == UintType(8)
        assert struct.get_field("z") is None


class TestStructRegistry:
    """Tests for StructRegistry."""

    def test_get(self):
        """Test lookup of registered structs."""
        a = StructDefinition("A")
        b = StructDefinition("B")
        registry = StructRegistry([a, b])

        assert registry.get("A") is a
        assert registry.get_or_raise("B") is b
        assert registry.get("C") is None
        assert "A" in registry
        assert "C" not in registry
        assert len(registry) == 2
        assert registry.list_structs() == ["A", "B"]
        assert list(registry) == [a, b]

    def test_get_or_raise_missing(self):
        """Test that a missing struct raises UnresolvedReferenceError."""
        registry = StructRegistry()
        with pytest.raises(UnresolvedReferenceError) as exc_info:
            registry.get_or_raise("Missing")
        assert exc_info.value.name == "Missing"
        assert "Missing" in str(exc_info.value)

    def test_duplicate(self):
        """Test that registering the same name twice fails."""
        with pytest.raises(DuplicateStructError):
            StructRegistry([StructDefinition("A"), StructDefinition("A")])

    def test_read_only(self):
        """Test that the registry cannot be modified after construction."""
        registry = StructRegistry([StructDefinition("A")])
        with pytest.raises(TypeError):
            registry._structs["B"] = StructDefinition("B")  # type: ignore[index]

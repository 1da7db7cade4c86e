"""Storage slot packing for struct definitions.

Layout rules:

- Value types use only as many bits as they need and share a slot with their
  neighbours. A value that does not fit the rest of a slot starts the next one.
- Fixed-size arrays start a new slot; their elements pack tightly by the same
  rules.
- Mappings, dynamic arrays, bytes and string start a new slot and take exactly
  one slot.
- Structs start a new slot, and whatever follows a struct starts a new slot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from slot_layout.config import LayoutConfig
from slot_layout.errors import RecursionLimitExceededError
from slot_layout.types import (
    SLOT_BITS,
    FixedArrayType,
    InlineStructType,
    SolType,
    StructDefinition,
    StructRefType,
    StructRegistry,
)

logger = logging.getLogger(__name__)


def round_up_to_slot(bits: int) -> int:
    """Round a bit count up to the next slot boundary."""
    return -(-bits // SLOT_BITS) * SLOT_BITS


def slot_count(bits: int) -> int:
    """Return the number of whole slots needed to hold ``bits`` bits."""
    return round_up_to_slot(bits) // SLOT_BITS


@dataclass(frozen=True)
class SlotState:
    """Packing position while walking the fields of a struct.

    ``total_bits`` is everything allocated so far; ``slot_bits_used`` is how
    much of the most recent slot is taken.
    """

    total_bits: int = 0
    slot_bits_used: int = 0

    def aligned(self) -> SlotState:
        """Move to the start of the next fresh slot."""
        return SlotState(round_up_to_slot(self.total_bits), 0)

    def pack(self, bits: int) -> SlotState:
        """Place a value of ``bits`` bits, spilling into the next slot if needed."""
        remaining = SLOT_BITS - self.slot_bits_used
        if bits <= remaining:
            return SlotState(self.total_bits + bits, self.slot_bits_used + bits)
        return SlotState(self.total_bits + remaining + bits, bits)


@dataclass(frozen=True)
class FieldPlacement:
    """Where a top-level struct field starts and how many bits it spans."""

    name: str
    sol_type: SolType
    slot: int
    offset_bits: int
    size_bits: int


class StorageLayout:
    """Computes storage sizes against a fixed StructRegistry."""

    def __init__(self, registry: StructRegistry, config: LayoutConfig | None = None) -> None:
        self.registry = registry
        self.config = config or LayoutConfig()
        # Sizes of structs already laid out; the registry never changes
        self._sizes: dict[StructDefinition, int] = {}

    def struct_size(self, struct: StructDefinition) -> int:
        """Return the number of bits a struct occupies, before final rounding."""
        try:
            return self._struct_bits(struct, ())
        except RecursionError as e:
            raise RecursionLimitExceededError(self.config.max_depth, (struct.name,)) from e

    def struct_slots(self, struct: StructDefinition) -> int:
        """Return the number of slots a struct occupies."""
        return slot_count(self.struct_size(struct))

    def type_size(self, sol_type: SolType) -> int:
        """Return the size in bits of a type on its own, outside any struct.

        A fixed array sized this way gives every element whole slots, unlike
        a fixed array inside a struct, whose elements pack tightly.
        """
        try:
            return self._type_bits(sol_type)
        except RecursionError as e:
            raise RecursionLimitExceededError(self.config.max_depth, (str(sol_type),)) from e

    def field_layout(self, struct: StructDefinition) -> list[FieldPlacement]:
        """Return the slot and bit offset at which each field of a struct starts."""
        return self.struct_layout(struct)[1]

    def struct_layout(self, struct: StructDefinition) -> tuple[int, list[FieldPlacement]]:
        """Return the struct size in bits together with its field placements."""
        chain = self._enter(struct, ())
        placements: list[FieldPlacement] = []
        state = SlotState()
        try:
            for f in struct.fields:
                after, start = self._advance(state, f.sol_type, chain)
                placements.append(
                    FieldPlacement(
                        name=f.name,
                        sol_type=f.sol_type,
                        slot=start // SLOT_BITS,
                        offset_bits=start % SLOT_BITS,
                        size_bits=after.total_bits - start,
                    )
                )
                state = after
        except RecursionError as e:
            raise RecursionLimitExceededError(self.config.max_depth, chain) from e
        self._sizes[struct] = state.total_bits
        return state.total_bits, placements

    def resolve(self, sol_type: StructRefType | InlineStructType) -> StructDefinition:
        """Return the struct a named or inline struct type stands for."""
        if isinstance(sol_type, InlineStructType):
            return sol_type.struct
        logger.debug("resolving struct reference %s", sol_type.name)
        return self.registry.get_or_raise(sol_type.name)

    def _enter(self, struct: StructDefinition, chain: tuple[str, ...]) -> tuple[str, ...]:
        chain = chain + (struct.name,)
        if len(chain) > self.config.max_depth:
            raise RecursionLimitExceededError(self.config.max_depth, chain)
        return chain

    def _struct_bits(self, struct: StructDefinition, chain: tuple[str, ...]) -> int:
        cached = self._sizes.get(struct)
        if cached is not None:
            return cached
        chain = self._enter(struct, chain)
        state = SlotState()
        for f in struct.fields:
            state, _ = self._advance(state, f.sol_type, chain)
        self._sizes[struct] = state.total_bits
        return state.total_bits

    def _advance(
        self, state: SlotState, sol_type: SolType, chain: tuple[str, ...]
    ) -> tuple[SlotState, int]:
        """Place one field. Returns the new state and the bit where the field starts."""
        if sol_type.is_value_type:
            after = state.pack(sol_type.bit_width)
            return after, after.total_bits - sol_type.bit_width

        start = state.aligned()
        if isinstance(sol_type, FixedArrayType):
            return self._repeat(start, sol_type.element, sol_type.length, chain), start.total_bits

        if sol_type.is_dynamic:
            return SlotState(start.total_bits + SLOT_BITS, 0), start.total_bits

        if isinstance(sol_type, (StructRefType, InlineStructType)):
            inner = self._struct_bits(self.resolve(sol_type), chain)
            return SlotState(start.total_bits + inner, 0).aligned(), start.total_bits

        raise TypeError(f"Unsupported type: {sol_type!r}")

    def _repeat(
        self, state: SlotState, element: SolType, count: int, chain: tuple[str, ...]
    ) -> SlotState:
        """Place ``count`` elements back to back.

        The next state depends only on ``slot_bits_used``, so once a value of
        it repeats the remaining iterations advance by a fixed amount per
        period and are skipped in one step.
        """
        history: dict[int, tuple[int, int]] | None = {}
        done = 0
        while done < count:
            if history is not None:
                seen = history.get(state.slot_bits_used)
                if seen is None:
                    history[state.slot_bits_used] = (done, state.total_bits)
                else:
                    period = done - seen[0]
                    cycles = (count - done) // period
                    step = state.total_bits - seen[1]
                    state = SlotState(state.total_bits + cycles * step, state.slot_bits_used)
                    done += cycles * period
                    history = None
                    logger.debug(
                        "skipped %d repetitions of %s (period %d)", cycles * period, element, period
                    )
                    continue
            state, _ = self._advance(state, element, chain)
            done += 1
        return state

    def _type_bits(self, sol_type: SolType) -> int:
        if sol_type.is_value_type:
            return sol_type.bit_width
        if isinstance(sol_type, FixedArrayType):
            # True round-up: an element already filling whole slots gets no extra slot
            return round_up_to_slot(self._type_bits(sol_type.element)) * sol_type.length
        if sol_type.is_dynamic:
            return SLOT_BITS
        if isinstance(sol_type, (StructRefType, InlineStructType)):
            return self._struct_bits(self.resolve(sol_type), ())
        raise TypeError(f"Unsupported type: {sol_type!r}")


def compute_size(
    struct: StructDefinition, registry: StructRegistry, config: LayoutConfig | None = None
) -> int:
    """Return the number of bits ``struct`` occupies given the structs in ``registry``."""
    return StorageLayout(registry, config).struct_size(struct)

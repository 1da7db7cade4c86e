"""Schema class tying struct parsing, registration and layout together."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from slot_layout.config import LayoutConfig
from slot_layout.errors import DuplicateStructError, LayoutError
from slot_layout.layout import FieldPlacement, StorageLayout, slot_count
from slot_layout.parsing import TypeParser
from slot_layout.parsing.source import StructSource, parse_source
from slot_layout.types import FieldDefinition, StructDefinition, StructRegistry

logger = logging.getLogger(__name__)


@dataclass
class StructResult:
    """Outcome of laying out one struct.

    A failed struct carries ``error`` and no sizes.
    """

    name: str
    fields: list[FieldDefinition] = field(default_factory=list)
    bits: int | None = None
    slots: int | None = None
    placements: list[FieldPlacement] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def build_struct(source: StructSource, parser: TypeParser | None = None) -> StructDefinition:
    """Parse the field types of a struct source into a StructDefinition."""
    parser = parser or TypeParser()
    fields = [
        FieldDefinition(name=field_name, sol_type=parser.parse(type_text))
        for field_name, type_text in source.fields
    ]
    return StructDefinition(name=source.name, fields=tuple(fields))


class Schema:
    """Parsed struct definitions with layout computation.

    Construction is two-phase: every struct is parsed first, then all of them
    are registered at once, so layouts can follow references in any direction.
    """

    def __init__(
        self,
        structs: list[StructDefinition],
        config: LayoutConfig | None = None,
        failures: dict[str, str] | None = None,
        order: list[str] | None = None,
    ) -> None:
        """Initialize a schema.

        Args:
            structs: Successfully parsed structs, in declaration order.
            config: Layout settings.
            failures: Struct name to error message for structs that could not
                be parsed.
            order: Declaration order of all struct names, failed ones included.
                Defaults to the order of ``structs``.
        """
        self.config = config or LayoutConfig()
        self.registry = StructRegistry(structs)
        self.layout = StorageLayout(self.registry, self.config)
        self.failures = dict(failures or {})
        self._order = list(order) if order is not None else [s.name for s in structs]

    @classmethod
    def parse(cls, source: str, config: LayoutConfig | None = None) -> Schema:
        """Parse struct source text and create a schema.

        Args:
            source: Text holding one or more ``struct Name { ... }`` definitions.
            config: Layout settings.

        Returns:
            A new Schema instance.

        Raises:
            MalformedStructError: If the text cannot be split into structs.
            DuplicateStructError: If two structs share a name.
        """
        parser = TypeParser()
        structs: list[StructDefinition] = []
        failures: dict[str, str] = {}
        order: list[str] = []

        for struct_source in parse_source(source):
            if struct_source.name in order:
                raise DuplicateStructError(struct_source.name)
            order.append(struct_source.name)
            try:
                structs.append(build_struct(struct_source, parser))
            except LayoutError as e:
                logger.debug("struct %s failed to parse: %s", struct_source.name, e)
                failures[struct_source.name] = str(e)

        return cls(structs, config, failures, order)

    def get_struct(self, name: str) -> StructDefinition:
        """Get a struct by name.

        Raises:
            UnresolvedReferenceError: If the struct is not registered.
        """
        return self.registry.get_or_raise(name)

    def list_structs(self) -> list[str]:
        """List every struct name, including ones that failed to parse."""
        return list(self._order)

    def struct_size(self, name: str) -> int:
        """Return the size in bits of the named struct."""
        return self.layout.struct_size(self.get_struct(name))

    def result(self, name: str) -> StructResult:
        """Lay out one struct, capturing any error instead of raising it."""
        if name in self.failures:
            return StructResult(name=name, error=self.failures[name])

        struct = self.get_struct(name)
        try:
            if self.config.show_fields:
                bits, placements = self.layout.struct_layout(struct)
            else:
                bits, placements = self.layout.struct_size(struct), []
        except LayoutError as e:
            logger.debug("struct %s failed to lay out: %s", name, e)
            return StructResult(name=name, fields=list(struct.fields), error=str(e))

        return StructResult(
            name=name,
            fields=list(struct.fields),
            bits=bits,
            slots=slot_count(bits),
            placements=placements,
        )

    def results(self) -> list[StructResult]:
        """Lay out every struct in declaration order."""
        return [self.result(name) for name in self._order]

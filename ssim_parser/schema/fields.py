"""Fixed-width field layout for SSIM records."""

from dataclasses import dataclass, field
from typing import Dict, Iterator, Tuple

from ssim_parser.errors import SchemaError

# Fields the materializer reads from every decoded record.
REQUIRED_FIELDS: Tuple[str, ...] = (
    "airline_designator",
    "flight_number",
    "service_type",
    "operation_start_date",
    "operation_end_date",
    "operation_days_of_week",
    "departure_station",
    "aircraft_departure_time",
    "utc_local_departure_time_variant",
    "arrival_station",
    "aircraft_arrival_time",
    "utc_local_arrival_time_variant",
    "aircraft_type",
    "aircraft_configuration_version",
    "date_variation",
)


@dataclass(frozen=True)
class FieldSpec:
    """One positional field: its name, width in characters and visibility."""

    name: str
    length: int
    exported: bool = True

    def __post_init__(self) -> None:
        if not self.name:
            raise SchemaError("Field name must be a non-empty string.")
        if self.length < 1:
            raise SchemaError(f"Field {self.name!r} must have a positive length.")


@dataclass(frozen=True)
class Schema:
    """Ordered field layout for one SSIM record version.

    The first field is the single-character record type discriminator and
    ``record_type`` is the literal value it must hold for lines of this
    version.
    """

    version: int
    record_type: str
    fields: Tuple[FieldSpec, ...]
    _offsets: Dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        fields = tuple(self.fields)
        object.__setattr__(self, "fields", fields)
        if not fields:
            raise SchemaError(f"Schema version {self.version} has no fields.")
        if len(self.record_type) != 1:
            raise SchemaError("record_type must be exactly one character.")
        if fields[0].length != 1:
            raise SchemaError("The first field must be the one-character record type.")

        offsets: Dict[str, int] = {}
        cursor = 0
        for spec in fields:
            key = spec.name.lower()
            if key in offsets:
                raise SchemaError(
                    f"Duplicate field {spec.name!r} in schema version {self.version}."
                )
            offsets[key] = cursor
            cursor += spec.length
        object.__setattr__(self, "_offsets", offsets)

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def width(self) -> int:
        return sum(spec.length for spec in self.fields)

    @property
    def exported_names(self) -> Tuple[str, ...]:
        return tuple(spec.name.lower() for spec in self.fields if spec.exported)

    def get_field(self, name: str) -> FieldSpec:
        key = name.lower()
        for spec in self.fields:
            if spec.name.lower() == key:
                return spec
        raise KeyError(name)

    def offset_of(self, name: str) -> int:
        """Return the zero-based character offset where ``name`` starts."""
        return self._offsets[name.lower()]


__all__ = ["FieldSpec", "Schema", "REQUIRED_FIELDS"]

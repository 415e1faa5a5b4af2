"""Positional decoding of fixed-width SSIM lines."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional

from ssim_parser.errors import TruncatedRecordError
from ssim_parser.schema.fields import Schema


@dataclass(frozen=True)
class DecodedRecord:
    """Exported field values of one decoded line, keyed by lower-cased name."""

    values: Mapping[str, str]
    version: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def __getitem__(self, name: str) -> str:
        return self.values[name]

    def __contains__(self, name: object) -> bool:
        return name in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.values.get(name, default)

    @property
    def record_type(self) -> Optional[str]:
        return self.values.get("record_type")

    def as_dict(self) -> Dict[str, Any]:
        return dict(self.values)


def decode(schema: Schema, line: str) -> DecodedRecord:
    """Slice ``line`` field by field according to ``schema``.

    Each slice is stripped of surrounding whitespace. Internal fields still
    advance the cursor but never appear in the result. Raises
    ``TruncatedRecordError`` when the line ends before a field does.
    """
    values: Dict[str, str] = {}
    cursor = 0
    for spec in schema.fields:
        end = cursor + spec.length
        if end > len(line):
            raise TruncatedRecordError(schema.width, len(line), spec.name)
        if spec.exported:
            values[spec.name.lower()] = line[cursor:end].strip()
        cursor = end
    return DecodedRecord(values=values, version=schema.version)


__all__ = ["DecodedRecord", "decode"]

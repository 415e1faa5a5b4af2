"""Explicit registry mapping SSIM version identifiers to schemas."""

import logging
from typing import Dict, List

from ssim_parser.errors import SchemaError, UnknownSchemaError
from ssim_parser.schema.fields import REQUIRED_FIELDS, Schema
from ssim_parser.schema.version3 import VERSION_3

LOGGER = logging.getLogger(__name__)


class SchemaRegistry:
    """Holds one immutable schema per version, registered explicitly."""

    def __init__(self) -> None:
        self._schemas: Dict[int, Schema] = {}

    def register(self, schema: Schema) -> Schema:
        """Add ``schema`` under its version.

        Rejects duplicate versions and schemas that do not export every field
        the materializer needs.
        """
        exported = set(schema.exported_names)
        missing = [name for name in REQUIRED_FIELDS if name not in exported]
        if missing:
            raise SchemaError(
                f"Schema version {schema.version} does not export required fields: "
                + ", ".join(missing)
            )

        if schema.version in self._schemas:
            raise SchemaError(f"Schema version {schema.version} is already registered.")
        self._schemas[schema.version] = schema
        LOGGER.debug(
            "Registered SSIM schema version=%s record_type=%s width=%s",
            schema.version,
            schema.record_type,
            schema.width,
        )
        return schema

    def schema_for(self, version: int) -> Schema:
        try:
            return self._schemas[version]
        except KeyError:
            raise UnknownSchemaError(version) from None

    def versions(self) -> List[int]:
        return sorted(self._schemas)

    def __contains__(self, version: object) -> bool:
        return version in self._schemas


_DEFAULT_REGISTRY = SchemaRegistry()
_DEFAULT_REGISTRY.register(VERSION_3)


def default_registry() -> SchemaRegistry:
    """Return the process-wide registry, pre-populated with version 3."""
    return _DEFAULT_REGISTRY


def schema_for(version: int) -> Schema:
    return _DEFAULT_REGISTRY.schema_for(version)


def supported_versions() -> List[int]:
    return _DEFAULT_REGISTRY.versions()


__all__ = [
    "SchemaRegistry",
    "default_registry",
    "schema_for",
    "supported_versions",
]

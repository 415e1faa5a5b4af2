"""SSIM record layouts and the version registry."""

from ssim_parser.schema.fields import REQUIRED_FIELDS, FieldSpec, Schema
from ssim_parser.schema.registry import (
    SchemaRegistry,
    default_registry,
    schema_for,
    supported_versions,
)
from ssim_parser.schema.version3 import VERSION_3

__all__ = [
    "FieldSpec",
    "Schema",
    "REQUIRED_FIELDS",
    "SchemaRegistry",
    "default_registry",
    "schema_for",
    "supported_versions",
    "VERSION_3",
]

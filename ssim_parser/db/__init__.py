"""Database access layer."""

from ssim_parser.db.client import DatabaseClient

__all__ = ["DatabaseClient"]

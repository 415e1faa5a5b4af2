"""Persistence of expanded flight occurrences."""

from ssim_parser.persistence.occurrences import (
    count_occurrences,
    ensure_occurrences_table,
    upsert_occurrences,
)

__all__ = ["count_occurrences", "ensure_occurrences_table", "upsert_occurrences"]

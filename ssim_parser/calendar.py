"""Calendar expansion of SSIM operating periods."""

from datetime import date, datetime, timedelta
from typing import AbstractSet, FrozenSet, List

from ssim_parser.errors import BadDateError

SSIM_DATE_FORMAT = "%d%b%y"
SSIM_DATE_LENGTH = 7


def parse_ssim_date(value: str, field: str = "date") -> date:
    """Parse an SSIM ``DDMMMYY`` date such as ``01JAN24``.

    Two-digit years pivot like ``%y``: 00-69 is 20xx, 70-99 is 19xx. The
    "until further notice" end date ``00XXX00`` is not a date and is rejected
    like any other malformed value.
    """
    text = (value or "").strip().upper()
    # strptime would also take a one-digit day or non-ASCII digits.
    if len(text) != SSIM_DATE_LENGTH or not text.isascii():
        raise BadDateError(field, value)
    try:
        return datetime.strptime(text, SSIM_DATE_FORMAT).date()
    except ValueError:
        raise BadDateError(field, value) from None


def weekdays_from_mask(mask: str) -> FrozenSet[int]:
    """Return the ISO weekday numbers (Monday=1) written in a days-of-week field.

    Each operated position holds its own weekday digit, so ``"1 3 5 7"`` and
    ``"1357"`` both yield ``{1, 3, 5, 7}``. Placeholders are ignored.
    """
    return frozenset(int(ch) for ch in mask if ch in "1234567")


def expand(start: date, end: date, weekdays: AbstractSet[int]) -> List[date]:
    """Return every date from ``start`` to ``end`` inclusive whose ISO weekday is in ``weekdays``."""
    if not weekdays or start > end:
        return []

    dates: List[date] = []
    current = start
    one_day = timedelta(days=1)
    while current <= end:
        if current.isoweekday() in weekdays:
            dates.append(current)
        current += one_day
    return dates


__all__ = ["parse_ssim_date", "weekdays_from_mask", "expand"]

"""Normalization of heterogeneous spreadsheet date text."""

import logging
import re
from datetime import date, datetime
from typing import Any

from dateutil import parser

from app.services.sheets import cell_text

logger = logging.getLogger(__name__)

DATE_LIKE_PATTERN = re.compile(r"^\d{1,4}[/-]\d{1,2}[/-]\d{1,4}$")


def _expand_year(year: int) -> int:
    return 2000 + year if year < 100 else year


def _parse_short(parts: list[str], date_order: str) -> date | None:
    """Read D/M/Y or M/D/Y from already-split numeric tokens."""
    try:
        first, second, year = (int(p) for p in parts)
        if date_order == "MDY":
            month, day = first, second
        else:
            day, month = first, second
        return date(_expand_year(year), month, day)
    except ValueError:
        return None


# Two distinct fill-in dates expose fields dateutil took from the default
# rather than from the text ("Jan 2024" has no day, "10:30" has no date)
_FILL_DEFAULTS = (datetime(1900, 1, 1), datetime(1904, 2, 2))


def _parse_direct(text: str, dayfirst: bool = False, yearfirst: bool = False) -> date | None:
    """Parse free-form date text, returning None when it is not a complete date."""
    # dateutil happily turns bare words like "Mon" or "May" into dates
    if not any(ch.isdigit() for ch in text):
        return None
    # dayfirst together with yearfirst would read 2024/01/05 as Y/D/M
    dayfirst = dayfirst and not yearfirst
    try:
        first, second = (
            parser.parse(text, dayfirst=dayfirst, yearfirst=yearfirst, default=default).date()
            for default in _FILL_DEFAULTS
        )
    except (ValueError, OverflowError, parser.ParserError):
        return None
    if first != second:
        return None
    return first


def parse_date(value: Any, date_order: str = "DMY") -> date | None:
    """Parse a date cell.

    Rules, in order:

    1. ``date``/``datetime`` values pass through.
    2. Slash-separated text with two short leading tokens (``15/01/2024``)
       is read in ``date_order``. When that reading is impossible
       (``01/15/2024`` as DMY) or the text carries more than the three
       tokens (``05/01/2024 10:30``) the whole string goes to dateutil,
       still preferring ``date_order``.
    3. Dash-separated text must have three tokens and is parsed directly,
       year-first when it leads with a four digit year.
    4. Anything else is handed to dateutil.

    Returns None for anything that does not resolve to a complete real
    date. Partial text such as ``Jan 2024`` is rejected rather than
    completed from today's date. The short-token rule keys on token
    length only, so ``03/04/2024`` is always read in ``date_order``;
    it cannot be disambiguated from the text.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = cell_text(value)
    if not text:
        return None
    dayfirst = date_order == "DMY"

    if "/" in text:
        parts = [p.strip() for p in text.split("/")]
        if len(parts) == 3 and len(parts[0]) <= 2 and len(parts[1]) <= 2:
            parsed = _parse_short(parts, date_order)
            if parsed is not None:
                return parsed
        return _parse_direct(text, dayfirst=dayfirst, yearfirst=len(parts[0]) == 4)

    if "-" in text:
        parts = text.split("-")
        if len(parts) != 3:
            return None
        return _parse_direct(text, dayfirst=dayfirst, yearfirst=len(parts[0].strip()) == 4)

    return _parse_direct(text, dayfirst=dayfirst)


def is_date_like(text: str) -> bool:
    """Whether a header label looks like a calendar date."""
    text = text.strip()
    if not text:
        return False
    if DATE_LIKE_PATTERN.match(text):
        return True
    return parse_date(text) is not None

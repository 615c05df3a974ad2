"""Conversion between raw spreadsheet rows and ``Contract`` records."""
from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence

from contract_tracker.core.headers import COLUMN_MAP, build_header_map, normalize_header
from contract_tracker.core.models import (
    DATE_FIELDS,
    NUMERIC_FIELDS,
    Contract,
    RawRow,
    derive_status,
)

logger = logging.getLogger(__name__)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_LEADING_NUMBER = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

# Display formats a text date cell may hold, tried in order. The slash pair
# is ambiguous, so its order is chosen per sheet (month first by default).
_YEAR_FIRST_FORMATS = ["%Y-%m-%d", "%Y/%m/%d"]
_MONTH_FIRST_FORMATS = ["%m/%d/%Y", "%d/%m/%Y"]
_DAY_FIRST_FORMATS = ["%d/%m/%Y", "%m/%d/%Y"]
_DASHED_FORMATS = ["%d-%m-%Y"]

# Day zero of spreadsheet serial dates.
SERIAL_EPOCH = date(1899, 12, 30)


def _date_formats(day_first: bool) -> List[str]:
    slashed = _DAY_FIRST_FORMATS if day_first else _MONTH_FIRST_FORMATS
    return _YEAR_FIRST_FORMATS + slashed + _DASHED_FORMATS


def as_text(value: Any) -> str:
    """Render a cell value as trimmed text; whole floats lose their ``.0``."""

    if value is None:
        return ""
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_number(value: Any) -> float:
    """Parse the leading decimal number of a cell, falling back to ``0.0``.

    Text such as ``"50%"`` yields ``50.0``. Booleans, blanks, and anything
    that is not finite all become ``0.0`` so decoded records never carry NaN.
    """

    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        try:
            number = float(value)
        except (OverflowError, ValueError):
            return 0.0
    elif isinstance(value, str):
        match = _LEADING_NUMBER.match(value.strip())
        if not match:
            if value.strip():
                logger.debug("Unparsable number %r replaced with 0", value)
            return 0.0
        number = float(match.group(0))
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def _serial_to_date(value: float) -> date | None:
    if not math.isfinite(value) or value < 1:
        return None
    try:
        return SERIAL_EPOCH + timedelta(days=int(value))
    except OverflowError:
        return None


def _parse_date(value: Any, day_first: bool = False) -> date | None:
    if isinstance(value, datetime):
        # Aware timestamps are read in UTC so the calendar day does not
        # depend on the reader's timezone.
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float, Decimal)):
        return _serial_to_date(float(value))
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        return _parse_date(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except (OverflowError, ValueError):
        pass
    for fmt in _date_formats(day_first):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def format_date(value: Any, day_first: bool = False) -> str:
    """Normalize a date cell to ``YYYY-MM-DD`` or ``''`` when it cannot be read.

    Numbers are spreadsheet serial dates (days since 1899-12-30, time of day
    dropped). Slash-separated text is read month first unless ``day_first``
    is set. Unparseable text that already looks like ``YYYY-MM-DD`` is kept
    as-is.
    """

    if value is None or value == "" or isinstance(value, bool):
        return ""
    parsed = _parse_date(value, day_first)
    if parsed is None:
        if isinstance(value, str) and _ISO_DATE.match(value.strip()):
            return value.strip()
        logger.debug("Unparsable date %r replaced with ''", value)
        return ""
    return f"{parsed.year:04d}-{parsed.month:02d}-{parsed.day:02d}"


def decode_row(
    raw_row: Sequence[Any],
    headers: Sequence[Any],
    column_map: Mapping[str, str] = COLUMN_MAP,
    day_first: bool = False,
) -> Contract:
    """Decode a raw row into a ``Contract``; never raises on malformed cells.

    ``day_first`` picks how slash-separated text dates are read; see
    ``format_date``.
    """

    header_map = build_header_map(column_map)
    values: Dict[str, Any] = {}

    for index, header in enumerate(headers):
        field_name = header_map.get(normalize_header(header))
        if not field_name:
            continue
        values[field_name] = raw_row[index] if index < len(raw_row) else ""

    for field_name, value in list(values.items()):
        if field_name in NUMERIC_FIELDS or field_name in DATE_FIELDS:
            if isinstance(value, str):
                values[field_name] = value.strip()
        else:
            values[field_name] = as_text(value)

    for field_name in NUMERIC_FIELDS:
        values[field_name] = parse_number(values.get(field_name))
    for field_name in DATE_FIELDS:
        values[field_name] = format_date(values.get(field_name), day_first)

    cui = values.get("cui", "")
    progress = values["progress"]
    values["id"] = cui
    values["status"] = derive_status(progress)
    values["total_amount"] = values["current_amount"]
    values["execution_progress"] = progress
    return Contract.from_dict(values)


def encode_row(
    data: Mapping[str, Any] | Contract,
    headers: Sequence[Any],
    column_map: Mapping[str, str] = COLUMN_MAP,
) -> RawRow:
    """Build a row aligned with ``headers``; unmapped or missing fields are blank."""

    if isinstance(data, Contract):
        data = data.to_dict()
    header_map = build_header_map(column_map)

    row: RawRow = []
    for header in headers:
        field_name = header_map.get(normalize_header(header))
        value = data.get(field_name) if field_name else None
        if isinstance(value, Enum):
            value = value.value
        row.append("" if value is None else value)
    return row

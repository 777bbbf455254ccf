"""Leaf conversion table: scalar kinds, predicates and text conversions.

Predicates take a classified shape and look through one ``OptionalShape``
layer, so ``is_numeric`` holds for both ``int`` and ``Optional[int]``.
Conversions assume the JSON text is well-formed for its node kind and fail
with ``LeafConversionError`` instead of truncating or saturating.
"""
from __future__ import annotations
import math
import re
import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

import numpy as np

from .errors import LeafConversionError
from .models import (
    DateTimeOffset, INTEGER_KINDS, NUMERIC_KINDS, OptionalShape,
    ScalarKind, ScalarShape,
)

# descriptor -> scalar kind
SCALAR_TYPES: Dict[Any, ScalarKind] = {
    np.int8: ScalarKind.INT8,
    np.int16: ScalarKind.INT16,
    np.int32: ScalarKind.INT32,
    np.int64: ScalarKind.INT64,
    int: ScalarKind.INT64,
    np.uint8: ScalarKind.BYTE,
    np.uint16: ScalarKind.UINT16,
    np.uint32: ScalarKind.UINT32,
    np.uint64: ScalarKind.UINT64,
    np.float32: ScalarKind.SINGLE,
    np.float64: ScalarKind.DOUBLE,
    float: ScalarKind.DOUBLE,
    Decimal: ScalarKind.DECIMAL,
    str: ScalarKind.STRING,
    bool: ScalarKind.BOOLEAN,
    datetime: ScalarKind.DATE,
    date: ScalarKind.DATE,
    DateTimeOffset: ScalarKind.DATE_WITH_OFFSET,
    uuid.UUID: ScalarKind.IDENTIFIER,
}

_INT_DTYPES = {
    ScalarKind.INT8: np.int8,
    ScalarKind.INT16: np.int16,
    ScalarKind.INT32: np.int32,
    ScalarKind.INT64: np.int64,
    ScalarKind.BYTE: np.uint8,
    ScalarKind.UINT16: np.uint16,
    ScalarKind.UINT32: np.uint32,
    ScalarKind.UINT64: np.uint64,
}
_SINGLE_MAX = float(np.finfo(np.float32).max)

# round-trip ISO-8601 first, then date-only; first match wins
_ROUND_TRIP_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,7}))?(Z|[+-]\d{2}:\d{2})?", re.ASCII
)
_DATE_ONLY_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})", re.ASCII)
_GUID_RE = re.compile(r"[0-9a-fA-F]{8}-(?:[0-9a-fA-F]{4}-){3}[0-9a-fA-F]{12}")


# ── predicates ────────────────────────────────────────────────

def _scalar_kind(shape: Any) -> Optional[ScalarKind]:
    if isinstance(shape, OptionalShape):
        shape = shape.inner
    if isinstance(shape, ScalarShape):
        return shape.kind
    return None


def is_numeric(shape: Any) -> bool:
    return _scalar_kind(shape) in NUMERIC_KINDS


def is_string(shape: Any) -> bool:
    return _scalar_kind(shape) is ScalarKind.STRING


def is_date(shape: Any) -> bool:
    return _scalar_kind(shape) is ScalarKind.DATE


def is_date_with_offset(shape: Any) -> bool:
    return _scalar_kind(shape) is ScalarKind.DATE_WITH_OFFSET


def is_identifier(shape: Any) -> bool:
    return _scalar_kind(shape) is ScalarKind.IDENTIFIER


def is_boolean(shape: Any) -> bool:
    return _scalar_kind(shape) is ScalarKind.BOOLEAN


# ── numbers ───────────────────────────────────────────────────

def to_number(kind: ScalarKind, python_type: Any, text: str) -> Any:
    """Decimal literal text -> value of ``python_type``; fails on overflow."""
    if kind in INTEGER_KINDS:
        return _to_integer(kind, python_type, text)
    if kind is ScalarKind.DECIMAL:
        return _to_decimal(text)
    try:
        value = float(text)
    except ValueError as e:
        raise LeafConversionError(f"{text!r} is not a number") from e
    if kind is ScalarKind.SINGLE:
        if math.isinf(value) or abs(value) > _SINGLE_MAX:
            raise LeafConversionError(f"{text} overflows single-precision float")
        return python_type(value)
    if kind is ScalarKind.DOUBLE:
        if math.isinf(value):
            raise LeafConversionError(f"{text} overflows double-precision float")
        return python_type(value)
    raise LeafConversionError(f"{kind.value} is not a numeric kind")


def _to_decimal(text: str) -> Decimal:
    try:
        return Decimal(text)
    except InvalidOperation as e:
        raise LeafConversionError(f"{text!r} is not a number") from e


def _to_integer(kind: ScalarKind, python_type: Any, text: str) -> Any:
    exact = _to_decimal(text)
    if not exact.is_finite() or exact != exact.to_integral_value():
        raise LeafConversionError(f"{text} is not an integral value")
    # reject before materializing huge exponents such as 1e999999
    if exact and exact.adjusted() > 20:
        raise LeafConversionError(f"{text} overflows {kind.value}")
    value = int(exact)
    bounds = np.iinfo(_INT_DTYPES[kind])
    if value < int(bounds.min) or value > int(bounds.max):
        raise LeafConversionError(
            f"{text} overflows {kind.value} (range {bounds.min}..{bounds.max})"
        )
    return python_type(value)


# ── dates ─────────────────────────────────────────────────────

def _zone(text: Optional[str]) -> Optional[timezone]:
    if text is None:
        return None
    if text == "Z":
        return timezone.utc
    sign = -1 if text[0] == "-" else 1
    hours, minutes = int(text[1:3]), int(text[4:6])
    if minutes >= 60:
        raise ValueError("offset minutes out of range")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def _parse_temporal(text: str) -> Optional[datetime]:
    m = _ROUND_TRIP_RE.fullmatch(text)
    if m:
        year, month, day, hour, minute, second, fraction, zone = m.groups()
        # 7 digits of 100ns ticks at most; keep microseconds
        micro = int((fraction or "").ljust(7, "0")[:6])
        try:
            return datetime(
                int(year), int(month), int(day), int(hour), int(minute), int(second),
                micro, tzinfo=_zone(zone),
            )
        except ValueError:
            return None
    m = _DATE_ONLY_RE.fullmatch(text)
    if m:
        try:
            return datetime(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            return None
    return None


def parse_date(text: str, python_type: Any = datetime) -> Any:
    value = _parse_temporal(text)
    if value is None:
        raise LeafConversionError(f'parsing of date value "{text}" failed')
    if python_type is date:
        return value.date()
    return value


def parse_date_with_offset(text: str) -> datetime:
    value = _parse_temporal(text)
    if value is None:
        raise LeafConversionError(f'parsing of date time offset value "{text}" failed')
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def format_date(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def format_round_trip(value: datetime) -> str:
    """Round-trip text with 6 fraction digits and a Z or +HH:MM / -HH:MM suffix.

    The suffix has minute resolution: offset seconds are dropped, so
    +00:00:30 is written as +00:00 and -00:01:30 as -00:01.
    """
    text = (
        f"{format_date(value)}T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
        f".{value.microsecond:06d}"
    )
    offset = value.utcoffset()
    if offset is None:
        return text
    if not offset:
        return text + "Z"
    seconds = int(offset.total_seconds())
    sign = "-" if seconds < 0 else "+"
    hours, minutes = divmod(abs(seconds) // 60, 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"


def is_midnight(value: datetime) -> bool:
    return (value.hour, value.minute, value.second, value.microsecond) == (0, 0, 0, 0)


# ── identifiers / misc ────────────────────────────────────────

def parse_identifier(text: str) -> uuid.UUID:
    if not _GUID_RE.fullmatch(text):
        raise LeafConversionError(f'parsing of identifier value "{text}" failed')
    return uuid.UUID(text)


def to_boolean(python_type: Any, value: bool) -> Any:
    return python_type(value)

"""Parsers: transforms from text to richer values.

Each parser decodes its base schema (``string`` by default), then parses the
text. A parse error is a decode failure ``<value> did not satisfy <parser>``.
Encoding formats the value back to text.

Example:
    >>> codec = Codec(union(number_from_string(), string))
    >>> codec.decode("1")
    DecodeSuccess(value=1.0)
    >>> codec.encode(2)
    '2'
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Union

from ..codec.decoder import NAN_WARNING
from ..codec.result import DecodeResult, success, unsatisfied, warning
from ..codec.schema import Schema, TransformSchema, number, string
from .builtins import instance_of

PARSE_FLOAT = "parseFloat"
PARSE_INT = "parseInt"
PARSE_DATETIME = "parseDateTime"


def format_number(value: Union[int, float]) -> str:
    """Render a number as text; integral floats lose their ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value) if isinstance(value, int) else repr(value)


def _is_plain(text: str) -> bool:
    # Python number syntax minus digit separators, padding and non-ASCII digits
    return text.isascii() and "_" not in text and text == text.strip()


def _parse_float(text: str) -> DecodeResult:
    if not _is_plain(text):
        return unsatisfied(text, PARSE_FLOAT)
    try:
        value = float(text)
    except ValueError:
        return unsatisfied(text, PARSE_FLOAT)
    if math.isnan(value):
        return warning(NAN_WARNING, value)
    return success(value)


def _parse_int(text: str) -> DecodeResult:
    if not _is_plain(text):
        return unsatisfied(text, PARSE_INT)
    try:
        return success(int(text, 10))
    except ValueError:
        return unsatisfied(text, PARSE_INT)


def _parse_datetime(text: str) -> DecodeResult:
    try:
        return success(datetime.fromisoformat(text))
    except ValueError:
        return unsatisfied(text, PARSE_DATETIME)


def number_from_string(base: Schema = string) -> TransformSchema:
    """Number carried as text, e.g. ``"1.5"``.

    ``"nan"`` parses to NaN with the number schema's warning.
    """
    return TransformSchema(base, number, _parse_float, format_number, PARSE_FLOAT)


def integer_from_string(base: Schema = string) -> TransformSchema:
    """Base-10 integer carried as text, e.g. ``"42"``."""
    return TransformSchema(base, number, _parse_int, _format_int, PARSE_INT)


def datetime_from_string(base: Schema = string) -> TransformSchema:
    """ISO 8601 timestamp carried as text, decoded to ``datetime``."""
    return TransformSchema(base, instance_of(datetime), _parse_datetime, _format_datetime, PARSE_DATETIME)


def _format_int(value: Any) -> str:
    return str(int(value))


def _format_datetime(value: datetime) -> str:
    return value.isoformat()

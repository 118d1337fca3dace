"""Ready-made data types for schemacodec.

This module provides declared types backed by the provider registry and
transform-based parsers for values carried as text.
"""

from __future__ import annotations

from .builtins import INSTANCE_OF, SET, enum_, instance_of, register_builtins, set_of
from .parsers import datetime_from_string, format_number, integer_from_string, number_from_string

__all__ = [
    # Declared types
    "instance_of",
    "set_of",
    "enum_",
    "register_builtins",
    "INSTANCE_OF",
    "SET",
    # Parsers
    "number_from_string",
    "integer_from_string",
    "datetime_from_string",
    "format_number",
]

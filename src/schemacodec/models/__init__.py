"""Pydantic model support for schemacodec.

This module derives schemas from Pydantic models so that model classes can be
decoded and encoded with the same compiled codecs as hand-written schemas.
"""

from __future__ import annotations

from .introspect import schema_from_annotation, schema_from_model

__all__ = [
    "schema_from_model",
    "schema_from_annotation",
]

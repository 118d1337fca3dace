"""Utility functions for schemacodec.

This module provides schema description helpers.
"""

from __future__ import annotations

from .describe import describe

__all__ = [
    "describe",
]

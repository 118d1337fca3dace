"""Schema codec compiler.

This module provides the schema model and the compilers turning a schema into
a validating decoder, an encoder and a structural recognizer.
"""

from __future__ import annotations

from .codec import Codec, codec_for
from .decoder import compile_decoder
from .encoder import compile_encoder
from .guard import compile_guard
from .registry import Capability, ProviderRegistry, default_registry
from .result import (
    MISSING,
    DecodeFailure,
    DecodeResult,
    DecodeSuccess,
    DecodeWarning,
    failure,
    render_value,
    success,
    warning,
)
from .schema import Field, PrimitiveKind, Schema, Severity

__all__ = [
    "Codec",
    "codec_for",
    "compile_decoder",
    "compile_encoder",
    "compile_guard",
    "Capability",
    "ProviderRegistry",
    "default_registry",
    "DecodeResult",
    "DecodeSuccess",
    "DecodeWarning",
    "DecodeFailure",
    "MISSING",
    "success",
    "warning",
    "failure",
    "render_value",
    "Schema",
    "Field",
    "PrimitiveKind",
    "Severity",
]

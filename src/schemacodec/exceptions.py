"""Exception hierarchy for schemacodec.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from SchemacodecError for easy catching of any
schemacodec-specific error.

Decode failures are ordinary values (see ``schemacodec.codec.result``); they only
become exceptions through ``Codec.parse_or_raise`` and ``Codec.decode_or_raise``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .codec.result import DecodeFailure


class SchemacodecError(Exception):
    """Base exception for all schemacodec errors."""

    pass


class SchemaError(SchemacodecError):
    """Raised when a schema is invalid or cannot be built.

    Examples:
        - Duplicate field names in a struct
        - A lazy schema that references itself while resolving
        - A pydantic annotation with no schema counterpart
    """

    pass


class ConfigurationError(SchemacodecError):
    """Raised at compile time when a declared type has no registered provider.

    This is a deterministic, data-independent failure: it blocks codec
    construction entirely and is never reported as a decode failure.
    """

    pass


class ProviderAlreadyRegisteredError(ConfigurationError):
    """Raised when registering a provider for a (capability, type id) pair twice."""

    pass


class EncodeError(SchemacodecError):
    """Raised when encoding a value fails.

    Examples:
        - No union member recognizes the value
        - A required struct field is missing
        - A tuple or array value is not a sequence
    """

    pass


class DecodeError(SchemacodecError):
    """Raised when a decode failure is converted into an exception.

    Examples:
        - ``parse_or_raise`` received invalid JSON text
        - ``parse_or_raise`` decoded the input to a failure

    Attributes:
        result: The decode failure that caused the error, if any
    """

    def __init__(self, message: str, result: Optional[DecodeFailure] = None) -> None:
        super().__init__(message)
        self.result = result

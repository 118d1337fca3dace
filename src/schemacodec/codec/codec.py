"""Codec facade: compiled decoder, encoder and recognizer for one schema.

A Codec is compiled once and is safe to share between threads: it holds only
immutable compiled closures.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Generic, Optional, TypeVar, Union

from ..config import CodecConfig
from ..exceptions import DecodeError
from .decoder import compile_decoder
from .encoder import compile_encoder
from .guard import compile_guard
from .registry import ProviderRegistry
from .result import DecodeFailure, DecodeResult, DecodeWarning
from .schema import Schema

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Codec(Generic[T]):
    """Decode/encode pair for a schema plus convenience helpers.

    Construction compiles everything up front, so a declared type without a
    provider fails here with ConfigurationError rather than at decode time.

    Attributes:
        schema: Schema the codec was compiled from
        config: JSON rendering configuration used by ``stringify``

    Example:
        >>> from schemacodec.codec import schema as S
        >>> Person = Codec(S.struct({"firstName": S.string, "lastName": S.string}))
        >>> person = Person.of({"firstName": "Michael", "lastName": "Arnaldi"})
        >>> Person.stringify(person)
        '{"firstName":"Michael","lastName":"Arnaldi"}'
        >>> Person.parse_or_raise('{"firstName":"Michael","lastName":"Arnaldi"}')
        {'firstName': 'Michael', 'lastName': 'Arnaldi'}
    """

    def __init__(
        self,
        schema: Schema,
        registry: Optional[ProviderRegistry] = None,
        config: Optional[CodecConfig] = None,
    ) -> None:
        """Compile a codec.

        Args:
            schema: Schema to compile
            registry: Provider registry for declared types (default: process-wide)
            config: JSON rendering configuration. If None, uses default config.

        Raises:
            ConfigurationError: If a declared type has no provider
        """
        self.schema = schema
        self.config = config if config is not None else CodecConfig()
        self._decode = compile_decoder(schema, registry)
        self._encode = compile_encoder(schema, registry)
        self._guard = compile_guard(schema, registry)
        logger.debug("Compiled codec for %s", type(schema).__name__)

    def decode(self, value: Any) -> DecodeResult[T]:
        """Validate and transform an untyped value."""
        return self._decode(value)

    def encode(self, value: T) -> Any:
        """Serialize a value to its external representation.

        Raises:
            EncodeError: If the value does not have the schema's shape
        """
        return self._encode(value)

    def of(self, value: T) -> T:
        """Trusted construction: return ``value`` as-is, without validation.

        Use only when the caller can prove the value already satisfies the schema.
        """
        return value

    def is_(self, value: Any) -> bool:
        """Structural check that ``value`` has the decoded shape (refinements ignored)."""
        return self._guard(value)

    def stringify(self, value: T) -> str:
        """Encode ``value`` and render it as JSON text."""
        return json.dumps(self.encode(value), **self.config.json_dumps_kwargs())

    def decode_or_raise(self, value: Any) -> T:
        """Decode ``value``; raise on failure, return the value on success or warning.

        Raises:
            DecodeError: If decoding fails; ``error.result`` holds the failure
        """
        result = self.decode(value)
        if isinstance(result, DecodeFailure):
            raise DecodeError(result.render(), result=result)
        if isinstance(result, DecodeWarning):
            logger.debug("Decoded with warning: %s", result.render())
        return result.value

    def parse_or_raise(self, text: Union[str, bytes]) -> T:
        """Parse JSON text and decode it.

        Warnings never abort: the decoded value is returned.

        Raises:
            DecodeError: If the text is not valid JSON or decoding fails
        """
        try:
            raw = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as err:
            raise DecodeError(f"Invalid JSON: {err}") from err
        return self.decode_or_raise(raw)

    def __repr__(self) -> str:
        return f"Codec({type(self.schema).__name__})"


def codec_for(
    schema: Schema,
    registry: Optional[ProviderRegistry] = None,
    config: Optional[CodecConfig] = None,
) -> Codec[Any]:
    """Compile a Codec for ``schema``; see ``Codec``."""
    return Codec(schema, registry=registry, config=config)

"""Provider registry for declared types.

A ``DeclareSchema`` is opaque to the compilers: its decoder, encoder and
structural recognizer come from factories registered under the schema's type
id. Registration happens during a single-threaded initialization phase; the
compilers only read the registry, once per compilation.

A factory is called as ``factory(metadata, *compiled_type_parameters)`` and
returns the compiled function for its capability:

- DECODER: ``value -> DecodeResult``
- ENCODER: ``value -> external value``
- GUARD: ``value -> bool``
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..exceptions import ConfigurationError, ProviderAlreadyRegisteredError

logger = logging.getLogger(__name__)

ProviderFactory = Callable[..., Callable[[Any], Any]]


class Capability(str, enum.Enum):
    """What a provider supplies for a declared type."""

    DECODER = "Decoder"
    ENCODER = "Encoder"
    GUARD = "Guard"


class ProviderRegistry:
    """Append-only mapping from (capability, type id) to provider factory.

    Example:
        >>> registry = ProviderRegistry()
        >>> registry.provide(
        ...     "acme/point",
        ...     decoder=lambda meta: decode_point,
        ...     encoder=lambda meta: encode_point,
        ...     guard=lambda meta: lambda value: isinstance(value, Point),
        ... )
        >>> codec = Codec(declare("acme/point"), registry=registry)
    """

    def __init__(self) -> None:
        self._providers: Dict[Tuple[Capability, str], ProviderFactory] = {}

    def register(self, capability: Capability, type_id: str, factory: ProviderFactory) -> None:
        """Register ``factory`` for ``capability`` of ``type_id``.

        Args:
            capability: Capability supplied by the factory
            type_id: Declared type identifier
            factory: Callable building the compiled function

        Raises:
            ProviderAlreadyRegisteredError: If the pair is already registered
        """
        key = (Capability(capability), type_id)
        if key in self._providers:
            raise ProviderAlreadyRegisteredError(
                f"{key[0].value} provider for data type {type_id} is already registered"
            )
        self._providers[key] = factory
        logger.debug("Registered %s provider for %s", key[0].value, type_id)

    def provide(
        self,
        type_id: str,
        *,
        decoder: Optional[ProviderFactory] = None,
        encoder: Optional[ProviderFactory] = None,
        guard: Optional[ProviderFactory] = None,
    ) -> None:
        """Register any combination of capabilities for ``type_id`` in one call."""
        for capability, factory in (
            (Capability.DECODER, decoder),
            (Capability.ENCODER, encoder),
            (Capability.GUARD, guard),
        ):
            if factory is not None:
                self.register(capability, type_id, factory)

    def resolve(self, capability: Capability, type_id: str) -> ProviderFactory:
        """Look up the factory for ``capability`` of ``type_id``.

        Raises:
            ConfigurationError: If nothing is registered for the pair
        """
        capability = Capability(capability)
        try:
            return self._providers[(capability, type_id)]
        except KeyError:
            raise ConfigurationError(
                f"Missing support for {capability.value} compiler, data type {type_id}"
            ) from None

    def is_registered(self, capability: Capability, type_id: str) -> bool:
        return (Capability(capability), type_id) in self._providers

    def type_ids(self) -> List[str]:
        """List every type id with at least one provider, in registration order."""
        return list(dict.fromkeys(type_id for _capability, type_id in self._providers))

    def copy(self) -> ProviderRegistry:
        """Independent registry seeded with this registry's providers."""
        clone = ProviderRegistry()
        clone._providers = dict(self._providers)
        return clone

    def __len__(self) -> int:
        return len(self._providers)


# Process-wide registry used when no registry is passed to a compiler.
# Built-in declared types are registered on it by ``schemacodec.data.builtins``.
default_registry = ProviderRegistry()

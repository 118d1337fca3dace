"""Declared types backed by the provider registry.

The providers below are registered on ``default_registry`` when this module is
imported, which happens on ``import schemacodec``. To compile these types
against a custom registry, seed it with ``register_builtins(registry)`` or
start from ``default_registry.copy()``.
"""

from __future__ import annotations

import enum
from typing import Any, Type

from ..codec.decoder import Decoder
from ..codec.encoder import Encoder
from ..codec.guard import Guard, is_sequence
from ..codec.registry import ProviderRegistry, default_registry
from ..codec.result import (
    DecodeFailure,
    DecodeResult,
    DecodeWarning,
    success,
    unsatisfied,
)
from ..codec.schema import DeclareSchema, LiteralSchema, TransformSchema, UnionSchema

INSTANCE_OF = "schemacodec/instanceOf"
SET = "schemacodec/set"


def instance_of(cls: type) -> DeclareSchema:
    """Schema accepting instances of ``cls``, passed through unchanged.

    Mostly useful as the ``to`` schema of a transform producing objects.
    """
    return DeclareSchema(INSTANCE_OF, cls)


def set_of(item: Any) -> DeclareSchema:
    """Schema decoding a JSON array into a ``frozenset`` of ``item`` values.

    Duplicates collapse silently; encoding yields a list.
    """
    return DeclareSchema(SET, None, (item,))


def enum_(enum_class: Type[enum.Enum]) -> TransformSchema:
    """Schema decoding member values into members of ``enum_class``.

    Example:
        >>> class Priority(enum.Enum):
        ...     LOW = 1
        ...     HIGH = 2
        >>> Codec(enum_(Priority)).decode(2)
        DecodeSuccess(value=<Priority.HIGH: 2>)
    """
    members = UnionSchema(tuple(LiteralSchema(member.value) for member in enum_class))
    return TransformSchema(
        base=members,
        to=instance_of(enum_class),
        forward=lambda value: success(enum_class(value)),
        inverse=lambda member: member.value,
        name=enum_class.__name__,
    )


# Providers


def _instance_decoder(cls: type) -> Decoder:
    descriptor = f"is({cls.__name__})"

    def decode(value: Any) -> DecodeResult:
        if isinstance(value, cls):
            return success(value)
        return unsatisfied(value, descriptor)

    return decode


def _instance_encoder(cls: type) -> Encoder:
    return lambda value: value


def _instance_guard(cls: type) -> Guard:
    return lambda value: isinstance(value, cls)


def _set_decoder(_metadata: Any, item: Decoder) -> Decoder:
    def decode(value: Any) -> DecodeResult:
        if not is_sequence(value):
            return unsatisfied(value, "is(sequence)")
        output = []
        first = None
        for index, element in enumerate(value):
            result = item(element)
            if isinstance(result, DecodeFailure):
                return result.prefixed(index)
            if isinstance(result, DecodeWarning) and first is None:
                first = result.prefixed(index)
            output.append(result.value)
        decoded = frozenset(output)
        if first is not None:
            return DecodeWarning(first.path, first.message, decoded)
        return success(decoded)

    return decode


def _set_encoder(_metadata: Any, item: Encoder) -> Encoder:
    return lambda value: [item(element) for element in value]


def _set_guard(_metadata: Any, item: Guard) -> Guard:
    return lambda value: isinstance(value, (set, frozenset)) and all(item(element) for element in value)


def register_builtins(registry: ProviderRegistry) -> None:
    """Register the built-in declared types on ``registry``.

    Raises:
        ProviderAlreadyRegisteredError: If ``registry`` already has them
    """
    registry.provide(
        INSTANCE_OF,
        decoder=_instance_decoder,
        encoder=_instance_encoder,
        guard=_instance_guard,
    )
    registry.provide(SET, decoder=_set_decoder, encoder=_set_encoder, guard=_set_guard)


register_builtins(default_registry)

"""Structural recognizers compiled from schemas.

A guard answers "does this value have the shape of the schema's decoded
type?" with a cheap type test. The encoder uses guards to pick a union member,
so guards ignore refinements and never run transforms: a transform is
recognized by the guard of its ``to`` schema.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Dict, List, Optional

from .registry import Capability, ProviderRegistry, default_registry
from .schema import (
    ArraySchema,
    DeclareSchema,
    LazySchema,
    LiteralSchema,
    PrimitiveKind,
    PrimitiveSchema,
    RefinementSchema,
    Schema,
    StructSchema,
    TransformSchema,
    TupleSchema,
    UnionSchema,
)

Guard = Callable[[Any], bool]


# Runtime type tests shared with the decoder


def is_sequence(value: Any) -> bool:
    """True for lists and tuples; strings and bytes are not sequences here."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_number(value: Any) -> bool:
    """True for int and float, excluding bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_bigint(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_json(value: Any) -> bool:
    """True if ``value`` is a JSON value tree with finite numbers and string keys."""
    if value is None or isinstance(value, (bool, str, int)):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if is_sequence(value):
        return all(is_json(item) for item in value)
    if is_mapping(value):
        return all(isinstance(key, str) and is_json(item) for key, item in value.items())
    return False


def deep_equal(left: Any, right: Any) -> bool:
    """Structural equality that keeps booleans apart from numbers.

    Plain ``==`` treats ``True == 1`` and ``[True] == [1]`` as equal; literal
    matching must not.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if is_sequence(left) and is_sequence(right):
        return len(left) == len(right) and all(deep_equal(a, b) for a, b in zip(left, right))
    if is_mapping(left) and is_mapping(right):
        return left.keys() == right.keys() and all(deep_equal(left[key], right[key]) for key in left)
    if is_sequence(left) or is_sequence(right) or is_mapping(left) or is_mapping(right):
        return False
    return bool(left == right)


_PRIMITIVE_GUARDS: Dict[PrimitiveKind, Guard] = {
    PrimitiveKind.STRING: lambda value: isinstance(value, str),
    PrimitiveKind.NUMBER: is_number,
    PrimitiveKind.BOOLEAN: lambda value: isinstance(value, bool),
    PrimitiveKind.BIGINT: is_bigint,
    PrimitiveKind.UNKNOWN: lambda value: True,
    PrimitiveKind.ANY: lambda value: True,
    PrimitiveKind.NEVER: lambda value: False,
    PrimitiveKind.JSON: is_json,
    PrimitiveKind.JSON_ARRAY: lambda value: is_sequence(value) and is_json(value),
    PrimitiveKind.JSON_OBJECT: lambda value: is_mapping(value) and is_json(value),
    PrimitiveKind.UNKNOWN_ARRAY: is_sequence,
    PrimitiveKind.UNKNOWN_OBJECT: is_mapping,
}


def primitive_guard(kind: PrimitiveKind) -> Guard:
    return _PRIMITIVE_GUARDS[kind]


def compile_guard(schema: Schema, registry: Optional[ProviderRegistry] = None) -> Guard:
    """Compile ``schema`` into a structural recognizer.

    Args:
        schema: Schema to compile
        registry: Provider registry for declared types (default: process-wide)

    Returns:
        Function returning True when a value has the schema's decoded shape

    Raises:
        ConfigurationError: If a declared type has no GUARD provider
    """
    return _GuardCompiler(registry if registry is not None else default_registry).compile(schema)


class _GuardCompiler:
    def __init__(self, registry: ProviderRegistry) -> None:
        self.registry = registry
        self._lazy: Dict[LazySchema, Guard] = {}

    def compile(self, schema: Schema) -> Guard:
        if isinstance(schema, LiteralSchema):
            expected = schema.value
            return lambda value: deep_equal(value, expected)

        if isinstance(schema, PrimitiveSchema):
            return primitive_guard(schema.kind)

        if isinstance(schema, TupleSchema):
            return self._tuple(schema)

        if isinstance(schema, StructSchema):
            return self._struct(schema)

        if isinstance(schema, ArraySchema):
            element = self.compile(schema.element)
            return lambda value: is_sequence(value) and all(element(item) for item in value)

        if isinstance(schema, UnionSchema):
            members = [self.compile(member) for member in schema.members]
            return lambda value: any(member(value) for member in members)

        if isinstance(schema, LazySchema):
            return self._lazy_guard(schema)

        # Constraints never take part in recognition
        if isinstance(schema, RefinementSchema):
            return self.compile(schema.base)

        if isinstance(schema, TransformSchema):
            return self.compile(schema.to)

        if isinstance(schema, DeclareSchema):
            factory = self.registry.resolve(Capability.GUARD, schema.type_id)
            parameters = [self.compile(parameter) for parameter in schema.type_parameters]
            return factory(schema.metadata, *parameters)

        raise TypeError(f"Unsupported schema node {type(schema).__name__}")

    def _tuple(self, schema: TupleSchema) -> Guard:
        elements = [self.compile(element) for element in schema.elements]
        rest = self.compile(schema.rest) if schema.rest is not None else None
        arity = len(elements)

        def guard(value: Any) -> bool:
            if not is_sequence(value):
                return False
            if len(value) < arity or (rest is None and len(value) != arity):
                return False
            if not all(element(item) for element, item in zip(elements, value)):
                return False
            return rest is None or all(rest(item) for item in value[arity:])

        return guard

    def _struct(self, schema: StructSchema) -> Guard:
        fields = [(field.name, field.optional, self.compile(field.schema)) for field in schema.fields]
        names = set(schema.field_names)
        index = self.compile(schema.index_signature) if schema.index_signature is not None else None

        def guard(value: Any) -> bool:
            if not is_mapping(value):
                return False
            for name, optional, field_guard in fields:
                if name not in value:
                    if optional:
                        continue
                    return False
                if not field_guard(value[name]):
                    return False
            if index is not None:
                return all(index(item) for key, item in value.items() if key not in names)
            return True

        return guard

    def _lazy_guard(self, schema: LazySchema) -> Guard:
        compiled = self._lazy.get(schema)
        if compiled is not None:
            return compiled

        cell: List[Guard] = []

        def guard(value: Any) -> bool:
            return cell[0](value)

        self._lazy[schema] = guard
        cell.append(self.compile(schema.dereference()))
        return guard

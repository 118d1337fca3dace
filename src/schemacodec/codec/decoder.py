"""Decoder compiler: Schema -> validating parse function.

The compiled decoder is a pure function ``value -> DecodeResult``. Compound
shapes process their members in declaration order:

- the first failing member short-circuits the level (union aggregates all of
  its member failures instead),
- warnings do not stop processing, but only the first anomaly of a level is
  reported: declared members first, then rest/index-signature entries, then
  the unexpected index/key warning.

Example:
    >>> from schemacodec.codec import schema as S
    >>> decode = compile_decoder(S.struct({"a": S.string, "b": S.number}))
    >>> decode({"a": "a", "b": 1, "c": True}).render()
    '/c key is unexpected'
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

from .guard import deep_equal, is_mapping, is_sequence, primitive_guard
from .registry import Capability, ProviderRegistry, default_registry
from .result import (
    MISSING,
    DecodeFailure,
    DecodeResult,
    DecodeWarning,
    render_value,
    success,
    union_failure,
    unsatisfied,
    warning,
)
from .schema import (
    ArraySchema,
    DeclareSchema,
    LazySchema,
    LiteralSchema,
    PrimitiveKind,
    PrimitiveSchema,
    RefinementSchema,
    Schema,
    Severity,
    StructSchema,
    TransformSchema,
    TupleSchema,
    UnionSchema,
)

Decoder = Callable[[Any], DecodeResult]

NAN_WARNING = "did not satisfy not(isNaN)"
UNEXPECTED_INDEX = "index is unexpected"
UNEXPECTED_KEY = "key is unexpected"


def compile_decoder(schema: Schema, registry: Optional[ProviderRegistry] = None) -> Decoder:
    """Compile ``schema`` into a decoder.

    Declared types are resolved here, once, so a missing provider surfaces as a
    ConfigurationError before any data is seen. Lazy nodes are compiled
    eagerly with a per-compilation memo, which keeps recursive schemas finite.

    Args:
        schema: Schema to compile
        registry: Provider registry for declared types (default: process-wide)

    Returns:
        Function mapping an untyped value to a DecodeResult

    Raises:
        ConfigurationError: If a declared type has no DECODER provider
    """
    return _DecoderCompiler(registry if registry is not None else default_registry).compile(schema)


class _DecoderCompiler:
    def __init__(self, registry: ProviderRegistry) -> None:
        self.registry = registry
        self._lazy: Dict[LazySchema, Decoder] = {}

    def compile(self, schema: Schema) -> Decoder:
        # Literal
        if isinstance(schema, LiteralSchema):
            expected = schema.value
            descriptor = f"isEqual({render_value(expected)})"

            def decode_literal(value: Any) -> DecodeResult:
                if deep_equal(value, expected):
                    return success(value)
                return unsatisfied(value, descriptor)

            return decode_literal

        # Primitive
        if isinstance(schema, PrimitiveSchema):
            return self._primitive(schema.kind)

        # Compound shapes
        if isinstance(schema, TupleSchema):
            return self._tuple(schema)

        if isinstance(schema, StructSchema):
            return self._struct(schema)

        if isinstance(schema, ArraySchema):
            return self._array(schema)

        if isinstance(schema, UnionSchema):
            return self._union(schema)

        if isinstance(schema, LazySchema):
            return self._lazy_decoder(schema)

        # Layers over a base schema
        if isinstance(schema, RefinementSchema):
            return self._refinement(schema)

        if isinstance(schema, TransformSchema):
            return self._transform(schema)

        if isinstance(schema, DeclareSchema):
            factory = self.registry.resolve(Capability.DECODER, schema.type_id)
            parameters = [self.compile(parameter) for parameter in schema.type_parameters]
            return factory(schema.metadata, *parameters)

        raise TypeError(f"Unsupported schema node {type(schema).__name__}")

    def _primitive(self, kind: PrimitiveKind) -> Decoder:
        test = primitive_guard(kind)
        descriptor = f"is({kind.value})"

        if kind is PrimitiveKind.NUMBER:

            def decode_number(value: Any) -> DecodeResult:
                if not test(value):
                    return unsatisfied(value, descriptor)
                if isinstance(value, float) and math.isnan(value):
                    return warning(NAN_WARNING, value)
                return success(value)

            return decode_number

        def decode_primitive(value: Any) -> DecodeResult:
            if test(value):
                return success(value)
            return unsatisfied(value, descriptor)

        return decode_primitive

    def _tuple(self, schema: TupleSchema) -> Decoder:
        elements = [self.compile(element) for element in schema.elements]
        rest = self.compile(schema.rest) if schema.rest is not None else None
        arity = len(elements)

        def decode_tuple(value: Any) -> DecodeResult:
            if not is_sequence(value):
                return unsatisfied(value, "is(sequence)")

            output: List[Any] = []
            first: Optional[DecodeWarning] = None

            for index, element in enumerate(elements):
                item = value[index] if index < len(value) else MISSING
                result = element(item)
                if isinstance(result, DecodeFailure):
                    return result.prefixed(index)
                if isinstance(result, DecodeWarning) and first is None:
                    first = result.prefixed(index)
                output.append(None if result.value is MISSING else result.value)

            if rest is not None:
                for index in range(arity, len(value)):
                    result = rest(value[index])
                    if isinstance(result, DecodeFailure):
                        return result.prefixed(index)
                    if isinstance(result, DecodeWarning) and first is None:
                        first = result.prefixed(index)
                    output.append(result.value)
            elif len(value) > arity and first is None:
                # Extra indexes are dropped from the output
                first = warning(UNEXPECTED_INDEX, None, (arity,))

            return _settle(first, output)

        return decode_tuple

    def _struct(self, schema: StructSchema) -> Decoder:
        fields = [(field.name, field.optional, self.compile(field.schema)) for field in schema.fields]
        names = set(schema.field_names)
        index = self.compile(schema.index_signature) if schema.index_signature is not None else None

        def decode_struct(value: Any) -> DecodeResult:
            if not is_mapping(value):
                return unsatisfied(value, "is(mapping)")

            output: Dict[Any, Any] = {}
            first: Optional[DecodeWarning] = None

            for name, optional, field_decoder in fields:
                if name in value:
                    item = value[name]
                elif optional:
                    continue
                else:
                    item = MISSING
                result = field_decoder(item)
                if isinstance(result, DecodeFailure):
                    return result.prefixed(name)
                if isinstance(result, DecodeWarning) and first is None:
                    first = result.prefixed(name)
                output[name] = None if result.value is MISSING else result.value

            for key in value:
                if key in names:
                    continue
                if index is None:
                    # Extra keys are dropped from the output
                    if first is None:
                        first = warning(UNEXPECTED_KEY, None, (key,))
                    continue
                result = index(value[key])
                if isinstance(result, DecodeFailure):
                    return result.prefixed(key)
                if isinstance(result, DecodeWarning) and first is None:
                    first = result.prefixed(key)
                output[key] = result.value

            return _settle(first, output)

        return decode_struct

    def _array(self, schema: ArraySchema) -> Decoder:
        element = self.compile(schema.element)

        def decode_array(value: Any) -> DecodeResult:
            if not is_sequence(value):
                return unsatisfied(value, "is(sequence)")

            output: List[Any] = []
            first: Optional[DecodeWarning] = None
            for index, item in enumerate(value):
                result = element(item)
                if isinstance(result, DecodeFailure):
                    return result.prefixed(index)
                if isinstance(result, DecodeWarning) and first is None:
                    first = result.prefixed(index)
                output.append(result.value)

            return _settle(first, output)

        return decode_array

    def _union(self, schema: UnionSchema) -> Decoder:
        members = [self.compile(member) for member in schema.members]

        if not members:
            return lambda value: unsatisfied(value, "is(never)")

        def decode_union(value: Any) -> DecodeResult:
            failures: List[DecodeFailure] = []
            for member in members:
                result = member(value)
                if not isinstance(result, DecodeFailure):
                    return result
                failures.append(result)
            return union_failure(failures)

        return decode_union

    def _lazy_decoder(self, schema: LazySchema) -> Decoder:
        compiled = self._lazy.get(schema)
        if compiled is not None:
            return compiled

        cell: List[Decoder] = []

        def decode_lazy(value: Any) -> DecodeResult:
            return cell[0](value)

        # Registered before compiling the target so self-references find it
        self._lazy[schema] = decode_lazy
        cell.append(self.compile(schema.dereference()))
        return decode_lazy

    def _refinement(self, schema: RefinementSchema) -> Decoder:
        base = self.compile(schema.base)
        predicate = schema.predicate
        descriptor = schema.descriptor
        soft = schema.severity is Severity.SOFT

        def decode_refinement(value: Any) -> DecodeResult:
            result = base(value)
            if isinstance(result, DecodeFailure):
                return result
            if predicate(result.value):
                return result
            if not soft:
                return unsatisfied(result.value, descriptor)
            if isinstance(result, DecodeWarning):
                return result
            return warning(f"did not satisfy {descriptor}", result.value)

        return decode_refinement

    def _transform(self, schema: TransformSchema) -> Decoder:
        base = self.compile(schema.base)
        forward = schema.forward

        def decode_transform(value: Any) -> DecodeResult:
            result = base(value)
            if isinstance(result, DecodeFailure):
                return result
            transformed = forward(result.value)
            if isinstance(result, DecodeWarning) and not isinstance(transformed, DecodeFailure):
                return replace(result, value=transformed.value)
            return transformed

        return decode_transform


def _settle(first: Optional[DecodeWarning], output: Any) -> DecodeResult:
    if first is None:
        return success(output)
    return replace(first, value=output)

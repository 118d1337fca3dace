"""Encoder compiler: Schema -> serialize function.

The compiled encoder mirrors the decoder and is total over every value the
decoder produced. Unions dispatch on structural recognizers (see
``guard.py``) rather than re-running validation, and refinements are
transparent because constraints never alter representation.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from ..exceptions import EncodeError
from .guard import Guard, compile_guard, is_mapping, is_sequence
from .registry import Capability, ProviderRegistry, default_registry
from .result import render_value
from .schema import (
    ArraySchema,
    DeclareSchema,
    LazySchema,
    LiteralSchema,
    PrimitiveSchema,
    RefinementSchema,
    Schema,
    StructSchema,
    TransformSchema,
    TupleSchema,
    UnionSchema,
)

Encoder = Callable[[Any], Any]


def compile_encoder(schema: Schema, registry: Optional[ProviderRegistry] = None) -> Encoder:
    """Compile ``schema`` into an encoder.

    Args:
        schema: Schema to compile
        registry: Provider registry for declared types (default: process-wide)

    Returns:
        Function mapping a decoded value back to its external representation

    Raises:
        ConfigurationError: If a declared type lacks an ENCODER provider, or a
            declared union member lacks a GUARD provider

    Examples:
        ```python
        from schemacodec.codec import schema as S
        from schemacodec.data import number_from_string

        encode = compile_encoder(S.tuple_(S.string, number_from_string()))
        encode(["b", 2])  # ["b", "2"]
        ```
    """
    return _EncoderCompiler(registry if registry is not None else default_registry).compile(schema)


def _identity(value: Any) -> Any:
    return value


class _EncoderCompiler:
    def __init__(self, registry: ProviderRegistry) -> None:
        self.registry = registry
        self._lazy: Dict[LazySchema, Encoder] = {}

    def compile(self, schema: Schema) -> Encoder:
        # Literal and primitive values are already in external form
        if isinstance(schema, (LiteralSchema, PrimitiveSchema)):
            return _identity

        if isinstance(schema, TupleSchema):
            return self._tuple(schema)

        if isinstance(schema, StructSchema):
            return self._struct(schema)

        if isinstance(schema, ArraySchema):
            element = self.compile(schema.element)

            def encode_array(value: Any) -> Any:
                _expect_sequence(value)
                return [element(item) for item in value]

            return encode_array

        if isinstance(schema, UnionSchema):
            return self._union(schema)

        if isinstance(schema, LazySchema):
            return self._lazy_encoder(schema)

        if isinstance(schema, RefinementSchema):
            return self.compile(schema.base)

        if isinstance(schema, TransformSchema):
            base = self.compile(schema.base)
            inverse = schema.inverse
            return lambda value: base(inverse(value))

        if isinstance(schema, DeclareSchema):
            factory = self.registry.resolve(Capability.ENCODER, schema.type_id)
            parameters = [self.compile(parameter) for parameter in schema.type_parameters]
            return factory(schema.metadata, *parameters)

        raise TypeError(f"Unsupported schema node {type(schema).__name__}")

    def _tuple(self, schema: TupleSchema) -> Encoder:
        elements = [self.compile(element) for element in schema.elements]
        rest = self.compile(schema.rest) if schema.rest is not None else None
        arity = len(elements)

        def encode_tuple(value: Any) -> Any:
            _expect_sequence(value)
            if len(value) < arity:
                raise EncodeError(
                    f"Expected at least {arity} elements, got {len(value)}: {render_value(value)}"
                )
            output = [element(item) for element, item in zip(elements, value)]
            if rest is not None:
                output.extend(rest(item) for item in value[arity:])
            return output

        return encode_tuple

    def _struct(self, schema: StructSchema) -> Encoder:
        fields = [(field.name, field.optional, self.compile(field.schema)) for field in schema.fields]
        names = set(schema.field_names)
        index = self.compile(schema.index_signature) if schema.index_signature is not None else None

        def encode_struct(value: Any) -> Any:
            if not is_mapping(value):
                raise EncodeError(f"Expected a mapping, got {type(value).__name__}")

            output: Dict[Any, Any] = {}
            for name, optional, field_encoder in fields:
                if name in value:
                    output[name] = field_encoder(value[name])
                elif not optional:
                    raise EncodeError(f"Field {name} is required but missing")

            if index is not None:
                for key, item in value.items():
                    if key not in names:
                        output[key] = index(item)
            return output

        return encode_struct

    def _union(self, schema: UnionSchema) -> Encoder:
        members: List[tuple[Guard, Encoder]] = [
            (compile_guard(member, self.registry), self.compile(member)) for member in schema.members
        ]

        def encode_union(value: Any) -> Any:
            for guard, member_encoder in members:
                if guard(value):
                    return member_encoder(value)
            raise EncodeError(f"{render_value(value)} does not match any union member")

        return encode_union

    def _lazy_encoder(self, schema: LazySchema) -> Encoder:
        compiled = self._lazy.get(schema)
        if compiled is not None:
            return compiled

        cell: List[Encoder] = []

        def encode_lazy(value: Any) -> Any:
            return cell[0](value)

        self._lazy[schema] = encode_lazy
        cell.append(self.compile(schema.dereference()))
        return encode_lazy


def _expect_sequence(value: Any) -> None:
    if not is_sequence(value):
        raise EncodeError(f"Expected a sequence, got {type(value).__name__}")

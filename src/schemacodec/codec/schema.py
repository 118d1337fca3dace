"""Schema model: an immutable AST of type descriptors.

Schemas are plain data. They are built once, shared freely, and compiled into
decoders, encoders and structural recognizers by the compilers in this package.
Recursive shapes go through ``lazy``, which defers and memoizes the reference.

Example:
    >>> from schemacodec.codec import schema as S
    >>> Person = S.struct({"name": S.string}, {"age": S.number})
    >>> Tree = S.lazy(lambda: S.struct({"value": S.number, "children": S.array(Tree)}))
"""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Tuple

from ..exceptions import SchemaError
from .result import DecodeResult, render_value

logger = logging.getLogger(__name__)


class PrimitiveKind(str, enum.Enum):
    """Base kinds; the value is the name used in diagnostics (``is(<value>)``)."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    BIGINT = "bigint"
    UNKNOWN = "unknown"
    ANY = "any"
    NEVER = "never"
    JSON = "json"
    JSON_ARRAY = "jsonArray"
    JSON_OBJECT = "jsonObject"
    UNKNOWN_ARRAY = "sequence"
    UNKNOWN_OBJECT = "mapping"


class Severity(str, enum.Enum):
    """Refinement severity: hard violations fail, soft violations warn."""

    HARD = "hard"
    SOFT = "soft"


class Schema:
    """Base class for every schema variant."""

    __slots__ = ()


@dataclass(frozen=True)
class LiteralSchema(Schema):
    """Matches a single value by structural equality."""

    value: Any


@dataclass(frozen=True)
class PrimitiveSchema(Schema):
    """Matches a base kind by runtime type test."""

    kind: PrimitiveKind


@dataclass(frozen=True)
class TupleSchema(Schema):
    """Fixed-arity positions plus an optional schema for every extra index.

    Attributes:
        elements: Schemas of the leading positions, in order
        rest: Schema applied to every index beyond ``len(elements)``
    """

    elements: Tuple[Schema, ...]
    rest: Optional[Schema] = None


@dataclass(frozen=True)
class Field:
    """A named struct member.

    Attributes:
        name: Key in the external mapping
        schema: Schema of the member value
        optional: Whether the key may be absent
    """

    name: str
    schema: Schema
    optional: bool = False


@dataclass(frozen=True)
class StructSchema(Schema):
    """Named fields plus an optional schema for additional string keys.

    Attributes:
        fields: Members in declaration order
        index_signature: Schema for every key not declared in ``fields``
    """

    fields: Tuple[Field, ...]
    index_signature: Optional[Schema] = None

    def __post_init__(self) -> None:
        seen = set()
        for field in self.fields:
            if field.name in seen:
                raise SchemaError(f"Duplicate struct field {field.name!r}")
            seen.add(field.name)

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(field.name for field in self.fields)


@dataclass(frozen=True)
class ArraySchema(Schema):
    """Applies one schema to every position of a sequence."""

    element: Schema


@dataclass(frozen=True)
class UnionSchema(Schema):
    """Ordered alternatives; the order is the decode priority."""

    members: Tuple[Schema, ...]


class LazySchema(Schema):
    """Deferred reference to another schema, resolved once on first use.

    The resolver runs at most once. Concurrent first use is serialized by a
    lock; a resolver that needs its own result to finish raises SchemaError.
    """

    __slots__ = ("_resolver", "_resolved", "_resolving", "_lock")

    def __init__(self, resolver: Callable[[], Schema]) -> None:
        self._resolver = resolver
        self._resolved: Optional[Schema] = None
        self._resolving = False
        self._lock = threading.RLock()

    def resolve(self) -> Schema:
        """Return the referenced schema, evaluating the resolver on first call.

        Raises:
            SchemaError: If the resolver re-enters this resolution or returns
                something that is not a Schema
        """
        resolved = self._resolved
        if resolved is not None:
            return resolved

        with self._lock:
            if self._resolved is None:
                if self._resolving:
                    raise SchemaError("Lazy schema referenced itself while resolving")
                self._resolving = True
                try:
                    target = self._resolver()
                finally:
                    self._resolving = False
                if not isinstance(target, Schema):
                    raise SchemaError(
                        f"Lazy resolver returned {type(target).__name__}, expected a Schema"
                    )
                logger.debug("Resolved lazy schema to %s", type(target).__name__)
                self._resolved = target
            return self._resolved

    def dereference(self) -> Schema:
        """Follow lazy-to-lazy references down to the first non-lazy schema.

        Raises:
            SchemaError: If the references loop back without reaching a
                concrete schema
        """
        seen = {self}
        target = self.resolve()
        while isinstance(target, LazySchema):
            if target in seen:
                raise SchemaError("Lazy schema resolves to itself")
            seen.add(target)
            target = target.resolve()
        return target

    @property
    def is_resolved(self) -> bool:
        return self._resolved is not None

    def __repr__(self) -> str:
        state = "resolved" if self.is_resolved else "pending"
        return f"LazySchema({state})"


@dataclass(frozen=True)
class RefinementSchema(Schema):
    """Adds a predicate constraint to a base schema without changing representation.

    Attributes:
        base: Schema decoded before the predicate runs
        predicate: Test applied to the decoded value
        name: Constraint name used in diagnostics
        param: Constraint parameter, rendered after the name when present
        severity: HARD turns violations into failures, SOFT into warnings
    """

    base: Schema
    predicate: Callable[[Any], bool]
    name: str
    param: Any = None
    has_param: bool = False
    severity: Severity = Severity.HARD

    @property
    def descriptor(self) -> str:
        """Constraint text, e.g. ``minLength(1)`` or ``int``."""
        if not self.has_param:
            return self.name
        param = self.param if isinstance(self.param, str) else render_value(self.param)
        return f"{self.name}({param})"


@dataclass(frozen=True)
class TransformSchema(Schema):
    """Decodes with ``base`` then ``forward``; encodes with ``inverse`` then ``base``.

    Attributes:
        base: Schema of the external representation
        to: Schema of the decoded value, used to recognize values when encoding
        forward: Decoded base value -> DecodeResult of the final value
        inverse: Final value -> base value
        name: Transform name used by ``describe``
    """

    base: Schema
    to: Schema
    forward: Callable[[Any], DecodeResult]
    inverse: Callable[[Any], Any]
    name: str = "transform"


@dataclass(frozen=True)
class DeclareSchema(Schema):
    """Opaque custom type whose capabilities come from a provider registry.

    Attributes:
        type_id: Stable identifier looked up in the registry
        metadata: Arbitrary data handed to the provider factories
        type_parameters: Schemas compiled and handed to the provider factories
    """

    type_id: str
    metadata: Any = None
    type_parameters: Tuple[Schema, ...] = ()


# Primitives

string = PrimitiveSchema(PrimitiveKind.STRING)
number = PrimitiveSchema(PrimitiveKind.NUMBER)
boolean = PrimitiveSchema(PrimitiveKind.BOOLEAN)
bigint = PrimitiveSchema(PrimitiveKind.BIGINT)
unknown = PrimitiveSchema(PrimitiveKind.UNKNOWN)
any_ = PrimitiveSchema(PrimitiveKind.ANY)
never = PrimitiveSchema(PrimitiveKind.NEVER)
json = PrimitiveSchema(PrimitiveKind.JSON)
json_array = PrimitiveSchema(PrimitiveKind.JSON_ARRAY)
json_object = PrimitiveSchema(PrimitiveKind.JSON_OBJECT)
unknown_array = PrimitiveSchema(PrimitiveKind.UNKNOWN_ARRAY)
unknown_object = PrimitiveSchema(PrimitiveKind.UNKNOWN_OBJECT)


# Constructors


def literal(value: Any) -> LiteralSchema:
    """Schema matching exactly ``value``."""
    return LiteralSchema(value)


def literals(*values: Any) -> UnionSchema:
    """Union of literal schemas, one per value."""
    return UnionSchema(tuple(LiteralSchema(value) for value in values))


def tuple_(*elements: Schema) -> TupleSchema:
    """Fixed-arity tuple schema."""
    return TupleSchema(tuple(elements))


def with_rest(schema: TupleSchema, rest: Schema) -> TupleSchema:
    """Return ``schema`` accepting any number of extra ``rest`` elements.

    Raises:
        SchemaError: If ``schema`` already has a rest schema
    """
    if schema.rest is not None:
        raise SchemaError("Tuple schema already has a rest element")
    return TupleSchema(schema.elements, rest)


def struct(
    required: Mapping[str, Schema], optional: Optional[Mapping[str, Schema]] = None
) -> StructSchema:
    """Struct schema from required and optional field mappings.

    Args:
        required: Field name -> schema, key must be present
        optional: Field name -> schema, key may be absent

    Returns:
        StructSchema with required fields first, in mapping order

    Example:
        >>> Person = struct({"firstName": string}, {"age": number})
    """
    fields = [Field(name, schema) for name, schema in required.items()]
    if optional:
        fields.extend(Field(name, schema, optional=True) for name, schema in optional.items())
    return StructSchema(tuple(fields))


def partial(schema: StructSchema) -> StructSchema:
    """Return ``schema`` with every field optional."""
    fields = tuple(Field(field.name, field.schema, optional=True) for field in schema.fields)
    return StructSchema(fields, schema.index_signature)


def string_index_signature(value: Schema) -> StructSchema:
    """Struct with no declared fields whose every string key maps to ``value``."""
    return StructSchema((), value)


def extend(schema: StructSchema, other: StructSchema) -> StructSchema:
    """Merge two structs; ``other`` contributes fields and its index signature.

    Raises:
        SchemaError: If a field is declared in both, or both have index signatures
    """
    if schema.index_signature is not None and other.index_signature is not None:
        raise SchemaError("Cannot extend a struct that already has an index signature")
    return StructSchema(
        schema.fields + other.fields,
        other.index_signature if other.index_signature is not None else schema.index_signature,
    )


def array(element: Schema) -> ArraySchema:
    """Sequence schema applying ``element`` to every position."""
    return ArraySchema(element)


def union(*members: Schema) -> UnionSchema:
    """Ordered union; an empty union accepts nothing."""
    return UnionSchema(tuple(members))


def optional(schema: Schema) -> UnionSchema:
    """``None`` or ``schema``: the absence marker comes first."""
    return UnionSchema((LiteralSchema(None), schema))


def lazy(resolver: Callable[[], Schema]) -> LazySchema:
    """Deferred schema reference, the building block of recursive schemas."""
    return LazySchema(resolver)


def transform(
    base: Schema,
    to: Schema,
    forward: Callable[[Any], DecodeResult],
    inverse: Callable[[Any], Any],
    name: str = "transform",
) -> TransformSchema:
    """Schema whose decoded value differs from its external representation.

    Args:
        base: Schema of the external representation
        to: Schema of the decoded value
        forward: Maps a decoded base value to a DecodeResult
        inverse: Maps a value back to the base representation
        name: Name used in descriptions

    Returns:
        TransformSchema
    """
    return TransformSchema(base, to, forward, inverse, name)


def declare(type_id: str, metadata: Any = None, *type_parameters: Schema) -> DeclareSchema:
    """Custom type resolved through the provider registry at compile time."""
    return DeclareSchema(type_id, metadata, tuple(type_parameters))

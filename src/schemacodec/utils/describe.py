"""Readable type expressions for schemas.

``describe`` is used by the CLI to summarize schemas; it never evaluates
predicates or transforms.
"""

from __future__ import annotations

from typing import Set

from ..codec.result import render_value
from ..codec.schema import (
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


def describe(schema: Schema) -> str:
    """Render ``schema`` as a type expression.

    Args:
        schema: Schema to describe

    Returns:
        Type expression text

    Example:
        >>> describe(struct({"a": string}, {"b": array(number)}))
        '{a: string, b?: list[number]}'
        >>> describe(min_length(string, 1))
        'string & minLength(1)'
    """
    return _describe(schema, set())


def _describe(schema: Schema, seen: Set[LazySchema]) -> str:
    if isinstance(schema, LiteralSchema):
        return render_value(schema.value)

    if isinstance(schema, PrimitiveSchema):
        return schema.kind.value

    if isinstance(schema, TupleSchema):
        parts = [_describe(element, seen) for element in schema.elements]
        if schema.rest is not None:
            parts.append(f"*{_describe(schema.rest, seen)}")
        return f"tuple[{', '.join(parts)}]"

    if isinstance(schema, StructSchema):
        parts = [
            f"{field.name}{'?' if field.optional else ''}: {_describe(field.schema, seen)}"
            for field in schema.fields
        ]
        if schema.index_signature is not None:
            parts.append(f"[str]: {_describe(schema.index_signature, seen)}")
        return "{" + ", ".join(parts) + "}"

    if isinstance(schema, ArraySchema):
        return f"list[{_describe(schema.element, seen)}]"

    if isinstance(schema, UnionSchema):
        if not schema.members:
            return "never"
        return " | ".join(_describe_member(member, seen) for member in schema.members)

    if isinstance(schema, LazySchema):
        # Recursive reference
        if schema in seen:
            return "..."
        seen.add(schema)
        try:
            return _describe(schema.resolve(), seen)
        finally:
            seen.discard(schema)

    if isinstance(schema, RefinementSchema):
        return f"{_describe(schema.base, seen)} & {schema.descriptor}"

    if isinstance(schema, TransformSchema):
        return f"{schema.name}({_describe(schema.base, seen)})"

    if isinstance(schema, DeclareSchema):
        if not schema.type_parameters:
            name = getattr(schema.metadata, "__name__", None)
            return f"{schema.type_id}<{name}>" if name else schema.type_id
        parameters = ", ".join(_describe(parameter, seen) for parameter in schema.type_parameters)
        return f"{schema.type_id}<{parameters}>"

    raise TypeError(f"Unsupported schema node {type(schema).__name__}")


def _describe_member(member: Schema, seen: Set[LazySchema]) -> str:
    text = _describe(member, seen)
    if isinstance(member, (UnionSchema, RefinementSchema)) and " " in text:
        return f"({text})"
    return text

"""Schema introspection for Pydantic models.

This module analyzes Pydantic models and derives the equivalent schema, so a
model class can be decoded with path-located diagnostics and encoded back to
JSON-ready data.

The derived schema is a transform from a struct of the model's fields to the
model class: decoding validates the struct, then builds the instance with
``model_validate``; encoding reads the field values back off the instance.
"""

from __future__ import annotations

import enum
import functools
import typing
from collections.abc import Mapping as AbcMapping
from collections.abc import Sequence as AbcSequence
from datetime import datetime
from types import UnionType
from typing import Any, Iterable, List, Type, get_args, get_origin

from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo

from ..codec import refinements as R
from ..codec import schema as S
from ..codec.result import DecodeResult, success, unsatisfied
from ..data.builtins import enum_, instance_of, set_of
from ..data.parsers import datetime_from_string
from ..exceptions import SchemaError

_UNION_ORIGINS = (typing.Union, UnionType)


@functools.lru_cache(maxsize=None)
def schema_from_model(model_class: Type[BaseModel]) -> S.TransformSchema:
    """Derive the schema of a Pydantic model.

    Results are cached per class, so nested and self-referencing models share
    one schema graph.

    Args:
        model_class: Pydantic model class to introspect

    Returns:
        TransformSchema decoding mappings into ``model_class`` instances

    Raises:
        SchemaError: If a field annotation has no schema counterpart

    Example:
        >>> class StatusReport(BaseModel):
        ...     vehicle_id: int = Field(ge=0, le=255)
        ...     callsign: str = Field(min_length=1)
        ...     depth_m: Optional[float] = None
        >>> codec = Codec(schema_from_model(StatusReport))
        >>> codec.decode({"vehicle_id": 300, "callsign": "A"}).render()
        '/vehicle_id 300 did not satisfy max(255)'
    """
    fields = tuple(
        S.Field(name, _extract_field_schema(name, info), optional=not info.is_required())
        for name, info in model_class.model_fields.items()
    )
    return S.TransformSchema(
        base=S.StructSchema(fields),
        to=instance_of(model_class),
        forward=_model_constructor(model_class),
        inverse=_model_fields_reader(model_class),
        name=model_class.__name__,
    )


def _extract_field_schema(name: str, field_info: FieldInfo) -> S.Schema:
    """Extract the schema of one Pydantic field, constraints included."""
    annotation = field_info.annotation
    if annotation is None:
        raise SchemaError(f"Field {name} has no type annotation")
    try:
        return schema_from_annotation(annotation, field_info.metadata)
    except SchemaError as err:
        raise SchemaError(f"Field {name}: {err}") from err


def schema_from_annotation(annotation: Any, metadata: Iterable[Any] = ()) -> S.Schema:
    """Derive a schema from a type annotation.

    Args:
        annotation: Type annotation, e.g. ``Optional[list[int]]``
        metadata: Constraint objects (``annotated_types`` or Pydantic metadata)

    Returns:
        Schema for the annotation

    Raises:
        SchemaError: If the annotation is not supported
    """
    origin = get_origin(annotation)
    args = get_args(annotation)

    # Annotated[T, constraints...]
    if origin is typing.Annotated:
        return schema_from_annotation(args[0], [*args[1:], *metadata])

    return _apply_constraints(_base_schema(annotation, origin, args), metadata)


def _base_schema(annotation: Any, origin: Any, args: tuple) -> S.Schema:
    if annotation is Any or annotation is object:
        return S.unknown

    if annotation is None or annotation is type(None):
        return S.literal(None)

    # Optional[T] / Union[A, B] / A | B
    if origin in _UNION_ORIGINS:
        return S.union(*(schema_from_annotation(arg) for arg in args))

    if origin is typing.Literal:
        return S.literals(*args)

    if origin in (list, AbcSequence):
        return S.array(schema_from_annotation(args[0]) if args else S.unknown)

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return S.array(schema_from_annotation(args[0]))
        return S.tuple_(*(schema_from_annotation(arg) for arg in args))

    if origin in (dict, AbcMapping):
        if args and args[0] is not str:
            raise SchemaError(f"mapping keys must be str, got {args[0]!r}")
        return S.string_index_signature(schema_from_annotation(args[1]) if args else S.unknown)

    if origin in (set, frozenset):
        return set_of(schema_from_annotation(args[0]) if args else S.unknown)

    if isinstance(annotation, type):
        if issubclass(annotation, BaseModel):
            # Deferred so recursive models terminate
            return S.lazy(lambda: schema_from_model(annotation))
        if issubclass(annotation, enum.Enum):
            return enum_(annotation)
        # bool is a subclass of int: check it first
        if annotation is bool:
            return S.boolean
        if annotation is int:
            return R.integer(S.number)
        if annotation is float:
            return S.number
        if annotation is str:
            return S.string
        if annotation is datetime:
            return datetime_from_string()
        if annotation is list:
            return S.unknown_array
        if annotation is dict:
            return S.unknown_object

    raise SchemaError(f"unsupported type {annotation!r}")


def _apply_constraints(schema: S.Schema, metadata: Iterable[Any]) -> S.Schema:
    """Layer Pydantic v2 constraint metadata over ``schema`` as refinements."""
    for constraint in metadata:
        # Annotated[T, Field(...)] carries its constraints one level down
        if isinstance(constraint, FieldInfo):
            schema = _apply_constraints(schema, constraint.metadata)
            continue
        if getattr(constraint, "ge", None) is not None:
            schema = R.minimum(schema, constraint.ge)
        if getattr(constraint, "le", None) is not None:
            schema = R.maximum(schema, constraint.le)
        if getattr(constraint, "gt", None) is not None:
            schema = R.greater_than(schema, constraint.gt)
        if getattr(constraint, "lt", None) is not None:
            schema = R.less_than(schema, constraint.lt)
        if getattr(constraint, "min_length", None) is not None:
            schema = R.min_length(schema, constraint.min_length)
        if getattr(constraint, "max_length", None) is not None:
            schema = R.max_length(schema, constraint.max_length)
        if getattr(constraint, "pattern", None) is not None:
            schema = R.pattern(schema, constraint.pattern)
    return schema


def _model_constructor(model_class: Type[BaseModel]) -> Any:
    def construct(value: Any) -> DecodeResult:
        try:
            return success(model_class.model_validate(value))
        except ValidationError as err:
            errors: List[Any] = err.errors()
            reason = errors[0]["msg"] if errors else str(err)
            return unsatisfied(value, f"{model_class.__name__}({reason})")

    return construct


def _model_fields_reader(model_class: Type[BaseModel]) -> Any:
    names = tuple(model_class.model_fields)

    def read(instance: BaseModel) -> dict:
        return {name: getattr(instance, name) for name in names}

    return read


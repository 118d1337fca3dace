"""Predicate constraints layered on a base schema.

Refinements never change the external representation: the encoder and the
structural recognizer see straight through them. Each helper takes the schema
to constrain as its first argument:

    >>> from schemacodec.codec import schema as S
    >>> Name = min_length(S.string, 1)
    >>> Port = maximum(minimum(integer(S.number), 1), 65535)
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable, Union

from .schema import RefinementSchema, Schema, Severity

_NO_PARAM = object()


def refine(
    schema: Schema,
    predicate: Callable[[Any], bool],
    name: str,
    param: Any = _NO_PARAM,
    severity: Severity = Severity.HARD,
) -> RefinementSchema:
    """Attach ``predicate`` to ``schema``.

    Args:
        schema: Base schema
        predicate: Test run on the value decoded by ``schema``
        name: Constraint name shown in diagnostics
        param: Constraint parameter shown as ``name(param)``; omit for ``name`` alone
        severity: HARD rejects violating values, SOFT keeps them with a warning

    Returns:
        RefinementSchema

    Example:
        >>> even = refine(S.number, lambda n: n % 2 == 0, "even")
        >>> suspicious = refine(S.string, lambda s: s.isprintable(), "printable",
        ...                     severity=Severity.SOFT)
    """
    has_param = param is not _NO_PARAM
    return RefinementSchema(
        base=schema,
        predicate=predicate,
        name=name,
        param=param if has_param else None,
        has_param=has_param,
        severity=Severity(severity),
    )


def min_length(schema: Schema, n: int) -> RefinementSchema:
    """Length of the value must be at least ``n``."""
    return refine(schema, lambda value: len(value) >= n, "minLength", n)


def max_length(schema: Schema, n: int) -> RefinementSchema:
    """Length of the value must be at most ``n``."""
    return refine(schema, lambda value: len(value) <= n, "maxLength", n)


def length(schema: Schema, n: int) -> RefinementSchema:
    """Length of the value must be exactly ``n``."""
    return refine(schema, lambda value: len(value) == n, "length", n)


def pattern(schema: Schema, regex: Union[str, re.Pattern[str]]) -> RefinementSchema:
    """String value must contain a match for ``regex`` (``re.search`` semantics)."""
    compiled = re.compile(regex)
    return refine(schema, lambda value: compiled.search(value) is not None, "pattern", compiled.pattern)


def starts_with(schema: Schema, prefix: str) -> RefinementSchema:
    return refine(schema, lambda value: value.startswith(prefix), "startsWith", prefix)


def ends_with(schema: Schema, suffix: str) -> RefinementSchema:
    return refine(schema, lambda value: value.endswith(suffix), "endsWith", suffix)


def minimum(schema: Schema, bound: Union[int, float]) -> RefinementSchema:
    """Value must be ``>= bound``."""
    return refine(schema, lambda value: value >= bound, "min", bound)


def maximum(schema: Schema, bound: Union[int, float]) -> RefinementSchema:
    """Value must be ``<= bound``."""
    return refine(schema, lambda value: value <= bound, "max", bound)


def greater_than(schema: Schema, bound: Union[int, float]) -> RefinementSchema:
    """Value must be ``> bound``."""
    return refine(schema, lambda value: value > bound, "greaterThan", bound)


def less_than(schema: Schema, bound: Union[int, float]) -> RefinementSchema:
    """Value must be ``< bound``."""
    return refine(schema, lambda value: value < bound, "lessThan", bound)


def integer(schema: Schema) -> RefinementSchema:
    """Numeric value must have no fractional part (``1.0`` counts as integral)."""
    return refine(schema, _is_integral, "int")


def finite(schema: Schema) -> RefinementSchema:
    """Numeric value must be neither infinite nor NaN."""
    return refine(schema, _is_finite, "finite")


def _is_integral(value: Any) -> bool:
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _is_finite(value: Any) -> bool:
    # Integers are always finite, including those too large for a float
    return isinstance(value, int) or math.isfinite(value)

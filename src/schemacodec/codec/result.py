"""Decode results and diagnostic message composition.

A decode produces exactly one of:

- ``DecodeSuccess(value)``
- ``DecodeWarning(path, message, value)``: non-fatal, the value is usable
- ``DecodeFailure(path, message)``: fatal for this input, no value

Paths are tuples of struct keys and sequence indices. The rendered diagnostic
prefixes each segment with ``/`` and joins everything with spaces:

    /as /0 1 did not satisfy is(mapping)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import Any, Generic, Iterable, Tuple, TypeVar, Union

T = TypeVar("T")

PathSegment = Union[str, int]
Path = Tuple[PathSegment, ...]


class _Missing:
    """Marker for a required member absent from the input."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def render_value(value: Any) -> str:
    """Render an input value for a diagnostic message.

    Values are rendered as compact JSON where possible, so strings are quoted
    and ``None`` reads as ``null``.

    Args:
        value: Value to render

    Returns:
        Rendered text

    Example:
        >>> render_value({"a": [1, None]})
        '{"a":[1,null]}'
        >>> render_value(MISSING)
        'undefined'
    """
    if value is MISSING:
        return "undefined"
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(value)


def render_path(path: Path) -> str:
    """Render a path as space-joined, ``/``-prefixed segments."""
    return " ".join(f"/{segment}" for segment in path)


@dataclass(frozen=True)
class DecodeSuccess(Generic[T]):
    """Successful decode.

    Attributes:
        value: Decoded value
    """

    value: T

    is_success = True
    is_warning = False
    is_failure = False
    has_value = True


@dataclass(frozen=True)
class DecodeWarning(Generic[T]):
    """Decode that produced a usable value along with a diagnostic.

    Attributes:
        path: Location of the anomaly relative to the decoded root
        message: Leaf diagnostic message
        value: Decoded value (always present)
    """

    path: Path
    message: str
    value: T

    is_success = False
    is_warning = True
    is_failure = False
    has_value = True

    def prefixed(self, *segments: PathSegment) -> DecodeWarning[T]:
        """Return a copy located under ``segments``."""
        return replace(self, path=tuple(segments) + self.path)

    def render(self) -> str:
        """Render the full diagnostic, path first."""
        return _compose(self.path, self.message)

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class DecodeFailure:
    """Failed decode.

    Attributes:
        path: Location of the failure relative to the decoded root
        message: Leaf diagnostic message
    """

    path: Path
    message: str

    is_success = False
    is_warning = False
    is_failure = True
    has_value = False

    def prefixed(self, *segments: PathSegment) -> DecodeFailure:
        """Return a copy located under ``segments``."""
        return replace(self, path=tuple(segments) + self.path)

    def render(self) -> str:
        """Render the full diagnostic, path first."""
        return _compose(self.path, self.message)

    def __str__(self) -> str:
        return self.render()


DecodeResult = Union[DecodeSuccess[T], DecodeWarning[T], DecodeFailure]


def _compose(path: Path, message: str) -> str:
    if not path:
        return message
    return f"{render_path(path)} {message}"


def success(value: T) -> DecodeSuccess[T]:
    """Build a successful result."""
    return DecodeSuccess(value)


def warning(message: str, value: T, path: Path = ()) -> DecodeWarning[T]:
    """Build a warning result carrying ``value``."""
    return DecodeWarning(tuple(path), message, value)


def failure(message: str, path: Path = ()) -> DecodeFailure:
    """Build a failure result."""
    return DecodeFailure(tuple(path), message)


def unsatisfied(value: Any, descriptor: str) -> DecodeFailure:
    """Build the standard leaf failure ``<value> did not satisfy <descriptor>``."""
    return DecodeFailure((), f"{render_value(value)} did not satisfy {descriptor}")


def union_failure(failures: Iterable[DecodeFailure]) -> DecodeFailure:
    """Aggregate every member failure of a union into one failure.

    Args:
        failures: Member failures in member order

    Returns:
        Failure whose message reads ``member 0 <msg>, member 1 <msg>``
    """
    parts = [f"member {index} {member.render()}" for index, member in enumerate(failures)]
    return DecodeFailure((), ", ".join(parts))

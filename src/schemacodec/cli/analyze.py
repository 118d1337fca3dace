"""Schema analysis and validation CLI commands."""

from __future__ import annotations

import importlib.util
import json
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, List, Optional, TextIO, Tuple

from pydantic import BaseModel

from ..codec import schema as S
from ..codec.codec import Codec
from ..codec.result import DecodeFailure, DecodeWarning
from ..codec.schema import Schema
from ..models.introspect import schema_from_model
from ..utils.describe import describe

MODULE_NAME = "user_schemas"

_LIBRARY_SCHEMAS = tuple(obj for obj in vars(S).values() if isinstance(obj, Schema))


def load_module(file_path: Path) -> ModuleType:
    """Import a Python file as a module.

    Args:
        file_path: Path to the Python file

    Returns:
        The executed module

    Raises:
        ValueError: If the file cannot be loaded as a module
    """
    spec = importlib.util.spec_from_file_location(MODULE_NAME, file_path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Could not load module from {file_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[MODULE_NAME] = module
    spec.loader.exec_module(module)
    return module


def find_schemas(module: ModuleType) -> List[Tuple[str, Schema]]:
    """Collect module-level schemas, codecs and Pydantic models defined in ``module``."""
    found: List[Tuple[str, Schema]] = []
    for name, obj in vars(module).items():
        if name.startswith("_"):
            continue
        schema = _as_schema(obj, module.__name__)
        if schema is not None:
            found.append((name, schema))
    return found


def _as_schema(obj: Any, module_name: str) -> Schema | None:
    if isinstance(obj, Schema):
        # Skip primitives imported from the library (``string``, ``number``, ...)
        if any(obj is constant for constant in _LIBRARY_SCHEMAS):
            return None
        return obj
    if isinstance(obj, Codec):
        return obj.schema
    # Only models defined in this file, not imported ones
    if isinstance(obj, type) and issubclass(obj, BaseModel) and obj.__module__ == module_name:
        return schema_from_model(obj)
    return None


def analyze_file(file_path: Path, out: Optional[TextIO] = None) -> None:
    """Print every schema found in a Python file with its type expression.

    Args:
        file_path: Path to Python file containing schema definitions
        out: Stream to write to (default: standard output)
    """
    schemas = find_schemas(load_module(file_path))

    if not schemas:
        print(f"No schemas found in {file_path}", file=out)
        return

    print("|" * 7, "schemacodec: Schema Codec Compiler", "|" * 7, file=out)
    print(f"{len(schemas)} schema{'s' if len(schemas) != 1 else ''} loaded.", file=out)
    print(file=out)

    for name, schema in schemas:
        print(f"{'=' * 12} {name} {'=' * 12}", file=out)
        print(f"    {describe(schema)}", file=out)
        print(file=out)


def validate_file(reference: str, input_path: str, out: Optional[TextIO] = None) -> int:
    """Decode a JSON document with a schema defined in a Python file.

    Args:
        reference: ``path/to/file.py:NAME`` naming a schema, codec or Pydantic model
        input_path: JSON file to decode, or ``-`` for standard input
        out: Stream to write the verdict to (default: standard output)

    Returns:
        Exit code: 0 on success or warning, 1 on failure

    Raises:
        ValueError: If the reference is malformed or names no schema
    """
    file_part, sep, name = reference.rpartition(":")
    if not sep or not file_part or not name:
        raise ValueError(f"Expected FILE:NAME, got {reference!r}")

    module = load_module(Path(file_part))
    if not hasattr(module, name):
        raise ValueError(f"{file_part} defines no {name!r}")
    schema = _as_schema(getattr(module, name), module.__name__)
    if schema is None:
        raise ValueError(f"{name!r} is not a schema, codec or Pydantic model")

    codec = Codec(schema)
    if input_path == "-":
        raw = json.load(sys.stdin)
    else:
        with open(input_path, encoding="utf-8") as handle:
            raw = json.load(handle)

    result = codec.decode(raw)
    if isinstance(result, DecodeFailure):
        print(f"FAILURE {result.render()}", file=out)
        return 1
    if isinstance(result, DecodeWarning):
        print(f"WARNING {result.render()}", file=out)
    else:
        print("OK", file=out)
    print(codec.stringify(result.value), file=out)
    return 0

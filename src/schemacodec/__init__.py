"""schemacodec: Schema Codec Compiler

A Python library compiling declarative schemas into validating decoders and
encoders. A decoder turns untyped input (typically parsed JSON) into a typed
value or a path-located diagnostic; an encoder turns the value back into its
external representation.

Key Features:
- Immutable schema AST with literals, primitives, tuples, structs, arrays,
  unions, recursive (lazy) references, refinements and transforms
- Warnings for recoverable anomalies (unexpected keys, NaN) alongside failures
- Provider registry for custom declared types
- Pydantic model introspection

Quick Start:
    >>> from schemacodec import Codec, struct, string, number
    >>>
    >>> Person = Codec(struct({"name": string}, {"age": number}))
    >>> Person.decode({"name": "Ada", "age": 36})
    DecodeSuccess(value={'name': 'Ada', 'age': 36})
    >>> Person.decode({"name": 1}).render()
    '/name 1 did not satisfy is(string)'
    >>> Person.stringify({"name": "Ada"})
    '{"name":"Ada"}'
"""

from __future__ import annotations

from .codec import (
    MISSING,
    Capability,
    Codec,
    DecodeFailure,
    DecodeResult,
    DecodeSuccess,
    DecodeWarning,
    Field,
    PrimitiveKind,
    ProviderRegistry,
    Schema,
    Severity,
    codec_for,
    compile_decoder,
    compile_encoder,
    compile_guard,
    default_registry,
    failure,
    render_value,
    success,
    warning,
)
from .codec.refinements import (
    ends_with,
    finite,
    greater_than,
    integer,
    length,
    less_than,
    max_length,
    maximum,
    min_length,
    minimum,
    pattern,
    refine,
    starts_with,
)
from .codec.schema import (
    any_,
    array,
    bigint,
    boolean,
    declare,
    extend,
    json,
    json_array,
    json_object,
    lazy,
    literal,
    literals,
    never,
    number,
    optional,
    partial,
    string,
    string_index_signature,
    struct,
    transform,
    tuple_,
    union,
    unknown,
    unknown_array,
    unknown_object,
    with_rest,
)
from .config import CodecConfig
from .data import (
    datetime_from_string,
    enum_,
    instance_of,
    integer_from_string,
    number_from_string,
    register_builtins,
    set_of,
)
from .exceptions import (
    ConfigurationError,
    DecodeError,
    EncodeError,
    ProviderAlreadyRegisteredError,
    SchemacodecError,
    SchemaError,
)
from .models import schema_from_model
from .utils import describe

__version__ = "0.1.0"

__all__ = [
    # Codec
    "Codec",
    "codec_for",
    "CodecConfig",
    "compile_decoder",
    "compile_encoder",
    "compile_guard",
    # Results
    "DecodeResult",
    "DecodeSuccess",
    "DecodeWarning",
    "DecodeFailure",
    "MISSING",
    "success",
    "warning",
    "failure",
    "render_value",
    # Schema model
    "Schema",
    "Field",
    "PrimitiveKind",
    "Severity",
    "string",
    "number",
    "boolean",
    "bigint",
    "unknown",
    "any_",
    "never",
    "json",
    "json_array",
    "json_object",
    "unknown_array",
    "unknown_object",
    "literal",
    "literals",
    "tuple_",
    "with_rest",
    "struct",
    "partial",
    "string_index_signature",
    "extend",
    "array",
    "union",
    "optional",
    "lazy",
    "transform",
    "declare",
    # Refinements
    "refine",
    "min_length",
    "max_length",
    "length",
    "pattern",
    "starts_with",
    "ends_with",
    "minimum",
    "maximum",
    "greater_than",
    "less_than",
    "integer",
    "finite",
    # Registry
    "Capability",
    "ProviderRegistry",
    "default_registry",
    # Data types
    "instance_of",
    "set_of",
    "enum_",
    "register_builtins",
    "number_from_string",
    "integer_from_string",
    "datetime_from_string",
    # Models
    "schema_from_model",
    # Utilities
    "describe",
    # Exceptions
    "SchemacodecError",
    "SchemaError",
    "ConfigurationError",
    "ProviderAlreadyRegisteredError",
    "EncodeError",
    "DecodeError",
    # Version
    "__version__",
]

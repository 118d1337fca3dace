#!/usr/bin/env python3
"""Basic usage example for schemacodec.

This example demonstrates:
1. Defining a schema from constructors
2. Decoding untyped input into values, warnings and failures
3. Encoding values back to JSON
4. Deriving a schema from a Pydantic model
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from schemacodec import (
    Codec,
    CodecConfig,
    DecodeError,
    array,
    describe,
    min_length,
    number,
    number_from_string,
    schema_from_model,
    string,
    struct,
    tuple_,
    union,
)


# Define a Pydantic model
class StatusReport(BaseModel):
    """Underwater vehicle status report."""

    vehicle_id: int = Field(ge=0, le=255, description="Vehicle ID (0-255)")
    callsign: str = Field(min_length=1, max_length=8)
    depth_m: Optional[float] = None


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("schemacodec Basic Usage Example")
    print("=" * 60)
    print()

    # Build a schema
    print("1. Building a schema...")
    Person = struct({"firstName": min_length(string, 1), "lastName": string}, {"scores": array(number)})
    print(f"   {describe(Person)}")
    print()

    codec = Codec(Person)

    # Decode
    print("2. Decoding...")
    for document in (
        {"firstName": "Michael", "lastName": "Arnaldi"},
        {"firstName": "Michael", "lastName": "Arnaldi", "age": 42},
        {"firstName": "Michael", "scores": [1, "2"]},
    ):
        result = codec.decode(document)
        if result.is_failure:
            print(f"   FAILURE {result.render()}")
        elif result.is_warning:
            print(f"   WARNING {result.render()} -> {result.value}")
        else:
            print(f"   OK      {result.value}")
    print()

    # Encode
    print("3. Encoding...")
    pairs = Codec(array(tuple_(string, union(number_from_string(), string))))
    decoded = pairs.decode_or_raise([["a", "1.5"], ["b", "x"]])
    print(f"   decoded: {decoded}")
    print(f"   JSON:    {pairs.stringify(decoded)}")
    print()

    # Pydantic models
    print("4. Pydantic models...")
    reports = Codec(schema_from_model(StatusReport), config=CodecConfig(indent=2))
    print(f"   {describe(reports.schema)}")
    report = reports.parse_or_raise('{"vehicle_id": 42, "callsign": "AUV1"}')
    print(f"   {report!r}")
    print(reports.stringify(report))

    try:
        reports.parse_or_raise('{"vehicle_id": 300, "callsign": "AUV1"}')
    except DecodeError as e:
        print(f"   Rejected: {e}")

    print()
    print("=" * 60)
    print("Example completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()

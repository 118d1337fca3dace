#!/usr/bin/env python3
"""Example schema definitions.

This file is also the target of the CLI:

    schemacodec --analyze examples/schemas.py
    echo '{"firstName": "Michael", "lastName": "Arnaldi"}' | \\
        schemacodec --validate examples/schemas.py:Person
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from schemacodec import (
    Codec,
    array,
    integer,
    lazy,
    maximum,
    min_length,
    minimum,
    number,
    number_from_string,
    optional,
    string,
    string_index_signature,
    struct,
    union,
)

# Plain schemas
Person = struct({"firstName": min_length(string, 1), "lastName": string}, {"age": integer(number)})

Tags = string_index_signature(array(string))

# Numbers arriving either as JSON numbers or as text
Reading = union(number, number_from_string())

# Recursive schema
Category = lazy(lambda: struct({"name": string, "subcategories": array(Category)}))

# A compiled codec is picked up through its schema
Percent = Codec(maximum(minimum(number, 0), 100))


class StatusReport(BaseModel):
    """Vehicle status report."""

    vehicle_id: int = Field(ge=0, le=255)
    callsign: str = Field(min_length=1, max_length=8)
    depth_m: Optional[float] = None
    notes: List[str] = []


def main() -> None:
    """Decode a few documents and print the outcome."""
    codec = Codec(Person)
    for document in (
        {"firstName": "Michael", "lastName": "Arnaldi"},
        {"firstName": "Michael", "lastName": "Arnaldi", "nickname": "mikearnaldi"},
        {"firstName": "", "lastName": "Arnaldi"},
    ):
        result = codec.decode(document)
        if result.is_failure:
            print(f"FAILURE {result.render()}")
        elif result.is_warning:
            print(f"WARNING {result.render()} -> {codec.stringify(result.value)}")
        else:
            print(f"OK {codec.stringify(result.value)}")

    print(Codec(optional(Reading)).decode("1.5"))


if __name__ == "__main__":
    main()

"""Configuration for codec text rendering.

This module provides the configuration dataclass consumed by ``Codec.stringify``.
Decoding and encoding themselves have no tunables: their behavior is fully
determined by the schema.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class CodecConfig:
    """Configuration for JSON rendering of encoded values.

    Attributes:
        indent: Indentation for pretty output (default None = compact output
            with no whitespace between tokens, e.g. ``{"a":1}``)
        sort_keys: Sort object keys in the output (default False, which keeps
            declaration order)
        ensure_ascii: Escape non-ASCII characters (default False)
        allow_nan: Render NaN/Infinity tokens instead of raising ValueError
            (default True, matching the number schema which accepts NaN with
            a warning)

    Examples:
        ```python
        from schemacodec import Codec, CodecConfig

        # Human-readable output
        config = CodecConfig(indent=2, sort_keys=True)
        codec = Codec(Person, config=config)

        # Strict JSON: refuse to emit NaN
        strict = CodecConfig(allow_nan=False)
        ```
    """

    indent: Optional[int] = None
    sort_keys: bool = False
    ensure_ascii: bool = False
    allow_nan: bool = True

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.indent is not None and self.indent < 0:
            raise ValueError(f"indent must be >= 0, got {self.indent}")

    def json_dumps_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``json.dumps`` implementing this configuration."""
        kwargs: Dict[str, Any] = {
            "sort_keys": self.sort_keys,
            "ensure_ascii": self.ensure_ascii,
            "allow_nan": self.allow_nan,
        }
        if self.indent is None:
            kwargs["separators"] = (",", ":")
        else:
            kwargs["indent"] = self.indent
        return kwargs

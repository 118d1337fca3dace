"""Main CLI entry point for schemacodec."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .. import __version__
from ..exceptions import SchemacodecError
from .analyze import analyze_file, validate_file


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the schemacodec CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        prog="schemacodec",
        description="schemacodec: Schema Codec Compiler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  schemacodec --analyze schemas.py                            Describe schemas
  schemacodec --validate schemas.py:Person --input data.json  Decode a JSON file
  schemacodec --version                                       Show version
        """,
    )

    parser.add_argument(
        "--analyze",
        metavar="FILE",
        type=str,
        help="Describe every schema, codec and Pydantic model defined in FILE",
    )

    parser.add_argument(
        "--validate",
        metavar="FILE:NAME",
        type=str,
        help="Decode the --input document with schema NAME from FILE",
    )

    parser.add_argument(
        "--input",
        metavar="JSON",
        type=str,
        default="-",
        help="JSON document for --validate ('-' reads standard input, the default)",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"schemacodec {__version__}",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # Handle --analyze
    if args.analyze:
        file_path = Path(args.analyze)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

        try:
            analyze_file(file_path)
            return 0
        except (SchemacodecError, ValueError, ImportError, SyntaxError) as e:
            print(f"Error analyzing file: {e}", file=sys.stderr)
            return 1

    # Handle --validate
    if args.validate:
        try:
            return validate_file(args.validate, args.input)
        except (SchemacodecError, ValueError, ImportError, SyntaxError, OSError) as e:
            # json.JSONDecodeError is a ValueError
            print(f"Error validating input: {e}", file=sys.stderr)
            return 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())


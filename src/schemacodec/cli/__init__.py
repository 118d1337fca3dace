"""Command line interface for schemacodec."""

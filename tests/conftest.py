"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from schemacodec import ProviderRegistry, default_registry
from schemacodec.codec.schema import TransformSchema
from schemacodec.data import number_from_string


@pytest.fixture
def number_from_string_schema() -> TransformSchema:
    """Number carried as text."""
    return number_from_string()


@pytest.fixture
def empty_registry() -> ProviderRegistry:
    """Registry with no providers at all."""
    return ProviderRegistry()


@pytest.fixture
def scoped_registry() -> ProviderRegistry:
    """Copy of the default registry, safe to extend inside a test."""
    return default_registry.copy()

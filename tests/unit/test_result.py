"""Unit tests for decode results and diagnostic rendering."""

from __future__ import annotations

import dataclasses

import pytest

from schemacodec import MISSING, DecodeFailure, DecodeSuccess, DecodeWarning, failure, render_value, success, warning
from schemacodec.codec.result import render_path, union_failure, unsatisfied


class TestRenderValue:
    """Test value rendering in diagnostics."""

    def test_json_values(self) -> None:
        """Values render as compact JSON."""
        assert render_value("a") == '"a"'
        assert render_value(1) == "1"
        assert render_value(None) == "null"
        assert render_value(True) == "true"
        assert render_value({"a": [1, None]}) == '{"a":[1,null]}'
        assert render_value([]) == "[]"

    def test_missing(self) -> None:
        """Absent members render as undefined."""
        assert render_value(MISSING) == "undefined"

    def test_non_json_values_fall_back_to_repr(self) -> None:
        """Values json cannot encode use repr."""
        assert render_value(b"ab") == "b'ab'"
        assert render_value(frozenset()) == "frozenset()"

    def test_missing_is_a_singleton(self) -> None:
        """MISSING is falsy and unique."""
        assert not MISSING
        assert type(MISSING)() is MISSING


class TestRenderPath:
    """Test path rendering."""

    def test_segments(self) -> None:
        assert render_path(()) == ""
        assert render_path(("as", 0)) == "/as /0"


class TestResults:
    """Test the three result variants."""

    def test_success(self) -> None:
        result = success(1)
        assert result == DecodeSuccess(1)
        assert result.is_success and result.has_value
        assert not result.is_warning and not result.is_failure

    def test_warning(self) -> None:
        result = warning("key is unexpected", {"a": 1}, ("c",))
        assert result == DecodeWarning(("c",), "key is unexpected", {"a": 1})
        assert result.is_warning and result.has_value
        assert result.render() == "/c key is unexpected"
        assert str(result) == "/c key is unexpected"

    def test_failure(self) -> None:
        result = failure("1 did not satisfy is(string)")
        assert result.is_failure and not result.has_value
        assert result.render() == "1 did not satisfy is(string)"

    def test_prefixed_prepends_segments(self) -> None:
        """Nested locations accumulate outermost first."""
        result = failure("1 did not satisfy is(mapping)").prefixed(0).prefixed("as").prefixed(0).prefixed("as")
        assert result.path == ("as", 0, "as", 0)
        assert result.render() == "/as /0 /as /0 1 did not satisfy is(mapping)"

    def test_prefixed_keeps_warning_value(self) -> None:
        result = warning("did not satisfy not(isNaN)", 1).prefixed("b")
        assert result.value == 1
        assert result.render() == "/b did not satisfy not(isNaN)"

    def test_results_are_immutable(self) -> None:
        result = failure("x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.message = "y"  # type: ignore[misc]


class TestMessageComposition:
    """Test standard failure messages."""

    def test_unsatisfied(self) -> None:
        assert unsatisfied("a", "isEqual(1)").render() == '"a" did not satisfy isEqual(1)'
        assert unsatisfied(MISSING, "is(number)").render() == "undefined did not satisfy is(number)"

    def test_union_failure(self) -> None:
        """Member failures are listed in member order with their paths."""
        members = [
            unsatisfied(None, "is(string)"),
            unsatisfied(1, "is(string)").prefixed("a"),
        ]
        result = union_failure(members)
        assert isinstance(result, DecodeFailure)
        assert result.path == ()
        assert result.render() == "member 0 null did not satisfy is(string), member 1 /a 1 did not satisfy is(string)"

"""Unit tests for the decoder compiler."""

from __future__ import annotations

import math

import pytest

from schemacodec import (
    Codec,
    DecodeFailure,
    DecodeSuccess,
    DecodeWarning,
    array,
    bigint,
    boolean,
    compile_decoder,
    extend,
    json,
    json_array,
    json_object,
    literal,
    literals,
    never,
    number,
    optional,
    partial,
    string,
    string_index_signature,
    struct,
    success,
    transform,
    tuple_,
    union,
    unknown,
    unknown_array,
    unknown_object,
    warning,
    with_rest,
)


def expect_failure(decode, value, message: str) -> None:
    result = decode(value)
    assert isinstance(result, DecodeFailure), result
    assert result.render() == message


def expect_warning(decode, value, message: str, expected) -> None:
    result = decode(value)
    assert isinstance(result, DecodeWarning), result
    assert result.render() == message
    assert result.value == expected


class TestLiteral:
    """Test literal matching."""

    def test_matches_value(self) -> None:
        decode = compile_decoder(literal(1))
        assert decode(1) == DecodeSuccess(1)

    def test_rejects_other_value(self) -> None:
        decode = compile_decoder(literal(1))
        expect_failure(decode, "a", '"a" did not satisfy isEqual(1)')

    def test_booleans_are_not_numbers(self) -> None:
        decode = compile_decoder(literal(1))
        expect_failure(decode, True, "true did not satisfy isEqual(1)")

    def test_structural_equality(self) -> None:
        decode = compile_decoder(literal({"a": [1, None]}))
        assert decode({"a": [1, None]}).is_success
        expect_failure(decode, {"a": [1]}, '{"a":[1]} did not satisfy isEqual({"a":[1,null]})')

    def test_literals_union(self) -> None:
        decode = compile_decoder(literals("a", "b"))
        assert decode("b") == DecodeSuccess("b")
        expect_failure(
            decode,
            "c",
            'member 0 "c" did not satisfy isEqual("a"), member 1 "c" did not satisfy isEqual("b")',
        )


class TestPrimitive:
    """Test primitive type tests."""

    def test_string(self) -> None:
        decode = compile_decoder(string)
        assert decode("a") == DecodeSuccess("a")
        expect_failure(decode, 1, "1 did not satisfy is(string)")

    def test_number(self) -> None:
        decode = compile_decoder(number)
        assert decode(1) == DecodeSuccess(1)
        assert decode(1.5) == DecodeSuccess(1.5)
        expect_failure(decode, True, "true did not satisfy is(number)")
        expect_failure(decode, "1", '"1" did not satisfy is(number)')

    def test_number_nan_is_a_warning(self) -> None:
        decode = compile_decoder(number)
        result = decode(math.nan)

        assert isinstance(result, DecodeWarning)
        assert result.render() == "did not satisfy not(isNaN)"
        assert result.value is math.nan

    def test_boolean(self) -> None:
        decode = compile_decoder(boolean)
        assert decode(False) == DecodeSuccess(False)
        expect_failure(decode, 0, "0 did not satisfy is(boolean)")

    def test_bigint(self) -> None:
        decode = compile_decoder(bigint)
        assert decode(10**30) == DecodeSuccess(10**30)
        expect_failure(decode, 1.5, "1.5 did not satisfy is(bigint)")

    def test_unknown_accepts_anything(self) -> None:
        decode = compile_decoder(unknown)
        for value in (None, 1, "a", [1], {"a": object}):
            assert decode(value).is_success

    def test_never(self) -> None:
        decode = compile_decoder(never)
        expect_failure(decode, 1, "1 did not satisfy is(never)")

    def test_json(self) -> None:
        decode = compile_decoder(json)
        assert decode({"a": [1, None, True, "x"]}).is_success
        expect_failure(decode, math.nan, "NaN did not satisfy is(json)")
        assert decode({1: "a"}).is_failure

    def test_json_array_and_object(self) -> None:
        assert compile_decoder(json_array)([1, "a"]).is_success
        expect_failure(compile_decoder(json_array), {}, "{} did not satisfy is(jsonArray)")
        assert compile_decoder(json_object)({"a": 1}).is_success
        expect_failure(compile_decoder(json_object), [], "[] did not satisfy is(jsonObject)")

    def test_untyped_containers(self) -> None:
        assert compile_decoder(unknown_array)([object()]).is_success
        expect_failure(compile_decoder(unknown_array), "ab", '"ab" did not satisfy is(sequence)')
        assert compile_decoder(unknown_object)({"a": object()}).is_success
        expect_failure(compile_decoder(unknown_object), None, "null did not satisfy is(mapping)")


class TestTuple:
    """Test tuple decoding."""

    def test_baseline(self) -> None:
        decode = compile_decoder(tuple_(string, number))
        assert decode(["a", 1]) == DecodeSuccess(["a", 1])
        assert decode(("a", 1)) == DecodeSuccess(["a", 1])

        expect_failure(decode, {}, "{} did not satisfy is(sequence)")
        expect_failure(decode, ["a"], "/1 undefined did not satisfy is(number)")
        expect_warning(decode, ["a", math.nan], "/1 did not satisfy not(isNaN)", ["a", math.nan])

    def test_absent_unknown_element_decodes_to_none(self) -> None:
        decode = compile_decoder(tuple_(string, unknown))
        assert decode(["a"]) == DecodeSuccess(["a", None])

    def test_additional_indexes_raise_a_warning(self) -> None:
        decode = compile_decoder(tuple_(string, number))
        result = decode(["a", 1, True])

        assert isinstance(result, DecodeWarning)
        assert result.path == (2,)
        assert result.message == "index is unexpected"
        assert result.value == ["a", 1]
        assert result.render() == "/2 index is unexpected"

    def test_only_first_extra_index_is_reported(self) -> None:
        decode = compile_decoder(tuple_(string))
        expect_warning(decode, ["a", 1, 2], "/1 index is unexpected", ["a"])

    def test_with_rest(self) -> None:
        decode = compile_decoder(with_rest(tuple_(string, number), boolean))
        assert decode(["a", 1]) == DecodeSuccess(["a", 1])
        assert decode(["a", 1, True]) == DecodeSuccess(["a", 1, True])
        assert decode(["a", 1, True, False]) == DecodeSuccess(["a", 1, True, False])

        expect_failure(decode, ["a", 1, True, "a", True], '/3 "a" did not satisfy is(boolean)')

    def test_first_failing_element_short_circuits(self) -> None:
        decode = compile_decoder(tuple_(string, number))
        expect_failure(decode, [1, "a"], "/0 1 did not satisfy is(string)")


class TestStruct:
    """Test struct decoding."""

    def test_string_keys(self) -> None:
        decode = compile_decoder(struct({"a": string, "b": number}))
        assert decode({"a": "a", "b": 1}) == DecodeSuccess({"a": "a", "b": 1})

        expect_failure(decode, None, "null did not satisfy is(mapping)")
        expect_failure(decode, {"a": "a", "b": "a"}, '/b "a" did not satisfy is(number)')
        expect_failure(decode, {"a": 1, "b": "a"}, "/a 1 did not satisfy is(string)")

        expect_warning(
            decode, {"a": "a", "b": math.nan}, "/b did not satisfy not(isNaN)", {"a": "a", "b": math.nan}
        )

    def test_additional_fields_raise_a_warning(self) -> None:
        decode = compile_decoder(struct({"a": string, "b": number}))
        result = decode({"a": "a", "b": 1, "c": True})

        assert isinstance(result, DecodeWarning)
        assert result.path == ("c",)
        assert result.message == "key is unexpected"
        assert result.value == {"a": "a", "b": 1}

    def test_missing_required_field(self) -> None:
        decode = compile_decoder(struct({"a": string}))
        expect_failure(decode, {}, "/a undefined did not satisfy is(string)")

    def test_absent_unknown_field_decodes_to_none(self) -> None:
        codec = Codec(struct({"a": unknown, "b": string}))
        result = codec.decode({"b": "x"})
        assert result == DecodeSuccess({"a": None, "b": "x"})
        assert codec.stringify(result.value) == '{"a":null,"b":"x"}'

        only = Codec(struct({"a": unknown}))
        assert only.stringify(only.decode_or_raise({})) == '{"a":null}'

    def test_optional_fields(self) -> None:
        decode = compile_decoder(struct({"a": string}, {"b": number}))
        assert decode({"a": "a"}) == DecodeSuccess({"a": "a"})
        assert decode({"a": "a", "b": 1}) == DecodeSuccess({"a": "a", "b": 1})
        expect_failure(decode, {"a": "a", "b": "x"}, '/b "x" did not satisfy is(number)')

    def test_partial_does_not_fail_on_missing_fields(self) -> None:
        decode = compile_decoder(partial(struct({"a": string, "b": number})))
        assert decode({}) == DecodeSuccess({})

    def test_string_index_signature(self) -> None:
        decode = compile_decoder(string_index_signature(number))
        assert decode({}) == DecodeSuccess({})
        assert decode({"a": 1}) == DecodeSuccess({"a": 1})

        expect_failure(decode, [], "[] did not satisfy is(mapping)")
        expect_failure(decode, {"a": "a"}, '/a "a" did not satisfy is(number)')
        expect_warning(decode, {"a": math.nan}, "/a did not satisfy not(isNaN)", {"a": math.nan})

    def test_extend_with_index_signature(self) -> None:
        decode = compile_decoder(extend(struct({"a": string}), string_index_signature(string)))
        assert decode({"a": "a"}) == DecodeSuccess({"a": "a"})
        assert decode({"a": "a", "b": "b"}) == DecodeSuccess({"a": "a", "b": "b"})

        expect_failure(decode, {}, "/a undefined did not satisfy is(string)")
        expect_failure(decode, {"b": "b"}, "/a undefined did not satisfy is(string)")
        expect_failure(decode, {"a": 1}, "/a 1 did not satisfy is(string)")
        expect_failure(decode, {"a": "a", "b": 1}, "/b 1 did not satisfy is(string)")

    def test_field_warning_precedes_unexpected_key(self) -> None:
        decode = compile_decoder(struct({"a": number}))
        expect_warning(
            decode, {"z": 1, "a": math.nan}, "/a did not satisfy not(isNaN)", {"a": math.nan}
        )

    def test_failure_after_warning_wins(self) -> None:
        decode = compile_decoder(struct({"a": number, "b": string}))
        expect_failure(decode, {"a": math.nan, "b": 1}, "/b 1 did not satisfy is(string)")

    def test_output_is_a_new_dict(self) -> None:
        decode = compile_decoder(struct({"a": string}))
        value = {"a": "a"}
        result = decode(value)
        assert result.value == value
        assert result.value is not value


class TestArray:
    """Test array decoding."""

    def test_baseline(self) -> None:
        decode = compile_decoder(array(string))
        assert decode([]) == DecodeSuccess([])
        assert decode(["a"]) == DecodeSuccess(["a"])

        expect_failure(decode, None, "null did not satisfy is(sequence)")
        expect_failure(decode, [1], "/0 1 did not satisfy is(string)")

    def test_element_warnings_propagate(self) -> None:
        decode = compile_decoder(array(number))
        expect_warning(decode, [1, math.nan, 3], "/1 did not satisfy not(isNaN)", [1, math.nan, 3])


class TestUnion:
    """Test union decoding."""

    def test_baseline(self) -> None:
        decode = compile_decoder(union(string, number))
        assert decode("a") == DecodeSuccess("a")
        assert decode(1) == DecodeSuccess(1)

        expect_failure(
            decode,
            None,
            "member 0 null did not satisfy is(string), member 1 null did not satisfy is(number)",
        )

    def test_empty_union(self) -> None:
        decode = compile_decoder(union())
        expect_failure(decode, 1, "1 did not satisfy is(never)")

    def test_member_order_is_priority(self, number_from_string_schema) -> None:
        decode = compile_decoder(union(number_from_string_schema, string))
        assert decode("1").value == 1
        assert decode("a") == DecodeSuccess("a")

        expect_failure(
            decode,
            None,
            "member 0 null did not satisfy is(string), member 1 null did not satisfy is(string)",
        )

    def test_member_warning_propagates(self) -> None:
        decode = compile_decoder(union(string, number))
        result = decode(math.nan)
        assert isinstance(result, DecodeWarning)
        assert result.render() == "did not satisfy not(isNaN)"

    def test_nested_member_failures_keep_their_paths(self) -> None:
        decode = compile_decoder(union(struct({"a": string}), array(number)))
        expect_failure(
            decode,
            {"a": 1},
            "member 0 /a 1 did not satisfy is(string), member 1 {\"a\":1} did not satisfy is(sequence)",
        )

    def test_optional(self) -> None:
        decode = compile_decoder(optional(number))
        assert decode(None) == DecodeSuccess(None)
        assert decode(1) == DecodeSuccess(1)

        expect_failure(
            decode,
            {},
            "member 0 {} did not satisfy isEqual(null), member 1 {} did not satisfy is(number)",
        )

        result = decode(math.nan)
        assert isinstance(result, DecodeWarning)
        assert result.render() == "did not satisfy not(isNaN)"
        assert math.isnan(result.value)


class TestTransform:
    """Test transform decoding."""

    def test_forward_runs_after_base(self) -> None:
        upper = transform(string, string, lambda s: success(s.upper()), str.lower, "upper")
        decode = compile_decoder(upper)
        assert decode("ab") == DecodeSuccess("AB")
        expect_failure(decode, 1, "1 did not satisfy is(string)")

    def test_base_warning_keeps_transformed_value(self) -> None:
        doubled = transform(number, number, lambda n: success(n * 2), lambda n: n / 2, "double")
        result = compile_decoder(array(doubled))([1, math.nan])

        assert isinstance(result, DecodeWarning)
        assert result.render() == "/1 did not satisfy not(isNaN)"
        assert result.value[0] == 2
        assert math.isnan(result.value[1])

    def test_forward_warning_is_returned(self) -> None:
        flagged = transform(string, string, lambda s: warning("was trimmed", s.strip()), str, "trim")
        result = compile_decoder(flagged)(" a ")
        assert result == DecodeWarning((), "was trimmed", "a")


@pytest.mark.parametrize(
    "schema",
    [string, number, tuple_(string), struct({"a": string}), array(string), union(string)],
)
def test_decoders_never_raise_on_foreign_input(schema) -> None:
    """Decoders report failures as values, whatever the input."""
    decode = compile_decoder(schema)
    for value in (None, object(), b"bytes", {1, 2}, 3j):
        assert isinstance(decode(value), DecodeFailure)

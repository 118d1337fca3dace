"""Property-based tests using hypothesis."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from schemacodec import (
    Codec,
    DecodeFailure,
    DecodeSuccess,
    DecodeWarning,
    array,
    boolean,
    json,
    lazy,
    number,
    number_from_string,
    optional,
    string,
    string_index_signature,
    struct,
    tuple_,
    union,
)

finite_floats = st.floats(allow_nan=False, allow_infinity=False)
numbers = st.one_of(st.integers(min_value=-(2**53), max_value=2**53), finite_floats)

json_values = st.recursive(
    st.none() | st.booleans() | numbers | st.text(max_size=5),
    lambda children: st.lists(children, max_size=4) | st.dictionaries(st.text(max_size=5), children, max_size=4),
    max_leaves=20,
)

Pair = tuple_(string, number_from_string())
Person = struct({"name": string, "scores": array(number)}, {"nickname": optional(string)})
Tree = lazy(lambda: struct({"value": number, "children": array(Tree)}))

trees = st.recursive(
    st.builds(lambda value: {"value": value, "children": []}, numbers),
    lambda children: st.builds(lambda value, kids: {"value": value, "children": kids}, numbers, st.lists(children, max_size=3)),
    max_leaves=10,
)


class TestCodecProperties:
    """Property-based tests for codec."""

    @given(name=st.text(), value=finite_floats)
    def test_encode_decode_roundtrip(self, name: str, value: float) -> None:
        """Decoding an encoded value gives the value back."""
        codec = Codec(Pair)
        assert codec.decode(codec.encode([name, value])) == DecodeSuccess([name, value])

    @given(value=json_values)
    def test_decoders_are_total(self, value: object) -> None:
        """Every input yields exactly one result and nothing raises."""
        for schema in (Pair, Person, Tree, union(string, number), array(boolean)):
            result = Codec(schema).decode(value)
            assert isinstance(result, (DecodeSuccess, DecodeWarning, DecodeFailure))

    @given(value=json_values)
    def test_json_accepts_json(self, value: object) -> None:
        assert Codec(json).decode(value) == DecodeSuccess(value)

    @given(tree=trees)
    def test_recursive_stringify_parse(self, tree: dict) -> None:
        """Rendered JSON parses back to the same value."""
        codec = Codec(Tree)
        assert codec.parse_or_raise(codec.stringify(tree)) == tree

    @given(
        name=st.text(),
        scores=st.lists(numbers, max_size=5),
        extra=st.text(min_size=1).filter(lambda key: key not in ("name", "scores", "nickname")),
    )
    def test_unexpected_key_is_dropped_with_warning(self, name: str, scores: list, extra: str) -> None:
        codec = Codec(Person)
        result = codec.decode({"name": name, "scores": scores, extra: True})

        assert isinstance(result, DecodeWarning)
        assert result.path == (extra,)
        assert result.value == {"name": name, "scores": scores}

    @given(value=json_values)
    def test_recognized_values_decode(self, value: object) -> None:
        """A value with the decoded shape never fails to decode."""
        for schema in (Person, Tree, string_index_signature(array(number)), union(string, number)):
            codec = Codec(schema)
            if codec.is_(value):
                assert not codec.decode(value).is_failure

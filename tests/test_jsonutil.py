import json

import pytest

from compkit.jsonutil import (
    Json,
    RawMessage,
    decode,
    encode,
    new_json,
    to_json,
    to_string,
)


def test_encode_is_compact_and_sorted():
    assert encode({"b": 1, "a": [1, 2]}) == b'{"a":[1,2],"b":1}'


def test_encode_escapes_html():
    assert encode("<a&b>") == b'"\\u003ca\\u0026b\\u003e"'


def test_encode_decode_round_trip():
    data = {"name": "x", "items": [1, 2.5, None, True], "nested": {"k": "ü"}}
    assert decode(encode(data)) == data


def test_decode_invalid_raises():
    with pytest.raises(ValueError):
        decode(b"{not json")


def test_to_string():
    assert json.loads(to_string({"a": 1})) == {"a": 1}
    assert to_string(object()) == ""


def test_to_json_navigation():
    j = to_json({"top": {"dict": {"value": 3, "name": "n"}}})
    assert j.get("top").get("dict").get("value").as_int() == 3
    assert j.get_path("top", "dict", "name").as_str() == "n"
    assert j.get("missing").data is None


def test_to_json_unencodable_gives_empty_object():
    assert to_json(object()).data == {}


def test_check_get():
    j = Json({"inner": 5})
    found = j.check_get("inner")
    assert found is not None and found.as_int() == 5
    assert j.check_get("other") is None


def test_set_and_delete():
    j = Json({})
    j.set("a", 1)
    assert j.as_dict() == {"a": 1}
    j.delete("a")
    assert j.as_dict() == {}
    scalar = Json(4)
    scalar.set("a", 1)
    assert scalar.data == 4


def test_set_path_creates_objects():
    j = Json("scalar")
    j.set_path(["a", "b"], 1)
    assert j.data == {"a": {"b": 1}}
    j.set_path(["a", "b", "c"], 2)
    assert j.data == {"a": {"b": {"c": 2}}}
    j.set_path([], [7])
    assert j.data == [7]


def test_type_conversions():
    assert Json(True).as_bool() is True
    assert Json("abc").as_bytes() == b"abc"
    assert Json([1, 2]).as_list() == [1, 2]
    assert Json(2).as_float() == 2.0
    assert Json(2.9).as_int() == 2
    assert Json(["a", None, "b"]).as_str_list() == ["a", "", "b"]


@pytest.mark.parametrize(
    "value, method",
    [
        ("s", "as_dict"),
        ({}, "as_list"),
        (1, "as_bool"),
        (1, "as_str"),
        (True, "as_int"),
        ("1", "as_float"),
        ([1], "as_str_list"),
    ],
)
def test_type_errors(value, method):
    with pytest.raises(TypeError):
        getattr(Json(value), method)()


def test_encode_pretty_round_trip():
    data = {"a": [1, 2], "b": {"c": "d"}}
    pretty = Json(data).encode_pretty()
    assert json.loads(pretty) == data
    assert b"\n  " in pretty
    assert json.loads(Json(data).encode()) == data


def test_new_json():
    assert new_json('{"x": [1]}').data == {"x": [1]}
    with pytest.raises(ValueError):
        new_json("[1,")


def test_raw_find():
    raw = RawMessage(b'{"a": [1, 2], "b": "x"}')
    assert raw.find("a") == b"[1, 2]"
    assert raw.find("b") == b'"x"'
    assert raw.find("c") is None


def test_raw_find_invalid(capsys):
    assert RawMessage(b"[1, 2]").find("a") is None
    assert "Resolve JSON Key failed" in capsys.readouterr().out


def test_raw_to_list():
    raw = RawMessage(b'[{"k": 1}, "s", 3]')
    assert raw.to_list() == [b'{"k": 1}', b'"s"', b"3"]
    assert RawMessage(b"[]").to_list() == []


def test_raw_to_list_invalid(capsys):
    assert RawMessage(b'{"a": 1}').to_list() is None
    assert "Resolve JSON List failed" in capsys.readouterr().out


def test_raw_nested_round_trip():
    inner = RawMessage(b'{"outer": {"list": [{"v": 1}, {"v": 2}]}}').find("outer")
    items = inner.find("list").to_list()
    assert [json.loads(item) for item in items] == [{"v": 1}, {"v": 2}]


def test_raw_to_string():
    assert RawMessage(b'"abc"').to_string() == "abc"
import json

import pytest

from enginekit.json_writer import JsonWriter


def test_single_key_object_layout():
    w = JsonWriter()
    w.begin_obj()
    w.key("name").string("a")
    w.end_obj()
    assert w.getvalue() == '{\n  "name": "a"\n}'


def test_empty_containers():
    w = JsonWriter()
    w.begin_obj()
    w.end_obj()
    assert w.getvalue() == "{}"

    a = JsonWriter()
    a.begin_array()
    a.end_array()
    assert a.getvalue() == "[]"


def test_nested_structure_round_trips():
    w = JsonWriter()
    w.begin_obj()
    w["name"].string("scene")
    w["entities"].begin_array()
    w.begin_obj()
    w["name"].string("cube")
    w["tags"].begin_array()
    w.string("Hidden")
    w.end_array()
    w["count"].value(3)
    w["enabled"].value(True)
    w["missing"].value(None)
    w.end_obj()
    w.end_array()
    w.end_obj()
    assert w.depth == 0
    assert json.loads(w.getvalue()) == {
        "name": "scene",
        "entities": [
            {"name": "cube", "tags": ["Hidden"], "count": 3, "enabled": True, "missing": None}
        ],
    }


def test_vec_writes_named_components():
    w = JsonWriter()
    w.vec((1.5, -2.0, 0.25))
    assert json.loads(w.getvalue()) == {"x": 1.5, "y": -2.0, "z": 0.25}


def test_quat_like_vec_has_w():
    w = JsonWriter()
    w.vec([0.0, 0.0, 0.0, 1.0])
    assert list(json.loads(w.getvalue())) == ["x", "y", "z", "w"]


def test_vec_rejects_bad_size():
    with pytest.raises(ValueError):
        JsonWriter().vec([1.0, 2.0, 3.0, 4.0, 5.0])
    with pytest.raises(ValueError):
        JsonWriter().vec([])


def test_array_of_floats_round_trips():
    values = [0.5, 1.25, -3.0, 16.0]
    w = JsonWriter()
    w.array(values)
    assert json.loads(w.getvalue()) == values


def test_float_formatting():
    w = JsonWriter()
    w.value(1.5)
    assert w.getvalue() == "1.5"


def test_string_escapes_quotes_and_newlines():
    w = JsonWriter()
    w.string('a"b\nc')
    assert json.loads(w.getvalue()) == 'a"b\nc'


def test_closing_without_opening_raises():
    with pytest.raises(ValueError):
        JsonWriter().end_obj()
    with pytest.raises(ValueError):
        JsonWriter().end_array()


def test_unsupported_value_type_raises():
    with pytest.raises(TypeError):
        JsonWriter().value(object())
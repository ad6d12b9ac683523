from __future__ import annotations

import pytest

from sgsst_connector.core.errors import FieldNotFoundError
from sgsst_connector.core.schema import (
    DataType,
    FieldDescriptor,
    SchemaLoadError,
    decode_value,
    find_field,
    infer_schema,
    load_static_schema,
    schema_from_json,
    schema_to_json,
)


def test_infer_schema_keeps_supported_types_in_order():
    schema = infer_schema({"a": "x", "b": 5, "c": True, "d": [1, 2]})

    assert [(field.name, field.data_type) for field in schema] == [
        ("a", DataType.STRING),
        ("b", DataType.NUMBER),
        ("c", DataType.BOOLEAN),
    ]
    assert all(field.concept_type.value == "DIMENSION" for field in schema)


def test_infer_schema_drops_null_nested_and_empty_keys():
    schema = infer_schema({"Placa": "ABC-123", "Km Actual": 10.5, "propietario": {"id": 1}, "notas": None, "": "x"})

    assert [field.name for field in schema] == ["placa", "km_actual"]
    assert schema[1].label == "Km Actual"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("", DataType.STRING),
        (0, DataType.NUMBER),
        (1.5, DataType.NUMBER),
        (False, DataType.BOOLEAN),
        (None, None),
        ({"k": 1}, None),
        ([1], None),
    ],
)
def test_decode_value(value, expected):
    assert decode_value(value) == expected


def test_find_field_hit_and_miss():
    schema = infer_schema({"a": "x", "b": 1})

    assert find_field(schema, "b").data_type == DataType.NUMBER
    with pytest.raises(FieldNotFoundError) as excinfo:
        find_field(schema, "nonexistent")
    assert "nonexistent" in excinfo.value.user_message
    assert excinfo.value.to_response()["errorCode"] == "FIELD_NOT_FOUND"


def test_schema_json_roundtrip_preserves_order_and_types():
    schema = infer_schema({"Zeta": 1, "alpha": "a", "Mid Value": False})

    restored = schema_from_json(schema_to_json(schema))

    assert [(f.name, f.data_type) for f in restored] == [(f.name, f.data_type) for f in schema]
    assert restored == schema


def test_schema_to_json_uses_host_shape():
    field = FieldDescriptor.from_label("Placa", DataType.STRING)

    assert field.to_dict() == {
        "name": "placa",
        "label": "Placa",
        "dataType": "STRING",
        "semantics": {"conceptType": "DIMENSION"},
    }


def test_schema_from_json_rejects_garbage():
    with pytest.raises(SchemaLoadError):
        schema_from_json("not json")
    with pytest.raises(SchemaLoadError):
        schema_from_json('{"name": "a"}')
    with pytest.raises(SchemaLoadError):
        schema_from_json('[{"name": "a", "dataType": "DATE"}]')


def test_load_static_schema_bundled():
    schema = load_static_schema()

    assert [field.name for field in schema] == ["alpha_two_code", "country", "name"]
    assert schema[0].label == "Alpha Two Code"


def test_load_static_schema_custom_file(tmp_path):
    path = tmp_path / "schema.yaml"
    path.write_text("- label: Placa\n  dataType: string\n- label: Modelo\n  dataType: NUMBER\n", encoding="utf-8")

    schema = load_static_schema(path)

    assert [(f.name, f.data_type) for f in schema] == [("placa", DataType.STRING), ("modelo", DataType.NUMBER)]


def test_load_static_schema_missing_file(tmp_path):
    with pytest.raises(SchemaLoadError):
        load_static_schema(tmp_path / "missing.yaml")

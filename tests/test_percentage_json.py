from __future__ import annotations

import json

import pytest
from pydantic import BaseModel, ValidationError

from plugin_sdk.core.errors import ParseError
from plugin_sdk.unit import Percentage, marshal_json, unmarshal_json


class TrafficWeights(BaseModel):
    primary: Percentage = Percentage()
    canary: Percentage = Percentage()


class CanaryOptions(BaseModel):
    replicas: Percentage
    suffix: str = ""


def test_marshal_emits_json_string():
    assert marshal_json(Percentage(50)) == '"50"'
    assert marshal_json(Percentage(50, True)) == '"50%"'
    assert marshal_json(Percentage()) == '"0"'


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('"75%"', Percentage(75, True)),
        ('"10"', Percentage(10, False)),
        (b'"-5%"', Percentage(-5, True)),
        (bytearray(b'"0%"'), Percentage(0, True)),
        ('  "3"  ', Percentage(3, False)),
        ('"\\u0035\\u0025"', Percentage(5, True)),
    ],
)
def test_unmarshal_decodes_json_strings(raw, expected):
    assert unmarshal_json(raw) == expected


@pytest.mark.parametrize("raw", ['"abc"', '"%"', '""', "50", "null", '{"n": 1}', "50%", '"5"0'])
def test_unmarshal_rejects_invalid_tokens(raw):
    with pytest.raises(ParseError):
        unmarshal_json(raw)


def test_unmarshal_requires_quoted_token():
    assert unmarshal_json('"50"') == Percentage(50)

    with pytest.raises(ParseError) as excinfo:
        unmarshal_json("50")

    assert excinfo.value.raw == "50"
    assert "expected a JSON string" in str(excinfo.value)


def test_unmarshal_rejects_embedded_quote_characters():
    # Literal quotes inside the string are content, not delimiters.
    with pytest.raises(ParseError):
        unmarshal_json('"\\"50\\""')


def test_encode_decode_encode_is_stable():
    for token in ('"0"', '"0%"', '"-5%"', '"75%"', '"+7"'):
        once = marshal_json(unmarshal_json(token))
        twice = marshal_json(unmarshal_json(once))
        assert once == twice


def test_model_decodes_percentage_fields_from_json():
    weights = TrafficWeights.model_validate_json('{"primary": "80%", "canary": "20"}')

    assert weights.primary == Percentage(80, True)
    assert weights.canary == Percentage(20, False)
    assert int(weights.primary) + int(weights.canary) == 100


def test_model_accepts_instances_and_python_strings():
    opts = CanaryOptions(replicas=Percentage(2))
    assert opts.replicas == Percentage(2)

    opts = CanaryOptions.model_validate({"replicas": "10%"})
    assert opts.replicas == Percentage(10, True)


def test_model_serializes_percentage_as_string():
    weights = TrafficWeights(primary="90%", canary="10%")

    assert json.loads(weights.model_dump_json()) == {"primary": "90%", "canary": "10%"}
    assert weights.model_dump(mode="json") == {"primary": "90%", "canary": "10%"}
    assert weights.model_dump()["primary"] == Percentage(90, True)


def test_zero_value_field_may_be_omitted():
    weights = TrafficWeights(primary="100%")

    assert weights.model_dump(mode="json", exclude_defaults=True) == {"primary": "100%"}
    assert TrafficWeights.model_validate_json("{}").canary.is_zero()


def test_bad_field_fails_whole_document():
    with pytest.raises(ValidationError) as excinfo:
        TrafficWeights.model_validate_json('{"primary": "80%", "canary": "twenty"}')

    errors = excinfo.value.errors()
    assert len(errors) == 1
    assert errors[0]["loc"] == ("canary",)
    assert "invalid percentage" in errors[0]["msg"]


def test_bare_json_number_is_rejected():
    with pytest.raises(ValidationError):
        CanaryOptions.model_validate_json('{"replicas": 50}')


def test_json_schema_describes_token():
    schema = CanaryOptions.model_json_schema()

    replicas = schema["properties"]["replicas"]
    assert replicas["type"] == "string"
    assert replicas["pattern"] == "^[+-]?[0-9]+%?$"
    assert schema["required"] == ["replicas"]

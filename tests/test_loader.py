import json
from dataclasses import asdict, dataclass

import cbor2
import msgpack
import pytest
import tomllib
import yaml

from assetkit.loader import (
    BytesLoader,
    CborLoader,
    JsonLoader,
    LoadFrom,
    MessagePackLoader,
    ParseLoader,
    StringLoader,
    TomlLoader,
    YamlLoader,
)


@dataclass(frozen=True)
class X:
    value: int


@dataclass(frozen=True)
class Point:
    x: int
    y: int

    @classmethod
    def from_mapping(cls, data):
        return cls(**data)


def test_string_loader_ok():
    assert StringLoader().load(b"Hello World!", "") == "Hello World!"


def test_string_loader_keeps_whitespace():
    assert StringLoader().load(b"  Hello \n", "txt") == "  Hello \n"


def test_string_loader_utf8_err():
    with pytest.raises(UnicodeDecodeError):
        StringLoader().load(b"e\xa2", "")


def test_bytes_loader_ok():
    assert BytesLoader().load(b"Hello World!", "") == b"Hello World!"
    assert BytesLoader().load(memoryview(b"Hello World!"), "") == b"Hello World!"


@pytest.mark.parametrize("n", [0, 42, -7, 2147483647, -2147483648])
def test_parse_loader_ok(n):
    assert ParseLoader(int).load(str(n).encode(), "") == n


def test_parse_loader_trims():
    assert ParseLoader(int).load(b"  42 \n", "x") == 42


def test_parse_loader_err():
    with pytest.raises(ValueError):
        ParseLoader(int).load(b"x", "")


@pytest.mark.parametrize("n", [0, 42, -2147483648])
def test_from_other(n):
    loader = LoadFrom(X, ParseLoader(int))
    assert loader.load(str(n).encode(), "") == X(n)


def test_from_other_propagates_error():
    with pytest.raises(ValueError):
        LoadFrom(X, ParseLoader(int)).load(b"x", "")


def _toml(point):
    return f"x = {point.x}\ny = {point.y}\n".encode()


def _json(point):
    return json.dumps(asdict(point)).encode()


SERIALIZERS = [
    (JsonLoader(), _json),
    (TomlLoader(), _toml),
    (YamlLoader(), lambda p: yaml.safe_dump(asdict(p)).encode()),
    (CborLoader(), lambda p: cbor2.dumps(asdict(p))),
    (MessagePackLoader(), lambda p: msgpack.packb(asdict(p))),
]


@pytest.mark.parametrize("loader, serialize", SERIALIZERS)
@pytest.mark.parametrize("point", [Point(5, -6), Point(2147483647, -2147483648)])
def test_serde_loader_ok(loader, serialize, point):
    loaded = LoadFrom(Point.from_mapping, loader).load(serialize(point), "")
    assert loaded == point


BAD = b"\x12ec\x4b"


def test_json_loader_err():
    with pytest.raises(ValueError):
        JsonLoader().load(BAD, "")


def test_toml_loader_err():
    with pytest.raises(tomllib.TOMLDecodeError):
        TomlLoader().load(BAD, "")


def test_yaml_loader_err():
    with pytest.raises(yaml.YAMLError):
        YamlLoader().load(BAD, "")


def test_msgpack_loader_err():
    with pytest.raises(ValueError):
        MessagePackLoader().load(BAD, "")


def test_cbor_loader_err():
    with pytest.raises(cbor2.CBORDecodeError):
        CborLoader().load(b"\xa2\x61", "")
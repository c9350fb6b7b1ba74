"""Loaders: how assets are built from the raw bytes of their files."""

from __future__ import annotations

import json
import tomllib
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import cbor2
import msgpack
import yaml

Content = bytes | bytearray | memoryview


class Loader(ABC):
    """Turns the raw content of a file into a value.

    The extension the file was read with is given too, which helps guessing the
    format when an asset type uses several extensions.
    """

    @abstractmethod
    def load(self, content: Content, ext: str) -> Any:
        """Builds a value from raw bytes, raising an exception on failure."""


class LoadFrom(Loader):
    """Loads a value with another loader, then converts it."""

    def __init__(self, convert: Callable[[Any], Any], loader: Loader) -> None:
        self.convert = convert
        self.loader = loader

    def load(self, content: Content, ext: str) -> Any:
        return self.convert(self.loader.load(content, ext))

    def __repr__(self) -> str:
        return f"LoadFrom({self.convert!r}, {self.loader!r})"


class BytesLoader(Loader):
    """Loads the raw bytes unchanged."""

    def load(self, content: Content, ext: str) -> bytes:
        return bytes(content)


class StringLoader(Loader):
    """Loads the content as UTF-8 text, without trimming it."""

    def load(self, content: Content, ext: str) -> str:
        return bytes(content).decode("utf-8")


class ParseLoader(Loader):
    """Parses UTF-8 text with a function, after stripping surrounding whitespace."""

    def __init__(self, parse: Callable[[str], Any]) -> None:
        self.parse = parse

    def load(self, content: Content, ext: str) -> Any:
        return self.parse(bytes(content).decode("utf-8").strip())

    def __repr__(self) -> str:
        return f"ParseLoader({self.parse!r})"


class JsonLoader(Loader):
    """Loads JSON documents."""

    def load(self, content: Content, ext: str) -> Any:
        return json.loads(bytes(content))


class TomlLoader(Loader):
    """Loads TOML documents."""

    def load(self, content: Content, ext: str) -> dict[str, Any]:
        return tomllib.loads(bytes(content).decode("utf-8"))


class YamlLoader(Loader):
    """Loads YAML documents."""

    def load(self, content: Content, ext: str) -> Any:
        return yaml.safe_load(bytes(content))


class CborLoader(Loader):
    """Loads CBOR encoded values."""

    def load(self, content: Content, ext: str) -> Any:
        return cbor2.loads(bytes(content))


class MessagePackLoader(Loader):
    """Loads MessagePack encoded values."""

    def load(self, content: Content, ext: str) -> Any:
        return msgpack.unpackb(bytes(content), raw=False)
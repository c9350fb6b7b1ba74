"""Untyped keys for stored assets and the messages describing cache changes."""

from __future__ import annotations

import enum
import functools
from abc import ABC, abstractmethod
from dataclasses import dataclass, field


def _declared_extensions(asset: type) -> tuple[str, ...]:
    extensions = getattr(asset, "EXTENSIONS", None)
    if extensions is not None:
        return tuple(extensions)
    extension = getattr(asset, "EXTENSION", None)
    if extension is not None:
        return (extension,)
    return ()


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class AssetType:
    """The type of an asset, with the file extensions it is loaded from.

    Two asset types are equal when they represent the same class. Unless given
    explicitly, the extensions come from the class's `EXTENSIONS` or
    `EXTENSION` attribute.
    """

    asset: type
    extensions: tuple[str, ...] = field(default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.extensions is None:
            extensions = _declared_extensions(self.asset)
        else:
            extensions = tuple(self.extensions)
        object.__setattr__(self, "extensions", extensions)

    def _sort_key(self) -> tuple[str, str, int]:
        return (self.asset.__module__, self.asset.__qualname__, id(self.asset))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AssetType):
            return NotImplemented
        return self.asset is other.asset

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, AssetType):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __hash__(self) -> int:
        return hash(self.asset)

    def __repr__(self) -> str:
        return f"AssetType({self.asset.__qualname__})"


@dataclass(frozen=True, order=True)
class AssetKey:
    """An untyped representation of a stored asset: its type and its id."""

    typ: AssetType
    id: str


class UpdateKind(enum.Enum):
    """The kinds of change a cache reports."""

    ADD_ASSET = "add_asset"
    REMOVE_ASSET = "remove_asset"
    CLEAR = "clear"


@dataclass(frozen=True)
class UpdateMessage:
    """A change in the content of a cache."""

    kind: UpdateKind
    key: AssetKey | None = None

    @classmethod
    def add_asset(cls, key: AssetKey) -> UpdateMessage:
        """An asset was added to the cache."""
        return cls(UpdateKind.ADD_ASSET, key)

    @classmethod
    def remove_asset(cls, key: AssetKey) -> UpdateMessage:
        """An asset was removed from the cache."""
        return cls(UpdateKind.REMOVE_ASSET, key)

    @classmethod
    def clear(cls) -> UpdateMessage:
        """Every asset was removed from the cache."""
        return cls(UpdateKind.CLEAR)


class UpdateSender(ABC):
    """Receives notifications of changes in a cache."""

    @abstractmethod
    def send_update(self, message: UpdateMessage) -> None:
        """Handles one change in the cache."""
"""Dependency tracking between assets, used to reload dependents in order."""

from __future__ import annotations

import threading
from collections.abc import Callable, Hashable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, TypeVar

T = TypeVar("T")

ReloadFn = Callable[[Any, str], "Iterable[Hashable] | None"]


@dataclass
class _AssetDeps:
    reload: ReloadFn | None = None
    rdeps: dict[Hashable, None] = field(default_factory=dict)
    deps: dict[Hashable, None] = field(default_factory=dict)


class DepsGraph:
    """Which assets each asset depends on, and which depend on it."""

    def __init__(self) -> None:
        self._nodes: dict[Hashable, _AssetDeps] = {}

    def insert(
        self,
        asset_key: Hashable,
        deps: Iterable[Hashable],
        reload: ReloadFn | None,
    ) -> None:
        """Records the dependencies of an asset and how to reload it.

        Replaces what was previously recorded for the same asset.
        """
        new_deps = dict.fromkeys(deps)
        for key in new_deps:
            self._nodes.setdefault(key, _AssetDeps()).rdeps[asset_key] = None

        entry = self._nodes.get(asset_key)
        if entry is None:
            self._nodes[asset_key] = _AssetDeps(reload=reload, deps=new_deps)
            return

        removed = [key for key in entry.deps if key not in new_deps]
        entry.deps = new_deps
        entry.reload = reload
        for key in removed:
            node = self._nodes.get(key)
            if node is not None:
                node.rdeps.pop(asset_key, None)

    def _get(self, key: Hashable) -> _AssetDeps | None:
        return self._nodes.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)


class AssetDepGraph:
    """The assets to reload after some assets changed, in a valid order.

    Every asset comes after all the assets it depends on; the changed assets
    themselves are not included.
    """

    def __init__(self, dep_graph: DepsGraph, keys: Iterable[Hashable]) -> None:
        visited: set[Hashable] = set()
        order: list[Hashable] = []

        def visit(key: Hashable, add_self: bool) -> None:
            if key in visited:
                return
            node = dep_graph._get(key)
            if node is None:
                return
            for rdep in list(node.rdeps):
                visit(rdep, True)
            visited.add(key)
            if add_self:
                order.append(key)

        for key in keys:
            visit(key, False)

        order.reverse()
        self._keys = order

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def update(self, deps: DepsGraph, cache: Any) -> None:
        """Reloads each asset, recording its new dependencies when it succeeds."""
        for key in self._keys:
            entry = deps._get(key)
            if entry is None or entry.reload is None:
                continue
            reload = entry.reload
            new_deps = reload(cache, key.id)
            if new_deps is not None:
                deps.insert(key, new_deps, reload)


class _Record:
    def __init__(self, reloader: object) -> None:
        self.reloader = reloader
        self.records: set[Hashable] = set()

    def insert(self, reloader: object, key: Hashable) -> None:
        if self.reloader is reloader:
            self.records.add(key)


_state = threading.local()


@contextmanager
def _recording(current: _Record | None) -> Iterator[None]:
    previous = getattr(_state, "record", None)
    _state.record = current
    try:
        yield
    finally:
        _state.record = previous


def record(reloader: object, f: Callable[[], T]) -> tuple[T, set[Hashable]]:
    """Calls `f` and returns its result with the keys recorded meanwhile."""
    current = _Record(reloader)
    with _recording(current):
        result = f()
    return result, current.records


def no_record(f: Callable[[], T]) -> T:
    """Calls `f` without recording the keys it loads."""
    with _recording(None):
        return f()


def add_record(reloader: object, key: Hashable) -> None:
    """Records `key` as a dependency if this thread is recording for `reloader`."""
    current = getattr(_state, "record", None)
    if current is not None:
        current.insert(reloader, key)
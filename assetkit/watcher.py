"""Hot-reloading based on filesystem events."""

from __future__ import annotations

import errno
import logging
import os
import queue
import threading
import weakref
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .keys import AssetKey, UpdateKind, UpdateMessage, UpdateSender
from .paths import DirEntry, path_of_entry

_log = logging.getLogger(__name__)

_DEBOUNCE = 0.05
_DISCONNECTED = object()
_RELOAD_EVENTS = frozenset({"modified", "created", "moved"})


class WatchedPaths:
    """Maps filesystem paths to the assets loaded from them."""

    def __init__(self, roots: Iterable[str | os.PathLike[str]]) -> None:
        self.roots = [Path(root) for root in roots]
        self._paths: dict[Path, dict[AssetKey, None]] = {}

    def _paths_of(self, asset: AssetKey) -> Iterator[Path]:
        for root in self.roots:
            for ext in asset.typ.extensions:
                yield path_of_entry(root, DirEntry.file(asset.id, ext))

    def add_asset(self, asset: AssetKey) -> None:
        """Watches every path the asset may be loaded from."""
        for path in self._paths_of(asset):
            self._paths.setdefault(path, {})[asset] = None

    def remove_asset(self, asset: AssetKey) -> None:
        """Stops watching every path the asset may be loaded from."""
        for path in self._paths_of(asset):
            self._paths.pop(path, None)

    def clear(self) -> None:
        """Stops watching every path."""
        self._paths.clear()

    def assets(self, path: str | os.PathLike[str]) -> Iterator[AssetKey]:
        """Yields the assets that depend on the file at `path`."""
        return iter(list(self._paths.get(Path(path), ())))

    def apply(self, message: UpdateMessage) -> None:
        """Updates the watched paths according to a cache change."""
        if message.kind is UpdateKind.ADD_ASSET:
            self.add_asset(message.key)
        elif message.kind is UpdateKind.REMOVE_ASSET:
            self.remove_asset(message.key)
        elif message.kind is UpdateKind.CLEAR:
            self.clear()


class QueueUpdateSender(UpdateSender):
    """Forwards cache changes into a queue."""

    def __init__(self, queue: queue.Queue) -> None:
        self.queue = queue

    def send_update(self, message: UpdateMessage) -> None:
        self.queue.put(message)


class _EventForwarder(FileSystemEventHandler):
    def __init__(self, notify: queue.Queue) -> None:
        super().__init__()
        self._notify = notify

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in _RELOAD_EVENTS:
            return
        raw = event.dest_path if event.event_type == "moved" else event.src_path
        self._notify.put(Path(os.fsdecode(raw)))


def _disconnect(updates: queue.Queue, notify: queue.Queue) -> None:
    updates.put(_DISCONNECTED)
    notify.put(_DISCONNECTED)


def _collect_changes(notify: queue.Queue) -> list[Path]:
    """Waits for filesystem changes and gathers those that follow closely."""
    changed: dict[Path, None] = {}
    item = notify.get()
    while True:
        if isinstance(item, Path):
            changed[item] = None
        try:
            item = notify.get(timeout=_DEBOUNCE)
        except queue.Empty:
            return list(changed)


def _sync(watched: WatchedPaths, updates: queue.Queue) -> bool:
    """Applies pending cache changes; returns False once the cache is gone."""
    while True:
        try:
            message = updates.get_nowait()
        except queue.Empty:
            return True
        if message is _DISCONNECTED:
            return False
        watched.apply(message)


def _translate(
    observer,
    watched: WatchedPaths,
    notify: queue.Queue,
    updates: queue.Queue,
    events: Callable[[AssetKey], object],
) -> None:
    _log.debug("Starting hot-reloading translation thread")
    try:
        while True:
            changed = _collect_changes(notify)
            if not _sync(watched, updates):
                return
            for path in changed:
                _log.debug("Received filesystem event for %s", path)
                for asset in watched.assets(path):
                    try:
                        events(asset)
                    except Exception:
                        _log.warning("Cannot deliver reload event, stopping watcher")
                        return
    finally:
        observer.stop()


class FsWatcherBuilder:
    """Built-in reloader based on filesystem events."""

    def __init__(self) -> None:
        self._roots: list[Path] = []
        self._notify: queue.Queue = queue.Queue()
        self._observer = Observer()
        self._handler = _EventForwarder(self._notify)
        self._built = False

    def _check_not_built(self) -> None:
        if self._built:
            raise RuntimeError("the watcher has already been started")

    def watch(self, path: str | os.PathLike[str]) -> None:
        """Adds a directory to watch recursively."""
        self._check_not_built()
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path))
        self._observer.schedule(self._handler, str(path), recursive=True)
        self._roots.append(path)

    def build(self, events: Callable[[AssetKey], object]) -> QueueUpdateSender:
        """Starts the watcher.

        `events` is called with the key of each asset whose file changed. The
        returned sender must be kept alive and fed the cache's changes; the
        watcher stops once it is garbage-collected.
        """
        self._check_not_built()
        self._built = True
        updates: queue.Queue = queue.Queue()
        sender = QueueUpdateSender(updates)
        weakref.finalize(sender, _disconnect, updates, self._notify)
        self._observer.start()
        thread = threading.Thread(
            target=_translate,
            args=(self._observer, WatchedPaths(self._roots), self._notify, updates, events),
            name="assets_translate",
            daemon=True,
        )
        thread.start()
        return sender

    def __repr__(self) -> str:
        return f"FsWatcherBuilder(roots={self._roots!r})"
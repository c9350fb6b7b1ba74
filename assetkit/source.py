"""Byte sources to load assets from, and the filesystem source."""

from __future__ import annotations

import copy
import errno
import os
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path

from .keys import AssetKey, UpdateSender
from .paths import DirEntry, extension_of, path_of_entry
from .watcher import FsWatcherBuilder


def _not_found(name: str) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), name)


class Source(ABC):
    """Where the bytes of assets come from, independently of the storage kind."""

    @abstractmethod
    def read(self, id: str, ext: str) -> bytes:
        """Returns the content of the file with the given id and extension.

        Raises an `OSError` (usually `FileNotFoundError`) when it cannot be read.
        """

    @abstractmethod
    def read_dir(self, id: str) -> list[DirEntry]:
        """Returns the entries of the directory with the given id."""

    @abstractmethod
    def exists(self, entry: DirEntry) -> bool:
        """Returns True if the entry points at an existing file or directory."""

    def make_source(self) -> Source | None:
        """Returns a source to use with hot-reloading, or None if unsupported."""
        return None

    def configure_hot_reloading(
        self, events: Callable[[AssetKey], object]
    ) -> UpdateSender:
        """Starts watching for changes and returns a sender for cache changes.

        `events` is called with the key of each asset that should be reloaded.
        """
        raise RuntimeError("this source does not support hot-reloading")


class Empty(Source):
    """A source that contains nothing."""

    def read(self, id: str, ext: str) -> bytes:
        raise _not_found(f"{id}.{ext}" if ext else id)

    def read_dir(self, id: str) -> list[DirEntry]:
        raise _not_found(id)

    def exists(self, entry: DirEntry) -> bool:
        return False

    def __repr__(self) -> str:
        return "Empty()"


class FileSystem(Source):
    """A source that loads assets from a directory of the filesystem."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        resolved = Path(path).resolve(strict=True)
        # Fails when the path is not a readable directory.
        os.listdir(resolved)
        self._path = resolved

    def root(self) -> Path:
        """Returns the absolute path of the source's root."""
        return self._path

    def path_of(self, entry: DirEntry) -> Path:
        """Returns the path the entry would have if it existed."""
        return path_of_entry(self._path, entry)

    def read(self, id: str, ext: str) -> bytes:
        return self.path_of(DirEntry.file(id, ext)).read_bytes()

    def read_dir(self, id: str) -> list[DirEntry]:
        entries: list[DirEntry] = []
        with os.scandir(self.path_of(DirEntry.directory(id))) as items:
            for item in items:
                path = Path(item.path)
                name = path.stem
                if not name:
                    continue
                entry_id = f"{id}.{name}" if id else name
                try:
                    if item.is_file():
                        entries.append(DirEntry.file(entry_id, extension_of(path)))
                    elif item.is_dir():
                        entries.append(DirEntry.directory(entry_id))
                except OSError:
                    continue
        return entries

    def exists(self, entry: DirEntry) -> bool:
        return self.path_of(entry).exists()

    def make_source(self) -> FileSystem:
        return copy.copy(self)

    def configure_hot_reloading(
        self, events: Callable[[AssetKey], object]
    ) -> UpdateSender:
        builder = FsWatcherBuilder()
        builder.watch(self._path)
        return builder.build(events)

    def __repr__(self) -> str:
        return f"FileSystem(root={str(self._path)!r})"
"""A source whose files are held in memory."""

from __future__ import annotations

import errno
import os
from collections.abc import Sequence
from dataclasses import dataclass

from .paths import DirEntry
from .source import Source


def _not_found(name: str) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), name)


@dataclass(frozen=True)
class RawEmbedded:
    """The raw description of embedded files.

    `files` pairs each `(id, extension)` with its content; `dirs` pairs each
    directory id with the entries it contains.
    """

    files: Sequence[tuple[tuple[str, str], bytes]] = ()
    dirs: Sequence[tuple[str, Sequence[DirEntry]]] = ()


class Embedded(Source):
    """A source that serves files held in memory."""

    def __init__(self, raw: RawEmbedded) -> None:
        self._files = {(id, ext): bytes(content) for (id, ext), content in raw.files}
        self._dirs = {id: tuple(entries) for id, entries in raw.dirs}

    def read(self, id: str, ext: str) -> bytes:
        try:
            return self._files[(id, ext)]
        except KeyError:
            raise _not_found(f"{id}.{ext}" if ext else id) from None

    def read_dir(self, id: str) -> list[DirEntry]:
        try:
            return list(self._dirs[id])
        except KeyError:
            raise _not_found(id) from None

    def exists(self, entry: DirEntry) -> bool:
        if entry.is_file():
            return (entry.id, entry.ext) in self._files
        return entry.id in self._dirs

    def __repr__(self) -> str:
        return f"Embedded(files={len(self._files)}, dirs={len(self._dirs)})"
"""A source that loads assets from a zip archive."""

from __future__ import annotations

import errno
import io
import logging
import os
import zipfile
from pathlib import PurePosixPath

from .paths import DirEntry, extension_of
from .source import Source

_log = logging.getLogger(__name__)


def _not_found(name: str) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), name)


def _enclosed_name(name: str) -> PurePosixPath | None:
    """Returns the member's path, or None if it could escape the archive."""
    if "\0" in name:
        return None
    path = PurePosixPath(name)
    if path.is_absolute():
        return None
    depth = 0
    for part in path.parts:
        if part == "..":
            depth -= 1
            if depth < 0:
                return None
        elif part != ".":
            depth += 1
    return path


class Zip(Source):
    """A source that reads its files from a zip archive."""

    def __init__(self, archive: zipfile.ZipFile) -> None:
        self._archive = archive
        self._files: dict[tuple[str, str], zipfile.ZipInfo] = {}
        self._dirs: dict[str, list[DirEntry]] = {}
        for info in archive.infolist():
            self._register(info)

    @classmethod
    def open(cls, path: str | os.PathLike[str]) -> Zip:
        """Opens the archive at the given path."""
        return cls(zipfile.ZipFile(path))

    @classmethod
    def from_bytes(cls, data: bytes) -> Zip:
        """Reads an archive held in memory."""
        return cls(zipfile.ZipFile(io.BytesIO(bytes(data))))

    def _register(self, info: zipfile.ZipInfo) -> None:
        path = _enclosed_name(info.filename)
        if path is None:
            _log.warning("Suspicious path in zip archive: %r", info.filename)
            return
        if not self._register_path(info, path):
            _log.warning("Unsupported path in zip archive: %r", info.filename)

    def _register_path(self, info: zipfile.ZipInfo, path: PurePosixPath) -> bool:
        segments: list[str] = []
        for component in path.parent.parts:
            if component == "..":
                if not segments:
                    return False
                segments.pop()
            elif component == ".":
                continue
            elif "." in component:
                return False
            else:
                segments.append(component)

        if not path.name or path.name in (".", ".."):
            return False
        parent_id = ".".join(segments)
        id = ".".join([*segments, path.stem])

        if info.is_dir():
            self._dirs.setdefault(id, [])
            entry = DirEntry.directory(id)
        else:
            ext = extension_of(path)
            self._files[(id, ext)] = info
            entry = DirEntry.file(id, ext)
        self._dirs.setdefault(parent_id, []).append(entry)
        return True

    def read(self, id: str, ext: str) -> bytes:
        info = self._files.get((id, ext))
        if info is None:
            raise _not_found(f"{id}.{ext}" if ext else id)
        return self._archive.read(info)

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
        return f"Zip(dirs={sorted(self._dirs)!r})"
"""Directory entries of a source and the filesystem paths they map to."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DirEntry:
    """An entry in a source: a file (id and extension) or a directory (id)."""

    id: str
    ext: str | None = None

    @classmethod
    def file(cls, id: str, ext: str) -> DirEntry:
        """Creates an entry for a file with an id and an extension."""
        return cls(id, ext)

    @classmethod
    def directory(cls, id: str) -> DirEntry:
        """Creates an entry for a directory."""
        return cls(id, None)

    def is_file(self) -> bool:
        """Returns True if this entry is a file."""
        return self.ext is not None

    def is_dir(self) -> bool:
        """Returns True if this entry is a directory."""
        return self.ext is None

    def parent_id(self) -> str | None:
        """Returns the id of the entry's parent, or None for the root."""
        if not self.id:
            return None
        head, _, _ = self.id.rpartition(".")
        return head


def path_of_entry(root: str | os.PathLike[str], entry: DirEntry) -> Path:
    """Returns the path that `entry` has below `root`.

    Each dot-separated segment of the id becomes a path component, and a file's
    extension is appended to the last one.
    """
    path = Path(root).joinpath(*entry.id.split("."))
    if entry.ext and path.name:
        path = path.with_name(f"{path.name}.{entry.ext}")
    return path


def extension_of(path: str | os.PathLike[str]) -> str:
    """Returns the extension of a path, or an empty string if it has none."""
    name = Path(path).name
    dot = name.rfind(".")
    if dot <= 0:
        return ""
    return name[dot + 1:]
# assetkit

Read asset files by dotted id from a directory, a zip archive or an in-memory
table, turn their bytes into values with ready-made loaders, watch the files
for changes, and work out in which order dependent assets must be reloaded.

## Ids and entries

Assets are named by dotted ids: the id `common.position` with the extension
`ron` is the file `common/position.ron` below a source's root. A
`DirEntry` (in `assetkit.paths`) names either a file (id and extension) or a
directory (id only):

```python
from assetkit.paths import DirEntry, path_of_entry

entry = DirEntry.file("example.hello.world", "txt")
entry.is_file()                      # True
entry.parent_id()                    # "example.hello"
DirEntry.directory("").parent_id()   # None: the root has no parent

path_of_entry("assets", DirEntry.file("common.position", "ron"))
# Path("assets/common/position.ron")
```

`extension_of(path)` returns a path's extension, or `""` when it has none.

## Sources

Every source derives from `assetkit.source.Source` and has
`read(id, ext) -> bytes`, `read_dir(id) -> list[DirEntry]` and
`exists(entry) -> bool`. Reading a missing file or directory raises
`FileNotFoundError`.

- `assetkit.source.FileSystem(path)` reads from a directory on disk. The
  path is resolved to an absolute one, available as `root()`; the constructor
  raises `OSError` if it is not a readable directory. `path_of(entry)` gives
  the path an entry would have.
- `assetkit.embedded.Embedded(raw)` serves the files and directories of a
  `RawEmbedded` table held in memory.
- `assetkit.zipsource.Zip.open(path)` and `Zip.from_bytes(data)` read from a
  zip archive; `Zip(zipfile_object)` wraps an already opened one. Members
  whose path could leave the archive, or whose directories contain a dot, are
  skipped with a warning.
- `assetkit.source.Empty()` contains nothing: every read fails and
  `exists` is always false.

```python
from assetkit.source import FileSystem
from assetkit.paths import DirEntry

fs = FileSystem("assets")
data = fs.read("test.b", "x")               # bytes of assets/test/b.x
for entry in fs.read_dir("test"):
    print(entry)
fs.exists(DirEntry.file("test.b", "x"))     # True
```

```python
from assetkit.embedded import Embedded, RawEmbedded
from assetkit.paths import DirEntry

source = Embedded(RawEmbedded(
    files=[(("test.b", "x"), b"-7")],
    dirs=[("test", [DirEntry.file("test.b", "x")])],
))
source.read("test.b", "x")    # b"-7"
```

## Loaders

A loader from `assetkit.loader` turns raw bytes into a value with
`load(content, ext)`, and raises when the content is not valid for it:

- `BytesLoader` returns the bytes unchanged.
- `StringLoader` decodes the bytes as UTF-8, without trimming.
- `ParseLoader(parse)` decodes UTF-8, strips surrounding whitespace, then
  calls `parse` on the text.
- `LoadFrom(convert, loader)` runs `loader`, then calls `convert` on its
  result.
- `JsonLoader`, `TomlLoader`, `YamlLoader` (safe loading), `CborLoader` and
  `MessagePackLoader` decode their formats.

```python
from dataclasses import dataclass
from assetkit.loader import LoadFrom, ParseLoader

@dataclass
class Point:
    x: int

loader = LoadFrom(Point, ParseLoader(int))
loader.load(b" 42\n", "x")    # Point(x=42)
```

## Keys and cache messages

`assetkit.keys.AssetType(cls)` represents an asset class; two are equal when
they wrap the same class. Its `extensions` come from the class's `EXTENSIONS`
or `EXTENSION` attribute unless given explicitly. `AssetKey(typ, id)` names
one stored asset.

`UpdateMessage.add_asset(key)`, `UpdateMessage.remove_asset(key)` and
`UpdateMessage.clear()` describe changes to a cache; an `UpdateSender`
receives them through `send_update(message)`.

## Hot-reloading

`FileSystem.configure_hot_reloading(events)` watches the source's root
recursively. When a watched file is modified, created or moved into place,
`events` is called with the `AssetKey` of each asset read from that file.
The returned sender decides which files are watched: feed it the
`UpdateMessage`s of your cache. Keep it alive; once it is garbage-collected
the watcher stops. Other sources raise `RuntimeError`, and their
`make_source()` returns `None`.

`assetkit.watcher.FsWatcherBuilder` does the same for any set of
directories (`watch(path)`, then `build(events)`), and `WatchedPaths` is the
mapping from file paths to asset keys that it maintains.

## Dependencies

`assetkit.dependencies.DepsGraph` stores, for each composite asset, the
keys it was built from and a reload function `reload(cache, id)` that
returns its new dependencies or `None` on failure. Given the keys of changed
assets, `AssetDepGraph(graph, keys)` lists the assets that depend on them,
each after everything it depends on; `update(graph, cache)` calls their
reload functions in that order (keys must have an `id` attribute, such as
`AssetKey`).

`record(reloader, f)` calls `f` and returns `(result, keys)`, where `keys`
holds those passed to `add_record(reloader, key)` on the same thread while
`f` ran. `no_record(f)` runs `f` with recording turned off.

## What it does not do

There is no asset cache: the package does not keep loaded values, hand out
handles, or load whole directories of assets. It provides the sources,
loaders, file watching and dependency ordering such a cache is built on;
storing values and calling the reload functions is left to your code.
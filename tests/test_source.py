import queue

import pytest

from assetkit.keys import AssetKey, AssetType, UpdateMessage
from assetkit.paths import DirEntry
from assetkit.source import Empty, FileSystem


@pytest.fixture
def assets(tmp_path):
    root = tmp_path / "assets"
    (root / "common").mkdir(parents=True)
    (root / "example").mkdir()
    (root / "test" / "read_dir" / "a").mkdir(parents=True)
    (root / "test" / "read_dir" / "b").mkdir()
    (root / "test" / "read_dir" / "c.txt").write_text("c")
    (root / "test" / "read_dir" / "d").write_text("d")
    (root / "test" / "b.x").write_bytes(b"-7")
    (root / "test" / "cache.x").write_bytes(b"42")
    return root


def _split(entries):
    files = sorted((e.id, e.ext) for e in entries if e.is_file())
    dirs = sorted(e.id for e in entries if e.is_dir())
    return files, dirs


def test_read_ok(assets):
    source = FileSystem(assets)
    assert source.read("test.b", "x") == b"-7"


def test_read_err(assets):
    source = FileSystem(assets)
    with pytest.raises(FileNotFoundError):
        source.read("test.not_found", "x")


def test_read_dir(assets):
    source = FileSystem(assets)
    files, dirs = _split(source.read_dir("test.read_dir"))
    assert files == [("test.read_dir.c", "txt"), ("test.read_dir.d", "")]
    assert dirs == ["test.read_dir.a", "test.read_dir.b"]


def test_read_root(assets):
    source = FileSystem(assets)
    _, dirs = _split(source.read_dir(""))
    assert dirs == ["common", "example", "test"]


def test_read_dir_missing(assets):
    source = FileSystem(assets)
    with pytest.raises(FileNotFoundError):
        source.read_dir("test.nothing")


def test_path_of(assets):
    fs = FileSystem(assets)
    expected = fs.root() / "test" / "a.x"
    assert fs.path_of(DirEntry.file("test.a", "x")) == expected


def test_root_is_absolute(assets):
    fs = FileSystem(assets)
    assert fs.root() == assets.resolve()
    assert fs.root().is_absolute()


def test_new_with_invalid_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        FileSystem(tmp_path / "asset")


def test_new_with_file(assets):
    with pytest.raises(NotADirectoryError):
        FileSystem(assets / "test" / "b.x")


def test_exists(assets):
    fs = FileSystem(assets)
    assert fs.exists(DirEntry.file("test.b", "x"))
    assert not fs.exists(DirEntry.file("test.b", "ron"))
    assert fs.exists(DirEntry.directory("test.read_dir"))
    assert not fs.exists(DirEntry.directory("test.missing"))


def test_make_source_has_same_root(assets):
    fs = FileSystem(assets)
    other = fs.make_source()
    assert other.root() == fs.root()
    assert other.read("test.cache", "x") == b"42"


def test_empty_source():
    empty = Empty()
    with pytest.raises(FileNotFoundError):
        empty.read("test.b", "x")
    with pytest.raises(FileNotFoundError):
        empty.read_dir("")
    assert empty.exists(DirEntry.directory("")) is False


def test_empty_does_not_support_hot_reloading():
    empty = Empty()
    assert empty.make_source() is None
    with pytest.raises(RuntimeError, match="does not support hot-reloading"):
        empty.configure_hot_reloading(lambda key: None)


class _Number:
    EXTENSION = "x"


def test_hot_reloading_reports_changed_file(assets):
    fs = FileSystem(assets)
    received = queue.Queue()
    sender = fs.configure_hot_reloading(received.put)
    key = AssetKey(AssetType(_Number), "test.b")
    sender.send_update(UpdateMessage.add_asset(key))

    path = fs.path_of(DirEntry.file("test.b", "x"))
    got = None
    for attempt in range(20):
        path.write_text(str(attempt))
        try:
            got = received.get(timeout=0.5)
            break
        except queue.Empty:
            continue
    assert got == key
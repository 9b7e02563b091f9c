import json

import pytest

from propublica990.errors import CacheReadError
from propublica990.storage.backends import LocalStorage, MemoryStorage


def test_local_storage_roundtrip_and_layout(tmp_path):
    root = tmp_path / "nested" / "_data"
    storage = LocalStorage(root)
    assert root.is_dir()
    assert storage.load("470825376") is None
    assert not storage.exists("470825376")

    storage.store("470825376", {"organization": {"name": "X"}, "filings_with_data": []})
    path = root / "470825376.json"
    assert path.exists()
    assert json.loads(path.read_text())["organization"]["name"] == "X"
    assert storage.exists("470825376")
    assert storage.list_eins() == ["470825376"]
    assert not list(root.glob("*.tmp"))


def test_local_storage_replaces_whole_file(tmp_path):
    storage = LocalStorage(tmp_path)
    storage.store("1", {"a": "x" * 500})
    storage.store("1", {"b": 1})
    assert storage.load("1") == {"b": 1}


def test_unusable_cache_dir_is_fatal(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a dir")
    with pytest.raises(OSError):
        LocalStorage(blocker / "sub")


def test_memory_storage_isolates_copies():
    rec = {"filings_with_data": [{"updated": "2022-01-01"}]}
    store = MemoryStorage({"1": rec})
    loaded = store.load("1")
    loaded["filings_with_data"].clear()
    assert store.load("1") == rec
    store.store("2", rec)
    assert store.writes == ["2"]
    assert store.list_eins() == ["1", "2"]


@pytest.mark.parametrize(
    "content",
    [b"{not json", b'{"organization": {"name": "\xff\xfe"}}', b"[]", b'"just a string"'],
)
def test_unusable_cache_file_raises_cache_read_error(tmp_path, content):
    storage = LocalStorage(tmp_path)
    (tmp_path / "1.json").write_bytes(content)
    with pytest.raises(CacheReadError) as exc:
        storage.load("1")
    assert exc.value.ein == "1"
    assert storage.exists("1")


def test_memory_storage_rejects_non_objects():
    with pytest.raises(CacheReadError):
        MemoryStorage({"1": []}).load("1")

"""Unit tests for the key-value stores."""

import json

import pytest

from resumex.contexts.storage.exceptions import StorageError
from resumex.contexts.storage.kv_store import JsonFileStore, MemoryStore


@pytest.mark.unit
@pytest.mark.parametrize("factory", ["memory", "file"])
def test_get_set_remove(factory, tmp_path):
    """Test the store contract on both implementations."""
    store = MemoryStore() if factory == "memory" else JsonFileStore(tmp_path / "storage.json")

    assert store.get("resume-storage") is None

    store.set("resume-storage", '{"state": {}}')
    store.set("hasOnboarded", "true")
    assert store.get("resume-storage") == '{"state": {}}'

    store.remove_many(["resume-storage", "hasOnboarded", "missing"])
    assert store.get("resume-storage") is None
    assert store.get("hasOnboarded") is None


@pytest.mark.unit
def test_values_must_be_strings():
    """Test non-string values are refused."""
    with pytest.raises(TypeError):
        MemoryStore().set("hasOnboarded", True)


@pytest.mark.unit
def test_file_store_preserves_text_exactly(tmp_path):
    """Test values come back byte-identical, including non-ASCII text."""
    store = JsonFileStore(tmp_path / "nested" / "storage.json")
    blob = '{"state":{"resumes":{"a":{"profile":{"name":"李明"}}}},  "version":0}'

    store.set("resume-storage", blob)

    assert JsonFileStore(tmp_path / "nested" / "storage.json").get("resume-storage") == blob
    assert list(tmp_path.joinpath("nested").iterdir()) == [tmp_path / "nested" / "storage.json"]


@pytest.mark.unit
def test_file_store_rejects_corrupt_file(tmp_path):
    """Test unreadable store files raise StorageError."""
    path = tmp_path / "storage.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageError):
        JsonFileStore(path).get("resume-storage")


@pytest.mark.unit
def test_remove_many_is_single_write(tmp_path):
    """Test both keys disappear together in one file replace."""
    path = tmp_path / "storage.json"
    store = JsonFileStore(path)
    store.set("resume-storage", "{}")
    store.set("hasOnboarded", "true")
    store.set("other", "kept")

    store.remove_many(["resume-storage", "hasOnboarded"])

    assert json.loads(path.read_text(encoding="utf-8")) == {"other": "kept"}

"""Integration tests for backup export, restore and clear against a file store."""

import asyncio
import json

import pytest

from resumex.contexts.storage.backup import (
    MSG_CLEARED,
    MSG_EXPORTED,
    MSG_INVALID_FORMAT,
    MSG_NO_DATA,
    MSG_PARSE_FAILED,
    MSG_READ_FAILED,
    MSG_RESTORE_FAILED,
    MSG_RESTORED,
    ONBOARDED_KEY,
    STORAGE_KEY,
    backup_filename,
    clear_all_data,
    export_backup,
    import_backup,
)
from resumex.contexts.storage.exceptions import StorageError
from resumex.contexts.storage.kv_store import JsonFileStore, MemoryStore
from resumex.contexts.storage.resume_store import ResumeStore


@pytest.fixture
def populated_store(tmp_path):
    kv = JsonFileStore(tmp_path / "data" / "storage.json")
    store = ResumeStore(kv)
    store.add_resume()
    store.update_profile("name", "王芳")
    kv.set(ONBOARDED_KEY, "true")
    return kv


@pytest.mark.integration
def test_export_then_import_is_byte_identical(populated_store, tmp_path):
    """Test a restored backup leaves the stored blob exactly as exported."""
    original = populated_store.get(STORAGE_KEY)

    exported = export_backup(populated_store, downloads_dir=tmp_path / "downloads")
    assert exported.success
    assert exported.message == MSG_EXPORTED
    assert exported.path.name == backup_filename()
    assert exported.path.read_text(encoding="utf-8") == original

    fresh = JsonFileStore(tmp_path / "other.json")
    restored = asyncio.run(import_backup(fresh, exported.path))

    assert restored.success
    assert restored.message == MSG_RESTORED
    assert restored.reload_required
    assert fresh.get(STORAGE_KEY) == original


@pytest.mark.integration
def test_restored_state_rehydrates(populated_store, tmp_path):
    """Test a store built over restored data sees the backed-up résumés."""
    exported = export_backup(populated_store, downloads_dir=tmp_path)
    kv = MemoryStore()
    asyncio.run(import_backup(kv, exported.path))

    store = ResumeStore(kv)

    assert len(store.resumes) == 2
    assert store.active.profile.name == "王芳"


@pytest.mark.integration
def test_export_without_data(tmp_path):
    """Test exporting an empty store reports that there is nothing to back up."""
    result = export_backup(MemoryStore(), downloads_dir=tmp_path)

    assert not result.success
    assert result.message == MSG_NO_DATA
    assert list(tmp_path.iterdir()) == []


@pytest.mark.integration
@pytest.mark.parametrize(
    "content, message",
    [
        ("{not json", MSG_PARSE_FAILED),
        (json.dumps({"version": 0}), MSG_INVALID_FORMAT),
        (json.dumps({"state": {"resumes": {}}}), MSG_INVALID_FORMAT),
        (json.dumps({"state": {"resumes": {"r": {"id": "r", "profile": {}, "modules": []}}}}), MSG_INVALID_FORMAT),
    ],
)
def test_rejected_imports_leave_blob_unchanged(populated_store, tmp_path, content, message):
    """Test invalid files are reported distinctly and nothing is written."""
    before = populated_store.get(STORAGE_KEY)
    backup = tmp_path / "bad.json"
    backup.write_text(content, encoding="utf-8")

    result = asyncio.run(import_backup(populated_store, backup))

    assert not result.success
    assert result.message == message
    assert not result.reload_required
    assert populated_store.get(STORAGE_KEY) == before


@pytest.mark.integration
def test_unreadable_file(populated_store, tmp_path):
    """Test a missing or undecodable file reports a read failure."""
    missing = asyncio.run(import_backup(populated_store, tmp_path / "missing.json"))
    assert missing.message == MSG_READ_FAILED

    binary = tmp_path / "binary.json"
    binary.write_bytes(b"\xff\xfe\x00garbage")
    undecodable = asyncio.run(import_backup(populated_store, binary))
    assert undecodable.message == MSG_READ_FAILED


@pytest.mark.integration
def test_clear_removes_state_and_onboarding_flag(populated_store):
    """Test clearing removes both keys and the next load starts from defaults."""
    result = clear_all_data(populated_store)

    assert result.success
    assert result.message == MSG_CLEARED
    assert result.reload_required
    assert populated_store.get(STORAGE_KEY) is None
    assert populated_store.get(ONBOARDED_KEY) is None
    assert ResumeStore(populated_store).active_resume_id == "default-resume"


@pytest.mark.integration
@pytest.mark.parametrize(
    "mutate",
    [
        lambda resume: resume["modules"][0].update(type="awards"),
        lambda resume: resume["modules"][0]["items"].append({"id": "i1"}),
        lambda resume: resume["settings"].update(fontSizeScale=-1),
    ],
)
def test_import_rejects_what_reload_would_discard(populated_store, tmp_path, mutate):
    """Test a backup the document model cannot load is refused and the stored résumés survive a reload."""
    before = populated_store.get(STORAGE_KEY)
    data = json.loads(before)
    active_id = data["state"]["activeResumeId"]
    mutate(data["state"]["resumes"][active_id])
    backup = tmp_path / "tampered.json"
    backup.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")

    result = asyncio.run(import_backup(populated_store, backup))

    assert not result.success
    assert result.message == MSG_INVALID_FORMAT
    assert populated_store.get(STORAGE_KEY) == before

    store = ResumeStore(populated_store)
    assert len(store.resumes) == 2
    assert store.active.profile.name == "王芳"


@pytest.mark.integration
def test_accepted_import_survives_reload_and_next_edit(tmp_path):
    """Test every résumé in an accepted backup is still there after reload and one more edit."""
    source = ResumeStore(MemoryStore())
    extra = source.add_resume()
    source.add_module("custom", "获奖情况")
    backup = tmp_path / "backup.json"
    backup.write_text(source.to_blob(), encoding="utf-8")

    kv = MemoryStore()
    assert asyncio.run(import_backup(kv, backup)).success

    store = ResumeStore(kv)
    store.update_profile("name", "赵雷")

    persisted = json.loads(kv.get(STORAGE_KEY))["state"]["resumes"]
    assert set(persisted) == {"default-resume", extra}
    assert persisted[extra]["modules"][-1]["title"] == "获奖情况"


@pytest.mark.integration
def test_import_keeps_crlf_text_verbatim(populated_store, tmp_path):
    """Test the restored blob keeps the file's line endings byte for byte."""
    pretty = json.dumps(json.loads(populated_store.get(STORAGE_KEY)), ensure_ascii=False, indent=2)
    crlf = pretty.replace("\n", "\r\n")
    backup = tmp_path / "windows.json"
    backup.write_bytes(crlf.encode("utf-8"))
    kv = MemoryStore()

    assert asyncio.run(import_backup(kv, backup)).success
    assert kv.get(STORAGE_KEY) == crlf


class FailingStore(MemoryStore):
    def set(self, key, value):
        raise StorageError("disk full")


@pytest.mark.integration
def test_persist_failure_reported_as_restore_failure(populated_store, tmp_path):
    """Test a write failure after validation reports a retryable restore failure, not a read failure."""
    exported = export_backup(populated_store, downloads_dir=tmp_path)

    result = asyncio.run(import_backup(FailingStore(), exported.path))

    assert not result.success
    assert result.message == MSG_RESTORE_FAILED
    assert not result.reload_required

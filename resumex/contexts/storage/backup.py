"""
Backup, Restore and Clear

Moves the persisted state blob in and out of the key-value store as a JSON
file. A backup file is byte-identical to the stored blob; restoring writes the
file's text back verbatim once its shape has been validated. Every operation
reports through a BackupResult and never raises for expected failures.

Examples:
    >>> result = export_backup(store, downloads_dir=Path("outs/downloads"))
    >>> result.path.name
    '简历备份_2025-03-07.json'
    >>> result = asyncio.run(import_backup(store, result.path))
    >>> result.reload_required
    True
"""

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from resumex.contexts.document.exceptions import InvalidDocumentError
from resumex.contexts.document.model import ResumeData
from resumex.contexts.storage.exceptions import StorageError
from resumex.contexts.storage.kv_store import KeyValueStore
from resumex.contexts.storage.logger import _log_debug, _log_warning, log_backup_result
from resumex.utils.downloads import save_download
from resumex.utils.timestamp import utc_today

STORAGE_KEY = "resume-storage"
ONBOARDED_KEY = "hasOnboarded"

MSG_EXPORTED = "备份文件已下载"
MSG_NO_DATA = "没有找到简历数据"
MSG_EXPORT_FAILED = "导出失败，请重试"
MSG_RESTORED = "数据恢复成功，请重新加载"
MSG_INVALID_FORMAT = "文件格式无效，请选择正确的备份文件"
MSG_PARSE_FAILED = "文件解析失败，请确认文件格式"
MSG_READ_FAILED = "文件读取失败，请重试"
MSG_RESTORE_FAILED = "恢复失败，请重试"
MSG_CLEARED = "数据已清空，请重新加载"
MSG_CLEAR_FAILED = "操作失败，请重试"


@dataclass
class BackupResult:
    """
    Outcome of a backup operation.

    Attributes:
        success: Whether the operation completed
        message: User-facing message
        path: Written backup file (export only)
        reload_required: Live state must be reloaded from the store
    """

    success: bool
    message: str
    path: Optional[Path] = None
    reload_required: bool = False


def backup_filename() -> str:
    """Backup file name for today's UTC date."""
    return f"简历备份_{utc_today()}.json"


def validate_backup_data(data: Any) -> bool:
    """
    Check that parsed backup JSON has the persisted state shape.

    Requires ``state.resumes`` to be a non-empty object whose entries each
    carry a string ``profile.name`` and decode as a ResumeData, so that
    everything accepted here loads back without loss.

    Args:
        data: Parsed JSON value

    Returns:
        True if the value can be accepted as the persisted blob
    """
    if not isinstance(data, dict):
        return False
    state = data.get("state")
    if not isinstance(state, dict):
        return False
    resumes = state.get("resumes")
    if not isinstance(resumes, dict) or not resumes:
        return False

    for key, resume in resumes.items():
        if not isinstance(resume, dict):
            return False
        profile = resume.get("profile")
        if not isinstance(profile, dict) or not isinstance(profile.get("name"), str):
            return False
        try:
            ResumeData.from_dict(resume, path=f"resumes[{key!r}]")
        except InvalidDocumentError as e:
            _log_debug(f"Backup entry rejected: {e}")
            return False

    return True


def export_backup(store: KeyValueStore, downloads_dir: Optional[Path] = None) -> BackupResult:
    """
    Write the persisted blob to a dated backup file.

    Args:
        store: Key-value store holding the blob
        downloads_dir: Target directory (default: DOWNLOADS_PATH)

    Returns:
        BackupResult with the backup path on success
    """
    try:
        blob = store.get(STORAGE_KEY)
    except StorageError as e:
        _log_warning(f"Could not read persisted state: {e}")
        result = BackupResult(success=False, message=MSG_EXPORT_FAILED)
        log_backup_result("export", result)
        return result

    if not blob:
        result = BackupResult(success=False, message=MSG_NO_DATA)
        log_backup_result("export", result)
        return result

    try:
        path = save_download(blob.encode("utf-8"), backup_filename(), downloads_dir)
        result = BackupResult(success=True, message=MSG_EXPORTED, path=path)
    except (OSError, ValueError) as e:
        _log_warning(f"Could not write backup file: {e}")
        result = BackupResult(success=False, message=MSG_EXPORT_FAILED)

    log_backup_result("export", result)
    return result


async def import_backup(store: KeyValueStore, file: Path) -> BackupResult:
    """
    Replace the persisted blob with a validated backup file.

    The file is decoded as UTF-8 without newline translation and stored exactly
    as read. Nothing is written unless the text parses and passes
    validate_backup_data.

    Args:
        store: Key-value store holding the blob
        file: Backup file to restore

    Returns:
        BackupResult; read failures, invalid JSON and invalid structure report
        distinct messages
    """
    try:
        raw = await asyncio.to_thread(Path(file).read_bytes)
        content = raw.decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _log_warning(f"Could not read backup file {file}: {e}")
        result = BackupResult(success=False, message=MSG_READ_FAILED)
        log_backup_result("import", result)
        return result

    try:
        data = json.loads(content)
    except ValueError as e:
        _log_debug(f"Backup is not JSON: {e}")
        result = BackupResult(success=False, message=MSG_PARSE_FAILED)
        log_backup_result("import", result)
        return result

    if not validate_backup_data(data):
        result = BackupResult(success=False, message=MSG_INVALID_FORMAT)
        log_backup_result("import", result)
        return result

    try:
        store.set(STORAGE_KEY, content)
    except StorageError as e:
        _log_warning(f"Could not persist restored state: {e}")
        result = BackupResult(success=False, message=MSG_RESTORE_FAILED)
        log_backup_result("import", result)
        return result

    result = BackupResult(success=True, message=MSG_RESTORED, path=Path(file), reload_required=True)
    log_backup_result("import", result)
    return result


def clear_all_data(store: KeyValueStore) -> BackupResult:
    """Remove the persisted blob and the onboarding flag together."""
    try:
        store.remove_many([STORAGE_KEY, ONBOARDED_KEY])
    except StorageError as e:
        _log_warning(f"Could not clear persisted state: {e}")
        result = BackupResult(success=False, message=MSG_CLEAR_FAILED)
        log_backup_result("clear", result)
        return result

    result = BackupResult(success=True, message=MSG_CLEARED, reload_required=True)
    log_backup_result("clear", result)
    return result

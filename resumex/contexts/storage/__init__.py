"""
Storage Context

Responsibilities:
- Keeps the persisted key-value entries (state blob, onboarding flag)
- Owns the résumé id → document map and its editing actions
- Exports, validates, restores and clears backups of the state blob

Owns: the ``resume-storage`` blob, ResumeStore, BackupResult
Never: Renders documents or decides what an edit means for history
"""

from resumex.contexts.storage.backup import (
    ONBOARDED_KEY,
    STORAGE_KEY,
    BackupResult,
    clear_all_data,
    export_backup,
    import_backup,
    validate_backup_data,
)
from resumex.contexts.storage.exceptions import StorageError
from resumex.contexts.storage.kv_store import JsonFileStore, KeyValueStore, MemoryStore
from resumex.contexts.storage.resume_store import ResumeStore

__all__ = [
    # Key-value layer
    "KeyValueStore",
    "JsonFileStore",
    "MemoryStore",
    "StorageError",
    "STORAGE_KEY",
    "ONBOARDED_KEY",
    # Résumé collection
    "ResumeStore",
    # Backup/restore
    "BackupResult",
    "export_backup",
    "import_backup",
    "clear_all_data",
    "validate_backup_data",
]

"""
Resume Store

Owns the map of résumé id → ResumeData, the active résumé id, and the actions
that mutate them. Each action builds new snapshots and then persists the full
state blob under ``resume-storage`` in one write.

Persisted shape:
    {"state": {"resumes": {id: ResumeData}, "activeResumeId": id}, "version": 0}

Usage:
    from resumex.contexts.storage.resume_store import ResumeStore
    from resumex.contexts.storage.kv_store import JsonFileStore

    store = ResumeStore(JsonFileStore())
    module_id = store.add_module("projects", "项目经历")
    store.add_module_item(module_id, title="ResumeX")
"""

import json
from dataclasses import fields, replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from resumex.contexts.document.exceptions import InvalidDocumentError, ModuleShapeError
from resumex.contexts.document.model import (
    MODULE_TYPES,
    GlobalSettings,
    ResumeData,
    ResumeModule,
    ResumeProfile,
    item_field_names,
    item_kind,
)
from resumex.contexts.document.presets import (
    DEFAULT_TITLE,
    create_resume,
    default_module_title,
    default_resume,
    new_id,
)
from resumex.contexts.history.manager import UndoRedoManager
from resumex.contexts.storage.backup import STORAGE_KEY
from resumex.contexts.storage.exceptions import StorageError
from resumex.contexts.storage.kv_store import KeyValueStore
from resumex.contexts.storage.logger import _log_debug, _log_info, _log_warning
from resumex.utils.timestamp import now_ms

STORE_HISTORY_LENGTH = 30
STORE_VERSION = 0
COPY_SUFFIX = "（副本）"


class ResumeStore:
    """
    Persisted résumé collection with editing actions.

    Actions that target "the active résumé" operate on ``active_resume_id``.
    Every effective change stamps ``last_modified`` and persists; actions that
    change nothing do not write.
    """

    def __init__(self, kv: KeyValueStore, history_length: int = STORE_HISTORY_LENGTH):
        self.kv = kv
        self.history = UndoRedoManager(history_length)
        self.resumes: Dict[str, ResumeData] = {}
        self.active_resume_id: str = ""
        self.rehydrate()

    # Persistence

    def rehydrate(self) -> None:
        """
        Load state from the key-value store and repair it.

        An absent or unreadable blob starts from the default résumé. An empty
        map gets the default résumé; a dangling active id points at the first
        résumé.
        """
        resumes, active_id = self._read_state()

        if not resumes:
            initial = default_resume()
            resumes = {initial.id: initial}
            active_id = initial.id
        elif active_id not in resumes:
            active_id = next(iter(resumes))

        self.resumes = resumes
        self.active_resume_id = active_id
        _log_debug(f"Rehydrated {len(resumes)} résumé(s), active: {active_id}")

    def _read_state(self) -> Tuple[Dict[str, ResumeData], str]:
        try:
            blob = self.kv.get(STORAGE_KEY)
        except StorageError as e:
            _log_warning(f"Persisted state unreadable, starting fresh: {e}")
            return {}, ""
        if not blob:
            return {}, ""

        try:
            state = json.loads(blob)["state"]
            raw_resumes = state["resumes"]
            items = list(raw_resumes.items())
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            _log_warning(f"Persisted state rejected, starting fresh: {e}")
            return {}, ""

        resumes: Dict[str, ResumeData] = {}
        for key, value in items:
            try:
                resumes[key] = ResumeData.from_dict(value, path=f"resumes[{key!r}]")
            except InvalidDocumentError as e:
                _log_warning(f"Skipping unreadable résumé {key!r}: {e}")

        active_id = state.get("activeResumeId")
        return resumes, active_id if isinstance(active_id, str) else ""

    def to_blob(self) -> str:
        """Serialize the full state as the persisted JSON text."""
        blob = {
            "state": {
                "resumes": {key: resume.to_dict() for key, resume in self.resumes.items()},
                "activeResumeId": self.active_resume_id,
            },
            "version": STORE_VERSION,
        }
        return json.dumps(blob, ensure_ascii=False)

    def persist(self) -> None:
        self.kv.set(STORAGE_KEY, self.to_blob())

    # Queries

    @property
    def active(self) -> ResumeData:
        return self.resumes[self.active_resume_id]

    def get(self, resume_id: str) -> Optional[ResumeData]:
        return self.resumes.get(resume_id)

    def list_resumes(self) -> List[ResumeData]:
        """Résumés, most recently modified first."""
        return sorted(self.resumes.values(), key=lambda r: r.last_modified, reverse=True)

    # Internal commit helpers

    def _commit(self, resume: ResumeData, stamp: bool = True) -> ResumeData:
        if stamp:
            resume = replace(resume, last_modified=now_ms())
        self.resumes[resume.id] = resume
        self.persist()
        return resume

    def _update_active(self, fn: Callable[[ResumeData], ResumeData]) -> ResumeData:
        current = self.active
        updated = fn(current)
        if updated is current:
            return current
        return self._commit(updated)

    def _require_resume(self, resume_id: str) -> ResumeData:
        if resume_id not in self.resumes:
            raise KeyError(f"Unknown résumé id: {resume_id}")
        return self.resumes[resume_id]

    # Collection actions

    def set_active_resume(self, resume_id: str) -> None:
        self._require_resume(resume_id)
        if resume_id != self.active_resume_id:
            self.active_resume_id = resume_id
            self.persist()

    def add_resume(self) -> str:
        """Add a blank résumé from the default document and make it active."""
        resume = create_resume(title=DEFAULT_TITLE)
        self.resumes[resume.id] = resume
        self.active_resume_id = resume.id
        self.persist()
        _log_info(f"Added résumé {resume.id}")
        return resume.id

    def delete_resume(self, resume_id: str) -> None:
        """
        Delete a résumé.

        Deleting the active résumé activates the first remaining one; deleting
        the last résumé creates a fresh default one.
        """
        self._require_resume(resume_id)
        del self.resumes[resume_id]

        if self.active_resume_id == resume_id:
            if self.resumes:
                self.active_resume_id = next(iter(self.resumes))
            else:
                fresh = create_resume()
                self.resumes[fresh.id] = fresh
                self.active_resume_id = fresh.id

        self.persist()
        _log_info(f"Deleted résumé {resume_id}")

    def duplicate_resume(self, resume_id: str) -> Optional[str]:
        """
        Copy a résumé with fresh ids for the document, its modules and items.

        Returns:
            New résumé id, or None if the source does not exist
        """
        source = self.resumes.get(resume_id)
        if source is None:
            return None

        modules = tuple(
            replace(
                module,
                id=new_id(),
                items=tuple(replace(item, id=new_id()) for item in module.items),
            )
            for module in source.modules
        )
        copy = replace(
            source,
            id=new_id(),
            title=f"{source.title}{COPY_SUFFIX}",
            last_modified=now_ms(),
            modules=modules,
        )
        self.resumes[copy.id] = copy
        self.active_resume_id = copy.id
        self.persist()
        _log_info(f"Duplicated résumé {resume_id} → {copy.id}")
        return copy.id

    def add_resume_from_preset(
        self, template_id: str, module_order: Optional[Sequence[Tuple[str, str]]] = None
    ) -> str:
        """Add a résumé using a template and, optionally, an empty module order."""
        resume = create_resume(title=DEFAULT_TITLE, template=template_id, module_order=module_order)
        self.resumes[resume.id] = resume
        self.active_resume_id = resume.id
        self.persist()
        _log_info(f"Added résumé {resume.id} from preset {template_id}")
        return resume.id

    def update_resume(self, resume_id: str, **changes: Any) -> ResumeData:
        """
        Replace top-level fields of a résumé (e.g., title, template, settings).

        Raises:
            KeyError: Unknown résumé id
            ValueError: Attempt to change the id or an unknown field
        """
        resume = self._require_resume(resume_id)
        allowed = {f.name for f in fields(ResumeData)} - {"id"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Cannot update résumé fields: {sorted(unknown)}")
        return self._commit(replace(resume, **changes))

    def reset_data(self, resume_id: str) -> ResumeData:
        """Reset a résumé to the default document, keeping its id and title."""
        resume = self._require_resume(resume_id)
        return self._commit(replace(default_resume(), id=resume.id, title=resume.title))

    def replace_resume(self, resume: ResumeData) -> None:
        """Store a snapshot as-is (history restores); no timestamp is stamped."""
        self._require_resume(resume.id)
        if self.resumes[resume.id] is not resume:
            self._commit(resume, stamp=False)

    # Active résumé actions

    def update_profile(self, field: str, value: Optional[str]) -> ResumeData:
        allowed = {f.name for f in fields(ResumeProfile)} - {"custom_fields"}
        if field not in allowed:
            raise ValueError(f"Unknown profile field: {field}")

        def apply(resume: ResumeData) -> ResumeData:
            if getattr(resume.profile, field) == value:
                return resume
            return replace(resume, profile=replace(resume.profile, **{field: value}))

        return self._update_active(apply)

    def update_settings(self, **changes: Any) -> ResumeData:
        allowed = {f.name for f in fields(GlobalSettings)}
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Unknown settings: {sorted(unknown)}")
        def apply(resume: ResumeData) -> ResumeData:
            settings = replace(resume.settings, **changes)
            if settings == resume.settings:
                return resume
            return replace(resume, settings=settings)

        return self._update_active(apply)

    def set_template(self, template_id: str) -> ResumeData:
        return self._update_active(
            lambda resume: resume if resume.template == template_id else replace(resume, template=template_id)
        )

    def add_module(self, module_type: str, title: Optional[str] = None) -> str:
        """Append an empty, visible module to the active résumé."""
        if module_type not in MODULE_TYPES:
            raise ValueError(f"Unknown module type: {module_type}")
        module = ResumeModule(
            id=new_id(),
            type=module_type,
            title=title if title is not None else default_module_title(module_type),
        )
        self._update_active(lambda resume: replace(resume, modules=resume.modules + (module,)))
        return module.id

    def remove_module(self, module_id: str) -> ResumeData:
        def apply(resume: ResumeData) -> ResumeData:
            modules = tuple(m for m in resume.modules if m.id != module_id)
            if len(modules) == len(resume.modules):
                return resume
            return replace(resume, modules=modules)

        return self._update_active(apply)

    def update_module(self, module_id: str, **changes: Any) -> ResumeData:
        """Change a module's title or visibility."""
        unknown = set(changes) - {"title", "visible"}
        if unknown:
            raise ValueError(f"Cannot update module fields: {sorted(unknown)}")
        def apply(module: ResumeModule) -> ResumeModule:
            if all(getattr(module, key) == value for key, value in changes.items()):
                return module
            return replace(module, **changes)

        return self._update_active(lambda resume: resume.map_module(module_id, apply))

    def reorder_modules(self, module_ids: Sequence[str]) -> ResumeData:
        """
        Put modules in the given order.

        Raises:
            ValueError: If module_ids is not a permutation of the current ids
        """

        def apply(resume: ResumeData) -> ResumeData:
            by_id = {m.id: m for m in resume.modules}
            _require_permutation(list(by_id), module_ids, "module")
            modules = tuple(by_id[module_id] for module_id in module_ids)
            if all(a is b for a, b in zip(modules, resume.modules)):
                return resume
            return replace(resume, modules=modules)

        return self._update_active(apply)

    def add_module_item(self, module_id: str, item=None, **item_fields: Any) -> str:
        """
        Append an item to a module of the active résumé.

        Pass a ready item, or field values to build one of the kind the module
        type requires.

        Raises:
            KeyError: Unknown module id
            ModuleShapeError: Item kind does not match the module type
        """
        module = self.active.find_module(module_id)
        if module is None:
            raise KeyError(f"Unknown module id: {module_id}")

        expected = item_kind(module.type)
        if item is None:
            item = expected(id=item_fields.pop("id", None) or new_id(), **item_fields)
        elif not isinstance(item, expected):
            raise ModuleShapeError(module.id, module.type, type(item).__name__)

        self._update_active(
            lambda resume: resume.map_module(
                module_id, lambda m: replace(m, items=m.items + (item,))
            )
        )
        return item.id

    def update_module_item(self, module_id: str, item_id: str, field: str, value: Any) -> ResumeData:
        def apply(resume: ResumeData) -> ResumeData:
            module = resume.find_module(module_id)
            if module is None:
                return resume
            if field not in item_field_names(module.type):
                raise ValueError(f"Items of {module.type} modules have no field '{field}'")
            return resume.map_module(
                module_id,
                lambda m: m.map_item(
                    item_id,
                    lambda item: item if getattr(item, field) == value else replace(item, **{field: value}),
                ),
            )

        return self._update_active(apply)

    def remove_module_item(self, module_id: str, item_id: str) -> ResumeData:
        def remove(module: ResumeModule) -> ResumeModule:
            items = tuple(i for i in module.items if i.id != item_id)
            return module if len(items) == len(module.items) else replace(module, items=items)

        return self._update_active(lambda resume: resume.map_module(module_id, remove))

    def reorder_module_items(self, module_id: str, item_ids: Sequence[str]) -> ResumeData:
        def reorder(module: ResumeModule) -> ResumeModule:
            by_id = {i.id: i for i in module.items}
            _require_permutation(list(by_id), item_ids, "item")
            items = tuple(by_id[item_id] for item_id in item_ids)
            if all(a is b for a, b in zip(items, module.items)):
                return module
            return replace(module, items=items)

        return self._update_active(lambda resume: resume.map_module(module_id, reorder))

    # Undo/Redo over the active résumé

    def push_history(self) -> None:
        """Record the active résumé as an undo checkpoint."""
        self.history.push(self.active)

    def undo(self) -> bool:
        """Restore the previous checkpoint of the active résumé. Returns False if there is none."""
        if not self._belongs_to_active(self.history.peek_undo()):
            return False
        self._commit(self.history.undo(self.active), stamp=False)
        return True

    def redo(self) -> bool:
        if not self._belongs_to_active(self.history.peek_redo()):
            return False
        self._commit(self.history.redo(self.active), stamp=False)
        return True

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def _belongs_to_active(self, snapshot: Optional[ResumeData]) -> bool:
        # Entries recorded for another résumé stay where they are
        if snapshot is None:
            return False
        if snapshot.id != self.active_resume_id:
            _log_warning(f"History entry belongs to inactive résumé {snapshot.id}; not restoring")
            return False
        return True


def _require_permutation(current: List[str], requested: Sequence[str], kind: str) -> None:
    if sorted(current) != sorted(requested):
        raise ValueError(f"New {kind} order must contain exactly the existing {kind} ids")


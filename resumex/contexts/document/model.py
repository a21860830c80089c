"""
Résumé Document Model

Defines the résumé schema: profile, ordered modules, module items and global
render settings. Every value is a frozen dataclass; sequences are tuples.

Snapshots are never mutated in place. Edits build a new ``ResumeData`` through
``dataclasses.replace`` and share every untouched module and item with the
previous snapshot, so history can compare snapshots by identity.

Serialized form (persisted state, backups) uses the camelCase keys of the
storage format: ``lastModified``, ``fontSizeScale``, ``customFields``, ...
"""

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from resumex.contexts.document.exceptions import InvalidDocumentError
from resumex.contexts.document.logger import _log_warning

MODULE_TYPES: Tuple[str, ...] = ("experience", "education", "projects", "skills", "custom")

THEME_COLORS: Tuple[str, ...] = (
    "tech-orange",
    "business-blue",
    "minimal-bw",
    "vibrant-red",
    "pro-blue",
    "emerald-green",
    "creative-purple",
    "warm-amber",
    "elegant-gold",
    "fresh-teal",
    "indigo-data",
    "navy-compact",
)
FONT_FAMILIES: Tuple[str, ...] = ("sans", "serif", "mono")
SPACING_LEVELS: Tuple[str, ...] = ("compact", "standard", "relaxed")
LANGUAGES: Tuple[str, ...] = ("zh", "en")

PROFILE_TEXT_FIELDS: Tuple[str, ...] = (
    "title",
    "email",
    "phone",
    "location",
    "website",
    "wechat",
    "avatar",
    "summary",
)


@dataclass(frozen=True)
class CustomField:
    """Free-form profile entry beyond the fixed fields (e.g., 政治面貌: 党员)."""

    label: str
    value: str


@dataclass(frozen=True)
class ResumeProfile:
    """
    Personal header information.

    Only ``name`` is always present; every other field is optional and is
    omitted from rendered output when empty.
    """

    name: str = ""
    title: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    wechat: Optional[str] = None
    avatar: Optional[str] = None
    summary: Optional[str] = None
    custom_fields: Tuple[CustomField, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        for key in PROFILE_TEXT_FIELDS:
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.custom_fields:
            data["customFields"] = [
                {"label": f.label, "value": f.value} for f in self.custom_fields
            ]
        return data

    @classmethod
    def from_dict(cls, data: Any, path: str = "profile") -> "ResumeProfile":
        _require_mapping(data, path)
        name = data.get("name", "")
        if not isinstance(name, str):
            raise InvalidDocumentError("name must be a string", path)

        values = {key: _optional_str(data, key, path) for key in PROFILE_TEXT_FIELDS}

        raw_fields = data.get("customFields") or []
        if not isinstance(raw_fields, list):
            raise InvalidDocumentError("customFields must be a list", path)
        custom_fields = []
        for i, entry in enumerate(raw_fields):
            entry_path = f"{path}.customFields[{i}]"
            _require_mapping(entry, entry_path)
            custom_fields.append(
                CustomField(
                    label=_optional_str(entry, "label", entry_path) or "",
                    value=_optional_str(entry, "value", entry_path) or "",
                )
            )

        return cls(name=name, custom_fields=tuple(custom_fields), **values)


@dataclass(frozen=True)
class ResumeItem:
    """Entry of an experience, education, projects or custom module."""

    id: str
    title: str = ""
    subtitle: Optional[str] = None
    date: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "title": self.title}
        for key in ("subtitle", "date", "location", "description"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Any, path: str = "item") -> "ResumeItem":
        _require_mapping(data, path)
        if "title" not in data:
            raise InvalidDocumentError("résumé item requires a 'title'", path)
        title = data["title"]
        if not isinstance(title, str):
            raise InvalidDocumentError("title must be a string", path)
        return cls(
            id=_require_id(data, path),
            title=title,
            subtitle=_optional_str(data, "subtitle", path),
            date=_optional_str(data, "date", path),
            location=_optional_str(data, "location", path),
            description=_optional_str(data, "description", path),
        )


@dataclass(frozen=True)
class SkillItem:
    """Entry of a skills module: a name and an optional 0-100 proficiency level."""

    id: str
    name: str = ""
    level: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "name": self.name}
        if self.level is not None:
            data["level"] = self.level
        return data

    @classmethod
    def from_dict(cls, data: Any, path: str = "item") -> "SkillItem":
        _require_mapping(data, path)
        if "name" not in data:
            raise InvalidDocumentError("skill item requires a 'name'", path)
        name = data["name"]
        if not isinstance(name, str):
            raise InvalidDocumentError("name must be a string", path)
        level = data.get("level")
        if level is not None and (isinstance(level, bool) or not isinstance(level, (int, float))):
            raise InvalidDocumentError("level must be a number", path)
        return cls(
            id=_require_id(data, path),
            name=name,
            level=int(level) if level is not None else None,
        )


ModuleItem = Union[ResumeItem, SkillItem]


@dataclass(frozen=True)
class ResumeModule:
    """
    Named, orderable, visibility-gated section of a résumé.

    Items are homogeneous: ``skills`` modules hold ``SkillItem``s, every other
    type holds ``ResumeItem``s. Which kind applies is decided by ``type`` alone.
    """

    id: str
    type: str
    title: str
    items: Tuple[ModuleItem, ...] = ()
    visible: bool = True

    def find_item(self, item_id: str) -> Optional[ModuleItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def map_item(self, item_id: str, fn: Callable[[ModuleItem], ModuleItem]) -> "ResumeModule":
        """Return a copy with one item replaced by ``fn(item)``; self if nothing changed."""
        changed = False
        items = []
        for item in self.items:
            if item.id == item_id:
                new_item = fn(item)
                changed = changed or new_item is not item
                items.append(new_item)
            else:
                items.append(item)
        return replace(self, items=tuple(items)) if changed else self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "visible": self.visible,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: Any, path: str = "module") -> "ResumeModule":
        _require_mapping(data, path)
        module_type = data.get("type")
        if module_type not in MODULE_TYPES:
            raise InvalidDocumentError(
                f"type must be one of {list(MODULE_TYPES)}, got {module_type!r}", path
            )
        title = data.get("title", "")
        if not isinstance(title, str):
            raise InvalidDocumentError("title must be a string", path)
        raw_items = data.get("items")
        if not isinstance(raw_items, list):
            raise InvalidDocumentError("items must be a list", path)
        visible = data.get("visible", True)
        if not isinstance(visible, bool):
            raise InvalidDocumentError("visible must be a boolean", path)

        items = tuple(
            item_from_dict(module_type, raw, f"{path}.items[{i}]")
            for i, raw in enumerate(raw_items)
        )
        return cls(
            id=_require_id(data, path),
            type=module_type,
            title=title,
            items=items,
            visible=visible,
        )


@dataclass(frozen=True)
class GlobalSettings:
    """Closed set of render settings shared by every template variant."""

    theme_color: str = "tech-orange"
    font_family: str = "sans"
    font_size_scale: float = 1.0
    line_height: str = "standard"
    page_margin: str = "standard"
    language: str = "zh"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "themeColor": self.theme_color,
            "fontFamily": self.font_family,
            "fontSizeScale": self.font_size_scale,
            "lineHeight": self.line_height,
            "pageMargin": self.page_margin,
            "language": self.language,
        }

    @classmethod
    def from_dict(cls, data: Any, path: str = "settings") -> "GlobalSettings":
        if data is None:
            return cls()
        _require_mapping(data, path)
        defaults = cls()

        scale = data.get("fontSizeScale", defaults.font_size_scale)
        if isinstance(scale, bool) or not isinstance(scale, (int, float)) or not 0 < scale < math.inf:
            raise InvalidDocumentError("fontSizeScale must be a positive number", path)

        return cls(
            theme_color=_enum_or_default(data, "themeColor", THEME_COLORS, defaults.theme_color, path),
            font_family=_enum_or_default(data, "fontFamily", FONT_FAMILIES, defaults.font_family, path),
            font_size_scale=float(scale),
            line_height=_enum_or_default(data, "lineHeight", SPACING_LEVELS, defaults.line_height, path),
            page_margin=_enum_or_default(data, "pageMargin", SPACING_LEVELS, defaults.page_margin, path),
            language=_enum_or_default(data, "language", LANGUAGES, defaults.language, path),
        )


@dataclass(frozen=True)
class ResumeData:
    """
    Complete résumé document: identity, metadata, settings, profile and modules.

    Attributes:
        id: Document identity (key in the persisted id → document map)
        title: Dashboard title (not rendered on the page)
        last_modified: Epoch milliseconds of the last settled edit
        template: Template variant id
        settings: Render settings
        profile: Personal header information
        modules: Ordered sections; display order is tuple order
    """

    id: str
    title: str
    last_modified: int
    template: str
    settings: GlobalSettings
    profile: ResumeProfile
    modules: Tuple[ResumeModule, ...] = ()

    def find_module(self, module_id: str) -> Optional[ResumeModule]:
        for module in self.modules:
            if module.id == module_id:
                return module
        return None

    def map_module(
        self, module_id: str, fn: Callable[[ResumeModule], ResumeModule]
    ) -> "ResumeData":
        """Return a copy with one module replaced by ``fn(module)``; self if nothing changed."""
        changed = False
        modules = []
        for module in self.modules:
            if module.id == module_id:
                new_module = fn(module)
                changed = changed or new_module is not module
                modules.append(new_module)
            else:
                modules.append(module)
        return replace(self, modules=tuple(modules)) if changed else self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "lastModified": self.last_modified,
            "template": self.template,
            "settings": self.settings.to_dict(),
            "profile": self.profile.to_dict(),
            "modules": [module.to_dict() for module in self.modules],
        }

    @classmethod
    def from_dict(cls, data: Any, path: str = "resume") -> "ResumeData":
        _require_mapping(data, path)
        for key in ("id", "profile", "modules"):
            if key not in data:
                raise InvalidDocumentError(f"missing required key '{key}'", path)

        raw_modules = data["modules"]
        if not isinstance(raw_modules, list):
            raise InvalidDocumentError("modules must be a list", path)

        last_modified = data.get("lastModified", 0)
        if isinstance(last_modified, bool) or not isinstance(last_modified, (int, float)):
            raise InvalidDocumentError("lastModified must be a number", path)
        if not math.isfinite(last_modified):
            raise InvalidDocumentError("lastModified must be finite", path)

        template = data.get("template", "tech")
        if not isinstance(template, str):
            raise InvalidDocumentError("template must be a string", path)

        title = data.get("title", "")
        if not isinstance(title, str):
            raise InvalidDocumentError("title must be a string", path)

        return cls(
            id=_require_id(data, path),
            title=title,
            last_modified=int(last_modified),
            template=template,
            settings=GlobalSettings.from_dict(data.get("settings"), f"{path}.settings"),
            profile=ResumeProfile.from_dict(data["profile"], f"{path}.profile"),
            modules=tuple(
                ResumeModule.from_dict(raw, f"{path}.modules[{i}]")
                for i, raw in enumerate(raw_modules)
            ),
        )


# Type guards (decided by module type only, never by item shape)


def is_skills_module(module: ResumeModule) -> bool:
    return module.type == "skills"


def is_content_module(module: ResumeModule) -> bool:
    return module.type != "skills"


def item_kind(module_type: str) -> type:
    """Item class a module of the given type must hold."""
    return SkillItem if module_type == "skills" else ResumeItem


def item_from_dict(module_type: str, data: Any, path: str = "item") -> ModuleItem:
    """Decode an item according to the type of the module that holds it."""
    return item_kind(module_type).from_dict(data, path)


def item_field_names(module_type: str) -> Tuple[str, ...]:
    """Editable field names of the items a module type holds (``id`` excluded)."""
    return tuple(f.name for f in fields(item_kind(module_type)) if f.name != "id")


def find_shape_violations(document: ResumeData) -> List[str]:
    """
    Report structural invariant violations of an in-memory document.

    Checks:
        - module types belong to the closed set
        - items match their module's type (skills vs. résumé items)
        - module ids and item ids are unique within the document

    Args:
        document: Document to inspect

    Returns:
        Human-readable violations (empty when the document is well formed)
    """
    violations = []
    seen_ids: Dict[str, str] = {}

    def _claim(entity_id: str, where: str) -> None:
        if entity_id in seen_ids:
            violations.append(f"Duplicate id '{entity_id}' at {where} (first used at {seen_ids[entity_id]})")
        else:
            seen_ids[entity_id] = where

    for m_index, module in enumerate(document.modules):
        module_path = f"modules[{m_index}]"
        _claim(module.id, module_path)
        if module.type not in MODULE_TYPES:
            violations.append(f"Unknown module type '{module.type}' at {module_path}")
        expected = item_kind(module.type)
        for i_index, item in enumerate(module.items):
            item_path = f"{module_path}.items[{i_index}]"
            _claim(item.id, item_path)
            if not isinstance(item, expected):
                violations.append(
                    f"{type(item).__name__} in {module.type} module '{module.id}' at {item_path}"
                )

    return violations


# Decoding helpers


def _require_mapping(data: Any, path: str) -> None:
    if not isinstance(data, Mapping):
        raise InvalidDocumentError(f"expected an object, got {type(data).__name__}", path)


def _require_id(data: Mapping, path: str) -> str:
    value = data.get("id")
    if not isinstance(value, str) or not value:
        raise InvalidDocumentError("id must be a non-empty string", path)
    return value


def _optional_str(data: Mapping, key: str, path: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidDocumentError(f"{key} must be a string", path)
    return value


def _enum_or_default(
    data: Mapping, key: str, allowed: Tuple[str, ...], default: str, path: str
) -> str:
    value = data.get(key, default)
    if value in allowed:
        return value
    _log_warning(f"{path}.{key}: unsupported value {value!r}, using {default!r}")
    return default

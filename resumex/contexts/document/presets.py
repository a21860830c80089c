"""
Default and Preset Documents

Loads the static content tables (theme palettes, the default résumé,
quick-start module orders) from YAML and builds new documents from them.

Examples:
    >>> resume = create_resume(title="未命名简历")
    >>> preset = get_preset("fresh", "tech")
    >>> preset.template_id
    'freshGrad'
"""

import os
import uuid
from dataclasses import dataclass, replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

from dotenv import load_dotenv
from omegaconf import OmegaConf

from resumex.contexts.document.model import (
    MODULE_TYPES,
    ResumeData,
    ResumeModule,
)
from resumex.utils.timestamp import now_ms

load_dotenv()
DOCUMENT_CONFIG_PATH = Path(
    os.getenv("RESUMEX_CONFIG_PATH", str(Path(__file__).parent / "config"))
)

DEFAULT_TITLE = "未命名简历"


@dataclass(frozen=True)
class Theme:
    """Named color palette selectable through ``settings.theme_color``."""

    id: str
    name: str
    name_zh: str
    scene_hint: str
    colors: Dict[str, str]


@dataclass(frozen=True)
class QuickStartPreset:
    """Recommended template and module order for an identity/job-category pair."""

    template_id: str
    module_order: Tuple[Tuple[str, str], ...]


def new_id() -> str:
    """Fresh identifier for documents, modules and items."""
    return str(uuid.uuid4())


def _load_yaml(name: str, config_dir: Optional[Path] = None) -> Dict[str, Any]:
    config_dir = config_dir or DOCUMENT_CONFIG_PATH
    return OmegaConf.to_container(OmegaConf.load(config_dir / name), resolve=True)


@lru_cache(maxsize=None)
def load_themes() -> Dict[str, Theme]:
    """Load every palette from themes.yaml, keyed by theme id."""
    raw = _load_yaml("themes.yaml")
    return {
        theme_id: Theme(
            id=theme_id,
            name=entry["name"],
            name_zh=entry["name_zh"],
            scene_hint=entry["scene_hint"],
            colors=dict(entry["colors"]),
        )
        for theme_id, entry in raw.items()
    }


def get_theme(theme_id: str) -> Theme:
    """
    Look up a palette, falling back to the first one for unknown ids.

    Args:
        theme_id: Theme identifier (e.g., "business-blue")

    Returns:
        Theme with primary/secondary/text/background/accent colors
    """
    themes = load_themes()
    if theme_id in themes:
        return themes[theme_id]
    return next(iter(themes.values()))


@lru_cache(maxsize=None)
def _default_resume() -> ResumeData:
    return ResumeData.from_dict(_load_yaml("default_resume.yaml"), path="default_resume")


@lru_cache(maxsize=None)
def _quick_start() -> Dict[str, Any]:
    return _load_yaml("quick_start.yaml")


def default_resume() -> ResumeData:
    """The document every new résumé starts from (id ``default-resume``)."""
    return _default_resume()


def create_resume(
    resume_id: Optional[str] = None,
    title: Optional[str] = None,
    template: Optional[str] = None,
    module_order: Optional[Sequence[Tuple[str, str]]] = None,
) -> ResumeData:
    """
    Build a new document from the default résumé.

    Args:
        resume_id: Identity for the new document (default: fresh uuid)
        title: Dashboard title (default: keep the default résumé's title)
        template: Template id (default: keep the default résumé's template)
        module_order: (type, title) pairs replacing the default modules with
                      empty ones, in this order

    Returns:
        New ResumeData stamped with the current time
    """
    base = default_resume()
    changes: Dict[str, Any] = {
        "id": resume_id or new_id(),
        "last_modified": now_ms(),
    }
    if title is not None:
        changes["title"] = title
    if template is not None:
        changes["template"] = template
    if module_order:
        changes["modules"] = tuple(
            ResumeModule(id=new_id(), type=module_type, title=module_title)
            for module_type, module_title in module_order
        )
    return replace(base, **changes)


def get_preset(identity: str, job_category: str) -> QuickStartPreset:
    """
    Recommended template and module order for a quick-start choice.

    Unknown identities use the ``working`` order; unknown job categories use
    the identity's default template.

    Args:
        identity: "fresh", "working" or "freelance"
        job_category: "tech", "product", "finance", "education", "admin",
                      "design", "sales" or "other"

    Returns:
        QuickStartPreset
    """
    tables = _quick_start()
    orders = tables["module_orders"]
    templates = tables["templates"]
    key = identity if identity in orders else "working"

    template_table = templates[key]
    template_id = template_table["by_category"].get(job_category, template_table["default"])
    module_order = tuple((entry["type"], entry["title"]) for entry in orders[key])
    return QuickStartPreset(template_id=template_id, module_order=module_order)


def default_module_title(module_type: str) -> str:
    """Default section title for a module added without one."""
    if module_type not in MODULE_TYPES:
        raise ValueError(f"Unknown module type: {module_type}")
    return _quick_start()["module_titles"][module_type]

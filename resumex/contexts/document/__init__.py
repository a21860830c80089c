"""
Document Context

Responsibilities:
- Defines the résumé schema (profile, typed modules, items, render settings)
- Decodes and encodes the persisted camelCase representation
- Builds default and quick-start preset documents from static YAML tables
- Validates editor form fields

Owns: ResumeData snapshots, module type guards, field validation rules
Never: Renders, persists or records history
"""

from resumex.contexts.document.exceptions import InvalidDocumentError, ModuleShapeError
from resumex.contexts.document.model import (
    CustomField,
    GlobalSettings,
    ResumeData,
    ResumeItem,
    ResumeModule,
    ResumeProfile,
    SkillItem,
    find_shape_violations,
    is_content_module,
    is_skills_module,
)
from resumex.contexts.document.presets import create_resume, default_resume, get_preset, get_theme
from resumex.contexts.document.validation import (
    FormValidator,
    ValidationRule,
    validate_field,
)

__all__ = [
    # Snapshot types
    "ResumeData",
    "ResumeProfile",
    "ResumeModule",
    "ResumeItem",
    "SkillItem",
    "CustomField",
    "GlobalSettings",
    # Shape contract
    "is_skills_module",
    "is_content_module",
    "find_shape_violations",
    "InvalidDocumentError",
    "ModuleShapeError",
    # Defaults and presets
    "default_resume",
    "create_resume",
    "get_preset",
    "get_theme",
    # Validation
    "validate_field",
    "ValidationRule",
    "FormValidator",
]

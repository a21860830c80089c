"""Unit tests for the résumé document model and presets."""

from dataclasses import replace

import pytest

from resumex.contexts.document.exceptions import InvalidDocumentError
from resumex.contexts.document.model import (
    GlobalSettings,
    ResumeData,
    ResumeItem,
    ResumeModule,
    SkillItem,
    find_shape_violations,
    is_content_module,
    is_skills_module,
    item_field_names,
)
from resumex.contexts.document.presets import (
    create_resume,
    default_module_title,
    default_resume,
    get_preset,
    get_theme,
    load_themes,
)


@pytest.mark.unit
def test_default_resume_loads():
    """Test the bundled default document decodes with its modules in order."""
    resume = default_resume()

    assert resume.id == "default-resume"
    assert resume.profile.name == "李明"
    assert [m.id for m in resume.modules] == ["exp-1", "proj-1", "edu-1", "skills-1"]
    assert all(isinstance(item, SkillItem) for item in resume.find_module("skills-1").items)
    assert find_shape_violations(resume) == []


@pytest.mark.unit
def test_serialization_roundtrip_uses_camel_case():
    """Test to_dict uses persisted key names and from_dict restores an equal snapshot."""
    resume = default_resume()
    data = resume.to_dict()

    assert "lastModified" in data
    assert "fontSizeScale" in data["settings"]
    assert ResumeData.from_dict(data) == resume


@pytest.mark.unit
def test_type_guards_use_module_type_only():
    """Test is_skills_module ignores item shapes."""
    mixed = ResumeModule(id="m", type="skills", title="技能", items=(ResumeItem(id="i", title="x"),))

    assert is_skills_module(mixed)
    assert not is_content_module(mixed)
    assert is_content_module(ResumeModule(id="e", type="experience", title="经历"))


@pytest.mark.unit
def test_shape_violations_detect_mixed_items_and_duplicate_ids():
    """Test malformed in-memory documents are reported, not tolerated."""
    base = default_resume()
    bad_skills = ResumeModule(id="exp-1", type="skills", title="技能", items=(ResumeItem(id="job-1", title="x"),))
    document = replace(base, modules=base.modules + (bad_skills,))

    violations = find_shape_violations(document)

    assert any("Duplicate id 'exp-1'" in v for v in violations)
    assert any("Duplicate id 'job-1'" in v for v in violations)
    assert any("ResumeItem in skills module" in v for v in violations)


@pytest.mark.unit
def test_items_decoded_by_module_type():
    """Test skill-shaped data in a skills module becomes SkillItem."""
    module = ResumeModule.from_dict(
        {"id": "s", "type": "skills", "title": "技能", "items": [{"id": "k", "name": "Python", "level": 80}]}
    )

    assert module.items == (SkillItem(id="k", name="Python", level=80),)


@pytest.mark.unit
@pytest.mark.parametrize(
    "payload,fragment",
    [
        ({"id": "r", "profile": {"name": "x"}}, "modules"),
        ({"id": "r", "profile": {"name": 1}, "modules": []}, "name must be a string"),
        ({"id": "", "profile": {"name": "x"}, "modules": []}, "id must be a non-empty string"),
        ({"id": "r", "profile": {"name": "x"}, "modules": [{"id": "m", "type": "hobbies", "items": []}]}, "type"),
        ({"id": "r", "profile": {"name": "x"}, "modules": [{"id": "m", "type": "skills", "items": [{"id": "s"}]}]}, "name"),
    ],
)
def test_from_dict_rejects_malformed_documents(payload, fragment):
    """Test decoding raises InvalidDocumentError naming the problem."""
    with pytest.raises(InvalidDocumentError) as exc_info:
        ResumeData.from_dict(payload)

    assert fragment in str(exc_info.value)


@pytest.mark.unit
def test_invalid_document_error_is_value_error():
    """Test callers can catch decoding errors as ValueError."""
    with pytest.raises(ValueError):
        ResumeData.from_dict([])


@pytest.mark.unit
def test_unknown_setting_values_fall_back_to_defaults():
    """Test unsupported enum values are replaced by defaults."""
    settings = GlobalSettings.from_dict({"themeColor": "neon-pink", "fontFamily": "serif", "lineHeight": "custom"})

    assert settings.theme_color == "tech-orange"
    assert settings.font_family == "serif"
    assert settings.line_height == "standard"


@pytest.mark.unit
def test_map_module_shares_untouched_modules():
    """Test edits share unchanged modules by identity."""
    resume = default_resume()
    edited = resume.map_module("exp-1", lambda m: replace(m, title="实习经历"))

    assert edited is not resume
    assert edited.modules[0].title == "实习经历"
    assert all(a is b for a, b in zip(edited.modules[1:], resume.modules[1:]))
    assert resume.map_module("missing", lambda m: replace(m, title="x")) is resume


@pytest.mark.unit
def test_item_field_names():
    """Test editable item fields per module type."""
    assert item_field_names("skills") == ("name", "level")
    assert item_field_names("custom") == ("title", "subtitle", "date", "location", "description")


@pytest.mark.unit
def test_create_resume_with_module_order():
    """Test preset documents get empty modules with fresh ids in order."""
    resume = create_resume(title="未命名简历", template="academic", module_order=[("education", "教育背景"), ("skills", "技能")])

    assert resume.id != "default-resume"
    assert resume.template == "academic"
    assert [(m.type, m.title, m.items) for m in resume.modules] == [("education", "教育背景", ()), ("skills", "技能", ())]
    assert resume.last_modified > 0


@pytest.mark.unit
def test_get_preset():
    """Test quick-start lookup with fallbacks."""
    preset = get_preset("fresh", "tech")
    assert preset.template_id == "freshGrad"
    assert preset.module_order[0] == ("education", "教育背景")

    assert get_preset("working", "finance").template_id == "accountant"
    assert get_preset("unknown", "nothing").template_id == "professional"


@pytest.mark.unit
def test_themes():
    """Test palettes load and unknown ids fall back to the first palette."""
    themes = load_themes()

    assert len(themes) == 12
    assert get_theme("business-blue").id == "business-blue"
    assert get_theme("missing").id == "tech-orange"
    assert set(get_theme("tech-orange").colors) >= {"primary", "secondary", "text", "background", "accent"}


@pytest.mark.unit
def test_default_module_title():
    """Test default section titles and unknown types."""
    assert default_module_title("projects") == "项目经历"
    with pytest.raises(ValueError):
        default_module_title("hobbies")

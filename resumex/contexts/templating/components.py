"""
Shared building blocks for template variants.

Every variant goes through these helpers for the parts of the contract that
must not vary: which modules are shown, which optional fields are present, how
font sizes scale and how item slots are tagged.
"""

from typing import Callable, Iterable, List, Optional, Tuple

from resumex.contexts.document.model import (
    ResumeData,
    ResumeItem,
    ResumeModule,
    ResumeProfile,
    SkillItem,
    is_skills_module,
)
from resumex.contexts.templating.tree import Node, el

# Root font size of every variant at scale 1; rem sizes resolve against 16px
BASE_FONT_PX = 12.5
REM_PX = 16

CONTACT_FIELDS = ("phone", "email", "location", "website", "wechat")
CONTACT_PREFIXES = {"wechat": "微信: "}


def has_text(value: Optional[str]) -> bool:
    """True for a non-blank string."""
    return value is not None and value.strip() != ""


def font_scale(document: ResumeData) -> float:
    return document.settings.font_size_scale or 1.0


def font_size(factor: float, scale: float) -> str:
    """Relative font size ``factor * scale`` in rem."""
    return f"{factor * scale:g}rem"


def root_style(scale: float, **declarations: str) -> dict:
    style = {"font-size": f"{BASE_FONT_PX * scale:g}px", "color": "var(--color-text)"}
    style.update({k.replace("_", "-"): v for k, v in declarations.items()})
    return style


def visible_modules(document: ResumeData) -> Tuple[ResumeModule, ...]:
    """Modules shown in rendered output, in document order."""
    return tuple(module for module in document.modules if module.visible is True)


def contact_values(
    profile: ResumeProfile, first: Iterable[str] = ()
) -> List[Tuple[str, str]]:
    """
    (field, display text) pairs of every non-blank contact entry.

    Fixed fields come first, led by the ones named in ``first`` and then in
    CONTACT_FIELDS order; custom fields follow as "label: value". A variant
    can only reorder the fixed fields, never leave one out.
    """
    first = tuple(first)
    order = list(first) + [name for name in CONTACT_FIELDS if name not in first]
    values = [
        (name, CONTACT_PREFIXES.get(name, "") + getattr(profile, name))
        for name in order
        if has_text(getattr(profile, name))
    ]
    for custom in profile.custom_fields:
        if has_text(custom.value):
            label = custom.label.strip()
            values.append((label or "custom", f"{label}: {custom.value}" if label else custom.value))
    return values


def contacts(profile: ResumeProfile, first: Iterable[str] = (), **declarations: str) -> List[Node]:
    """Contact nodes for contact_values(profile, first)."""
    return [contact(name, value, **declarations) for name, value in contact_values(profile, first)]


def text(
    tag: str,
    value: str,
    role: Optional[str] = None,
    size: Optional[str] = None,
    key: Optional[str] = None,
    classes: Tuple[str, ...] = (),
    attrs: Optional[dict] = None,
    **declarations: str,
) -> Node:
    style = {k.replace("_", "-"): v for k, v in declarations.items()}
    if size is not None:
        style["font-size"] = size
    return Node(tag=tag, text=value, role=role, key=key, classes=classes, style=style, attrs=attrs or {})


def profile_name(profile: ResumeProfile, size: str, **declarations: str) -> Node:
    return text("h1", profile.name, role="profile-name", size=size, font_weight="bold", **declarations)


def profile_title(profile: ResumeProfile, size: str, **declarations: str) -> Optional[Node]:
    if not has_text(profile.title):
        return None
    return text("p", profile.title, role="profile-title", size=size, **declarations)


def contact(name: str, value: str, size: Optional[str] = None, **declarations: str) -> Node:
    return text("span", value, role="contact", size=size, attrs={"data-field": name}, **declarations)


def summary(profile: ResumeProfile, size: Optional[str] = None, **declarations: str) -> Optional[Node]:
    if not has_text(profile.summary):
        return None
    return text("p", profile.summary, role="summary", size=size, **declarations)


def avatar(profile: ResumeProfile, size_px: int, round_: bool = False, **declarations: str) -> Optional[Node]:
    """Avatar image, or None so no space is reserved when the profile has none."""
    if not has_text(profile.avatar):
        return None
    style = {"width": f"{size_px}px", "height": f"{size_px}px"}
    if round_:
        style["border-radius"] = "50%"
    style.update({k.replace("_", "-"): v for k, v in declarations.items()})
    return Node(
        tag="img",
        role="avatar",
        style=style,
        attrs={"src": profile.avatar, "alt": profile.name},
    )


def optional_slot(
    value: Optional[str], role: str, size: str, tag: str = "span", **declarations: str
) -> Optional[Node]:
    if not has_text(value):
        return None
    return text(tag, value, role=role, size=size, **declarations)


def description(item: ResumeItem, size: str, **declarations: str) -> Optional[Node]:
    """Multi-line description; literal line breaks are kept (pre-line)."""
    if not has_text(item.description):
        return None
    return text("div", item.description, role="item-description", size=size, white_space="pre-line", **declarations)


def section(module: ResumeModule, heading: Node, body: Node, **declarations: str) -> Node:
    style = {k.replace("_", "-"): v for k, v in declarations.items()}
    return el("section", heading, body, role="section", key=module.id, style=style)


def module_body(
    module: ResumeModule,
    render_skill: Callable[[SkillItem], Node],
    render_item: Callable[[ResumeItem], Node],
    skills_style: Optional[dict] = None,
    items_style: Optional[dict] = None,
) -> Node:
    """
    Body of a section, branching on the module type.

    Skills modules become a flow of skill tags; every other type becomes a
    column of résumé items. Item order is preserved.
    """
    if is_skills_module(module):
        style = {"display": "flow", "gap": "8px"}
        style.update(skills_style or {})
        return el("div", *(render_skill(item) for item in module.items), style=style)

    style = {"display": "block", "gap": "8px"}
    style.update(items_style or {})
    return el("div", *(render_item(item) for item in module.items), style=style)


def skill(item: SkillItem, size: str, **declarations: str) -> Node:
    return text("span", item.name, role="skill", key=item.id, size=size, **declarations)


def item(resume_item: ResumeItem, *children: Optional[Node], **declarations: str) -> Node:
    style = {k.replace("_", "-"): v for k, v in declarations.items()}
    return el("div", *children, role="item", key=resume_item.id, style=style)


def page(*children: Optional[Node], style: dict, classes: Tuple[str, ...] = ()) -> Node:
    """Outer element of a variant's output."""
    return el("div", *children, style=style, classes=classes)

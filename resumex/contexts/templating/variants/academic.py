"""
Academic variant: centered serif header and fixed bilingual section headings.

Section headings come from the module type (``experience`` becomes
"WORK EXPERIENCE / 工作经历"); custom and unmapped modules use their own title
upper-cased.
"""

from resumex.contexts.document.model import ResumeData, ResumeItem, ResumeModule, SkillItem
from resumex.contexts.templating import components as c
from resumex.contexts.templating.tree import Node, el

TEMPLATE_ID = "academic"
NAME = "学术科研"

SECTION_TITLES = {
    "experience": "WORK EXPERIENCE / 工作经历",
    "education": "EDUCATION / 教育背景",
    "projects": "RESEARCH & PROJECTS / 项目研究",
    "skills": "SKILLS / 技能",
}

SUMMARY_TITLE = "PERSONAL SUMMARY / 个人简介"


def section_title(module: ResumeModule) -> str:
    return SECTION_TITLES.get(module.type, module.title.upper())


def render(document: ResumeData) -> Node:
    profile = document.profile
    scale = c.font_scale(document)
    small = c.font_size(0.8, scale)
    heading_size = c.font_size(0.9, scale)
    heading_style = {
        "font-weight": "bold",
        "text-transform": "uppercase",
        "border-bottom": "1px solid #999999",
        "margin-bottom": "6px",
    }

    contact_parts = []
    for node in c.contacts(profile, first=("email",)):
        if contact_parts:
            contact_parts.append(c.text("span", " | "))
        contact_parts.append(node)

    header = el(
        "header",
        c.profile_name(profile, c.font_size(1.5, scale), letter_spacing="0.15em", margin_bottom="8px"),
        c.profile_title(profile, c.font_size(0.95, scale), margin_bottom="6px"),
        el("div", *contact_parts, style={"display": "flow", "justify": "center", "font-size": c.font_size(0.78, scale)})
        if contact_parts
        else None,
        style={"text-align": "center", "border-bottom": "2px solid var(--color-text)", "margin-bottom": "12px"},
    )

    summary_block = None
    summary_node = c.summary(profile, small, text_align="justify")
    if summary_node is not None:
        summary_block = el(
            "div",
            c.text("h2", SUMMARY_TITLE, size=heading_size, **_kw(heading_style)),
            summary_node,
            style={"margin-bottom": "12px"},
        )

    def render_skill(item: SkillItem) -> Node:
        return el(
            "span",
            c.text("span", "• "),
            c.skill(item, small),
            style={"display": "flow", "margin-right": "16px"},
        )

    def render_item(item: ResumeItem) -> Node:
        first_line = el(
            "div",
            el(
                "div",
                c.optional_slot(item.subtitle, "item-subtitle", heading_size, font_weight="bold"),
                c.text("span", ", ", size=small) if c.has_text(item.location) else None,
                c.optional_slot(item.location, "item-location", small),
                style={"display": "flow", "flex": "1"},
            ),
            c.optional_slot(item.date, "item-date", small, font_style="italic"),
            style={"display": "row", "justify": "space-between"},
        )
        return c.item(
            item,
            first_line,
            c.text("p", item.title, role="item-title", size=small, font_style="italic", margin_bottom="4px"),
            c.description(item, small, padding_left="16px"),
        )

    sections = []
    for module in c.visible_modules(document):
        heading = c.text("h2", section_title(module), role="section-title", size=heading_size, **_kw(heading_style))
        sections.append(c.section(module, heading, c.module_body(module, render_skill, render_item)))

    return c.page(
        header,
        summary_block,
        el("div", *sections, style={"gap": "12px"}),
        style=c.root_style(scale, padding="20px 24px", font_family="serif"),
    )


def _kw(style: dict) -> dict:
    return {k.replace("-", "_"): v for k, v in style.items()}

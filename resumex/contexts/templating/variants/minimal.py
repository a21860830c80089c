"""Minimal variant: serif, ruled header, contact block on the right."""

from resumex.contexts.document.model import ResumeData, ResumeItem, SkillItem
from resumex.contexts.templating import components as c
from resumex.contexts.templating.tree import Node, el

TEMPLATE_ID = "minimal"
NAME = "极简主义"


def render(document: ResumeData) -> Node:
    profile = document.profile
    scale = c.font_scale(document)
    small = c.font_size(0.8, scale)
    medium = c.font_size(0.9, scale)

    header = el(
        "header",
        el(
            "div",
            c.profile_name(profile, c.font_size(1.5, scale), text_transform="uppercase", margin_bottom="8px"),
            c.profile_title(profile, c.font_size(0.95, scale), font_style="italic"),
            style={"flex": "1"},
        ),
        el(
            "div",
            *c.contacts(profile, first=("email",)),
            style={"font-size": small, "text-align": "right"},
        ),
        style={
            "display": "row",
            "justify": "space-between",
            "border-bottom": "2px solid var(--color-text)",
            "margin-bottom": "12px",
        },
    )

    # Avatar sits beside the summary; without one the summary takes the full width
    intro = None
    summary_node = c.summary(profile)
    avatar_node = c.avatar(profile, 96, round_=True)
    if summary_node is not None or avatar_node is not None:
        intro = el(
            "div",
            el("div", summary_node, style={"flex": "1"}) if summary_node is not None else None,
            avatar_node,
            style={"display": "row", "gap": "12px", "margin-bottom": "12px"},
        )

    def render_skill(item: SkillItem) -> Node:
        return c.skill(item, small, font_weight="500")

    def render_item(item: ResumeItem) -> Node:
        first_line = el(
            "div",
            c.text("h4", item.title, role="item-title", size=medium, font_weight="bold", flex="1"),
            c.optional_slot(item.date, "item-date", small, font_style="italic"),
            style={"display": "row", "justify": "space-between"},
        )
        second_line = None
        if c.has_text(item.subtitle) or c.has_text(item.location):
            second_line = el(
                "div",
                c.optional_slot(item.subtitle, "item-subtitle", small, font_weight="600", flex="1"),
                c.optional_slot(item.location, "item-location", small),
                style={"display": "row", "justify": "space-between", "margin-bottom": "8px"},
            )
        return c.item(
            item,
            first_line,
            second_line,
            c.description(item, small, padding_left="16px", border_left="1px solid var(--color-secondary)"),
            margin_bottom="6px",
        )

    sections = []
    for module in c.visible_modules(document):
        heading = c.text(
            "h3",
            module.title,
            role="section-title",
            size=medium,
            font_weight="bold",
            text_transform="uppercase",
            border_bottom="1px solid var(--color-secondary)",
            margin_bottom="6px",
        )
        sections.append(
            c.section(
                module,
                heading,
                c.module_body(module, render_skill, render_item, skills_style={"gap": "16px"}),
            )
        )

    return c.page(
        header,
        intro,
        el("div", *sections, style={"gap": "16px"}),
        style=c.root_style(scale, padding="20px", font_family="serif"),
    )

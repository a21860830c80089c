"""Executive variant: centered serif layout with gold rules."""

from resumex.contexts.document.model import ResumeData, ResumeItem, SkillItem
from resumex.contexts.templating import components as c
from resumex.contexts.templating.tree import Node, el

TEMPLATE_ID = "executive"
NAME = "高管精英"

GOLD = "#C9A96E"
SUMMARY_TITLE = "职业概述"


def _divider() -> Node:
    return el(
        "div",
        Node(tag="hr", style={"width": "64px", "border-top": f"1px solid {GOLD}"}),
        Node(tag="div", style={"width": "8px", "height": "8px", "background": GOLD}),
        Node(tag="hr", style={"width": "64px", "border-top": f"1px solid {GOLD}"}),
        style={"display": "row", "justify": "center", "gap": "12px", "margin-bottom": "12px"},
    )


def render(document: ResumeData) -> Node:
    profile = document.profile
    scale = c.font_scale(document)
    caption = c.font_size(0.78, scale)
    heading_size = c.font_size(0.85, scale)

    header = el(
        "header",
        c.profile_name(profile, c.font_size(1.8, scale), letter_spacing="0.15em", margin_bottom="12px"),
        c.profile_title(profile, c.font_size(0.95, scale), font_style="italic", margin_bottom="12px"),
        _divider(),
        el(
            "div",
            *c.contacts(profile, first=("email",)),
            style={"display": "flow", "justify": "center", "gap": "20px", "font-size": c.font_size(0.75, scale)},
        ),
        style={"text-align": "center", "margin-bottom": "20px"},
    )

    summary_block = None
    summary_node = c.summary(profile, caption, text_align="center")
    if summary_node is not None:
        summary_block = el(
            "div",
            c.text("h2", SUMMARY_TITLE, size=heading_size, color=GOLD, font_weight="600", text_align="center", margin_bottom="16px"),
            summary_node,
            style={"margin-bottom": "20px"},
        )

    def render_skill(item: SkillItem) -> Node:
        return c.skill(item, caption, font_weight="500")

    def render_item(item: ResumeItem) -> Node:
        first_line = el(
            "div",
            c.text("h3", item.title, role="item-title", size=c.font_size(1.05, scale), font_weight="bold", flex="1"),
            c.optional_slot(item.date, "item-date", caption, font_style="italic"),
            style={"display": "row", "justify": "space-between", "margin-bottom": "4px"},
        )
        second_line = None
        if c.has_text(item.subtitle) or c.has_text(item.location):
            second_line = el(
                "p",
                c.optional_slot(item.subtitle, "item-subtitle", caption, font_weight="500"),
                c.text("span", " | ", size=caption) if c.has_text(item.location) else None,
                c.optional_slot(item.location, "item-location", caption),
                style={"display": "flow", "margin-bottom": "8px"},
            )
        return c.item(item, first_line, second_line, c.description(item, caption))

    sections = []
    for module in c.visible_modules(document):
        heading = el(
            "div",
            c.text(
                "h2",
                module.title,
                role="section-title",
                size=heading_size,
                color=GOLD,
                font_weight="600",
                text_transform="uppercase",
                margin_bottom="8px",
            ),
            Node(tag="hr", style={"width": "40px", "border-top": f"1px solid {GOLD}"}),
            style={"text-align": "center", "margin-bottom": "12px"},
        )
        body = c.module_body(
            module,
            render_skill,
            render_item,
            skills_style={"justify": "center", "gap": "16px"},
            items_style={"gap": "12px"},
        )
        sections.append(c.section(module, heading, body))

    return c.page(
        header,
        summary_block,
        el("div", *sections, style={"gap": "20px"}),
        _divider(),
        style=c.root_style(scale, padding="32px 40px", font_family="serif"),
    )

"""Timeline variant: round badge headings and a dotted vertical rail per section."""

from resumex.contexts.document.model import ResumeData, ResumeItem, SkillItem
from resumex.contexts.templating import components as c
from resumex.contexts.templating.tree import Node, el

TEMPLATE_ID = "timeline"
NAME = "时间线"


def render(document: ResumeData) -> Node:
    profile = document.profile
    scale = c.font_scale(document)
    small = c.font_size(0.8, scale)
    tiny = c.font_size(0.75, scale)
    medium = c.font_size(0.9, scale)

    header = el(
        "header",
        c.avatar(profile, 80, round_=True, border="3px solid var(--color-primary)"),
        el(
            "div",
            c.profile_name(profile, c.font_size(1.5, scale), color="var(--color-primary)", margin_bottom="4px"),
            c.profile_title(profile, c.font_size(0.95, scale), margin_bottom="6px"),
            el(
                "div",
                *c.contacts(profile),
                style={"display": "flow", "gap": "12px", "font-size": tiny},
            ),
            style={"flex": "1"},
        ),
        style={
            "display": "row",
            "gap": "12px",
            "border-bottom": "2px solid var(--color-primary)",
            "margin-bottom": "12px",
        },
    )

    summary_node = c.summary(profile, small)
    summary_block = (
        el(
            "div",
            summary_node,
            style={"border-left": "3px solid var(--color-primary)", "padding-left": "32px", "margin-bottom": "12px"},
        )
        if summary_node is not None
        else None
    )

    def render_skill(item: SkillItem) -> Node:
        return c.skill(
            item,
            tiny,
            background="var(--color-accent)",
            color="var(--color-primary)",
            border="1px solid var(--color-secondary)",
            padding="4px 12px",
            border_radius="9999px",
        )

    def render_item(item: ResumeItem) -> Node:
        dot = Node(
            tag="div",
            style={
                "width": "15px",
                "height": "15px",
                "border": "3px solid var(--color-primary)",
                "border-radius": "50%",
                "background": "#FFFFFF",
            },
        )
        secondary = None
        if c.has_text(item.subtitle) or c.has_text(item.location):
            secondary = el(
                "div",
                c.optional_slot(item.subtitle, "item-subtitle", small, color="var(--color-primary)"),
                c.text("span", " · ", size=small) if c.has_text(item.subtitle) and c.has_text(item.location) else None,
                c.optional_slot(item.location, "item-location", small),
                style={"display": "flow", "margin-bottom": "4px"},
            )
        body = el(
            "div",
            c.optional_slot(
                item.date,
                "item-date",
                tiny,
                font_weight="600",
                background="var(--color-accent)",
                color="var(--color-primary)",
                padding="2px 8px",
            ),
            c.text("h4", item.title, role="item-title", size=medium, font_weight="bold"),
            secondary,
            c.description(item, small),
            style={"flex": "1"},
        )
        return c.item(item, dot, body, display="row", gap="16px")

    sections = []
    for module in c.visible_modules(document):
        badge = c.text(
            "div",
            module.title[:1],
            size=tiny,
            color="#FFFFFF",
            background="var(--color-primary)",
            font_weight="bold",
            width="32px",
            height="32px",
            border_radius="50%",
            text_align="center",
        )
        heading = el(
            "div",
            badge,
            c.text("h3", module.title, role="section-title", size=medium, color="var(--color-primary)", font_weight="bold"),
            style={"display": "row", "gap": "12px", "margin-bottom": "8px"},
        )
        body = c.module_body(
            module,
            render_skill,
            render_item,
            skills_style={"padding-left": "48px"},
            items_style={"padding-left": "16px", "border-left": "2px solid var(--color-secondary)"},
        )
        sections.append(c.section(module, heading, body))

    return c.page(
        header,
        summary_block,
        el("div", *sections, style={"gap": "16px"}),
        style=c.root_style(scale, padding="24px"),
    )

"""Tech variant: accent bar section headings, pill skill tags, date column."""

from resumex.contexts.document.model import ResumeData, ResumeItem, SkillItem
from resumex.contexts.templating import components as c
from resumex.contexts.templating.tree import Node, el

TEMPLATE_ID = "tech"
NAME = "技术极客"


def render(document: ResumeData) -> Node:
    profile = document.profile
    scale = c.font_scale(document)
    small = c.font_size(0.8, scale)

    contacts = el(
        "div",
        *c.contacts(profile, color="var(--color-text)"),
        style={"display": "flow", "gap": "12px", "font-size": small},
    )
    header = el(
        "header",
        el(
            "div",
            c.profile_name(profile, c.font_size(1.5, scale), color="var(--color-secondary)", margin_bottom="8px"),
            c.profile_title(profile, c.font_size(0.95, scale), color="var(--color-primary)", margin_bottom="6px"),
            contacts,
            style={"flex": "1"},
        ),
        c.avatar(profile, 96, border="2px solid var(--color-primary)"),
        style={"display": "row", "justify": "space-between", "margin-bottom": "16px"},
    )

    def render_skill(item: SkillItem) -> Node:
        return c.skill(
            item,
            small,
            background="var(--color-accent)",
            border="1px solid var(--color-primary)",
            padding="4px 12px",
            border_radius="9999px",
        )

    def render_item(item: ResumeItem) -> Node:
        date_column = el(
            "div",
            c.optional_slot(item.date, "item-date", small, tag="p", font_weight="600"),
            style={"width": "25%"},
        )
        body = el(
            "div",
            c.text("h4", item.title, role="item-title", font_weight="bold"),
            _subtitle_line(item, small),
            c.description(item, small),
            style={"flex": "1"},
        )
        return c.item(item, date_column, body, display="row", gap="16px")

    sections = []
    for module in c.visible_modules(document):
        heading = el(
            "div",
            Node(tag="div", style={"width": "6px", "height": "24px", "background": "var(--color-primary)"}),
            c.text(
                "h3",
                module.title,
                role="section-title",
                size=c.font_size(0.9, scale),
                color="var(--color-primary)",
                font_weight="bold",
            ),
            style={"display": "row", "gap": "8px", "border-bottom": "1px solid var(--color-secondary)", "margin-bottom": "6px"},
        )
        sections.append(c.section(module, heading, c.module_body(module, render_skill, render_item)))

    return c.page(
        header,
        c.summary(profile, margin_bottom="12px"),
        el("div", *sections, style={"gap": "16px"}),
        style=c.root_style(scale, padding="24px"),
    )


def _subtitle_line(item: ResumeItem, size: str):
    subtitle = c.optional_slot(item.subtitle, "item-subtitle", size, color="var(--color-primary)")
    location = c.optional_slot(item.location, "item-location", size)
    if subtitle is None and location is None:
        return None
    bullet = c.text("span", " • ", size=size) if location is not None else None
    return el("div", subtitle, bullet, location, style={"display": "flow", "margin-bottom": "8px"})

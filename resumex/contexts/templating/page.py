"""
Page root for rendered documents.

Wraps a variant's output in the A4 page element carrying the theme palette as
``--color-*`` variables and the font, line-height and margin settings as data
attributes.
"""

from typing import Optional

from resumex.contexts.document.model import ResumeData
from resumex.contexts.document.presets import get_theme
from resumex.contexts.templating.exceptions import TemplateLoadError, TemplateRenderError
from resumex.contexts.templating.registry import TemplateRegistry
from resumex.contexts.templating.tree import Node

PAGE_WIDTH_MM = 210
PAGE_HEIGHT_MM = 297

LINE_HEIGHTS = {"compact": 1.35, "standard": 1.5, "relaxed": 1.7}
PAGE_MARGINS_MM = {"compact": 10, "standard": 15, "relaxed": 20}
FONT_STACKS = {
    "sans": '"Source Han Sans", "Noto Sans SC", system-ui, sans-serif',
    "serif": '"Source Han Serif", "Noto Serif SC", Georgia, serif',
    "mono": '"JetBrains Mono", "Source Code Pro", monospace',
}

_default_registry: Optional[TemplateRegistry] = None


def default_registry() -> TemplateRegistry:
    global _default_registry
    if _default_registry is None:
        _default_registry = TemplateRegistry()
    return _default_registry


def page_style(document: ResumeData) -> dict:
    settings = document.settings
    colors = get_theme(settings.theme_color).colors
    style = {f"--color-{name}": value for name, value in colors.items()}
    style.update(
        {
            "width": f"{PAGE_WIDTH_MM}mm",
            "min-height": f"{PAGE_HEIGHT_MM}mm",
            "background": "#FFFFFF",
            "font-family": FONT_STACKS.get(settings.font_family, FONT_STACKS["sans"]),
            "line-height": str(LINE_HEIGHTS.get(settings.line_height, LINE_HEIGHTS["standard"])),
            "padding": f"{PAGE_MARGINS_MM.get(settings.page_margin, PAGE_MARGINS_MM['standard'])}mm",
        }
    )
    return style


def render_document(document: ResumeData, registry: Optional[TemplateRegistry] = None) -> Node:
    """
    Render a document through its template variant and wrap it in the page root.

    Args:
        document: Document snapshot (never modified)
        registry: Variant registry (default: shared registry of built-in variants)

    Returns:
        Page root node

    Raises:
        TemplateLoadError: If the variant module cannot be loaded
        TemplateRenderError: If the variant raises while rendering
    """
    registry = registry or default_registry()
    template_id = registry.resolve_id(document.template)
    variant = registry.get_variant(template_id)

    try:
        body = variant.render(document)
    except (TemplateLoadError, TemplateRenderError):
        raise
    except Exception as e:
        raise TemplateRenderError("Template variant failed", template_id=template_id, original_error=e) from e

    settings = document.settings
    return Node(
        tag="div",
        children=(body,),
        classes=("resume-page",),
        style=page_style(document),
        attrs={
            "data-template": template_id,
            "data-font": settings.font_family,
            "data-line-height": settings.line_height,
            "data-margin": settings.page_margin,
        },
        key=document.id,
        role="page",
    )

"""
Templating Context

Responsibilities:
- Defines the presentation tree produced by template variants
- Renders documents through a closed set of visual variants
- Loads variants lazily, with retry for asynchronous loads
- Serializes trees to HTML for preview
- Guards rendering with a last-resort failure boundary

Owns: Presentation tree, template variants, variant registry, HTML preview
Never: Mutates documents, measures or paints pixels
"""

from resumex.contexts.templating.boundary import BoundaryResult, RenderBoundary
from resumex.contexts.templating.exceptions import TemplateLoadError, TemplateRenderError
from resumex.contexts.templating.html import render_html
from resumex.contexts.templating.page import render_document
from resumex.contexts.templating.registry import TemplateRegistry
from resumex.contexts.templating.tree import EXPORT_EXCLUDE_CLASS, Node, outline

__all__ = [
    # Tree
    "Node",
    "outline",
    "EXPORT_EXCLUDE_CLASS",
    # Rendering
    "render_document",
    "render_html",
    "TemplateRegistry",
    # Failure handling
    "RenderBoundary",
    "BoundaryResult",
    "TemplateLoadError",
    "TemplateRenderError",
]

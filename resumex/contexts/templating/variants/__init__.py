"""
Template variants.

Each module exposes ``TEMPLATE_ID``, ``NAME`` and ``render(document) -> Node``.
Variants differ in color, spacing and decoration only; section order, item
order and optional-field handling come from the shared components.
"""

VARIANT_MODULES = {
    "tech": "resumex.contexts.templating.variants.tech",
    "minimal": "resumex.contexts.templating.variants.minimal",
    "academic": "resumex.contexts.templating.variants.academic",
    "timeline": "resumex.contexts.templating.variants.timeline",
    "executive": "resumex.contexts.templating.variants.executive",
}

DEFAULT_TEMPLATE_ID = "tech"

"""
HTML preview host.

Serializes a presentation tree to a standalone HTML page with Jinja2. Layout
keywords of the tree vocabulary map onto flexbox:

- ``display: row``   -> ``display: flex``
- ``display: flow``  -> ``display: flex; flex-wrap: wrap``
- ``justify: X``     -> ``justify-content: X``
"""

import os
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv
from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, select_autoescape
from markupsafe import Markup, escape

from resumex.contexts.templating.tree import EXPORT_EXCLUDE_CLASS, Node

load_dotenv()
HTML_TEMPLATES_PATH = Path(
    os.getenv("RESUMEX_HTML_TEMPLATES_PATH", str(Path(__file__).parent / "templates"))
)

VOID_TAGS = ("img", "hr", "br")


def css_declarations(style: Mapping[str, str]) -> str:
    """Translate tree style declarations to an inline CSS string."""
    declarations = []
    for name, value in style.items():
        if name == "display" and value == "row":
            declarations.append("display: flex")
        elif name == "display" and value == "flow":
            declarations.append("display: flex")
            declarations.append("flex-wrap: wrap")
        elif name == "justify":
            declarations.append(f"justify-content: {value}")
        else:
            declarations.append(f"{name}: {value}")
    return "; ".join(declarations)


def node_attrs(node: Node) -> Markup:
    """Render the attribute string of a node (leading space included)."""
    parts = []
    if node.classes:
        parts.append(f' class="{escape(" ".join(node.classes))}"')
    if node.style:
        parts.append(f' style="{escape(css_declarations(node.style))}"')
    if node.key is not None:
        parts.append(f' data-key="{escape(node.key)}"')
    if node.role is not None:
        parts.append(f' data-role="{escape(node.role)}"')
    for name, value in node.attrs.items():
        parts.append(f' {escape(name)}="{escape(value)}"')
    return Markup("".join(parts))


class HtmlRenderer:
    """
    Jinja2 environment for the preview page.

    Example:
        html = HtmlRenderer().render(tree, title="李明_简历")
    """

    def __init__(self, templates_path: Path = None):
        if templates_path is None:
            templates_path = HTML_TEMPLATES_PATH

        self.templates_path = templates_path
        self.env = Environment(
            loader=FileSystemLoader(str(templates_path)),
            undefined=StrictUndefined,
            autoescape=select_autoescape(enabled_extensions=("html", "jinja")),
            keep_trailing_newline=True,
        )
        self.env.filters["node_attrs"] = node_attrs
        self._template: Template = None

    def get_template(self) -> Template:
        if self._template is None:
            self._template = self.env.get_template("page.html.jinja")
        return self._template

    def render(self, tree: Node, title: str = "简历", lang: str = "zh-CN") -> str:
        return self.get_template().render(
            tree=tree,
            title=title,
            lang=lang,
            void_tags=VOID_TAGS,
            exclude_class=EXPORT_EXCLUDE_CLASS,
        )


def render_html(tree: Node, title: str = "简历", lang: str = "zh-CN") -> str:
    """Serialize a tree to a standalone HTML page."""
    return HtmlRenderer().render(tree, title=title, lang=lang)

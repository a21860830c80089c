"""
Presentation Tree

Immutable, renderer-agnostic description of a rendered résumé. Template
variants produce trees; the HTML preview host and the layout host consume them.

Style values use CSS vocabulary (``font-size: 1.2rem``, ``color:
var(--color-primary)``) so the same tree can be serialized to HTML or laid out
directly.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, Mapping, Optional, Tuple

# Subtrees carrying this class are left out of raster and print output
EXPORT_EXCLUDE_CLASS = "no-export"

# Semantic slots shared by every variant
ROLES = (
    "page",
    "profile-name",
    "profile-title",
    "contact",
    "summary",
    "avatar",
    "section",
    "section-title",
    "item",
    "item-title",
    "item-subtitle",
    "item-date",
    "item-location",
    "item-description",
    "skill",
)


@dataclass(frozen=True)
class Node:
    """
    One element of a presentation tree.

    Attributes:
        tag: Element kind ("div", "h1", "p", "span", "img", "hr", ...)
        text: Literal text content (line breaks preserved)
        children: Child nodes in display order
        classes: Styling and marker classes
        style: CSS-like declarations (font-size, color, display, ...)
        attrs: Extra attributes (src, alt, data-*)
        key: Module or item id for reconciliation
        role: Semantic slot (see ROLES)
    """

    tag: str
    text: Optional[str] = None
    children: Tuple["Node", ...] = ()
    classes: Tuple[str, ...] = ()
    style: Mapping[str, str] = field(default_factory=dict)
    attrs: Mapping[str, str] = field(default_factory=dict)
    key: Optional[str] = None
    role: Optional[str] = None

    def walk(self) -> Iterator["Node"]:
        """Depth-first, pre-order traversal including this node."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find_all(self, role: str) -> Tuple["Node", ...]:
        return tuple(node for node in self.walk() if node.role == role)

    def find(self, role: str) -> Optional["Node"]:
        for node in self.walk():
            if node.role == role:
                return node
        return None

    def text_content(self) -> str:
        """Concatenated text of this subtree."""
        return "".join(node.text or "" for node in self.walk())

    def with_style(self, **declarations: str) -> "Node":
        style: Dict[str, str] = dict(self.style)
        style.update({k.replace("_", "-"): v for k, v in declarations.items()})
        return replace(self, style=style)

    @property
    def excluded(self) -> bool:
        return EXPORT_EXCLUDE_CLASS in self.classes


def el(tag: str, *children: Optional[Node], **kwargs) -> Node:
    """
    Build a node, dropping ``None`` children.

    Optional content is expressed by passing ``None`` for absent parts, so a
    missing field never leaves an empty placeholder element behind.

    Example:
        el("div", name_node, title_node if profile.title else None, role="item")
    """
    return Node(tag=tag, children=tuple(c for c in children if c is not None), **kwargs)


def outline(tree: Node) -> Tuple[Tuple[str, str, Tuple[Tuple[str, ...], ...]], ...]:
    """
    Visible content of a rendered résumé, independent of styling.

    Returns one entry per section: ``(module_id, title_text, items)``. Each item
    is ``(item_id, *slot_texts)`` with the texts of the slots present, in slot
    order (title, subtitle, date, location, description for résumé items; the
    name for skills).

    Example:
        >>> outline(render(document))[0][0]
        'exp-1'
    """
    item_slots = ("item-title", "item-subtitle", "item-date", "item-location", "item-description")
    sections = []
    for section in tree.find_all("section"):
        title_node = section.find("section-title")
        items = []
        for node in section.walk():
            if node.role == "skill":
                items.append((node.key, node.text_content()))
            elif node.role == "item":
                slot_texts = []
                for slot in item_slots:
                    slot_node = node.find(slot)
                    if slot_node is not None:
                        slot_texts.append(slot_node.text_content())
                items.append((node.key, *slot_texts))
        sections.append((section.key, title_node.text_content() if title_node else "", tuple(items)))
    return tuple(sections)

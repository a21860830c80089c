"""
Layout host.

Materializes a presentation tree into positioned boxes, the way a browser
realizes a DOM: every node becomes a ``RenderedNode`` with absolute geometry,
wrapped text lines and resolved colors. Text is measured with Pillow fonts so
the painter and the layout agree on glyph widths.

Supported layout vocabulary (see templating.tree):
- ``display``: ``block`` (default, vertical stack), ``row`` (horizontal),
  ``flow`` (inline, wrapping)
- ``width``/``height`` in px, mm, rem or percent; ``flex: 1`` takes the
  remaining row width
- ``padding`` shorthand, ``padding-left``, ``margin-bottom``, ``gap``
- ``justify``: ``space-between`` or ``center``; ``text-align``
- ``font-size``, ``font-weight``, ``line-height``, ``color``, ``background``,
  ``border``/``border-top``/``border-bottom``/``border-left``,
  ``text-transform: uppercase``, ``white-space: pre-line``
"""

import os
import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from dotenv import load_dotenv
from PIL import ImageColor, ImageFont

from resumex.contexts.templating.tree import EXPORT_EXCLUDE_CLASS, Node

load_dotenv()
FONT_PATH = os.getenv("RESUMEX_FONT_PATH") or None
BOLD_FONT_PATH = os.getenv("RESUMEX_BOLD_FONT_PATH") or None

PX_PER_MM = 96 / 25.4
REM_PX = 16
PAGE_WIDTH_PX = round(210 * PX_PER_MM)
PAGE_HEIGHT_PX = round(297 * PX_PER_MM)
DEFAULT_FONT_PX = 16.0
DEFAULT_LINE_HEIGHT = 1.5
DEFAULT_COLOR = (45, 55, 72)

RGB = Tuple[int, int, int]

_LENGTH_PATTERN = re.compile(r"^(-?\d+(?:\.\d+)?)(px|rem|em|mm|%)?$")


@dataclass(eq=False)
class TextLine:
    text: str
    x: float
    y: float


@dataclass(eq=False)
class RenderedNode:
    """
    Realized element with absolute geometry, in CSS pixels at scale 1.

    Mutable like a DOM element: the print flow assigns ``element_id`` to scope
    printing to one subtree.
    """

    node: Node
    x: float
    y: float
    width: float
    height: float
    font_px: float = DEFAULT_FONT_PX
    bold: bool = False
    color: RGB = DEFAULT_COLOR
    background: Optional[RGB] = None
    borders: Dict[str, Tuple[float, RGB]] = field(default_factory=dict)
    radius: float = 0.0
    lines: List[TextLine] = field(default_factory=list)
    children: List["RenderedNode"] = field(default_factory=list)
    element_id: Optional[str] = None
    classes: List[str] = field(default_factory=list)

    @property
    def excluded(self) -> bool:
        return EXPORT_EXCLUDE_CLASS in self.classes

    def walk(self) -> Iterator["RenderedNode"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def find_by_id(self, element_id: str) -> Optional["RenderedNode"]:
        for rendered in self.walk():
            if rendered.element_id == element_id:
                return rendered
        return None

    def shift(self, dx: float, dy: float) -> None:
        """Move this subtree by (dx, dy)."""
        for rendered in self.walk():
            rendered.x += dx
            rendered.y += dy
            for line in rendered.lines:
                line.x += dx
                line.y += dy


@dataclass(frozen=True)
class _Context:
    font_px: float
    line_height: float
    color: RGB
    bold: bool
    text_align: str
    uppercase: bool
    variables: Tuple[Tuple[str, str], ...]

    def variable(self, name: str) -> Optional[str]:
        for key, value in self.variables:
            if key == name:
                return value
        return None


class FontBook:
    """
    Pillow fonts by pixel size and weight.

    Uses ``RESUMEX_FONT_PATH``/``RESUMEX_BOLD_FONT_PATH`` TrueType files when set
    (a CJK-capable font is needed for Chinese glyphs), Pillow's built-in font
    otherwise.
    """

    def __init__(self, regular_path: Optional[str] = FONT_PATH, bold_path: Optional[str] = BOLD_FONT_PATH):
        self.regular_path = regular_path
        self.bold_path = bold_path or regular_path
        self._fonts: Dict[Tuple[int, bool], ImageFont.ImageFont] = {}

    def get(self, size_px: int, bold: bool = False) -> ImageFont.ImageFont:
        size_px = max(1, int(size_px))
        key = (size_px, bold)
        font = self._fonts.get(key)
        if font is None:
            path = self.bold_path if bold else self.regular_path
            font = ImageFont.truetype(path, size_px) if path else ImageFont.load_default(size=size_px)
            self._fonts[key] = font
        return font

    def text_width(self, text: str, size_px: float, bold: bool = False) -> float:
        if not text:
            return 0.0
        return float(self.get(round(size_px), bold).getlength(text))


def parse_length(value: Optional[str], font_px: float, reference: float = 0.0) -> Optional[float]:
    """CSS length in px; percentages resolve against ``reference``."""
    if value is None:
        return None
    match = _LENGTH_PATTERN.match(str(value).strip())
    if not match:
        return None
    number = float(match.group(1))
    unit = match.group(2) or "px"
    if unit == "px":
        return number
    if unit == "rem":
        return number * REM_PX
    if unit == "em":
        return number * font_px
    if unit == "mm":
        return number * PX_PER_MM
    return number * reference / 100


def parse_box(value: Optional[str], font_px: float) -> Tuple[float, float, float, float]:
    """Padding shorthand (1 to 4 values) as (top, right, bottom, left)."""
    if not value:
        return (0.0, 0.0, 0.0, 0.0)
    parts = [parse_length(p, font_px) or 0.0 for p in str(value).split()]
    if len(parts) == 1:
        return (parts[0],) * 4
    if len(parts) == 2:
        return (parts[0], parts[1], parts[0], parts[1])
    if len(parts) == 3:
        return (parts[0], parts[1], parts[2], parts[1])
    return tuple(parts[:4])


def resolve_color(value: Optional[str], ctx: _Context) -> Optional[RGB]:
    """Resolve ``var(--name)`` references and color literals to RGB."""
    if not value:
        return None
    value = value.strip()
    var_match = re.match(r"^var\((--[\w-]+)\)$", value)
    if var_match:
        value = ctx.variable(var_match.group(1))
        if value is None:
            return None
    try:
        return ImageColor.getrgb(value)[:3]
    except ValueError:
        return None


def _parse_border(value: Optional[str], ctx: _Context) -> Optional[Tuple[float, RGB]]:
    if not value:
        return None
    parts = value.split()
    width = parse_length(parts[0], ctx.font_px) or 1.0
    color = resolve_color(" ".join(parts[2:]), ctx) if len(parts) > 2 else ctx.color
    return (width, color or ctx.color)


class LayoutEngine:
    """
    Block/row/flow box layout over presentation trees.

    Example:
        rendered = LayoutEngine().materialize(render_document(document))
        rendered.width, rendered.height
    """

    def __init__(self, fonts: Optional[FontBook] = None, page_width: float = PAGE_WIDTH_PX):
        self.fonts = fonts or FontBook()
        self.page_width = page_width

    def materialize(self, tree: Node) -> RenderedNode:
        root_ctx = _Context(
            font_px=DEFAULT_FONT_PX,
            line_height=DEFAULT_LINE_HEIGHT,
            color=DEFAULT_COLOR,
            bold=False,
            text_align="left",
            uppercase=False,
            variables=(),
        )
        return self._layout(tree, 0.0, 0.0, self.page_width, root_ctx)

    # Style resolution

    def _context(self, node: Node, parent: _Context) -> _Context:
        style = node.style
        variables = parent.variables + tuple((k, v) for k, v in style.items() if k.startswith("--"))
        ctx = _Context(
            font_px=parent.font_px,
            line_height=parent.line_height,
            color=parent.color,
            bold=parent.bold,
            text_align=style.get("text-align", parent.text_align),
            uppercase=parent.uppercase or style.get("text-transform") == "uppercase",
            variables=variables,
        )

        font_px = parse_length(style.get("font-size"), parent.font_px, parent.font_px)
        weight = style.get("font-weight")
        bold = parent.bold if weight is None else weight in ("bold", "600", "700", "800", "900")
        line_height = parent.line_height
        if "line-height" in style:
            try:
                line_height = float(style["line-height"])
            except ValueError:
                pass
        color = resolve_color(style.get("color"), ctx) or parent.color

        return _Context(
            font_px=font_px or parent.font_px,
            line_height=line_height,
            color=color,
            bold=bold,
            text_align=ctx.text_align,
            uppercase=ctx.uppercase,
            variables=variables,
        )

    def _display_text(self, node: Node, ctx: _Context) -> Optional[str]:
        if node.text is None:
            return None
        text = node.text
        if node.style.get("white-space") != "pre-line":
            text = " ".join(text.split())
        return text.upper() if ctx.uppercase else text

    # Measurement

    def _wrap(self, text: str, width: float, ctx: _Context) -> List[str]:
        lines: List[str] = []
        for paragraph in text.split("\n"):
            current = ""
            for char in paragraph:
                candidate = current + char
                if current and self.fonts.text_width(candidate, ctx.font_px, ctx.bold) > width:
                    lines.append(current.rstrip())
                    current = char.lstrip()
                else:
                    current = candidate
            lines.append(current)
        return lines

    def natural_width(self, node: Node, parent_ctx: _Context) -> float:
        """Width the node would take without wrapping."""
        ctx = self._context(node, parent_ctx)
        top, right, bottom, left = parse_box(node.style.get("padding"), ctx.font_px)
        left = parse_length(node.style.get("padding-left"), ctx.font_px) or left
        explicit = parse_length(node.style.get("width"), ctx.font_px)
        if explicit is not None and not str(node.style.get("width")).endswith("%"):
            return explicit

        content = 0.0
        text = self._display_text(node, ctx)
        if text:
            content = max(self.fonts.text_width(line, ctx.font_px, ctx.bold) for line in text.split("\n"))

        display = node.style.get("display", "block")
        gap = parse_length(node.style.get("gap"), ctx.font_px) or 0.0
        widths = [self.natural_width(child, ctx) for child in node.children]
        if widths:
            if display in ("row", "flow"):
                content = max(content, sum(widths) + gap * (len(widths) - 1))
            else:
                content = max(content, max(widths))
        return content + left + right

    # Layout

    def _layout(self, node: Node, x: float, y: float, available: float, parent_ctx: _Context) -> RenderedNode:
        ctx = self._context(node, parent_ctx)
        style = node.style

        width = parse_length(style.get("width"), ctx.font_px, available)
        width = min(width, available) if width is not None else available
        top, right, bottom, left = parse_box(style.get("padding"), ctx.font_px)
        if "padding-left" in style:
            left = parse_length(style["padding-left"], ctx.font_px) or 0.0

        borders = {}
        for side in ("top", "right", "bottom", "left"):
            parsed = _parse_border(style.get(f"border-{side}") or style.get("border"), ctx)
            if parsed is not None:
                borders[side] = parsed

        rendered = RenderedNode(
            node=node,
            x=x,
            y=y,
            width=width,
            height=0.0,
            font_px=ctx.font_px,
            bold=ctx.bold,
            color=ctx.color,
            background=resolve_color(style.get("background"), ctx),
            borders=borders,
            radius=parse_length(style.get("border-radius"), ctx.font_px, width) or 0.0,
            classes=list(node.classes),
            element_id=node.attrs.get("id"),
        )

        content_x = x + left
        content_y = y + top
        content_width = max(1.0, width - left - right)
        cursor = content_y

        text = self._display_text(node, ctx)
        if text:
            line_px = ctx.font_px * ctx.line_height
            for line in self._wrap(text, content_width, ctx):
                line_width = self.fonts.text_width(line, ctx.font_px, ctx.bold)
                offset = 0.0
                if ctx.text_align == "center":
                    offset = max(0.0, (content_width - line_width) / 2)
                elif ctx.text_align == "right":
                    offset = max(0.0, content_width - line_width)
                rendered.lines.append(TextLine(text=line, x=content_x + offset, y=cursor))
                cursor += line_px

        if node.children:
            display = style.get("display", "block")
            gap = parse_length(style.get("gap"), ctx.font_px) or 0.0
            if display == "row":
                children, used = self._layout_row(node, content_x, cursor, content_width, gap, ctx)
            elif display == "flow":
                children, used = self._layout_flow(node, content_x, cursor, content_width, gap, ctx)
            else:
                children, used = self._layout_block(node, content_x, cursor, content_width, gap, ctx)
            rendered.children = children
            cursor += used

        natural_height = cursor - y + bottom
        explicit_height = parse_length(style.get("height"), ctx.font_px)
        rendered.height = max(natural_height, explicit_height or 0.0)
        min_height = parse_length(style.get("min-height"), ctx.font_px)
        if min_height is not None:
            rendered.height = max(rendered.height, min_height)
        return rendered

    def _margin_bottom(self, child: Node, ctx: _Context) -> float:
        return parse_length(child.style.get("margin-bottom"), ctx.font_px) or 0.0

    def _layout_block(self, node, x, y, width, gap, ctx) -> Tuple[List[RenderedNode], float]:
        children = []
        cursor = y
        for index, child in enumerate(node.children):
            if index:
                cursor += gap
            rendered = self._layout(child, x, cursor, width, ctx)
            children.append(rendered)
            cursor += rendered.height + self._margin_bottom(child, ctx)
        return children, cursor - y

    def _layout_row(self, node, x, y, width, gap, ctx) -> Tuple[List[RenderedNode], float]:
        count = len(node.children)
        remaining = width - gap * (count - 1)
        widths: List[Optional[float]] = []
        flex_indexes = []
        for index, child in enumerate(node.children):
            explicit = parse_length(child.style.get("width"), ctx.font_px, width)
            if explicit is not None:
                widths.append(explicit)
            elif child.style.get("flex"):
                widths.append(None)
                flex_indexes.append(index)
            else:
                widths.append(self.natural_width(child, ctx))
        fixed = sum(w for w in widths if w is not None)
        if flex_indexes:
            share = max(0.0, remaining - fixed) / len(flex_indexes)
            widths = [share if w is None else w for w in widths]

        justify = node.style.get("justify")
        spacing = gap
        offset = 0.0
        leftover = max(0.0, remaining - sum(widths))
        if not flex_indexes and justify == "space-between" and count > 1:
            spacing = gap + leftover / (count - 1)
        elif not flex_indexes and justify == "center":
            offset = leftover / 2

        children = []
        cursor = x + offset
        tallest = 0.0
        for child, child_width in zip(node.children, widths):
            rendered = self._layout(child, cursor, y, max(1.0, min(child_width, width)), ctx)
            children.append(rendered)
            cursor += rendered.width + spacing
            tallest = max(tallest, rendered.height + self._margin_bottom(child, ctx))
        return children, tallest

    def _layout_flow(self, node, x, y, width, gap, ctx) -> Tuple[List[RenderedNode], float]:
        children: List[RenderedNode] = []
        line: List[RenderedNode] = []
        cursor_x = x
        cursor_y = y
        line_height = 0.0
        center = node.style.get("justify") == "center"

        def close_line() -> None:
            if center and line:
                used = line[-1].x + line[-1].width - x
                dx = max(0.0, (width - used) / 2)
                for rendered in line:
                    rendered.shift(dx, 0.0)

        for child in node.children:
            child_width = min(self.natural_width(child, ctx), width)
            if line and cursor_x + child_width > x + width:
                close_line()
                line = []
                cursor_x = x
                cursor_y += line_height + gap
                line_height = 0.0
            rendered = self._layout(child, cursor_x, cursor_y, max(1.0, child_width), ctx)
            children.append(rendered)
            line.append(rendered)
            cursor_x += rendered.width + gap
            line_height = max(line_height, rendered.height)
        close_line()
        return children, cursor_y + line_height - y


def materialize(tree: Node, fonts: Optional[FontBook] = None) -> RenderedNode:
    """Lay out a presentation tree on an A4-wide page."""
    return LayoutEngine(fonts=fonts).materialize(tree)


def content_height(rendered: RenderedNode) -> float:
    """
    Height the content needs, ignoring ``min-height``.

    Measured from the top of ``rendered`` to the lowest descendant, plus a
    bottom margin equal to the top one (pages pad symmetrically).
    """
    descendants = [node for node in rendered.walk() if node is not rendered]
    if not descendants:
        if not rendered.lines:
            return 0.0
        return rendered.lines[-1].y + rendered.font_px * DEFAULT_LINE_HEIGHT - rendered.y

    top = min(node.y for node in descendants) - rendered.y
    bottom = max(node.y + node.height for node in descendants) - rendered.y
    return bottom + max(0.0, top)


def content_overflow_percent(rendered: RenderedNode) -> float:
    """Content height as a percentage of one A4 page (over 100 spills onto a second page)."""
    return content_height(rendered) / PAGE_HEIGHT_PX * 100


def fits_one_page(rendered: RenderedNode) -> bool:
    return content_height(rendered) <= PAGE_HEIGHT_PX

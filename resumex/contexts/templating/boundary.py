"""
Render failure boundary.

Last-resort catch around template rendering. While rendering succeeds the
boundary is transparent. When a variant raises, the boundary keeps showing the
last good render (or a fallback view if there is none), reports the fault
through the injected ``report(kind, text)`` callback and waits for ``retry()``.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from resumex.contexts.document.model import ResumeData
from resumex.contexts.templating.logger import _log_error, _log_info
from resumex.contexts.templating.tree import Node, el

Reporter = Callable[[str, str], None]

ERROR_TITLE = "哎呀，出错了"
ERROR_TEXT = "应用遇到了一个意外错误。请尝试重试或返回首页。"


@dataclass
class BoundaryResult:
    """
    Outcome of rendering through the boundary.

    Attributes:
        tree: Tree to display (fresh render, last good render or fallback view)
        ok: True if ``tree`` is a fresh render of the requested document
        stale: True if ``tree`` is the last good render of an earlier snapshot
        error: The fault caught on this call, if any
    """

    tree: Node
    ok: bool
    stale: bool = False
    error: Optional[BaseException] = None


def fallback_view() -> Node:
    """View shown when rendering fails before anything rendered successfully."""
    return el(
        "div",
        Node(tag="h1", text=ERROR_TITLE, style={"font-size": "1.5rem", "font-weight": "bold"}),
        Node(tag="p", text=ERROR_TEXT, style={"color": "#4A5568"}),
        classes=("render-fallback",),
        style={"padding": "32px", "text-align": "center"},
        role="page",
    )


class RenderBoundary:
    """
    "Last good render, else fallback" state machine.

    Example:
        boundary = RenderBoundary(render_document, report=messages.append_report)
        result = boundary.render(document)
        if not result.ok:
            result = boundary.retry()
    """

    def __init__(
        self,
        render: Callable[[ResumeData], Node],
        report: Optional[Reporter] = None,
        fallback: Callable[[], Node] = fallback_view,
    ):
        self._render = render
        self._report = report
        self._fallback = fallback
        self.last_good: Optional[Node] = None
        self.error: Optional[BaseException] = None
        self._last_document: Optional[ResumeData] = None

    @property
    def has_error(self) -> bool:
        return self.error is not None

    def render(self, document: ResumeData) -> BoundaryResult:
        self._last_document = document
        try:
            tree = self._render(document)
        except Exception as e:
            self.error = e
            _log_error(f"Render failed for document '{document.id}': {e!r}")
            if self._report is not None:
                self._report("error", ERROR_TITLE)
            if self.last_good is not None:
                return BoundaryResult(tree=self.last_good, ok=False, stale=True, error=e)
            return BoundaryResult(tree=self._fallback(), ok=False, error=e)

        self.error = None
        self.last_good = tree
        return BoundaryResult(tree=tree, ok=True)

    def retry(self) -> Optional[BoundaryResult]:
        """Clear the fault and re-render the most recently requested document."""
        self.error = None
        if self._last_document is None:
            return None
        _log_info(f"Retrying render of document '{self._last_document.id}'")
        return self.render(self._last_document)

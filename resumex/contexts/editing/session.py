"""
Editor Session

Composition root of the editing flow: a store mutation produces a new snapshot,
the history engine records it, the active template variant renders it through
the failure boundary, and exports capture that render.

User-visible messages go through the injected ``report(kind, text)`` callback
(kinds: "success", "error", "warning", "info"); the session never holds global
message state.

Usage:
    session = EditorSession(ResumeStore(JsonFileStore()), report=print_message)
    session.open()
    session.edit(lambda store: store.update_profile("name", "李明"))
    session.undo()
    result = asyncio.run(session.export_png())
"""

import asyncio
from functools import partial
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

from resumex.contexts.document.model import ResumeData
from resumex.contexts.editing.logger import _log_debug, _log_info, _log_warning
from resumex.contexts.history.engine import HistoryEngine
from resumex.contexts.rendering.docx_export import export_to_docx
from resumex.contexts.rendering.filename import generate_export_filename
from resumex.contexts.rendering.layout import (
    FontBook,
    RenderedNode,
    content_height,
    content_overflow_percent,
    fits_one_page,
    materialize,
)
from resumex.contexts.rendering.printing import HostDocument, PdfPrintHost, PrintController, PrintHost
from resumex.contexts.rendering.raster import ProgressCallback, export_to_raster
from resumex.contexts.rendering.results import ExportResult
from resumex.contexts.storage.resume_store import ResumeStore
from resumex.contexts.templating.boundary import BoundaryResult, RenderBoundary
from resumex.contexts.templating.page import render_document
from resumex.contexts.templating.registry import TemplateRegistry
from resumex.utils.debounce import Debouncer

Reporter = Callable[[str, str], None]

DEFAULT_DEBOUNCE_S = 0.3

MSG_NAME_REQUIRED = "请先填写姓名再导出"
MSG_RENDER_UNAVAILABLE = "预览渲染失败，无法导出"
MSG_ALREADY_ONE_PAGE = "当前内容已在一页内"
MSG_FIT_FAILED = "排版已最大程度压缩，建议精简部分内容后重试"

FONT_SCALE_MIN = 0.80
FONT_SCALE_STEP = 0.02


class EditorSession:
    """
    One open résumé with history, rendering and exports.

    Attributes:
        store: Résumé collection the session edits
        registry: Template variant registry
        history: Snapshot history of the open résumé (None until ``open``)
        boundary: Failure boundary around rendering
    """

    def __init__(
        self,
        store: ResumeStore,
        registry: Optional[TemplateRegistry] = None,
        report: Optional[Reporter] = None,
        debounce_s: float = DEFAULT_DEBOUNCE_S,
        fonts: Optional[FontBook] = None,
        downloads_dir: Optional[Path] = None,
        print_host: Optional[PrintHost] = None,
    ):
        self.store = store
        self.registry = registry or TemplateRegistry()
        self.report = report
        self.fonts = fonts or FontBook()
        self.downloads_dir = downloads_dir
        self.history: Optional[HistoryEngine[ResumeData]] = None
        self.boundary = RenderBoundary(partial(render_document, registry=self.registry), report=report)
        self.host_document = HostDocument(body=[])
        self.print_controller = PrintController(
            self.host_document,
            print_host or PdfPrintHost(output_dir=downloads_dir, fonts=self.fonts),
        )
        self._profile_debouncer = Debouncer(self._apply_profile_edit, debounce_s)
        self._exporting = False

    def _report(self, kind: str, text: str) -> None:
        if self.report is not None:
            self.report(kind, text)

    # Document lifecycle

    @property
    def document(self) -> ResumeData:
        return self.store.active

    def open(self, resume_id: Optional[str] = None) -> ResumeData:
        """
        Open a résumé; loading it is not an undoable edit.

        Args:
            resume_id: Résumé to activate (default: the store's active résumé)
        """
        self._profile_debouncer.cancel()
        if resume_id is not None:
            self.store.set_active_resume(resume_id)

        document = self.store.active
        if self.history is None:
            self.history = HistoryEngine(document)
        else:
            self.history.set_state(document, skip_history=True)
            self.history.clear_history()

        _log_info(f"Opened résumé {document.id} ({document.title})")
        return document

    def _require_open(self) -> HistoryEngine[ResumeData]:
        if self.history is None:
            raise RuntimeError("No résumé is open; call open() first")
        return self.history

    def close(self) -> None:
        """Cancel pending debounced work."""
        if self._profile_debouncer.cancel():
            _log_debug("Dropped pending profile edit on close")

    # Editing

    def edit(self, mutation: Callable[[ResumeStore], Any]) -> ResumeData:
        """
        Apply a store mutation and record the resulting snapshot.

        Args:
            mutation: Callable receiving the store, e.g.
                      ``lambda store: store.add_module("projects", "项目经历")``

        Returns:
            The new present snapshot
        """
        history = self._require_open()
        mutation(self.store)
        history.set_state(self.store.active)
        return history.present

    def edit_profile_debounced(self, field: str, value: Optional[str]) -> None:
        """Schedule a profile edit; rapid calls coalesce into the last one."""
        self._require_open()
        self._profile_debouncer(field, value)

    def _apply_profile_edit(self, field: str, value: Optional[str]) -> None:
        self.edit(lambda store: store.update_profile(field, value))

    def flush_pending(self) -> bool:
        """Apply a pending debounced edit now. Returns True if one was applied."""
        return self._profile_debouncer.flush()

    @property
    def can_undo(self) -> bool:
        return self.history is not None and self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history is not None and self.history.can_redo

    def undo(self) -> ResumeData:
        history = self._require_open()
        self._profile_debouncer.cancel()
        history.undo()
        self.store.replace_resume(history.present)
        return history.present

    def redo(self) -> ResumeData:
        history = self._require_open()
        self._profile_debouncer.cancel()
        history.redo()
        self.store.replace_resume(history.present)
        return history.present

    # Rendering

    def render(self) -> BoundaryResult:
        return self.boundary.render(self.store.active)

    def retry_render(self) -> Optional[BoundaryResult]:
        return self.boundary.retry()

    def realize(self, document: Optional[ResumeData] = None) -> Tuple[ResumeData, Optional[RenderedNode]]:
        """
        Render and materialize a snapshot.

        Args:
            document: Snapshot to realize (default: the current one)

        Returns:
            (snapshot, realized node); the node is None when rendering failed
        """
        document = document or self.store.active
        result = self.boundary.render(document)
        if not result.ok:
            return document, None
        return document, materialize(result.tree, self.fonts)

    async def _realize_for_export(self) -> Tuple[ResumeData, Optional[RenderedNode]]:
        """Like realize, but only layout measurement leaves the event loop."""
        document = self.store.active
        result = self.boundary.render(document)
        if not result.ok:
            return document, None
        return document, await asyncio.to_thread(materialize, result.tree, self.fonts)

    def page_fill(self) -> float:
        """Content height of the current render as a percentage of one A4 page."""
        _, rendered = self.realize()
        return content_overflow_percent(rendered) if rendered is not None else 0.0

    def fit_one_page(self) -> bool:
        """
        Tighten margins, then line height, then font scale until the render fits one page.

        Each step is applied as a normal edit and measured before the next.

        Returns:
            True if the render fits on one page afterwards
        """
        self._require_open()
        _, rendered = self.realize()
        if rendered is None:
            return False
        if fits_one_page(rendered):
            self._report("success", MSG_ALREADY_ONE_PAGE)
            return True

        start = self.store.active.settings
        for label, changes in _fit_steps(start.page_margin, start.line_height, start.font_size_scale):
            self.edit(lambda store: store.update_settings(**changes))
            _, rendered = self.realize()
            _log_debug(f"Fit step {label} {changes}: content height {content_height(rendered) if rendered else '?'}")
            if rendered is not None and fits_one_page(rendered):
                break

        if rendered is None or not fits_one_page(rendered):
            self._report("warning", MSG_FIT_FAILED)
            return False

        final = self.store.active.settings
        adjusted = []
        if final.page_margin != start.page_margin:
            adjusted.append("页边距")
        if final.line_height != start.line_height:
            adjusted.append("行间距")
        if final.font_size_scale != start.font_size_scale:
            adjusted.append(f"字体{round(final.font_size_scale * 100)}%")
        self._report("success", f"已适应一页（调整了{'、'.join(adjusted)}）")
        return True

    # Exports

    def _begin_export(self) -> bool:
        if self._exporting:
            _log_debug("Export already in progress; ignoring request")
            return False
        if not (self.store.active.profile.name or "").strip():
            self._report("warning", MSG_NAME_REQUIRED)
            return False
        self._exporting = True
        return True

    def _finish_export(self, result: Optional[ExportResult]) -> Optional[ExportResult]:
        self._exporting = False
        if result is not None:
            self._report("success" if result.success else "error", result.message)
        return result

    async def export_png(self, on_progress: Optional[ProgressCallback] = None) -> Optional[ExportResult]:
        """
        Export the current render as a PNG download.

        Returns:
            ExportResult, or None if the export was not started (another export
            running, or the profile has no name)
        """
        if not self._begin_export():
            return None
        result = None
        try:
            document, rendered = await self._realize_for_export()
            if rendered is None:
                result = ExportResult(success=False, message=MSG_RENDER_UNAVAILABLE)
            else:
                result = await export_to_raster(
                    rendered,
                    filename=generate_export_filename(document.profile, "png"),
                    on_progress=on_progress,
                    fonts=self.fonts,
                    downloads_dir=self.downloads_dir,
                )
        finally:
            self._finish_export(result)
        return result

    async def print_pdf(self) -> Optional[ExportResult]:
        """Print the current render to PDF through the print controller."""
        if not self._begin_export():
            return None
        result = None
        try:
            document, rendered = await self._realize_for_export()
            if rendered is None:
                result = ExportResult(success=False, message=MSG_RENDER_UNAVAILABLE)
            else:
                self.host_document.body = [rendered]
                result = await self.print_controller.print_document(
                    rendered, generate_export_filename(document.profile, "pdf")
                )
                if result is None:
                    _log_warning("Print request ignored; a print flow is still pending")
        finally:
            self._finish_export(result)
        return result

    async def export_docx(self) -> Optional[ExportResult]:
        """Export the current snapshot as a Word download."""
        if not self._begin_export():
            return None
        result = None
        try:
            document = self.store.active
            result = await export_to_docx(document, downloads_dir=self.downloads_dir)
        finally:
            self._finish_export(result)
        return result


def _fit_steps(page_margin: str, line_height: str, font_size_scale: float) -> List[Tuple[str, dict]]:
    """Settings changes in order of increasing visual impact."""
    steps: List[Tuple[str, dict]] = []

    if page_margin == "relaxed":
        steps.append(("margin", {"page_margin": "standard"}))
    if page_margin != "compact":
        steps.append(("margin", {"page_margin": "compact"}))

    if line_height == "relaxed":
        steps.append(("line-height", {"line_height": "standard"}))
    if line_height != "compact":
        steps.append(("line-height", {"line_height": "compact"}))

    scale = round(font_size_scale - FONT_SCALE_STEP, 2)
    while scale >= FONT_SCALE_MIN:
        steps.append(("font", {"font_size_scale": scale}))
        scale = round(scale - FONT_SCALE_STEP, 2)

    return steps

"""
Print flow.

Scopes printing to one realized subtree: a print stylesheet hides everything
except the element with id ``print-content``, the target gets that id, and the
document title becomes the export file name so print-to-file suggests it.
State is restored when the host fires ``afterprint``, or after a fixed 5 s
fallback if it never does. A print request while another is pending is
ignored.

Example:
    host_document = HostDocument(body=[toolbar, rendered_page], title="ResumeX")
    controller = PrintController(host_document, PdfPrintHost(output_dir))
    await controller.print_document(rendered_page, "李明_简历.pdf")
"""

import asyncio
import math
import os
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol

from dotenv import load_dotenv
from PIL import Image

from resumex.contexts.rendering.layout import FontBook, RenderedNode
from resumex.contexts.rendering.logger import _log_debug, _log_error, _log_info, _log_warning
from resumex.contexts.rendering.paint import paint
from resumex.contexts.rendering.results import ExportResult
from resumex.utils.downloads import DOWNLOADS_PATH
from resumex.utils.pdf_processing import page_count

load_dotenv()

PRINT_CONTENT_ID = "print-content"
PRINT_STYLE = """@media print {
  body * { visibility: hidden; }
  #print-content, #print-content * { visibility: visible; }
  #print-content { position: absolute; left: 0; top: 0; width: 210mm; min-height: 297mm; }
}"""
FALLBACK_RESTORE_S = 5.0
MAX_PAGES = 20
A4_RATIO = 297 / 210
PRINT_SCALE = float(os.getenv("RESUMEX_PRINT_SCALE", "2"))

MSG_SUCCESS = "PDF 导出成功！"
MSG_FAILED = "PDF 导出失败，请重试"


class HostDocument:
    """
    Minimal host document: a title, head stylesheets, body elements and events.

    Attributes:
        title: Document title (print-to-file dialogs suggest it as file name)
        head_styles: Stylesheets currently installed
        body: Top-level realized elements, in order
    """

    def __init__(self, body: List[RenderedNode], title: str = "ResumeX"):
        self.title = title
        self.head_styles: List[str] = []
        self.body = list(body)
        self._listeners: Dict[str, List[Callable[[], None]]] = {}

    def add_event_listener(self, event: str, listener: Callable[[], None]) -> None:
        self._listeners.setdefault(event, []).append(listener)

    def remove_event_listener(self, event: str, listener: Callable[[], None]) -> None:
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    def dispatch(self, event: str) -> None:
        for listener in list(self._listeners.get(event, [])):
            listener()

    def get_element_by_id(self, element_id: str) -> Optional[RenderedNode]:
        for element in self.body:
            found = element.find_by_id(element_id)
            if found is not None:
                return found
        return None

    def print_targets(self) -> List[RenderedNode]:
        """Elements visible to the print medium under the installed stylesheets."""
        if PRINT_STYLE in self.head_styles:
            scoped = self.get_element_by_id(PRINT_CONTENT_ID)
            if scoped is not None:
                return [scoped]
        return list(self.body)


class PrintHost(Protocol):
    async def print(self, document: HostDocument) -> ExportResult:
        ...


class PdfPrintHost:
    """
    Print host that "prints to file": paginates the print-visible elements into
    A4 pages and writes ``<title>.pdf``, then fires ``afterprint``.
    """

    def __init__(
        self,
        output_dir: Optional[Path] = None,
        scale: float = PRINT_SCALE,
        fonts: Optional[FontBook] = None,
        fire_afterprint: bool = True,
    ):
        self.output_dir = Path(output_dir) if output_dir is not None else DOWNLOADS_PATH
        self.scale = scale
        self.fonts = fonts
        self.fire_afterprint = fire_afterprint

    def output_path(self, title: str) -> Path:
        name = title if title.lower().endswith(".pdf") else f"{title}.pdf"
        return self.output_dir / name

    def _pages(self, targets: List[RenderedNode]) -> List[Image.Image]:
        pages: List[Image.Image] = []
        for target in targets:
            image = paint(target, self.scale, self.fonts)
            page_height = math.ceil(image.width * A4_RATIO)
            offset = 0
            while offset < image.height and len(pages) < MAX_PAGES:
                page = Image.new("RGB", (image.width, page_height), (255, 255, 255))
                page.paste(image.crop((0, offset, image.width, min(offset + page_height, image.height))), (0, 0))
                pages.append(page)
                offset += page_height
        return pages

    def _write(self, document: HostDocument) -> ExportResult:
        targets = document.print_targets()
        pages = self._pages(targets)
        if not pages:
            return ExportResult(success=False, message=MSG_FAILED)

        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_path(document.title)
        pages[0].save(
            path,
            format="PDF",
            save_all=True,
            append_images=pages[1:],
            resolution=96 * self.scale,
        )
        return ExportResult(success=True, message=MSG_SUCCESS, path=path, page_count=page_count(path))

    async def print(self, document: HostDocument) -> ExportResult:
        try:
            result = await asyncio.to_thread(self._write, document)
        finally:
            if self.fire_afterprint:
                document.dispatch("afterprint")
        return result


class PrintController:
    """
    Reentrancy-guarded print flow over a host document.

    Attributes:
        fallback_s: Delay after which state is restored if ``afterprint`` never fires
    """

    def __init__(self, document: HostDocument, host: PrintHost, fallback_s: float = FALLBACK_RESTORE_S):
        self.document = document
        self.host = host
        self.fallback_s = fallback_s
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    async def print_document(self, rendered: RenderedNode, filename: str) -> Optional[ExportResult]:
        """
        Print one realized subtree.

        Args:
            rendered: Element to print (everything else is suppressed)
            filename: Title for the print job, e.g. "李明_简历.pdf"

        Returns:
            The host's ExportResult, or None if a print flow was already pending
        """
        if self._pending:
            _log_debug("Print already in progress; ignoring request")
            return None
        self._pending = True

        document = self.document
        loop = asyncio.get_running_loop()

        document.head_styles.append(PRINT_STYLE)
        original_id = rendered.element_id
        rendered.element_id = PRINT_CONTENT_ID
        original_title = document.title
        document.title = filename

        fallback: Optional[asyncio.TimerHandle] = None

        def restore() -> None:
            if not self._pending:
                return
            if PRINT_STYLE in document.head_styles:
                document.head_styles.remove(PRINT_STYLE)
            rendered.element_id = original_id
            document.title = original_title
            document.remove_event_listener("afterprint", restore)
            if fallback is not None:
                fallback.cancel()
            self._pending = False
            _log_debug("Print state restored")

        document.add_event_listener("afterprint", restore)
        fallback = loop.call_later(self.fallback_s, restore)

        _log_info(f"Printing: {filename}")
        try:
            result = await self.host.print(document)
        except Exception as e:
            _log_error(f"Print failed: {e!r}")
            restore()
            return ExportResult(success=False, message=MSG_FAILED)

        if self._pending:
            _log_warning(f"No afterprint notification yet; restoring in at most {self.fallback_s}s")
        return result

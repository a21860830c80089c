"""
Rendering Context

Responsibilities:
- Materializes presentation trees into measured boxes (the layout host)
- Exports realized renders as PNG downloads
- Runs the scoped print flow that produces PDF files
- Writes Word documents and derives export file names

Owns: RenderedNode, export results, print state restoration
Never: Decides document content or template styling
"""

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
from resumex.contexts.rendering.printing import HostDocument, PdfPrintHost, PrintController
from resumex.contexts.rendering.raster import export_to_raster
from resumex.contexts.rendering.results import ExportResult

__all__ = [
    # Layout host
    "materialize",
    "RenderedNode",
    "FontBook",
    "content_height",
    "content_overflow_percent",
    "fits_one_page",
    # Exports
    "ExportResult",
    "export_to_raster",
    "export_to_docx",
    "generate_export_filename",
    # Print flow
    "HostDocument",
    "PdfPrintHost",
    "PrintController",
]

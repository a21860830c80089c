"""
Raster export.

Paints a realized node onto an opaque white background, encodes it as PNG and
publishes it as a download. Every failure is reported through ExportResult.
"""

import asyncio
import io
import time
from pathlib import Path
from typing import Callable, Optional

from PIL import Image

from resumex.contexts.rendering.layout import FontBook, RenderedNode
from resumex.contexts.rendering.logger import _log_error, _log_info, log_export_result
from resumex.contexts.rendering.paint import paint
from resumex.contexts.rendering.results import ExportResult
from resumex.utils.downloads import save_download

DEFAULT_FILENAME = "简历.png"
DEFAULT_SCALE = 2

MSG_SUCCESS = "PNG导出成功"
MSG_EMPTY = "生成图片失败"
MSG_FAILED = "PNG导出失败，请重试"

ProgressCallback = Callable[[float], None]


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


async def export_to_raster(
    rendered: RenderedNode,
    filename: str = DEFAULT_FILENAME,
    scale: float = DEFAULT_SCALE,
    on_progress: Optional[ProgressCallback] = None,
    fonts: Optional[FontBook] = None,
    downloads_dir: Optional[Path] = None,
) -> ExportResult:
    """
    Export a realized node as a PNG download.

    Progress is reported at 0.1 (start), 0.3 (measured), 0.6 (painted),
    0.9 (encoded) and 1.0 (published). Painting and encoding run off the event
    loop.

    Args:
        rendered: Realized node to capture (export-excluded subtrees are skipped)
        filename: Download name
        scale: Pixel density multiplier
        on_progress: Called with increasing fractions in [0, 1]
        fonts: Font source used for layout
        downloads_dir: Target directory (default: DOWNLOADS_PATH)

    Returns:
        ExportResult with the published path on success
    """
    start_time = time.time()

    def progress(fraction: float) -> None:
        if on_progress is not None:
            on_progress(fraction)

    try:
        progress(0.1)
        _log_info(f"Exporting PNG: {filename} (scale {scale})")

        if rendered.width <= 0 or rendered.height <= 0:
            result = ExportResult(success=False, message=MSG_EMPTY)
        else:
            progress(0.3)
            image = await asyncio.to_thread(paint, rendered, scale, fonts)
            progress(0.6)
            data = await asyncio.to_thread(encode_png, image)
            progress(0.9)

            if not data:
                result = ExportResult(success=False, message=MSG_EMPTY)
            else:
                path = await asyncio.to_thread(save_download, data, filename, downloads_dir)
                progress(1.0)
                result = ExportResult(success=True, message=MSG_SUCCESS, path=path)
    except Exception as e:
        _log_error(f"PNG export failed: {e!r}")
        result = ExportResult(success=False, message=MSG_FAILED)

    log_export_result("png", result, time.time() - start_time)
    return result

"""
Word export.

Writes a document as a generic .docx résumé with python-docx. The layout does
not copy any template variant, but it follows the same content rules: visible
modules in order, skills as one joined line, and optional fields omitted when
empty.
"""

import asyncio
import base64
import binascii
import io
import re
import time
from pathlib import Path
from typing import Optional

from docx import Document
from docx.enum.text import WD_TAB_ALIGNMENT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor, Twips

from resumex.contexts.document.model import ResumeData, is_skills_module
from resumex.contexts.document.presets import get_theme
from resumex.contexts.rendering.filename import generate_export_filename
from resumex.contexts.rendering.logger import _log_error, _log_info, _log_warning, log_export_result
from resumex.contexts.rendering.results import ExportResult
from resumex.contexts.templating.components import contact_values, has_text, visible_modules
from resumex.utils.downloads import save_download

FONT_NAME = "Microsoft YaHei"
SEPARATOR = "  |  "
SUMMARY_TITLE = "个人简介"

# A4 in twentieths of a point, 0.5in margins
PAGE_WIDTH_TWIPS = 11906
PAGE_HEIGHT_TWIPS = 16838
PAGE_MARGIN_TWIPS = 720

MSG_SUCCESS = "Word 文档导出成功！"
MSG_FAILED = "Word 导出失败"

_BULLET_PREFIX = re.compile(r"^[•·\-–]\s*")


def _rgb(hex_color: str) -> RGBColor:
    return RGBColor.from_string(hex_color.lstrip("#").upper())


def _add_run(paragraph, text: str, size_pt: float, bold: bool = False, color: Optional[str] = None):
    run = paragraph.add_run(text)
    run.bold = bold
    run.font.size = Pt(size_pt)
    run.font.name = FONT_NAME
    run._element.get_or_add_rPr().get_or_add_rFonts().set(qn("w:eastAsia"), FONT_NAME)
    if color:
        run.font.color.rgb = _rgb(color)
    return run


def _set_bottom_border(paragraph, hex_color: str, size: int) -> None:
    """Draw a single rule under a paragraph."""
    p_pr = paragraph._p.get_or_add_pPr()
    borders = OxmlElement("w:pBdr")
    bottom = OxmlElement("w:bottom")
    bottom.set(qn("w:val"), "single")
    bottom.set(qn("w:sz"), str(size))
    bottom.set(qn("w:space"), "1")
    bottom.set(qn("w:color"), hex_color.lstrip("#").upper())
    borders.append(bottom)
    p_pr.append(borders)


def _spacing(paragraph, before_pt: float = 0, after_pt: float = 0) -> None:
    paragraph.paragraph_format.space_before = Pt(before_pt)
    paragraph.paragraph_format.space_after = Pt(after_pt)


def _right_tab(doc, paragraph) -> None:
    section = doc.sections[0]
    usable = section.page_width - section.left_margin - section.right_margin
    paragraph.paragraph_format.tab_stops.add_tab_stop(usable, WD_TAB_ALIGNMENT.RIGHT)


def _avatar_bytes(avatar: Optional[str]) -> Optional[bytes]:
    """Image bytes from a data URL or an image file path."""
    if not has_text(avatar):
        return None
    if avatar.startswith("data:image"):
        try:
            return base64.b64decode(avatar.split(",", 1)[1]) or None
        except (IndexError, binascii.Error):
            return None
    path = Path(avatar)
    if path.is_file():
        return path.read_bytes()
    return None


def build_docx(document: ResumeData):
    """
    Build the python-docx Document for a résumé.

    Args:
        document: Document snapshot

    Returns:
        docx.document.Document ready to save
    """
    profile = document.profile
    primary = get_theme(document.settings.theme_color).colors["primary"]

    doc = Document()
    section = doc.sections[0]
    section.page_width = Twips(PAGE_WIDTH_TWIPS)
    section.page_height = Twips(PAGE_HEIGHT_TWIPS)
    for side in ("top_margin", "bottom_margin", "left_margin", "right_margin"):
        setattr(section, side, Twips(PAGE_MARGIN_TWIPS))

    # Name line, avatar right-aligned on the same line
    if has_text(profile.name):
        paragraph = doc.add_paragraph()
        _add_run(paragraph, profile.name, 16, bold=True, color=primary)
        avatar = _avatar_bytes(profile.avatar)
        if avatar:
            _right_tab(doc, paragraph)
            paragraph.add_run("\t")
            try:
                paragraph.add_run().add_picture(io.BytesIO(avatar), width=Pt(45), height=Pt(45))
            except Exception as e:
                _log_warning(f"Avatar skipped in Word export: {e!r}")
        _spacing(paragraph, after_pt=4)

    if has_text(profile.title):
        paragraph = doc.add_paragraph()
        _add_run(paragraph, profile.title, 11, color="#555555")
        _spacing(paragraph, after_pt=3)

    contact_parts = [value for _, value in contact_values(profile)]
    if contact_parts:
        paragraph = doc.add_paragraph()
        _add_run(paragraph, SEPARATOR.join(contact_parts), 9, color="#888888")
        _spacing(paragraph, after_pt=6)

    rule = doc.add_paragraph()
    _set_bottom_border(rule, primary, 6)
    _spacing(rule, after_pt=8)

    if has_text(profile.summary):
        heading = doc.add_paragraph()
        _add_run(heading, SUMMARY_TITLE, 12, bold=True, color=primary)
        _set_bottom_border(heading, primary, 4)
        _spacing(heading, after_pt=4)
        paragraph = doc.add_paragraph()
        _add_run(paragraph, profile.summary, 10)
        _spacing(paragraph, after_pt=8)

    for module in visible_modules(document):
        heading = doc.add_paragraph()
        _add_run(heading, module.title, 12, bold=True, color=primary)
        _set_bottom_border(heading, primary, 4)
        _spacing(heading, before_pt=8, after_pt=5)

        if is_skills_module(module):
            names = [item.name for item in module.items if item.name]
            if names:
                paragraph = doc.add_paragraph()
                _add_run(paragraph, SEPARATOR.join(names), 10)
                _spacing(paragraph, after_pt=4)
            continue

        for item in module.items:
            title_line = doc.add_paragraph()
            _add_run(title_line, item.title or "", 10.5, bold=True)
            if has_text(item.date):
                _right_tab(doc, title_line)
                title_line.add_run("\t")
                _add_run(title_line, item.date, 9.5, color="#888888")
            _spacing(title_line, before_pt=3)

            subtitle_parts = [part for part in (item.subtitle, item.location) if has_text(part)]
            if subtitle_parts:
                paragraph = doc.add_paragraph()
                _add_run(paragraph, SEPARATOR.join(subtitle_parts), 9.5, color="#555555")
                _spacing(paragraph, after_pt=2)

            if has_text(item.description):
                for line in item.description.split("\n"):
                    if not line.strip():
                        continue
                    paragraph = doc.add_paragraph()
                    _add_run(paragraph, f"•  {_BULLET_PREFIX.sub('', line.strip())}", 9.5)
                    paragraph.paragraph_format.left_indent = Twips(240)
                    _spacing(paragraph, after_pt=1)

            _spacing(doc.add_paragraph(), after_pt=3)

    return doc


def _docx_bytes(document: ResumeData) -> bytes:
    buffer = io.BytesIO()
    build_docx(document).save(buffer)
    return buffer.getvalue()


async def export_to_docx(
    document: ResumeData,
    filename: Optional[str] = None,
    downloads_dir: Optional[Path] = None,
) -> ExportResult:
    """
    Export a document as a Word download.

    Args:
        document: Document snapshot
        filename: Download name (default: derived from the profile)
        downloads_dir: Target directory (default: DOWNLOADS_PATH)

    Returns:
        ExportResult with the published path on success
    """
    start_time = time.time()
    filename = filename or generate_export_filename(document.profile, "docx")
    _log_info(f"Exporting Word document: {filename}")

    try:
        data = await asyncio.to_thread(_docx_bytes, document)
        path = await asyncio.to_thread(save_download, data, filename, downloads_dir)
        result = ExportResult(success=True, message=MSG_SUCCESS, path=path)
    except Exception as e:
        _log_error(f"Word export failed: {e!r}")
        result = ExportResult(success=False, message=MSG_FAILED)

    log_export_result("docx", result, time.time() - start_time)
    return result

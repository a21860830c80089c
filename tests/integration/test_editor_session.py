"""Integration tests for the editor session: edits, history, rendering and exports."""

import asyncio
import threading

import pytest

from resumex.contexts.editing.session import (
    MSG_ALREADY_ONE_PAGE,
    MSG_FIT_FAILED,
    MSG_NAME_REQUIRED,
    MSG_RENDER_UNAVAILABLE,
    EditorSession,
    _fit_steps,
)
from resumex.contexts.rendering.printing import MSG_SUCCESS as PDF_SUCCESS
from resumex.contexts.rendering.raster import MSG_SUCCESS as PNG_SUCCESS
from resumex.contexts.storage.kv_store import MemoryStore
from resumex.contexts.storage.resume_store import ResumeStore
from resumex.contexts.templating.boundary import ERROR_TITLE
from resumex.contexts.templating.registry import TemplateRegistry


class Reports(list):
    def __call__(self, kind, text):
        self.append((kind, text))


@pytest.fixture
def reports():
    return Reports()


@pytest.fixture
def session(reports, tmp_path):
    session = EditorSession(ResumeStore(MemoryStore()), report=reports, downloads_dir=tmp_path, debounce_s=0.05)
    session.open()
    return session


def _overflowing(store, count=40):
    for i in range(count):
        store.add_module_item("exp-1", title=f"职位 {i}", date="2020 - 2021", description="• 一\n• 二\n• 三")


@pytest.mark.integration
def test_edit_undo_redo(session):
    """Test edits are recorded and undo/redo write snapshots back to the store."""
    original = session.document
    assert not session.can_undo

    session.edit(lambda store: store.update_profile("name", "王芳"))
    edited = session.document

    assert session.can_undo
    assert session.undo() is original
    assert session.store.active is original
    assert session.can_redo
    assert session.redo() is edited
    assert session.store.active.profile.name == "王芳"


@pytest.mark.integration
def test_noop_edit_not_recorded(session):
    """Test an edit that changes nothing adds no history entry."""
    session.edit(lambda store: store.update_profile("name", "李明"))

    assert not session.can_undo


@pytest.mark.integration
def test_open_resets_history(session):
    """Test switching résumés does not make the switch undoable."""
    session.edit(lambda store: store.update_profile("name", "王芳"))
    other = session.store.add_resume()

    document = session.open(other)

    assert document.id == other
    assert session.history.present is document
    assert not session.can_undo
    assert not session.can_redo


@pytest.mark.integration
def test_debounced_profile_edits_coalesce(session):
    """Test rapid profile edits become one history entry with the last value."""

    async def scenario():
        for value in ("王", "王芳", "王芳芳"):
            session.edit_profile_debounced("name", value)
            await asyncio.sleep(0.01)
        await asyncio.sleep(0.15)

    asyncio.run(scenario())

    assert session.document.profile.name == "王芳芳"
    session.undo()
    assert session.document.profile.name == "李明"
    assert not session.can_undo


@pytest.mark.integration
def test_undo_drops_pending_edit(session):
    """Test undo cancels a debounced edit that has not fired yet."""
    session.edit(lambda store: store.update_profile("title", "架构师"))

    async def scenario():
        session.edit_profile_debounced("name", "王芳")
        session.undo()
        await asyncio.sleep(0.1)

    asyncio.run(scenario())

    assert session.document.profile.name == "李明"
    assert session.document.profile.title == "高级全栈工程师"


@pytest.mark.integration
def test_flush_applies_pending_edit(session):
    """Test flush_pending applies a scheduled edit immediately."""

    async def scenario():
        session.edit_profile_debounced("name", "王芳")
        return session.flush_pending()

    assert asyncio.run(scenario())
    assert session.document.profile.name == "王芳"


@pytest.mark.integration
def test_export_png(session, reports, tmp_path):
    """Test the PNG export reports progress and success."""
    progress = []

    result = asyncio.run(session.export_png(on_progress=progress.append))

    assert result.success
    assert result.path == tmp_path / "李明_高级全栈工程师_简历.png"
    assert progress[-1] == 1.0
    assert reports[-1] == ("success", PNG_SUCCESS)


@pytest.mark.integration
def test_print_pdf(session, reports, tmp_path):
    """Test printing writes the PDF and restores the host document."""
    result = asyncio.run(session.print_pdf())

    assert result.success
    assert result.path == tmp_path / "李明_高级全栈工程师_简历.pdf"
    assert result.page_count >= 1
    assert session.host_document.title == "ResumeX"
    assert not session.print_controller.pending
    assert reports[-1] == ("success", PDF_SUCCESS)


@pytest.mark.integration
def test_export_docx(session, tmp_path):
    """Test the Word export is written next to the other downloads."""
    result = asyncio.run(session.export_docx())

    assert result.success
    assert result.path == tmp_path / "李明_高级全栈工程师_简历.docx"


@pytest.mark.integration
def test_export_requires_name(session, reports, tmp_path):
    """Test exports do not start while the profile name is blank."""
    session.edit(lambda store: store.update_profile("name", "  "))

    assert asyncio.run(session.export_png()) is None
    assert asyncio.run(session.export_docx()) is None
    assert reports == [("warning", MSG_NAME_REQUIRED), ("warning", MSG_NAME_REQUIRED)]
    assert list(tmp_path.iterdir()) == []


@pytest.mark.integration
def test_concurrent_exports_rejected(session):
    """Test a second export while one is running is ignored."""

    async def scenario():
        return await asyncio.gather(session.export_png(), session.export_png())

    first, second = asyncio.run(scenario())

    assert first is not None and first.success
    assert second is None


@pytest.mark.integration
def test_export_renders_on_event_loop_thread(session):
    """Test the render boundary is only driven from the event loop thread during exports."""
    threads = []
    render = session.boundary.render

    def recording_render(document):
        threads.append(threading.current_thread())
        return render(document)

    session.boundary.render = recording_render

    assert asyncio.run(session.export_png()).success
    assert asyncio.run(session.print_pdf()).success

    assert len(threads) == 2
    assert all(thread is threading.main_thread() for thread in threads)
    assert session.boundary.last_good is not None


@pytest.mark.integration
def test_render_failure_blocks_export(reports, tmp_path):
    """Test a failing variant shows the error view and exports report it."""
    broken = TemplateRegistry(modules={"tech": "resumex.contexts.templating.tree"})
    session = EditorSession(ResumeStore(MemoryStore()), registry=broken, report=reports, downloads_dir=tmp_path)
    session.open()

    result = session.render()
    assert not result.ok
    assert ERROR_TITLE in result.tree.text_content()

    exported = asyncio.run(session.export_png())
    assert not exported.success
    assert exported.message == MSG_RENDER_UNAVAILABLE
    assert ("error", ERROR_TITLE) in reports
    assert session.fit_one_page() is False


@pytest.mark.integration
def test_default_resume_fits_one_page(session, reports):
    """Test fit_one_page leaves a résumé that already fits untouched."""
    assert 0 < session.page_fill() <= 100

    assert session.fit_one_page()
    assert reports[-1] == ("success", MSG_ALREADY_ONE_PAGE)
    assert not session.can_undo


@pytest.mark.integration
def test_fit_one_page_gives_up_on_long_content(session, reports):
    """Test overflowing content is compressed step by step, then reported."""
    session.edit(_overflowing)
    assert session.page_fill() > 100

    assert not session.fit_one_page()

    settings = session.document.settings
    assert (settings.page_margin, settings.line_height, settings.font_size_scale) == ("compact", "compact", 0.8)
    assert reports[-1] == ("warning", MSG_FIT_FAILED)

    session.undo()
    assert session.document.settings.font_size_scale == 0.82


@pytest.mark.integration
def test_fit_steps_order():
    """Test margins are tightened before line height, and font scale last."""
    steps = _fit_steps("relaxed", "standard", 0.86)

    assert steps == [
        ("margin", {"page_margin": "standard"}),
        ("margin", {"page_margin": "compact"}),
        ("line-height", {"line_height": "compact"}),
        ("font", {"font_size_scale": 0.84}),
        ("font", {"font_size_scale": 0.82}),
        ("font", {"font_size_scale": 0.8}),
    ]
    assert _fit_steps("compact", "compact", 0.8) == []

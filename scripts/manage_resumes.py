#!/usr/bin/env python3
"""
Command-line interface for managing résumés.

Works on the persisted résumé store (RESUMEX_DATA_PATH). Exports and backups
are written to DOWNLOADS_PATH unless an output directory is given.

Commands:
    list        - List résumés (active one marked)
    new         - Create a résumé (blank or from a quick-start preset)
    preview     - Render a résumé to a standalone HTML page
    export-png  - Export a résumé as a PNG image
    print-pdf   - Print a résumé to PDF
    export-docx - Export a résumé as a Word document
    backup      - Write the persisted state to a backup file
    restore     - Replace the persisted state with a backup file
    clear       - Remove all persisted data

Examples:\n

    manage_resumes.py new --identity fresh --job tech      # Preset for a graduate

    manage_resumes.py preview --output preview.html        # HTML preview of the active résumé

    manage_resumes.py print-pdf 3f0c...                     # Print a specific résumé

    manage_resumes.py restore 简历备份_2025-03-07.json      # Restore a backup
"""

import asyncio
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from resumex.contexts.document.presets import get_preset
from resumex.contexts.editing.logger import setup_editing_logger
from resumex.contexts.editing.session import EditorSession
from resumex.contexts.rendering.layout import content_overflow_percent, materialize
from resumex.contexts.rendering.logger import setup_rendering_logger
from resumex.contexts.storage.backup import clear_all_data, export_backup, import_backup
from resumex.contexts.storage.kv_store import JsonFileStore
from resumex.contexts.storage.logger import setup_storage_logger
from resumex.contexts.storage.resume_store import ResumeStore
from resumex.contexts.templating.html import render_html
from resumex.contexts.templating.logger import setup_templating_logger
from resumex.contexts.templating.page import render_document
from resumex.utils.timestamp import format_timestamp, now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

REPORT_COLORS = {
    "success": typer.colors.GREEN,
    "error": typer.colors.RED,
    "warning": typer.colors.YELLOW,
    "info": typer.colors.BLUE,
}

app = typer.Typer(
    help="Manage résumés: create, preview, export and back up",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _report(kind: str, text: str) -> None:
    typer.secho(text, fg=REPORT_COLORS.get(kind), err=kind in ("error", "warning"))


def _open_store() -> ResumeStore:
    return ResumeStore(JsonFileStore())


def _open_session(resume_id: Optional[str], output_dir: Optional[Path], log_name: str) -> EditorSession:
    store = _open_store()
    if resume_id is not None and store.get(resume_id) is None:
        typer.secho(f"Unknown résumé id: {resume_id}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    log_file = setup_rendering_logger(LOGS_PATH / f"{log_name}_{now()}", resume_id or store.active_resume_id)
    typer.echo(f"Log: {log_file}")

    session = EditorSession(store, report=_report, downloads_dir=output_dir)
    session.open(resume_id)
    return session


def _finish(result) -> None:
    if result is None:
        raise typer.Exit(code=1)
    if not result.success:
        raise typer.Exit(code=1)
    typer.echo(f"→ {result.path}")


ResumeIdArgument = Annotated[
    Optional[str],
    typer.Argument(help="Résumé id (default: the active résumé)"),
]
OutputDirOption = Annotated[
    Optional[Path],
    typer.Option("--output-dir", "-o", help="Directory for the exported file (default: DOWNLOADS_PATH)"),
]


@app.command("list")
def list_command():
    """List résumés, most recently modified first."""
    store = _open_store()
    resumes = store.list_resumes()

    typer.secho(f"\n{len(resumes)} résumé(s)", fg=typer.colors.BLUE, bold=True)
    for resume in resumes:
        marker = "*" if resume.id == store.active_resume_id else " "
        modified = format_timestamp(resume.last_modified, relative=True)
        typer.echo(f"{marker} {resume.id}  {resume.title}  [{resume.template}]  {modified}")


@app.command("new")
def new_command(
    template: Annotated[
        Optional[str],
        typer.Option("--template", "-t", help="Template id (overrides the preset's template)"),
    ] = None,
    identity: Annotated[
        Optional[str],
        typer.Option("--identity", help="Quick-start identity: fresh, working or freelance"),
    ] = None,
    job: Annotated[
        str,
        typer.Option("--job", help="Quick-start job category (e.g., tech, finance, design)"),
    ] = "other",
    title: Annotated[
        Optional[str],
        typer.Option("--title", help="Dashboard title"),
    ] = None,
):
    """
    Create a résumé and make it active.

    Without --identity the new résumé starts from the default content. With
    --identity it gets the preset's template and empty modules in the preset's
    order.
    """
    store = _open_store()
    setup_editing_logger(LOGS_PATH / f"new_{now()}")

    if identity is not None:
        preset = get_preset(identity, job)
        resume_id = store.add_resume_from_preset(template or preset.template_id, preset.module_order)
    else:
        resume_id = store.add_resume()
        if template is not None:
            store.set_template(template)

    if title is not None:
        store.update_resume(resume_id, title=title)

    typer.secho(f"✓ Created {resume_id}", fg=typer.colors.GREEN)


@app.command("preview")
def preview_command(
    resume_id: ResumeIdArgument = None,
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="HTML file to write"),
    ] = Path("preview.html"),
):
    """Render a résumé to a standalone HTML page and report how full the page is."""
    store = _open_store()
    document = store.get(resume_id) if resume_id else store.active
    if document is None:
        typer.secho(f"Unknown résumé id: {resume_id}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    setup_templating_logger(LOGS_PATH / f"preview_{now()}", template_id=document.template)
    tree = render_document(document)
    output.write_text(render_html(tree, title=document.title), encoding="utf-8")

    fill = content_overflow_percent(materialize(tree))
    color = typer.colors.GREEN if fill <= 100 else typer.colors.YELLOW
    typer.echo(f"✓ Preview written to {output}")
    typer.secho(f"  Page fill: {fill:.0f}%", fg=color)


@app.command("export-png")
def export_png_command(resume_id: ResumeIdArgument = None, output_dir: OutputDirOption = None):
    """Export a résumé as a PNG image."""
    session = _open_session(resume_id, output_dir, "export_png")
    _finish(asyncio.run(session.export_png()))


@app.command("print-pdf")
def print_pdf_command(resume_id: ResumeIdArgument = None, output_dir: OutputDirOption = None):
    """Print a résumé to a PDF file named after the profile."""
    session = _open_session(resume_id, output_dir, "print_pdf")
    _finish(asyncio.run(session.print_pdf()))


@app.command("export-docx")
def export_docx_command(resume_id: ResumeIdArgument = None, output_dir: OutputDirOption = None):
    """Export a résumé as a Word document."""
    session = _open_session(resume_id, output_dir, "export_docx")
    _finish(asyncio.run(session.export_docx()))


@app.command("backup")
def backup_command(output_dir: OutputDirOption = None):
    """Write the persisted state to 简历备份_<date>.json."""
    setup_storage_logger(LOGS_PATH / f"backup_{now()}")
    result = export_backup(JsonFileStore(), downloads_dir=output_dir)
    _report("success" if result.success else "error", result.message)
    _finish(result)


@app.command("restore")
def restore_command(
    backup_file: Annotated[
        Path,
        typer.Argument(help="Backup file produced by the backup command", exists=True, dir_okay=False),
    ],
):
    """Replace the persisted state with a backup file (validated first)."""
    setup_storage_logger(LOGS_PATH / f"restore_{now()}")
    result = asyncio.run(import_backup(JsonFileStore(), backup_file))
    _report("success" if result.success else "error", result.message)
    if not result.success:
        raise typer.Exit(code=1)


@app.command("clear")
def clear_command(
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip the confirmation prompt"),
    ] = False,
):
    """Remove every résumé and the onboarding flag."""
    if not yes:
        typer.confirm("Delete all résumé data?", abort=True)
    setup_storage_logger(LOGS_PATH / f"clear_{now()}")
    result = clear_all_data(JsonFileStore())
    _report("success" if result.success else "error", result.message)
    if not result.success:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()

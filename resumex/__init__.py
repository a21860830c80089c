"""
ResumeX - structured résumé editing, templating and export

Builds a résumé from typed sections, previews it through interchangeable visual
templates and exports the result as a raster image, a printed PDF or a Word file.

Architecture:
- Document Context: résumé schema, field validation, default and preset documents
- History Context: bounded undo/redo over immutable snapshots
- Templating Context: pure template variants producing presentation trees
- Rendering Context: layout, raster export, print flow and export file names
- Storage Context: persisted state blob, resume store, backup and restore
- Editing Context: composition root tying edits, history, rendering and export
"""

__version__ = "0.1.0"

"""
Editing Context

Responsibilities:
- Opens a résumé for editing and records every edit in the history engine
- Coalesces rapid profile edits with a trailing-edge debounce
- Renders the current snapshot through the failure boundary
- Starts PNG, PDF and Word exports of the current snapshot

Owns: EditorSession
Never: Persists directly (goes through ResumeStore) or shows UI
"""

from resumex.contexts.editing.session import EditorSession

__all__ = ["EditorSession"]

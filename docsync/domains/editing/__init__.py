from docsync.domains.editing.scheduler import DebouncedSaveScheduler
from docsync.domains.editing.session import EditingSessionController, SessionState, SaveStatus
from docsync.domains.editing.surface import FORMAT_COMMANDS, RichTextSurface, InMemorySurface
from docsync.domains.editing.toggle import ToggleController, TogglePolicy

__all__ = [
    "DebouncedSaveScheduler",
    "EditingSessionController", "SessionState", "SaveStatus",
    "FORMAT_COMMANDS", "RichTextSurface", "InMemorySurface",
    "ToggleController", "TogglePolicy",
]

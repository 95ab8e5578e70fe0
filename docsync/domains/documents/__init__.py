from docsync.domains.documents.entities import Document
from docsync.domains.documents.errors import (
    StoreError, DocumentNotFoundError, StoreTimeoutError,
    SyncError, LoadError, NotFoundError, SaveError, CreateError, DeleteError, ToggleError
)
from docsync.domains.documents.schemas import (
    UNTITLED_DOCUMENT, DocumentOrder, DocumentFilter, DocumentCreate, DocumentUpdate,
    DocumentResponse, DocumentListResponse
)
from docsync.domains.documents.store import DocumentStore, TimedDocumentStore

__all__ = [
    "Document",
    "StoreError", "DocumentNotFoundError", "StoreTimeoutError",
    "SyncError", "LoadError", "NotFoundError", "SaveError", "CreateError", "DeleteError", "ToggleError",
    "UNTITLED_DOCUMENT", "DocumentOrder", "DocumentFilter", "DocumentCreate", "DocumentUpdate",
    "DocumentResponse", "DocumentListResponse",
    "DocumentStore", "TimedDocumentStore",
]

from docsync.infrastructure.document_store import SqlDocumentStore

__all__ = ["SqlDocumentStore"]

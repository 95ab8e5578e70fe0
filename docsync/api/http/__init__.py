from docsync.api.http.health import router as health_router
from docsync.api.http.documents import router as documents_router

__all__ = [
    "health_router",
    "documents_router",
]

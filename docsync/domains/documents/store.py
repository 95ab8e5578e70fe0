import asyncio
import logging
from typing import List, Optional, Protocol, runtime_checkable

from docsync.core.config import settings
from docsync.domains.documents.entities import Document
from docsync.domains.documents.errors import StoreTimeoutError
from docsync.domains.documents.schemas import (
    DocumentCreate, DocumentFilter, DocumentOrder, DocumentUpdate
)

logger = logging.getLogger(__name__)


@runtime_checkable
class DocumentStore(Protocol):
    """Удалённое хранилище документов, которым пользуется клиент"""

    async def list(
        self,
        filter: DocumentFilter,
        order_by: Optional[DocumentOrder] = None
    ) -> List[Document]:
        ...

    async def create(self, data: DocumentCreate) -> Document:
        ...

    async def update(self, document_id: str, changes: DocumentUpdate) -> Document:
        ...

    async def delete(self, document_id: str) -> None:
        ...


class TimedDocumentStore:
    """Обёртка над хранилищем, ограничивающая время каждого вызова"""

    def __init__(self, store: DocumentStore, timeout: Optional[float] = None):
        self.store = store
        self.timeout = settings.store_timeout_seconds if timeout is None else timeout

    async def _call(self, operation: str, awaitable):
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Store call '{operation}' exceeded {self.timeout}s")
            raise StoreTimeoutError(operation, self.timeout)

    async def list(
        self,
        filter: DocumentFilter,
        order_by: Optional[DocumentOrder] = None
    ) -> List[Document]:
        return await self._call("list", self.store.list(filter, order_by))

    async def create(self, data: DocumentCreate) -> Document:
        return await self._call("create", self.store.create(data))

    async def update(self, document_id: str, changes: DocumentUpdate) -> Document:
        return await self._call("update", self.store.update(document_id, changes))

    async def delete(self, document_id: str) -> None:
        return await self._call("delete", self.store.delete(document_id))

from contextlib import asynccontextmanager
from typing import List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from docsync.core.db import SessionLocal
from docsync.db.repositories.document_repository import DocumentRepository
from docsync.domains.documents.entities import Document
from docsync.domains.documents.schemas import (
    DocumentCreate, DocumentFilter, DocumentOrder, DocumentUpdate
)


class SqlDocumentStore:
    """Хранилище документов поверх БД: отдельная сессия на каждый вызов"""

    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal

    @asynccontextmanager
    async def _repository(self):
        async with self.session_factory() as session:
            yield DocumentRepository(session)

    async def list(
        self,
        filter: DocumentFilter,
        order_by: Optional[DocumentOrder] = None
    ) -> List[Document]:
        async with self._repository() as repo:
            return await repo.list(filter, order_by)

    async def create(self, data: DocumentCreate) -> Document:
        async with self._repository() as repo:
            return await repo.create(data)

    async def update(self, document_id: str, changes: DocumentUpdate) -> Document:
        async with self._repository() as repo:
            return await repo.update(document_id, changes)

    async def delete(self, document_id: str) -> None:
        async with self._repository() as repo:
            await repo.delete(document_id)

from typing import Optional, List

from sqlalchemy.ext.asyncio import AsyncSession

from docsync.db.repositories.document_repository import DocumentRepository
from docsync.domains.documents.entities import Document
from docsync.domains.documents.errors import DocumentNotFoundError
from docsync.domains.documents.schemas import (
    DocumentCreate, DocumentFilter, DocumentOrder, DocumentUpdate
)


class DocumentService:
    """Сервис для работы с документами в пределах одного владельца"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.document_repository = DocumentRepository(session)

    async def list_documents(
        self,
        user_id: str,
        document_id: Optional[str] = None,
        order_by: Optional[DocumentOrder] = None
    ) -> List[Document]:
        """Получение документов пользователя"""
        return await self.document_repository.list(
            DocumentFilter(user_id=user_id, id=document_id),
            order_by
        )

    async def create_document(self, document_data: DocumentCreate, user_id: str) -> Document:
        """Создание нового документа"""
        # Владелец всегда берётся из токена, а не из тела запроса
        data = document_data.model_copy(update={"user_id": user_id})
        return await self.document_repository.create(data)

    async def update_document(
        self,
        document_id: str,
        update_data: DocumentUpdate,
        user_id: str
    ) -> Document:
        """Обновление документа"""
        await self._get_owned(document_id, user_id)
        return await self.document_repository.update(document_id, update_data)

    async def delete_document(self, document_id: str, user_id: str) -> None:
        """Удаление документа"""
        await self._get_owned(document_id, user_id)
        await self.document_repository.delete(document_id)

    async def _get_owned(self, document_id: str, user_id: str) -> Document:
        document = await self.document_repository.get_by_id(document_id)

        # Чужой документ неотличим от отсутствующего
        if not document or not document.is_owned_by(user_id):
            raise DocumentNotFoundError(document_id)

        return document

from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from docsync.db.base import new_id, utcnow
from docsync.db.models.document import Document as DocumentModel
from docsync.domains.documents.errors import DocumentNotFoundError
from docsync.domains.documents.schemas import DocumentOrder

if TYPE_CHECKING:
    from docsync.domains.documents.entities import Document
    from docsync.domains.documents.schemas import DocumentCreate, DocumentFilter, DocumentUpdate


ORDERINGS = {
    DocumentOrder.UPDATED_AT_DESC: (DocumentModel.updated_at.desc(),),
    DocumentOrder.UPDATED_AT_ASC: (DocumentModel.updated_at.asc(),),
    DocumentOrder.CREATED_AT_DESC: (DocumentModel.created_at.desc(),),
    DocumentOrder.TITLE_ASC: (DocumentModel.title.asc(),),
}


class DocumentRepository:
    """Репозиторий для работы с документами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, data: "DocumentCreate") -> "Document":
        """Создание нового документа"""
        if not data.user_id:
            raise ValueError("Invalid user_id")

        now = utcnow()
        db_document = DocumentModel(
            id=new_id(),
            title=data.title,
            content=data.content,
            user_id=data.user_id,
            is_starred=data.is_starred,
            created_at=now,
            updated_at=now
        )

        self.session.add(db_document)
        try:
            await self.session.commit()
            await self.session.refresh(db_document)
            return self._to_domain(db_document)
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("Invalid document data")

    async def get_by_id(self, document_id: str) -> Optional["Document"]:
        """Получение документа по идентификатору"""
        result = await self.session.execute(
            select(DocumentModel).where(DocumentModel.id == document_id)
        )
        db_document = result.scalar_one_or_none()
        return self._to_domain(db_document) if db_document else None

    async def list(
        self,
        filter: "DocumentFilter",
        order_by: Optional[DocumentOrder] = None
    ) -> List["Document"]:
        """Выборка документов владельца, опционально по идентификатору"""
        query = select(DocumentModel).where(DocumentModel.user_id == filter.user_id)

        if filter.id is not None:
            query = query.where(DocumentModel.id == filter.id)

        if order_by is not None:
            query = query.order_by(*ORDERINGS[order_by])

        result = await self.session.execute(query)
        return [self._to_domain(doc) for doc in result.scalars().all()]

    async def update(self, document_id: str, changes: "DocumentUpdate") -> "Document":
        """Слияние переданных полей с документом и обновление updated_at"""
        stmt = (
            update(DocumentModel)
            .where(DocumentModel.id == document_id)
            .values(**changes.changes(), updated_at=utcnow())
        )

        result = await self.session.execute(stmt)
        await self.session.commit()

        if result.rowcount == 0:
            raise DocumentNotFoundError(document_id)

        return await self.get_by_id(document_id)

    async def delete(self, document_id: str) -> None:
        """Удаление документа"""
        stmt = delete(DocumentModel).where(DocumentModel.id == document_id)
        result = await self.session.execute(stmt)
        await self.session.commit()

        if result.rowcount == 0:
            raise DocumentNotFoundError(document_id)

    def _to_domain(self, db_document: DocumentModel) -> "Document":
        """Преобразование модели БД в доменную сущность"""
        from docsync.domains.documents.entities import Document

        return Document(
            id=db_document.id,
            title=db_document.title,
            content=db_document.content,
            user_id=db_document.user_id,
            is_starred=db_document.is_starred,
            created_at=db_document.created_at,
            updated_at=db_document.updated_at
        )

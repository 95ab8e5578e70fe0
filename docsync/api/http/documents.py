import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from docsync.api.http.auth import get_current_user
from docsync.core.db import get_db
from docsync.domains.documents.errors import DocumentNotFoundError
from docsync.domains.documents.schemas import (
    DocumentCreate, DocumentUpdate, DocumentResponse, DocumentListResponse, DocumentOrder
)
from docsync.domains.documents.services import DocumentService
from docsync.domains.identity.entities import Identity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    id: Optional[str] = Query(None),
    order_by: Optional[DocumentOrder] = Query(None),
    user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Получение списка документов текущего пользователя"""
    document_service = DocumentService(db)

    documents = await document_service.list_documents(user.id, document_id=id, order_by=order_by)

    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(doc) for doc in documents],
        total=len(documents)
    )


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: DocumentCreate,
    user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Создание нового документа"""
    document_service = DocumentService(db)

    try:
        document = await document_service.create_document(document_data, user.id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    logger.info(f"Document {document.id} created by {user.id}")
    return DocumentResponse.model_validate(document)


@router.patch("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: str,
    update_data: DocumentUpdate,
    user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Частичное обновление документа"""
    document_service = DocumentService(db)

    try:
        document = await document_service.update_document(document_id, update_data, user.id)
    except DocumentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )

    return DocumentResponse.model_validate(document)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: str,
    user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Удаление документа"""
    document_service = DocumentService(db)

    try:
        await document_service.delete_document(document_id, user.id)
    except DocumentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )

    logger.info(f"Document {document_id} deleted by {user.id}")

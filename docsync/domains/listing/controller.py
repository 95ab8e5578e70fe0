import asyncio
import logging
from typing import Callable, List, Optional

from docsync.core.config import settings
from docsync.core.tasks import spawn
from docsync.domains.documents.entities import Document
from docsync.domains.documents.errors import SyncError, LoadError, CreateError, DeleteError
from docsync.domains.documents.schemas import (
    UNTITLED_DOCUMENT, DocumentCreate, DocumentFilter, DocumentOrder
)
from docsync.domains.documents.store import DocumentStore, TimedDocumentStore
from docsync.domains.editing.toggle import ToggleController
from docsync.domains.identity.entities import AuthState, Identity
from docsync.domains.identity.session import AuthSession
from docsync.domains.listing.views import ListView, derive_views

logger = logging.getLogger(__name__)


class DocumentListController:
    """Список документов пользователя с поиском и отметками"""

    def __init__(
        self,
        store: DocumentStore,
        toggle_controller: Optional[ToggleController] = None,
        on_error: Optional[Callable[[SyncError], None]] = None,
        recent_limit: Optional[int] = None,
        timeout: Optional[float] = None
    ):
        if not isinstance(store, TimedDocumentStore):
            store = TimedDocumentStore(store, timeout)
        self.store = store
        self.toggle_controller = toggle_controller or ToggleController(
            self.store, on_error=self._forward_error
        )
        self.on_error = on_error
        self.recent_limit = recent_limit or settings.recent_documents_limit

        self.documents: List[Document] = []
        self.search_term = ""
        self.user: Optional[Identity] = None
        self.is_loading = True
        self.last_error: Optional[SyncError] = None

        self._load_epoch = 0
        self._load_task: Optional[asyncio.Task] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def views(self) -> ListView:
        # Пересчитывается при каждом обращении, кэша нет
        return derive_views(self.documents, self.search_term, self.recent_limit)

    @property
    def is_empty(self) -> bool:
        return not self.documents

    def bind(self, auth_session: AuthSession) -> None:
        """Подписка на сессию аутентификации"""
        if self._unsubscribe is not None:
            self._unsubscribe()
        self._unsubscribe = auth_session.on_change(self._on_auth_change)

    def _on_auth_change(self, state: AuthState) -> None:
        self.is_loading = state.is_loading
        if state.is_loading:
            return

        previous = self.user
        self.user = state.user

        if state.user is None:
            # Документы видны только в рамках владельца
            self._load_epoch += 1
            self.documents = []
            return

        if previous is not None and previous.id == state.user.id:
            return

        self._load_task = spawn(self.load(state.user.id), name=f"list-{state.user.id}")

    async def wait_loaded(self) -> List[Document]:
        if self._load_task is not None:
            await self._load_task
        return self.documents

    def set_search(self, search_term: str) -> ListView:
        self.search_term = search_term or ""
        return self.views

    async def load(self, user_id: str) -> List[Document]:
        """Загрузка коллекции владельца, свежие документы первыми"""
        self._load_epoch += 1
        epoch = self._load_epoch

        try:
            documents = await self.store.list(
                DocumentFilter(user_id=user_id),
                order_by=DocumentOrder.UPDATED_AT_DESC
            )
        except Exception as e:
            self._report(LoadError(cause=e))
            return self.documents

        if epoch != self._load_epoch:
            logger.info(f"Discarding stale document list of user {user_id}")
            return self.documents

        self.documents = list(documents)
        logger.info(f"Loaded {len(self.documents)} documents for user {user_id}")
        return self.documents

    async def create_document(self) -> Optional[Document]:
        """Создание пустого документа"""
        if self.user is None:
            self._report(CreateError(cause=PermissionError("No signed-in user")))
            return None

        try:
            document = await self.store.create(DocumentCreate(
                title=UNTITLED_DOCUMENT,
                content="",
                user_id=self.user.id,
                is_starred=False
            ))
        except Exception as e:
            self._report(CreateError(cause=e))
            return None

        self.documents.insert(0, document)
        logger.info(f"Document {document.id} created")
        return document

    def toggle_star(self, document_id: str) -> Optional["asyncio.Task[bool]"]:
        """Переключение отметки документа из списка"""
        document = self._find(document_id)
        if document is None:
            logger.warning(f"Cannot toggle unknown document {document_id}")
            return None

        return self.toggle_controller.toggle(document)

    async def delete_document(self, document_id: str) -> bool:
        """Удаление документа"""
        try:
            await self.store.delete(document_id)
        except Exception as e:
            self._report(DeleteError(document_id, e))
            return False

        self.documents = [doc for doc in self.documents if doc.id != document_id]
        logger.info(f"Document {document_id} deleted")
        return True

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _find(self, document_id: str) -> Optional[Document]:
        for document in self.documents:
            if document.id == document_id:
                return document
        return None

    def _report(self, error: SyncError) -> None:
        logger.error(str(error))
        self._forward_error(error)

    def _forward_error(self, error: SyncError) -> None:
        self.last_error = error
        if self.on_error:
            self.on_error(error)

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from docsync.core.tasks import spawn
from docsync.domains.documents.entities import Document
from docsync.domains.documents.errors import (
    SyncError, LoadError, NotFoundError, SaveError
)
from docsync.domains.documents.schemas import DocumentFilter, DocumentUpdate
from docsync.domains.documents.store import DocumentStore, TimedDocumentStore
from docsync.domains.editing.scheduler import DebouncedSaveScheduler
from docsync.domains.editing.surface import FORMAT_COMMANDS, RichTextSurface
from docsync.domains.editing.toggle import ToggleController
from docsync.domains.identity.entities import AuthState, Identity
from docsync.domains.identity.session import AuthSession

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Состояния сессии редактирования"""
    LOADING = "loading"
    READY = "ready"
    NOT_FOUND = "not_found"
    LOAD_FAILED = "load_failed"


class SaveStatus(str, Enum):
    IDLE = "idle"
    SAVING = "saving"


class EditingSessionController:
    """Сессия редактирования одного документа

    Владеет локальными заголовком и содержимым, единственная инициирует
    сохранения своего документа. local_title/local_content всегда равны
    тому, что ввёл пользователь, а document хранит последнее состояние,
    принятое хранилищем.

    Каждая загрузка, правка и сохранение увеличивают счётчик эпох.
    Результат загрузки применяется, только если с её начала эпоха
    не изменилась, иначе медленная перезагрузка могла бы затереть
    более свежие локальные данные.
    """

    def __init__(
        self,
        document_id: str,
        store: DocumentStore,
        surface: Optional[RichTextSurface] = None,
        scheduler: Optional[DebouncedSaveScheduler] = None,
        toggle_controller: Optional[ToggleController] = None,
        on_error: Optional[Callable[[SyncError], None]] = None,
        timeout: Optional[float] = None
    ):
        self.document_id = document_id
        if not isinstance(store, TimedDocumentStore):
            store = TimedDocumentStore(store, timeout)
        self.store = store
        self.surface = surface
        self.scheduler = scheduler or DebouncedSaveScheduler(name=document_id)
        self.toggle_controller = toggle_controller or ToggleController(
            self.store, on_error=self._forward_error
        )
        self.on_error = on_error

        self.document: Optional[Document] = None
        self.local_title = ""
        self.local_content = ""
        self.state = SessionState.LOADING
        self.save_status = SaveStatus.IDLE
        self.user: Optional[Identity] = None
        self.last_error: Optional[SyncError] = None

        self._epoch = 0
        self._surface_seeded = False
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._load_task: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def pending_save(self) -> bool:
        return self.scheduler.pending_save

    @property
    def has_unsaved_edits(self) -> bool:
        """Правки, ещё не подтверждённые хранилищем"""
        scheduler = self.scheduler
        return scheduler.is_armed or scheduler.is_saving or scheduler.pending_save

    @property
    def is_loading(self) -> bool:
        return self.state is SessionState.LOADING

    @property
    def is_not_found(self) -> bool:
        return self.state is SessionState.NOT_FOUND

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def status_label(self) -> str:
        return "saving..." if self.save_status is SaveStatus.SAVING else "saved"

    def bind(self, auth_session: AuthSession) -> None:
        """Подписка на сессию аутентификации"""
        if self._unsubscribe is not None:
            self._unsubscribe()
        self._unsubscribe = auth_session.on_change(self._on_auth_change)

    def _on_auth_change(self, state: AuthState) -> None:
        if state.is_loading or self._closed:
            return

        previous = self.user
        self.user = state.user

        if state.user is None:
            if previous is not None:
                logger.info(f"Edits of document {self.document_id} paused until sign-in")
            return

        if previous is not None and previous.id == state.user.id:
            return

        self._load_task = spawn(
            self.load(self.document_id, state.user.id),
            name=f"load-{self.document_id}"
        )

    async def wait_loaded(self) -> SessionState:
        """Ожидание загрузки, запущенной сессией аутентификации"""
        if self._load_task is not None:
            await self._load_task
        return self.state

    async def load(self, document_id: str, owner_id: str) -> SessionState:
        """Загрузка документа владельца"""
        if self._closed or self.state is SessionState.NOT_FOUND:
            return self.state

        self._epoch += 1
        epoch = self._epoch
        # Снимок, прочитанный во время сохранения, может его не содержать
        started_while_saving = self.scheduler.is_saving

        try:
            documents = await self.store.list(DocumentFilter(id=document_id, user_id=owner_id))
        except Exception as e:
            self._report(LoadError(document_id, e))
            if self.document is None:
                self.state = SessionState.LOAD_FAILED
            return self.state

        if epoch != self._epoch or started_while_saving:
            logger.info(f"Discarding stale load of document {document_id}")
            return self.state

        if not documents:
            self.state = SessionState.NOT_FOUND
            self.scheduler.cancel()
            self._report(NotFoundError(document_id), level=logging.WARNING)
            return self.state

        document = documents[0]

        if self.document is not None and document.updated_at < self.document.updated_at:
            logger.info(f"Discarding load of document {document_id} older than confirmed state")
            return self.state

        self.document = document
        if self.has_unsaved_edits:
            logger.info(f"Keeping unsaved local edits of document {document_id} over loaded copy")
        else:
            self.local_title = document.title
            self.local_content = document.content
        self.state = SessionState.READY

        # Засев поверхности только при первой загрузке, иначе потеряется курсор
        if self.surface is not None and not self._surface_seeded:
            self.surface.set_serialized_content(self.local_content)
            self._surface_seeded = True

        logger.info(f"Document {document_id} loaded for editing")
        return self.state

    def edit_title(self, title: str) -> None:
        """Изменение заголовка"""
        if not self._accepts_edits("title"):
            return

        self.local_title = title
        self._epoch += 1
        self.scheduler.schedule(self._save)

    def edit_content(self, content: str) -> None:
        """Изменение содержимого"""
        if not self._accepts_edits("content"):
            return

        self.local_content = content
        self._epoch += 1
        self.scheduler.schedule(self._save)

    def handle_content_change(self) -> None:
        """Чтение содержимого с поверхности после ввода пользователя"""
        if self.surface is None:
            raise RuntimeError("No rich-text surface attached")

        self.edit_content(self.surface.get_serialized_content())

    def format_text(self, command: str, value: Optional[str] = None) -> None:
        """Применение команды форматирования"""
        if command not in FORMAT_COMMANDS:
            raise ValueError(f"Unknown formatting command: {command}")

        if self.surface is None:
            raise RuntimeError("No rich-text surface attached")

        self.surface.exec_command(command, value)
        self.handle_content_change()

    def toggle_star(self) -> Optional["asyncio.Task[bool]"]:
        """Переключение отметки «избранное» без отложенного сохранения"""
        if self.document is None or self._closed or self._is_signed_out():
            return None

        self._epoch += 1
        return self.toggle_controller.toggle(self.document)

    async def flush(self) -> None:
        """Немедленная запись отложенных правок"""
        await self.scheduler.flush()

    def close(self) -> None:
        """Закрытие сессии при уходе из редактора"""
        if self._closed:
            return

        self._closed = True

        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        self.scheduler.close()
        logger.info(f"Editing session for document {self.document_id} closed")

    async def _save(self) -> None:
        if self.document is None:
            return

        document_id = self.document.id
        title = self.local_title
        content = self.local_content
        self._epoch += 1
        self.save_status = SaveStatus.SAVING

        try:
            saved = await self.store.update(
                document_id, DocumentUpdate(title=title, content=content)
            )
        except Exception as e:
            self._report(SaveError(document_id, e))
        else:
            updated_at = saved.updated_at if saved is not None else datetime.now(timezone.utc)
            # Загрузка могла заменить объект документа, пока шло сохранение
            document = self.document
            if document is not None and document.id == document_id:
                document.apply_saved(title, content, updated_at)
            logger.debug(f"Document {document_id} saved")
        finally:
            self._epoch += 1
            self.save_status = SaveStatus.IDLE

    def _is_signed_out(self) -> bool:
        return self._unsubscribe is not None and self.user is None

    def _accepts_edits(self, field: str) -> bool:
        if self._closed or self.state is not SessionState.READY:
            logger.warning(
                f"Ignoring {field} edit of document {self.document_id} in state {self.state.value}"
            )
            return False
        if self._is_signed_out():
            logger.warning(f"Ignoring {field} edit of document {self.document_id} while signed out")
            return False
        return True

    def _report(self, error: SyncError, level: int = logging.ERROR) -> None:
        logger.log(level, str(error))
        self._forward_error(error)

    def _forward_error(self, error: SyncError) -> None:
        self.last_error = error
        if self.on_error:
            self.on_error(error)

import asyncio
import logging
from enum import Enum
from typing import Callable, Dict, Optional

from docsync.core.config import settings
from docsync.core.tasks import spawn
from docsync.domains.documents.entities import Document
from docsync.domains.documents.errors import SyncError, ToggleError
from docsync.domains.documents.schemas import DocumentUpdate
from docsync.domains.documents.store import DocumentStore

logger = logging.getLogger(__name__)


class TogglePolicy(str, Enum):
    """Поведение при неудачном переключении отметки"""
    REVERT = "revert"
    KEEP = "keep"


class ToggleController:
    """Оптимистичное переключение отметки «избранное»

    При политике REVERT после ошибки флаг возвращается к последнему
    значению, подтверждённому хранилищем, но только когда по документу
    не осталось незавершённых переключений.
    """

    def __init__(
        self,
        store: DocumentStore,
        policy: Optional[str] = None,
        on_error: Optional[Callable[[SyncError], None]] = None
    ):
        self.store = store
        self.policy = TogglePolicy(policy or settings.toggle_failure_policy)
        self.on_error = on_error
        self.last_error: Optional[ToggleError] = None
        self._pending: Dict[str, int] = {}
        self._confirmed: Dict[str, bool] = {}

    def toggle(self, document: Document) -> "asyncio.Task[bool]":
        """Локальное переключение сразу, запись в хранилище фоновой задачей"""
        if not self._pending.get(document.id):
            self._confirmed[document.id] = document.is_starred
        self._pending[document.id] = self._pending.get(document.id, 0) + 1

        new_value = not document.is_starred
        document.is_starred = new_value
        logger.debug(f"Document {document.id} starred={new_value} (optimistic)")

        return spawn(self._commit(document, new_value), name=f"toggle-{document.id}")

    async def _commit(self, document: Document, value: bool) -> bool:
        try:
            saved = await self.store.update(document.id, DocumentUpdate(is_starred=value))
        except Exception as e:
            error = ToggleError(document.id, e)
            logger.error(str(error))
            self._settle(document, failed=True)

            self.last_error = error
            if self.on_error:
                self.on_error(error)
            return False

        self._confirmed[document.id] = value
        if saved is not None:
            document.touch(saved.updated_at)
        self._settle(document, failed=False)
        return True

    def _settle(self, document: Document, failed: bool) -> None:
        self._pending[document.id] -= 1
        if self._pending[document.id]:
            return

        del self._pending[document.id]
        confirmed = self._confirmed.pop(document.id)

        if failed and self.policy is TogglePolicy.REVERT and document.is_starred != confirmed:
            logger.info(f"Reverting star of document {document.id} to {confirmed}")
            document.is_starred = confirmed

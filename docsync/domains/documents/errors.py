from typing import Optional


class StoreError(Exception):
    """Базовая ошибка хранилища документов"""


class DocumentNotFoundError(StoreError):
    """Документ с указанным идентификатором отсутствует"""

    def __init__(self, document_id: str):
        super().__init__(f"Document {document_id} not found")
        self.document_id = document_id


class StoreTimeoutError(StoreError):
    """Хранилище не ответило за отведённое время"""

    def __init__(self, operation: str, timeout: float):
        super().__init__(f"Store call '{operation}' timed out after {timeout}s")
        self.operation = operation
        self.timeout = timeout


class SyncError(Exception):
    """Ошибка синхронизации клиента с хранилищем"""

    action = "sync"

    def __init__(self, document_id: Optional[str] = None, cause: Optional[BaseException] = None):
        self.document_id = document_id
        self.cause = cause
        message = f"Failed to {self.action} document"
        if document_id:
            message += f" {document_id}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class LoadError(SyncError):
    action = "load"


class NotFoundError(SyncError):
    action = "find"


class SaveError(SyncError):
    action = "save"


class CreateError(SyncError):
    action = "create"


class DeleteError(SyncError):
    action = "delete"


class ToggleError(SyncError):
    action = "toggle star of"

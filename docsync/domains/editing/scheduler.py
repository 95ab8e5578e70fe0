import asyncio
import logging
from typing import Awaitable, Callable, Optional

from docsync.core.config import settings
from docsync.core.tasks import spawn

logger = logging.getLogger(__name__)

SaveFn = Callable[[], Awaitable[None]]


class DebouncedSaveScheduler:
    """Планировщик отложенного сохранения одной сессии редактирования

    Серия правок склеивается в одну запись: каждый вызов schedule()
    перевзводит таймер, и сохранение выполняется после паузы без правок.
    Одновременно выполняется не больше одного сохранения; правка, пришедшая
    во время сохранения, помечается флагом pending_save и таймер взводится
    заново сразу после его завершения.
    """

    def __init__(self, delay: Optional[float] = None, name: str = "session"):
        self.delay = settings.save_debounce_seconds if delay is None else delay
        self.name = name
        self.pending_save = False
        self._save_fn: Optional[SaveFn] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._in_flight: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def is_armed(self) -> bool:
        return self._timer is not None

    @property
    def is_saving(self) -> bool:
        return self._in_flight is not None

    @property
    def is_closed(self) -> bool:
        return self._closed

    def schedule(self, save_fn: SaveFn) -> None:
        """Запрос отложенного сохранения"""
        if self._closed:
            raise RuntimeError(f"Save scheduler for {self.name} is closed")

        self._save_fn = save_fn

        if self._in_flight is not None:
            self.pending_save = True
            logger.debug(f"Save for {self.name} in flight, queued another one")
            return

        self._arm()

    def cancel(self) -> bool:
        """Отмена взведённого таймера"""
        if self._timer is None:
            return False

        self._timer.cancel()
        self._timer = None
        return True

    def close(self) -> None:
        """Закрытие планировщика вместе с сессией

        Таймер снимается; если правка ещё ждала своего таймера, она
        сохраняется немедленно. Текущее сохранение доживает до конца.
        """
        if self._closed:
            return

        self._closed = True

        if self.cancel():
            logger.info(f"Flushing pending edit of {self.name} on close")
            self._fire()

    async def flush(self) -> None:
        """Немедленное сохранение и ожидание всех сохранений"""
        while True:
            if self.cancel():
                self._fire()

            if self._in_flight is None:
                return

            await self._in_flight

    async def wait_idle(self) -> None:
        """Ожидание текущего сохранения и сохранений, поставленных за ним"""
        while self._in_flight is not None:
            await self._in_flight

    def _arm(self) -> None:
        self.cancel()
        self._timer = asyncio.get_running_loop().call_later(self.delay, self._fire)

    def _fire(self) -> None:
        self._timer = None
        self._in_flight = spawn(self._run(self._save_fn), name=f"save-{self.name}")

    async def _run(self, save_fn: SaveFn) -> None:
        try:
            await save_fn()
        except Exception as e:
            logger.error(f"Debounced save for {self.name} failed: {e}")
        finally:
            self._in_flight = None

            if self.pending_save:
                self.pending_save = False
                if self._closed:
                    self._fire()
                else:
                    self._arm()

import asyncio
import logging
from typing import Coroutine, Set

logger = logging.getLogger(__name__)

# Цикл событий держит задачи слабыми ссылками, поэтому храним их здесь
_background_tasks: Set[asyncio.Task] = set()


def spawn(coro: Coroutine, name: str = None) -> asyncio.Task:
    """Запуск фоновой задачи, которая доживёт до завершения"""
    task = asyncio.get_running_loop().create_task(coro, name=name)
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task

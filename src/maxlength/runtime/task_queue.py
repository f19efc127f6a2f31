"""Очередь отложенных задач.

Модель "применить после нативного действия, до перерисовки": хост
вызывает run_pending() сразу после того, как нативная правка применена.
Новая задача с тем же ключом вытесняет ещё не выполненную.
"""

import logging
from typing import Callable, Hashable

logger = logging.getLogger(__name__)

DeferredTask = Callable[[], None]


class DeferredTaskQueue:
    """FIFO отложенных задач с вытеснением по ключу."""

    def __init__(self) -> None:
        self._tasks: dict[Hashable, DeferredTask] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def pending_keys(self) -> list[Hashable]:
        return list(self._tasks)

    def schedule(self, key: Hashable, task: DeferredTask) -> None:
        if key in self._tasks:
            logger.debug("Deferred task %r superseded", key)
            del self._tasks[key]
        self._tasks[key] = task

    def run_pending(self) -> int:
        """Выполнить все задачи, включая запланированные во время выполнения.

        Returns:
            Количество выполненных задач
        """
        executed = 0
        while self._tasks:
            key = next(iter(self._tasks))
            task = self._tasks.pop(key)
            task()
            executed += 1
        return executed

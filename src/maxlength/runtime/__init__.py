"""Runtime — явные объекты контекста и привязка к хосту.

NumberFieldController импортируется из maxlength.runtime.controller
(или из корня пакета maxlength).
"""

from .binding import ElementBinding, read_reference
from .context import NumberFieldContext
from .memory_document import InMemoryDocument, MemoryElement
from .registry import GENERATED_ID_PREFIX, FieldRegistry
from .settings import MaxLengthSettings
from .task_queue import DeferredTask, DeferredTaskQueue

__all__ = [
    # Binding
    "ElementBinding",
    "read_reference",
    "InMemoryDocument",
    "MemoryElement",
    # Context
    "NumberFieldContext",
    "FieldRegistry",
    "GENERATED_ID_PREFIX",
    "DeferredTask",
    "DeferredTaskQueue",
    # Settings
    "MaxLengthSettings",
]

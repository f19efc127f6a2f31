"""Отложенные корректирующие перезаписи.

Перезапись выполняется одной отложенной задачей сразу после того, как
нативное действие клавиши применено, и до следующей перерисовки.
Она получает текущее состояние поля и возвращает новое (или None — без изменений).
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from maxlength.core.domain.edit_state import EditState
from maxlength.core.domain.limit_spec import LimitSpec
from maxlength.core.domain.number_format import NumberFormat
from maxlength.editing.runs import check_well_formed

logger = logging.getLogger(__name__)


class Rewrite(Protocol):
    """Отложенная перезапись содержимого поля."""

    reason: str

    def apply(self, current: EditState) -> EditState | None: ...


@dataclass(frozen=True)
class ReplaceContent:
    """Заменить содержимое и поставить курсор (smart-minus, вставка "0.")."""

    text: str
    cursor: int
    reason: str

    def apply(self, current: EditState) -> EditState | None:
        return EditState.caret(self.text, min(self.cursor, len(self.text)))


@dataclass(frozen=True)
class RollbackIfInvalid:
    """Откатить вставку, если результат нарушает синтаксис или бюджет."""

    previous: EditState
    spec: LimitSpec
    number_format: NumberFormat
    reason: str = "paste_check"

    def apply(self, current: EditState) -> EditState | None:
        is_valid, error = check_well_formed(current.text, self.spec, self.number_format)
        if is_valid:
            return None
        logger.warning("Paste result %r rolled back to %r: %s", current.text, self.previous.text, error)
        return self.previous

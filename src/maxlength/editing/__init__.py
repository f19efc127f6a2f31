"""Editing — проверка правок числового поля.

- Keystroke Validator: решение accept/reject по нажатию клавиши
- Selection-Replace Validator: удаление выделения (Backspace/Delete/Ctrl+X)
- Отложенные перезаписи: smart-minus, ведущий "0.", откат вставки
"""

from .keys import KeyClass, KeyCode, classify_key
from .keystroke_validator import KeystrokeDecision, KeystrokeValidator, KeystrokeValidatorConfig
from .rewrites import ReplaceContent, Rewrite, RollbackIfInvalid
from .runs import DigitRuns, check_well_formed, split_runs
from .selection_validator import SelectionCheckResult, SelectionReplaceValidator

__all__ = [
    "KeyClass",
    "KeyCode",
    "classify_key",
    "KeystrokeDecision",
    "KeystrokeValidator",
    "KeystrokeValidatorConfig",
    "ReplaceContent",
    "Rewrite",
    "RollbackIfInvalid",
    "DigitRuns",
    "check_well_formed",
    "split_runs",
    "SelectionCheckResult",
    "SelectionReplaceValidator",
]

"""Классификация клавиш по кодам (keyCode).

Класс клавиши определяет ветку Keystroke Validator:
NONE → отклонить, MINUS / SEPARATOR / DIGIT → бюджетные проверки,
NAVIGATION → пропуск (кроме Backspace/Delete у разделителя и на выделении).
"""

from enum import Enum, IntEnum
from typing import Final

from maxlength.core.domain.number_format import NumberFormat


class KeyClass(str, Enum):
    """Класс клавиши"""

    NONE = "none"
    MINUS = "minus"
    SEPARATOR = "separator"
    DIGIT = "digit"
    NAVIGATION = "navigation"
    COMBINATION = "combination"


class KeyCode(IntEnum):
    """Коды функциональных клавиш и комбинаций."""

    BACKSPACE = 8
    TAB = 9
    ENTER = 13
    ESC = 27
    PAGE_UP = 33
    PAGE_DOWN = 34
    END = 35
    HOME = 36
    LEFT = 37
    UP = 38
    RIGHT = 39
    DOWN = 40
    DEL = 46
    V = 86
    X = 88
    ENTER_SUB = 108
    F5 = 116


MINUS_KEY_CODES: Final[frozenset[int]] = frozenset({109, 189})

# 0-9 основного ряда и цифрового блока
DIGIT_KEY_CODES: Final[frozenset[int]] = frozenset(range(48, 58)) | frozenset(range(96, 106))

NAVIGATION_KEY_CODES: Final[frozenset[int]] = frozenset(
    {
        KeyCode.F5,
        KeyCode.ESC,
        KeyCode.BACKSPACE,
        KeyCode.DEL,
        KeyCode.TAB,
        KeyCode.ENTER,
        KeyCode.ENTER_SUB,
        KeyCode.PAGE_UP,
        KeyCode.PAGE_DOWN,
        KeyCode.END,
        KeyCode.HOME,
        KeyCode.LEFT,
        KeyCode.UP,
        KeyCode.RIGHT,
        KeyCode.DOWN,
    }
)


def classify_key(key_code: int, number_format: NumberFormat) -> KeyClass:
    """
    Класс клавиши с учётом клавиши разделителя текущего формата.

    Examples:
        >>> classify_key(190, NUMBER_FORMATS[NumberFormatStandard.EN])
        <KeyClass.SEPARATOR: 'separator'>
        >>> classify_key(190, NUMBER_FORMATS[NumberFormatStandard.ES])
        <KeyClass.NONE: 'none'>
    """
    if key_code in number_format.separator_key_codes:
        return KeyClass.SEPARATOR
    if key_code in MINUS_KEY_CODES:
        return KeyClass.MINUS
    if key_code in DIGIT_KEY_CODES:
        return KeyClass.DIGIT
    if key_code in NAVIGATION_KEY_CODES:
        return KeyClass.NAVIGATION
    return KeyClass.NONE

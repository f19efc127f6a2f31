"""Иерархия исключений maxlength.

Исключения поднимаются только на этапе настройки (ошибки разработчика).
Отклонённые нажатия клавиш, откат вставки и нечисловые операнды арифметики
исключений не порождают.
"""


class MaxLengthError(Exception):
    """Базовое исключение для всех ошибок maxlength."""


class ConfigurationError(MaxLengthError):
    """Некорректная конфигурация поля, обнаруженная при настройке."""


class DerivedFieldConfigError(ConfigurationError):
    """Нарушена кардинальность селекторов вычисляемого поля.

    difference / quotient / percent требуют ровно 2 селектора,
    и первый должен находить ровно один элемент.
    """

    def __init__(self, target_field_id: str, expected: int, received: int, detail: str) -> None:
        self.target_field_id = target_field_id
        self.expected = expected
        self.received = received
        super().__init__(
            f"Derived field {target_field_id!r}: {detail}. "
            f"Expected: {expected}. Received: {received}."
        )


class DerivedFieldCycleError(ConfigurationError):
    """Цепочка пересчёта вернулась к полю, которое уже вычисляется."""

    def __init__(self, chain: list[str]) -> None:
        self.chain = list(chain)
        super().__init__(f"Derived field cycle detected: {' -> '.join(self.chain)}")


class UnknownFieldError(MaxLengthError):
    """Событие пришло для поля, не зарегистрированного в контексте."""

    def __init__(self, field_id: str) -> None:
        self.field_id = field_id
        super().__init__(f"Field {field_id!r} is not registered")


class UnknownNumberFormatError(ConfigurationError):
    """Запрошен неизвестный стандарт формата чисел."""

    def __init__(self, standard: str) -> None:
        self.standard = standard
        super().__init__(f"Unknown number format standard {standard!r}, expected one of ISO, EN, ES")

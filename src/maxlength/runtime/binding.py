"""Протокол привязки к элементам хоста.

Хост (DOM-мост, TUI, GUI-тулкит) реализует поиск элементов по селектору,
чтение/запись текста и выделения, применение стиля. Привязка событий
остаётся на стороне хоста: он вызывает обработчики NumberFieldController.
"""

from typing import Protocol

from maxlength.presentation.formatter import FieldStyle


class ElementBinding(Protocol):
    """Доступ к элементам хоста."""

    def select(self, selector: str) -> list[str]:
        """Идентификаторы элементов по селектору в порядке документа (без исключений)."""
        ...

    def get_value(self, element_id: str) -> str | None:
        """Текущее значение; None для неизвестного элемента."""
        ...

    def set_value(self, element_id: str, value: str) -> None: ...

    def get_selection(self, element_id: str) -> tuple[int, int]: ...

    def set_selection(self, element_id: str, start: int, end: int) -> None: ...

    def get_name(self, element_id: str) -> str | None:
        """Имя группы элемента (атрибут name); None для неизвестного элемента."""
        ...

    def apply_style(self, element_id: str, style: FieldStyle) -> None: ...


def read_reference(binding: ElementBinding, selector: str) -> str | None:
    """Значение первого элемента по селектору, None если элементов нет."""
    element_ids = binding.select(selector)
    if not element_ids:
        return None
    return binding.get_value(element_ids[0])

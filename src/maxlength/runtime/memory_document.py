"""In-memory element binding — dict-backed stand-in for a host document.

Поддерживаемые селекторы (через запятую): "#id", ".class", "[name=value]".
"""

import re
from dataclasses import dataclass, field
from typing import Any, Final

from maxlength.presentation.formatter import FieldStyle

_SIMPLE_SELECTOR: Final[re.Pattern[str]] = re.compile(
    r"""^(?:\#(?P<id>[\w-]+)|\.(?P<cls>[\w-]+)|\[name=["']?(?P<name>[^"'\]]+)["']?\])$"""
)


@dataclass
class MemoryElement:
    """Элемент документа."""

    element_id: str
    value: str = ""
    name: str | None = None
    classes: frozenset[str] = frozenset()
    attributes: dict[str, Any] = field(default_factory=dict)
    selection: tuple[int, int] = (0, 0)
    style: FieldStyle | None = None


class InMemoryDocument:
    """Dict-backed ElementBinding для тестов и headless-встраивания."""

    def __init__(self) -> None:
        self._elements: dict[str, MemoryElement] = {}

    def add_element(
        self,
        element_id: str,
        value: str = "",
        name: str | None = None,
        classes: tuple[str, ...] = (),
        attributes: dict[str, Any] | None = None,
    ) -> MemoryElement:
        element = MemoryElement(
            element_id=element_id,
            value=value,
            name=name,
            classes=frozenset(classes),
            attributes=dict(attributes or {}),
            selection=(len(value), len(value)),
        )
        self._elements[element_id] = element
        return element

    def element(self, element_id: str) -> MemoryElement:
        return self._elements[element_id]

    # ElementBinding -----------------------------------------------------------

    def select(self, selector: str) -> list[str]:
        matched: list[str] = []
        for part in selector.split(","):
            match = _SIMPLE_SELECTOR.match(part.strip())
            if match is None:
                continue
            for element in self._elements.values():
                if element.element_id in matched:
                    continue
                if (
                    (match["id"] is not None and element.element_id == match["id"])
                    or (match["cls"] is not None and match["cls"] in element.classes)
                    or (match["name"] is not None and element.name == match["name"])
                ):
                    matched.append(element.element_id)
        order = list(self._elements)
        return sorted(matched, key=order.index)

    def get_value(self, element_id: str) -> str | None:
        element = self._elements.get(element_id)
        return element.value if element is not None else None

    def set_value(self, element_id: str, value: str) -> None:
        element = self._elements[element_id]
        element.value = value
        start, end = element.selection
        element.selection = (min(start, len(value)), min(end, len(value)))

    def get_selection(self, element_id: str) -> tuple[int, int]:
        return self._elements[element_id].selection

    def set_selection(self, element_id: str, start: int, end: int) -> None:
        self._elements[element_id].selection = (start, end)

    def get_name(self, element_id: str) -> str | None:
        element = self._elements.get(element_id)
        return element.name if element is not None else None

    def apply_style(self, element_id: str, style: FieldStyle) -> None:
        self._elements[element_id].style = style

    # Native edits (то, что хост делает сам после accept) ----------------------

    def type_text(self, element_id: str, text: str) -> None:
        """Нативная вставка текста на место выделения."""
        element = self._elements[element_id]
        start, end = element.selection
        element.value = element.value[:start] + text + element.value[end:]
        cursor = start + len(text)
        element.selection = (cursor, cursor)

    def delete_selection(self, element_id: str) -> str:
        """Нативное удаление выделения (cut); возвращает удалённый текст."""
        element = self._elements[element_id]
        start, end = element.selection
        removed = element.value[start:end]
        element.value = element.value[:start] + element.value[end:]
        element.selection = (start, start)
        return removed

"""
EditState — Снапшот редактируемого поля

Текст поля + выделение (selection_start <= selection_end).
Курсор без выделения: selection_start == selection_end.
"""

from dataclasses import dataclass

from maxlength.core.domain.number_format import MINUS


@dataclass(frozen=True)
class EditState:
    """Текст и выделение поля в момент события."""

    text: str
    selection_start: int = 0
    selection_end: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.selection_start <= self.selection_end <= len(self.text):
            raise ValueError(
                f"invalid selection [{self.selection_start}, {self.selection_end}] "
                f"for text of length {len(self.text)}"
            )

    @classmethod
    def caret(cls, text: str, position: int | None = None) -> "EditState":
        """Курсор без выделения (по умолчанию — в конце текста)."""
        pos = len(text) if position is None else position
        return cls(text, pos, pos)

    @property
    def cursor(self) -> int:
        """Позиция курсора (конец выделения)."""
        return self.selection_end

    @property
    def has_selection(self) -> bool:
        return self.selection_start != self.selection_end

    @property
    def whole_selected(self) -> bool:
        """Выделено всё поле."""
        return self.selection_start == 0 and self.selection_end == len(self.text)

    @property
    def selected_text(self) -> str:
        return self.text[self.selection_start:self.selection_end]

    @property
    def has_minus(self) -> bool:
        return self.text.startswith(MINUS)

    def without_selection(self) -> "EditState":
        """Состояние после удаления выделенного фрагмента."""
        text = self.text[: self.selection_start] + self.text[self.selection_end:]
        return EditState.caret(text, self.selection_start)

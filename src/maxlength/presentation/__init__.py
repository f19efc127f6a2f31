"""Presentation — каноническое отображение и стиль числовых полей."""

from .formatter import (
    DEFAULT_HIGHLIGHT_COLOR,
    DEFAULT_HORIZONTAL_ALIGN,
    FieldStyle,
    PresentationFormatter,
    resolve_alignment,
    resolve_highlight_color,
)

__all__ = [
    "DEFAULT_HIGHLIGHT_COLOR",
    "DEFAULT_HORIZONTAL_ALIGN",
    "FieldStyle",
    "PresentationFormatter",
    "resolve_alignment",
    "resolve_highlight_color",
]

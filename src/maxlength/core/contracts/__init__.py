"""
Contract Validation Module

Модуль для валидации сырых атрибутов числовых полей.
"""

from .validators import (
    FIELD_ATTRIBUTES_SCHEMA,
    FieldAttributesValidator,
    SchemaLoader,
    get_field_attributes_validator,
    validate_field_attributes,
)

__all__ = [
    "FIELD_ATTRIBUTES_SCHEMA",
    # Classes
    "SchemaLoader",
    "FieldAttributesValidator",
    # Functions
    "get_field_attributes_validator",
    "validate_field_attributes",
]

"""
Field Attribute Contracts — проверка сырых атрибутов поля

Атрибуты поля (data-max-length, data-sum, data-ceil, ...) проверяются
JSON Schema контрактом до построения FieldConfig. Некорректный
дескриптор data-max-length НЕ является нарушением контракта: он молча
заменяется умолчанием при разборе LimitSpec. Контракт ловит только
ошибки типов и взаимоисключающие флаги.

Схемы поставляются в пакете (schema/ рядом с модулем):
- field_attributes.json
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping

import jsonschema
from jsonschema import Draft202012Validator, ValidationError

logger = logging.getLogger(__name__)

FIELD_ATTRIBUTES_SCHEMA = "field_attributes"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """Загрузчик и кэш JSON Schema контрактов пакета."""

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Args:
            schema_name: имя схемы без расширения ('field_attributes')

        Raises:
            FileNotFoundError: файла схемы нет в пакете
            ValueError: схема не проходит meta-validation
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        schema = json.loads(schema_path.read_text(encoding="utf-8"))

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_path.name}: {e.message}") from e

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# FIELD ATTRIBUTE VALIDATOR
# =============================================================================


class FieldAttributesValidator:
    """
    Валидатор атрибутов поля.

    Отображение атрибутов копируется в dict: хост может передать
    любой Mapping (например, DOMStringMap-подобный объект).
    """

    def __init__(self, loader: SchemaLoader | None = None):
        self.schema = (loader or _SCHEMA_LOADER).load_schema(FIELD_ATTRIBUTES_SCHEMA)
        self._validator = Draft202012Validator(self.schema)

    def validate(self, attributes: Mapping[str, Any]) -> None:
        """
        Raises:
            ValidationError: атрибуты нарушают контракт
        """
        self._validator.validate(dict(attributes))

    def is_valid(self, attributes: Mapping[str, Any]) -> bool:
        return self._validator.is_valid(dict(attributes))

    def iter_errors(self, attributes: Mapping[str, Any]) -> Iterator[ValidationError]:
        return self._validator.iter_errors(dict(attributes))

    def violations(self, attributes: Mapping[str, Any]) -> List[str]:
        """Все нарушения в виде 'атрибут: сообщение', по порядку атрибутов."""
        messages = []
        for error in sorted(self.iter_errors(attributes), key=lambda e: [str(p) for p in e.path]):
            where = "/".join(str(p) for p in error.path) or "<attributes>"
            messages.append(f"{where}: {error.message}")
        return messages


_FIELD_ATTRIBUTES_VALIDATOR: FieldAttributesValidator | None = None


def get_field_attributes_validator() -> FieldAttributesValidator:
    """Общий экземпляр валидатора (схема разбирается один раз)."""
    global _FIELD_ATTRIBUTES_VALIDATOR
    if _FIELD_ATTRIBUTES_VALIDATOR is None:
        _FIELD_ATTRIBUTES_VALIDATOR = FieldAttributesValidator()
    return _FIELD_ATTRIBUTES_VALIDATOR


def validate_field_attributes(attributes: Mapping[str, Any]) -> None:
    """
    Raises:
        ValidationError: атрибуты не соответствуют схеме
    """
    validator = get_field_attributes_validator()
    try:
        validator.validate(attributes)
    except ValidationError:
        logger.warning("Field attributes rejected: %s", "; ".join(validator.violations(attributes)))
        raise

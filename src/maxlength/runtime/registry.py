"""
Field Registry — реестр полей и кэш LimitSpec

Заменяет глобальные таблицы поле → LimitSpec явным объектом контекста.
LimitSpec разрешается лениво при первом обращении и сбрасывается
одной точкой входа (invalidate) при смене формата чисел.
"""

import logging
from typing import Final, Iterator

from maxlength.core.domain.field_config import FieldConfig
from maxlength.core.domain.limit_spec import DEFAULT_LIMIT_SPEC, LimitSpec
from maxlength.core.exceptions import UnknownFieldError

logger = logging.getLogger(__name__)

# Префикс идентификаторов для полей без собственного id
GENERATED_ID_PREFIX: Final[str] = "_max_length_no_"


class FieldRegistry:
    """Зарегистрированные поля и их разрешённые LimitSpec."""

    def __init__(self) -> None:
        self._configs: dict[str, FieldConfig] = {}
        self._specs: dict[str, LimitSpec] = {}
        self._counter = 0

    def __contains__(self, field_id: object) -> bool:
        return field_id in self._configs

    def __len__(self) -> int:
        return len(self._configs)

    def __iter__(self) -> Iterator[FieldConfig]:
        return iter(list(self._configs.values()))

    def generate_id(self) -> str:
        """Следующий свободный идентификатор вида "_max_length_no_N"."""
        while True:
            field_id = f"{GENERATED_ID_PREFIX}{self._counter}"
            self._counter += 1
            if field_id not in self._configs:
                return field_id

    def register(self, config: FieldConfig) -> None:
        """Регистрация (или перерегистрация) поля; кэш его LimitSpec сбрасывается."""
        if config.field_id in self._configs:
            logger.debug("Field %s re-registered", config.field_id)
        self._configs[config.field_id] = config
        self._specs.pop(config.field_id, None)

    def config(self, field_id: str) -> FieldConfig:
        try:
            return self._configs[field_id]
        except KeyError:
            raise UnknownFieldError(field_id) from None

    def config_or_default(self, field_id: str) -> FieldConfig:
        """Конфигурация поля; для незарегистрированного элемента — числовое поле по умолчанию."""
        config = self._configs.get(field_id)
        if config is None:
            return FieldConfig(field_id=field_id)
        return config

    def limit_spec(self, field_id: str) -> LimitSpec:
        """LimitSpec поля; незарегистрированное поле получает DEFAULT_LIMIT_SPEC."""
        spec = self._specs.get(field_id)
        if spec is not None:
            return spec
        config = self._configs.get(field_id)
        if config is None:
            return DEFAULT_LIMIT_SPEC
        spec = config.limit_spec
        self._specs[field_id] = spec
        return spec

    def invalidate(self) -> None:
        """Сбросить кэш LimitSpec всех полей."""
        self._specs.clear()

    def resolve_all(self) -> dict[str, LimitSpec]:
        """Разрешить LimitSpec всех зарегистрированных полей."""
        return {field_id: self.limit_spec(field_id) for field_id in self._configs}

    def field_ids(self) -> list[str]:
        return list(self._configs)

"""
JSON Schema Contract Validators

Модуль для валидации JSON данных согласно формальным JSON Schema контрактам.
Использует библиотеку jsonschema для проверки соответствия данных схемам.

Схемы (contracts/schema/):
- order.json — подписанный ордер
- signature.json — подпись (65-байтный hex или v/r/s)
- execution_request.json — submission executor (calls + order + signature)
- executor_config.json — конфигурация deployment
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator
from referencing import Registry, Resource
from referencing.jsonschema import DRAFT202012


SCHEMA_NAMES = ("order", "signature", "execution_request", "executor_config")


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Автоматически находит схемы в contracts/schema/ относительно корня проекта.
    Все схемы регистрируются в общем registry, чтобы межфайловые $ref
    (execution_request → order, signature) разрешались без сети.
    """

    def __init__(self):
        # Определяем корень проекта (4 уровня вверх от этого файла)
        self._schema_dir = Path(__file__).parent.parent.parent.parent / "contracts" / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}
        self._registry: Registry | None = None

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'order')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            json.JSONDecodeError: Если файл не является валидным JSON
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Валидируем саму схему (meta-validation)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema

    @property
    def registry(self) -> Registry:
        """Registry со всеми схемами проекта (по их $id)."""
        if self._registry is None:
            resources = []
            for name in SCHEMA_NAMES:
                schema = self.load_schema(name)
                resources.append(
                    (schema["$id"], Resource.from_contents(schema, default_specification=DRAFT202012))
                )
            self._registry = Registry().with_resources(resources)
        return self._registry


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        """
        Инициализация валидатора.

        Args:
            schema_name: Имя схемы для валидации
        """
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema, registry=_SCHEMA_LOADER.registry)

    def validate(self, data: Any) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Any) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Any):
        """
        Итератор по всем ошибкам валидации.

        Yields:
            ValidationError объекты для каждой найденной ошибки
        """
        return self.validator.iter_errors(data)


class OrderContractValidator(ContractValidator):
    def __init__(self):
        super().__init__("order")


class SignatureContractValidator(ContractValidator):
    def __init__(self):
        super().__init__("signature")


class ExecutionRequestValidator(ContractValidator):
    def __init__(self):
        super().__init__("execution_request")


class ExecutorConfigValidator(ContractValidator):
    def __init__(self):
        super().__init__("executor_config")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_order(data: Dict[str, Any]) -> None:
    """
    Валидация order данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    OrderContractValidator().validate(data)


def validate_signature(data: Any) -> None:
    SignatureContractValidator().validate(data)


def validate_execution_request(data: Dict[str, Any]) -> None:
    """
    Валидация submission executor.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    ExecutionRequestValidator().validate(data)


def validate_executor_config(data: Dict[str, Any]) -> None:
    ExecutorConfigValidator().validate(data)

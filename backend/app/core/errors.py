from __future__ import annotations

from typing import Any


class FleetError(Exception):
    """
    Базовая ошибка домена.

    Каждый подкласс привязан к одному классу исхода (плохой ввод / не найдено /
    внутренняя ошибка), status_code используется обработчиком в backend/main.py.
    """

    status_code: int = 500
    code: str = "FLEET_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict[str, Any]:
        return {
            "success": False,
            "error": self.message,
        }


class ValidationError(FleetError):
    """Некорректные координаты или форма входных данных."""

    status_code = 400
    code = "VALIDATION_ERROR"


class InvalidDataError(FleetError):
    """VehicleFactory.validate вернул False."""

    status_code = 400
    code = "INVALID_DATA"


class InvalidTypeError(FleetError):
    """Запрошен / отфильтрован неизвестный тип ТС."""

    status_code = 400
    code = "INVALID_TYPE"


class UnknownTypeError(FleetError):
    """Фабрика не нашла вариант под переданный type."""

    status_code = 400
    code = "UNKNOWN_TYPE"


class NotFoundError(FleetError):
    status_code = 404
    code = "NOT_FOUND"


class StorageError(FleetError):
    """
    Сбой хранилища. Исходное исключение сохраняется в __cause__
    (raise StorageError(...) from exc).
    """

    status_code = 500
    code = "STORAGE_ERROR"

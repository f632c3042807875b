"""
Custom exceptions for the rota validation engine
"""
from typing import Any


class RotaError(Exception):
    """Base exception for rota-engine errors"""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses"""
        return {
            "error": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class InvalidInterval(RotaError):
    """Exception raised when shift bounds cannot form a valid interval"""

    def __init__(
        self,
        message: str,
        day: int | None = None,
        in_time: int | None = None,
        out_time: int | None = None,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message, "INVALID_INTERVAL", details)
        self.day = day
        self.in_time = in_time
        self.out_time = out_time

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["interval_info"] = {
            "day": self.day,
            "in_time": self.in_time,
            "out_time": self.out_time
        }
        return result


class StorageUnavailable(RotaError):
    """Exception raised when the backing store cannot be reached"""

    def __init__(
        self,
        message: str = "Shift store unavailable",
        operation: str | None = None,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message, "STORAGE_UNAVAILABLE", details)
        self.operation = operation

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["storage_info"] = {
            "operation": self.operation
        }
        return result


class ConfigurationError(RotaError):
    """Exception raised when configuration is invalid"""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        actual_value: Any | None = None,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message, "CONFIGURATION_ERROR", details)
        self.config_key = config_key
        self.actual_value = actual_value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["config_info"] = {
            "key": self.config_key,
            "actual_value": self.actual_value
        }
        return result


# Ingestion errors are collected per shift; storage errors abort the pass
INGESTION_EXCEPTIONS = (
    InvalidInterval,
)

FATAL_EXCEPTIONS = (
    StorageUnavailable,
    ConfigurationError
)

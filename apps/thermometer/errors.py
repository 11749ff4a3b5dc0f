"""Ошибки домена и хранилища конфигурации кампании."""
from __future__ import annotations


class ThermometerError(Exception):
    code = "thermometer_error"

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.code)
        self.detail = detail or self.code


class ValidationError(ThermometerError):
    """Bad field value in admin input. Never retried."""

    code = "validation_error"

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class CsvValidationError(ValidationError):
    """CSV upload rejected at `row` (1-indexed, header excluded; 0 = header/file)."""

    code = "csv_validation_error"

    def __init__(self, row: int, column: str | None, reason: str) -> None:
        super().__init__(column or "file", reason)
        self.row = row
        self.column = column
        where = f"row {row}" if row else "header"
        if column:
            where = f"{where}, column '{column}'"
        self.detail = f"{where}: {reason}"
        self.args = (self.detail,)


class StorageError(ThermometerError):
    code = "storage_error"


class StorageUnavailable(StorageError):
    """Backend unreachable, timed out or refused auth. Caller may retry."""

    code = "storage_unavailable"

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


class DocumentDecodeError(StorageError):
    """Stored document exists but does not map onto CampaignConfig."""

    code = "storage_corrupt"

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason

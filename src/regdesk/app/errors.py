from __future__ import annotations


class RegDeskError(Exception):
    """Base class for errors raised by the record manager."""


class RecordValidationError(RegDeskError):
    """Raised when submitted form input cannot become a record."""

    def __init__(self, message: str, *, field: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.field = str(field or "").strip()


class ExportPreconditionError(RegDeskError):
    """Raised when an export is requested without rows or without fields."""


class DataStoreError(RegDeskError):
    """Raised when a collection file exists but cannot be decoded."""

    def __init__(self, file_name: str, detail: str) -> None:
        super().__init__(f"{file_name}: {detail}")
        self.file_name = file_name
        self.detail = detail

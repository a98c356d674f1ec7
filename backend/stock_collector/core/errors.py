"""
Domain-specific exception hierarchy for the stock collector.

All collector exceptions inherit from CollectorError so callers can
catch broadly or narrowly as needed.  Each exception carries structured
context (supplier folder, file name, etc.) for logging/debugging.

Validation rejections are NOT exceptions — they are first-class
pipeline outcomes (see ValidationOutcome).
"""

from __future__ import annotations


class CollectorError(Exception):
    """Base exception for all collector errors."""

    def __init__(
        self,
        message: str,
        *,
        supplier_folder: str | None = None,
        file_name: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.supplier_folder = supplier_folder
        self.file_name = file_name
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(CollectorError):
    """A required configuration value is missing or invalid."""

    def __init__(self, message: str, *, missing: list[str] | None = None, **kwargs) -> None:
        self.missing = missing or []
        super().__init__(message, **kwargs)


class RetryExhaustedError(CollectorError):
    """A retried network request failed on every attempt."""

    def __init__(
        self,
        message: str,
        *,
        attempts: int = 0,
        last_error: BaseException | None = None,
        status_code: int | None = None,
        **kwargs,
    ) -> None:
        self.attempts = attempts
        self.last_error = last_error
        self.status_code = status_code
        super().__init__(message, **kwargs)


class SupplierNotFoundError(CollectorError):
    """No supplier document exists for the given supplier id."""

    def __init__(self, supplier_id: str, **kwargs) -> None:
        self.supplier_id = supplier_id
        super().__init__(f"No such document: {supplier_id}", **kwargs)


class SupplierLookupError(CollectorError):
    """The supplier metadata or token endpoint answered with an unusable response."""

    def __init__(self, message: str, *, status_code: int | None = None, **kwargs) -> None:
        self.status_code = status_code
        super().__init__(message, **kwargs)


class WriteExhaustedError(CollectorError):
    """Copying a file into the storage sink failed on every attempt."""

    def __init__(self, file_path: str, *, attempts: int = 0, **kwargs) -> None:
        self.file_path = file_path
        self.attempts = attempts
        super().__init__(f"Error writing file to storage: {file_path}.", **kwargs)


class InvalidSupplierFolderError(CollectorError):
    """The folder name matches neither the supplier nor the internal convention."""

    def __init__(self, supplier_folder: str, **kwargs) -> None:
        super().__init__(
            f"Invalid supplierFolder: {supplier_folder}",
            supplier_folder=supplier_folder,
            **kwargs,
        )


class EndpointError(CollectorError):
    """A remote SFTP endpoint operation failed."""
    pass

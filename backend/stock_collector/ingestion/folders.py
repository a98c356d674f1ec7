"""
Supplier folder conventions on the inbox.

    <6 digits>          a supplier's own SFTP folder; the folder IS the supplier id
    internal exceptions  upload folders shared by many suppliers; the supplier
                         id is taken from the file name instead
    ignored folders      belong to the other stage and are never touched

Which folders are internal / ignored depends on the environment.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from stock_collector.core.config import Settings
from stock_collector.core.constants import SUPPLIER_NUMBER_LENGTH, InboundMethod
from stock_collector.core.errors import InvalidSupplierFolderError
from stock_collector.validation.file_name import extract_supplier_id

DIGIT_PATTERN = re.compile(r"\d+")
SUPPLIER_FOLDER_PATTERN = re.compile(r"\d+")


@dataclass(frozen=True)
class FolderPolicy:
    internal_folder_exceptions: list[str] = field(default_factory=list)
    ignored_folders: list[str] = field(default_factory=list)
    production: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> FolderPolicy:
        return cls(
            internal_folder_exceptions=settings.internal_folder_exceptions,
            ignored_folders=settings.ignored_folders,
            production=settings.is_production,
        )

    def is_listed(self, folder_name: str) -> bool:
        """Supplier folders (anything with digits) are only visible in prod."""
        return self.production or DIGIT_PATTERN.search(folder_name) is None

    def is_ignored(self, folder_name: str) -> bool:
        return folder_name in self.ignored_folders

    def get_supplier_id(self, file_name: str, supplier_folder: str) -> str:
        """Supplier id for a file: from the name in internal folders, else the folder."""
        if supplier_folder in self.internal_folder_exceptions:
            extracted = extract_supplier_id(file_name)
            if extracted:
                return extracted
        return supplier_folder

    def get_inbound_method(self, supplier_folder: str) -> InboundMethod:
        if (
            SUPPLIER_FOLDER_PATTERN.fullmatch(supplier_folder)
            and len(supplier_folder) == SUPPLIER_NUMBER_LENGTH
        ):
            return InboundMethod.SFTP
        if supplier_folder in self.internal_folder_exceptions:
            return InboundMethod.UPLOAD
        raise InvalidSupplierFolderError(supplier_folder)

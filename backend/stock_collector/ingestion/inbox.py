"""
SftpInbox — folder/file level view over the endpoint client.

Translates (supplier folder, file name) pairs into remote paths:

    <base_path><supplier_folder>/data/<file_name>
"""

from __future__ import annotations

from typing import BinaryIO

from stock_collector.core.logging import get_logger
from stock_collector.ingestion.folders import FolderPolicy
from stock_collector.ingestion.sftp_client import EndpointClient, RemoteStat

logger = get_logger(__name__)


class SftpInbox:
    """Supplier-folder operations used by the pipeline and the orchestrator."""

    def __init__(self, client: EndpointClient, base_path: str, policy: FolderPolicy) -> None:
        self.client = client
        self.base_path = base_path if base_path.endswith("/") else f"{base_path}/"
        self.policy = policy

    def folder_path(self, supplier_folder: str) -> str:
        return f"{self.base_path}{supplier_folder}/data"

    def file_path(self, supplier_folder: str, file_name: str) -> str:
        return f"{self.folder_path(supplier_folder)}/{file_name}"

    async def list_supplier_folders(self) -> list[str]:
        entries = await self.client.list(self.base_path)
        return [entry.name for entry in entries if self.policy.is_listed(entry.name)]

    async def list_files(self, supplier_folder: str) -> list[str]:
        entries = await self.client.list(self.folder_path(supplier_folder))
        return [entry.name for entry in entries]

    async def stat_file(self, supplier_folder: str, file_name: str) -> RemoteStat:
        return await self.client.stat(self.file_path(supplier_folder, file_name))

    async def download(self, supplier_folder: str, file_name: str, sink: BinaryIO) -> None:
        await self.client.get(self.file_path(supplier_folder, file_name), sink)

    async def delete_file(
        self,
        supplier_folder: str,
        file_name: str,
        ignore_missing: bool = False,
    ) -> str:
        logger.info("Deleting file", supplier_folder=supplier_folder, file_name=file_name)
        return await self.client.delete(
            self.file_path(supplier_folder, file_name),
            ignore_missing,
        )

    async def rename_file(self, supplier_folder: str, old_name: str, new_name: str) -> None:
        logger.info(
            "Renaming file",
            supplier_folder=supplier_folder,
            file_name=old_name,
            new_name=new_name,
        )
        await self.client.rename(
            self.file_path(supplier_folder, old_name),
            self.file_path(supplier_folder, new_name),
        )

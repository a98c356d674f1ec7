"""
IngestWriter — copies an accepted file from the inbox into object storage.

Destination:
    bucket  csv → INBOUND_CSV_BUCKET_NAME, anything else → INBOUND_XLSX_BUCKET_NAME
    key     <supplier_id>/<file stem>_<transmission_id>.<ext>

The copy is attempted a bounded number of times.  The attempt counter is
local to copy_to_sink(), so one writer instance is safe to reuse for
every file of a batch.
"""

from __future__ import annotations

from dataclasses import dataclass

from stock_collector.core.errors import WriteExhaustedError
from stock_collector.core.logging import get_logger
from stock_collector.ingestion.inbox import SftpInbox
from stock_collector.ingestion.storage import DurableSink
from stock_collector.notifications.alerts import AlertChannel
from stock_collector.validation.file_name import get_inbound_channel

logger = get_logger(__name__)

DEFAULT_WRITE_ATTEMPTS = 3
CSV_EXTENSION = "csv"


@dataclass(frozen=True)
class BucketFileInfo:
    file_path: str              # remote source path
    bucket_file_path: str       # object key
    bucket: str


class IngestWriter:
    """Copies files from the SFTP inbox to the durable sink."""

    def __init__(
        self,
        inbox: SftpInbox,
        sink: DurableSink,
        alerts: AlertChannel,
        *,
        csv_bucket: str,
        xlsx_bucket: str,
        uri_scheme: str = "s3",
        max_attempts: int = DEFAULT_WRITE_ATTEMPTS,
    ) -> None:
        self._inbox = inbox
        self._sink = sink
        self._alerts = alerts
        self._csv_bucket = csv_bucket
        self._xlsx_bucket = xlsx_bucket
        self._uri_scheme = uri_scheme
        self._max_attempts = max_attempts

    def choose_bucket(self, file_name: str) -> str:
        if get_inbound_channel(file_name) == CSV_EXTENSION:
            return self._csv_bucket
        return self._xlsx_bucket

    @staticmethod
    def get_file_path(file_name: str, supplier_id: str, transmission_id: int) -> str:
        stem, _, extension = file_name.rpartition(".")
        return f"{supplier_id}/{stem}_{transmission_id}.{extension.lower()}"

    async def copy_to_sink(
        self,
        supplier_folder: str,
        file_name: str,
        transmission_id: int,
    ) -> str:
        """Copy one file and return its `scheme://bucket/key` URI."""
        supplier_id = self._inbox.policy.get_supplier_id(file_name, supplier_folder)
        file_info = BucketFileInfo(
            file_path=self._inbox.file_path(supplier_folder, file_name),
            bucket_file_path=self.get_file_path(file_name, supplier_id, transmission_id),
            bucket=self.choose_bucket(file_name),
        )

        for attempt in range(1, self._max_attempts + 1):
            writer = self._sink.write(file_info.bucket_file_path, file_info.bucket)
            try:
                await self._inbox.download(supplier_folder, file_name, writer)
                await writer.commit()
            except Exception as exc:
                logger.error(
                    "Writing file to bucket failed",
                    supplier_folder=supplier_folder,
                    file_name=file_name,
                    attempt=attempt,
                    max_attempts=self._max_attempts,
                    error=str(exc),
                )
                continue
            finally:
                writer.close()

            logger.info(
                "File copied to bucket",
                supplier_folder=supplier_folder,
                file_name=file_name,
                bucket=file_info.bucket,
                key=file_info.bucket_file_path,
                attempt=attempt,
            )
            return f"{self._uri_scheme}://{file_info.bucket}/{file_info.bucket_file_path}"

        await self._alerts.alert(
            f"Error writing file name {file_name} to folder {supplier_folder}",
            "An error has occurred while writing file",
            [
                ("Supplier", supplier_id),
                ("File Name", file_name),
                ("Folder Name", supplier_folder),
            ],
        )
        raise WriteExhaustedError(
            file_info.file_path,
            attempts=self._max_attempts,
            supplier_folder=supplier_folder,
            file_name=file_name,
        )

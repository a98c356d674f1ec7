"""
BatchOrchestrator — one collection run over every supplier folder.

Flow:
    setup        connect to the endpoint, load the authorization set
    folders      listed, ignored ones dropped, processed concurrently
    files        processed one after another within a folder:
                     validate → log INITIATED → copy → log SUCCESS → delete source
                 followed by the stale-file sweep, whatever the outcome
    teardown     close endpoint, database and HTTP resources

A failing file never stops its siblings; a failing folder never stops
the other folders.  Both are logged and counted in the BatchReport.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Callable

import httpx

from stock_collector.clients.documents import FirestoreSupplierDocuments
from stock_collector.clients.retry_fetch import RetryableCaller
from stock_collector.clients.supplier_directory import SupplierDirectory
from stock_collector.core.config import REQUIRED_FOR_COLLECTION, Settings
from stock_collector.core.constants import NOT_AVAILABLE_PATH, TransmissionStatus
from stock_collector.core.errors import EndpointError, WriteExhaustedError
from stock_collector.core.logging import get_logger
from stock_collector.db.session import create_engine, create_session_factory
from stock_collector.ingestion.folders import FolderPolicy
from stock_collector.ingestion.inbox import SftpInbox
from stock_collector.ingestion.sftp_client import ParamikoEndpointClient, RemoteFileNotFoundError
from stock_collector.ingestion.storage import S3Sink
from stock_collector.ingestion.writer import IngestWriter
from stock_collector.notifications.alerts import TeamsAlerter
from stock_collector.notifications.publisher import PubSubMailPublisher
from stock_collector.pipeline.engine import ValidationPipeline
from stock_collector.repositories.log_store import LogStore, PostgresLogStore
from stock_collector.repositories.transmissions import TransmissionRecord
from stock_collector.validation.file_name import get_inbound_channel

logger = get_logger(__name__)


@dataclass
class BatchReport:
    """Counters for one run; returned by run() and the Celery task."""

    folders: int = 0
    failed_folders: int = 0
    files: int = 0
    accepted: int = 0
    rejected: int = 0
    ingested: int = 0
    failed_writes: int = 0
    failed_files: int = 0
    stale_deleted: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


class BatchOrchestrator:
    def __init__(
        self,
        inbox: SftpInbox,
        pipeline: ValidationPipeline,
        writer: IngestWriter,
        log_store: LogStore,
        *,
        maximum_age_seconds: float,
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.inbox = inbox
        self.pipeline = pipeline
        self.writer = writer
        self.log_store = log_store
        self.maximum_age_seconds = maximum_age_seconds
        self._http_client = http_client
        self._clock = clock

    # ── Lifecycle ─────────────────────────────

    async def setup(self) -> None:
        try:
            await self.inbox.client.connect()
        except EndpointError as exc:
            logger.error("SFTP connection failed", error=str(exc))
        await self.log_store.load_supplier_states()

    async def teardown(self) -> None:
        try:
            await self.inbox.client.end()
        finally:
            try:
                await self.log_store.teardown()
            finally:
                if self._http_client is not None:
                    await self._http_client.aclose()

    async def run(self) -> BatchReport:
        """Run one complete collection over the inbox."""
        report = BatchReport()
        started = self._clock()
        try:
            await self.setup()
            folders = [
                folder
                for folder in await self.inbox.list_supplier_folders()
                if not self.inbox.policy.is_ignored(folder)
            ]
            report.folders = len(folders)
            logger.info("Collection started", folders=len(folders))

            results = await asyncio.gather(
                *(self.process_folder(folder, report) for folder in folders),
                return_exceptions=True,
            )
            for folder, result in zip(folders, results):
                if isinstance(result, BaseException):
                    report.failed_folders += 1
                    logger.error(
                        "Processing supplier folder failed",
                        supplier_folder=folder,
                        error=str(result),
                        error_type=type(result).__name__,
                    )
        finally:
            await self.teardown()

        logger.info(
            "Collection finished",
            duration_ms=int((self._clock() - started) * 1000),
            **report.to_dict(),
        )
        return report

    # ── Per folder / per file ─────────────────

    async def process_folder(self, supplier_folder: str, report: BatchReport) -> None:
        file_names = await self.inbox.list_files(supplier_folder)
        logger.debug("Supplier folder listed", supplier_folder=supplier_folder, files=len(file_names))

        for file_name in file_names:
            report.files += 1
            try:
                await self.handle_file(supplier_folder, file_name, report)
            except Exception as exc:
                report.failed_files += 1
                logger.error(
                    "Handling file failed",
                    supplier_folder=supplier_folder,
                    file_name=file_name,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )

            try:
                if await self.delete_outdated_file(supplier_folder, file_name):
                    report.stale_deleted += 1
            except Exception as exc:
                logger.error(
                    "Deleting outdated file failed",
                    supplier_folder=supplier_folder,
                    file_name=file_name,
                    error=str(exc),
                )

    async def handle_file(
        self,
        supplier_folder: str,
        file_name: str,
        report: BatchReport | None = None,
    ) -> None:
        report = report or BatchReport()
        supplier_id = self.inbox.policy.get_supplier_id(file_name, supplier_folder)

        outcome = await self.pipeline.validate(supplier_folder, file_name, supplier_id)
        if not outcome.accepted:
            report.rejected += 1
            return
        report.accepted += 1

        transmission_id = await self.log_store.add_transmission(
            TransmissionRecord(
                transmission_timestamp=datetime.now(timezone.utc),
                supplier_number=supplier_id,
                status=TransmissionStatus.INITIATED,
                inbound_channel=get_inbound_channel(file_name),
                inbound_method=self.inbox.policy.get_inbound_method(supplier_folder),
            )
        )

        try:
            storage_uri = await self.writer.copy_to_sink(supplier_folder, file_name, transmission_id)
        except WriteExhaustedError as exc:
            report.failed_writes += 1
            logger.error(
                str(exc),
                supplier_folder=supplier_folder,
                file_name=file_name,
                transmission_id=transmission_id,
            )
            await self.log_store.update_transmission(
                transmission_id, TransmissionStatus.FAILED, NOT_AVAILABLE_PATH
            )
            return

        await self.log_store.update_transmission(
            transmission_id, TransmissionStatus.SUCCESS, storage_uri
        )
        deletion_result = await self.inbox.delete_file(supplier_folder, file_name)
        report.ingested += 1
        logger.info(
            deletion_result,
            supplier_folder=supplier_folder,
            file_name=file_name,
            transmission_id=transmission_id,
            storage_uri=storage_uri,
        )

    async def delete_outdated_file(self, supplier_folder: str, file_name: str) -> bool:
        """Delete the file if it is older than the maximum age. Returns True if deleted."""
        try:
            stat = await self.inbox.stat_file(supplier_folder, file_name)
        except RemoteFileNotFoundError:
            logger.debug(
                "File no longer on the endpoint, skipping age sweep",
                supplier_folder=supplier_folder,
                file_name=file_name,
            )
            return False

        if self._clock() - stat.modify_time < self.maximum_age_seconds:
            return False

        logger.info(
            "File is older than the maximum age and is being deleted",
            supplier_folder=supplier_folder,
            file_name=file_name,
        )
        await self.inbox.delete_file(supplier_folder, file_name)
        return True


# ═══════════════════════════════════════════════════════════
#  Factory
# ═══════════════════════════════════════════════════════════

def build_orchestrator(settings: Settings, **overrides: Any) -> BatchOrchestrator:
    """
    Wire the production collaborators from settings.

    Raises ConfigurationError before any I/O if a required value is missing.
    Keyword overrides replace individual collaborators (inbox, sink,
    log_store, publisher, documents, http_client).
    """
    settings.require(*REQUIRED_FOR_COLLECTION)

    http_client = overrides.get("http_client") or httpx.AsyncClient()
    policy = FolderPolicy.from_settings(settings)
    inbox = overrides.get("inbox") or SftpInbox(
        ParamikoEndpointClient(
            settings.SFTP_HOST,
            settings.SFTP_PORT,
            settings.SFTP_USER_NAME,
            settings.SFTP_PASSWORD,
        ),
        settings.SFTP_BASE_PATH,
        policy,
    )

    log_store = overrides.get("log_store")
    if log_store is None:
        engine = create_engine(settings)
        log_store = PostgresLogStore(create_session_factory(engine), engine)

    caller = RetryableCaller(
        http_client,
        attempts=settings.HTTP_RETRY_ATTEMPTS,
        delay=settings.HTTP_RETRY_DELAY_SECONDS,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    directory = SupplierDirectory(
        caller,
        overrides.get("documents") or FirestoreSupplierDocuments(
            settings.FIRESTORE_PROJECT_ID,
            settings.FIRESTORE_SUPPLIER_COLLECTION,
        ),
        oauth_url=settings.OAUTH_URL,
        oauth_username=settings.OAUTH_USERNAME,
        oauth_password=settings.OAUTH_PASSWORD,
        masterdata_url=settings.SUPPLIER_MASTERDATA_SERVICE_URL,
        default_mailbox=settings.DEFAULT_SUPPLIER_MAILBOX,
    )
    publisher = overrides.get("publisher") or PubSubMailPublisher(
        settings.GENERAL_PROJECT_ID,
        settings.MAIL_SENDER_TOPIC,
    )
    alerts = TeamsAlerter(
        http_client,
        webhook_url=settings.TEAMS_WEBHOOK_URL,
        project=settings.PROJECT_ID,
    )
    sink = overrides.get("sink") or S3Sink(
        settings.STORAGE_ENDPOINT,
        settings.STORAGE_ACCESS_KEY,
        settings.STORAGE_SECRET_KEY,
        settings.STORAGE_REGION,
    )

    return BatchOrchestrator(
        inbox,
        ValidationPipeline.build(settings, inbox, directory, publisher, alerts, log_store),
        IngestWriter(
            inbox,
            sink,
            alerts,
            csv_bucket=settings.INBOUND_CSV_BUCKET_NAME,
            xlsx_bucket=settings.INBOUND_XLSX_BUCKET_NAME,
            uri_scheme=settings.STORAGE_URI_SCHEME,
            max_attempts=settings.BUCKET_WRITE_ATTEMPTS,
        ),
        log_store,
        maximum_age_seconds=settings.MAXIMUM_FILE_AGE_SECONDS,
        http_client=http_client,
    )

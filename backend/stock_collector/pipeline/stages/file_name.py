"""
Name gate — enforce the stock file naming scheme.

A rejected file is renamed with the ERROR_ prefix so the next run does
not mail the supplier again.  Files that already carry a rejection
prefix are rejected silently.
"""

from __future__ import annotations

from stock_collector.core.constants import (
    ERROR_PREFIX,
    REJECTION_PREFIXES,
    MailSubject,
    RejectionReason,
    SideEffect,
    ValidationState,
)
from stock_collector.core.logging import get_logger
from stock_collector.ingestion.inbox import SftpInbox
from stock_collector.notifications.alerts import AlertChannel
from stock_collector.pipeline.context import CandidateFile, StageResult
from stock_collector.pipeline.notifier import SupplierNotifier
from stock_collector.pipeline.stage import ValidationStage
from stock_collector.validation.file_name import parse_file_name

logger = get_logger(__name__)

NAME_SCHEMA_MESSAGE = (
    "Der Dateiname {file_name} bei der Ablage auf dem SFTP-Server entspricht nicht "
    "dem erwarteten Schema: stock_{{supplierID}}_{{country}}_{{dateTime}}.{{ending}}"
)
TIMESTAMP_MESSAGE = (
    " Die Zeitangabe {timestamp} ist ungültig. Die Eingabe muss ein gültiges Datum "
    "im Format YYYYMMDDHHMMSS beinhalten. Bitte prüfen Sie die Angaben."
)


class FileNameGate(ValidationStage):
    name = "file_name"
    description = "Validate file name and timestamp"
    accepted_state = ValidationState.NAME_OK

    def __init__(
        self,
        inbox: SftpInbox,
        notifier: SupplierNotifier,
        alerts: AlertChannel,
    ) -> None:
        super().__init__(inbox)
        self.notifier = notifier
        self.alerts = alerts

    async def evaluate(self, candidate: CandidateFile) -> StageResult:
        file_name = candidate.file_name
        parsed = parse_file_name(file_name)
        candidate.parsed = parsed

        if parsed is not None and parsed.timestamp_valid:
            return self._accept({"timestamp": parsed.timestamp})

        if file_name.startswith(REJECTION_PREFIXES):
            return self._reject(RejectionReason.ALREADY_REJECTED)

        # Grammar matched, so only the timestamp is wrong
        invalid_timestamp = parsed is not None

        if invalid_timestamp:
            sent = await self.alerts.alert(
                f"Invalid file name {file_name} in folder {candidate.supplier_folder}",
                "Invalid file name on DGE",
                [("File Name", file_name), ("Folder Name", candidate.supplier_folder)],
            )
            if sent:
                candidate.record(SideEffect.ALERTED)

        await self.inbox.rename_file(
            candidate.supplier_folder, file_name, f"{ERROR_PREFIX}{file_name}"
        )
        candidate.record(SideEffect.RENAMED)

        message = NAME_SCHEMA_MESSAGE.format(file_name=file_name)
        if invalid_timestamp:
            message += TIMESTAMP_MESSAGE.format(timestamp=parsed.timestamp)

        logger.info(
            "Invalid file name",
            supplier_folder=candidate.supplier_folder,
            file_name=file_name,
            invalid_timestamp=invalid_timestamp,
        )
        await self.notifier.notify(candidate, MailSubject.FILE_NAME, message)
        candidate.record(SideEffect.NOTIFIED)

        reason = (
            RejectionReason.INVALID_TIMESTAMP
            if invalid_timestamp
            else RejectionReason.INVALID_FILE_NAME
        )
        return self._reject(reason)

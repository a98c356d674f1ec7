"""
Size gate — empty files are deleted and reported to the supplier.
"""

from __future__ import annotations

from stock_collector.core.constants import (
    EMPTY_FILE_SIZE,
    MailSubject,
    RejectionReason,
    SideEffect,
    ValidationState,
)
from stock_collector.core.logging import get_logger
from stock_collector.ingestion.inbox import SftpInbox
from stock_collector.pipeline.context import CandidateFile, StageResult
from stock_collector.pipeline.notifier import SupplierNotifier
from stock_collector.pipeline.stage import ValidationStage

logger = get_logger(__name__)

EMPTY_FILE_MESSAGE = "Die Datei {file_name} hat eine Dateigröße von Null"


class FileSizeGate(ValidationStage):
    name = "file_size"
    description = "Reject empty files"
    accepted_state = ValidationState.SIZE_OK

    def __init__(self, inbox: SftpInbox, notifier: SupplierNotifier) -> None:
        super().__init__(inbox)
        self.notifier = notifier

    async def evaluate(self, candidate: CandidateFile) -> StageResult:
        stat = await self._stat(candidate)
        if stat.size != EMPTY_FILE_SIZE:
            return self._accept({"size": stat.size})

        logger.info(
            "File has a file size of zero",
            supplier_folder=candidate.supplier_folder,
            file_name=candidate.file_name,
        )
        await self.inbox.delete_file(
            candidate.supplier_folder, candidate.file_name, ignore_missing=True
        )
        candidate.record(SideEffect.DELETED)

        await self.notifier.notify(
            candidate,
            MailSubject.FILE_SIZE,
            EMPTY_FILE_MESSAGE.format(file_name=candidate.file_name),
        )
        candidate.record(SideEffect.NOTIFIED)
        return self._reject(RejectionReason.EMPTY_FILE, {"size": stat.size})

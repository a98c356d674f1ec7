"""
Authorization gate — is this supplier allowed to send this file?

    supplier id missing from the name   → ERROR_ rename, mail to the default mailbox
    (supplier, country, channel) known  → accept if authorized
    otherwise                           → UNAUTHORIZED_ rename, mail to the supplier
"""

from __future__ import annotations

from stock_collector.core.constants import (
    ERROR_PREFIX,
    UNAUTHORIZED_PREFIX,
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
from stock_collector.repositories.log_store import LogStore
from stock_collector.validation.file_name import get_country, get_inbound_channel

logger = get_logger(__name__)

UNEXPECTED_SUPPLIER_MESSAGE = "Unerwartete Lieferanten-ID in {file_name}, erwartet: {supplier_id}"
UNAUTHORIZED_MESSAGE = "Der Lieferant {supplier_id} ist nicht berechtigt, die Datei {file_name} zu senden"


class SupplierAuthorizationGate(ValidationStage):
    name = "supplier_authorization"
    description = "Check supplier authorization"
    accepted_state = ValidationState.AUTHORIZED

    def __init__(
        self,
        inbox: SftpInbox,
        notifier: SupplierNotifier,
        log_store: LogStore,
        *,
        default_mailbox: str,
    ) -> None:
        super().__init__(inbox)
        self.notifier = notifier
        self.log_store = log_store
        self.default_mailbox = default_mailbox

    async def evaluate(self, candidate: CandidateFile) -> StageResult:
        file_name = candidate.file_name
        supplier_id = candidate.supplier_id
        log = logger.bind(
            supplier_folder=candidate.supplier_folder,
            file_name=file_name,
            supplier_id=supplier_id,
        )

        if supplier_id not in file_name:
            log.warning("Unexpected supplier id in file name")
            await self._rename(candidate, ERROR_PREFIX)
            await self.notifier.notify(
                candidate,
                MailSubject.SUPPLIER_ID,
                UNEXPECTED_SUPPLIER_MESSAGE.format(file_name=file_name, supplier_id=supplier_id),
                recipient=self.default_mailbox,
            )
            candidate.record(SideEffect.NOTIFIED)
            return self._reject(RejectionReason.UNEXPECTED_SUPPLIER_ID)

        country = get_country(file_name)
        inbound_channel = get_inbound_channel(file_name)
        if await self.log_store.is_supplier_authorized(supplier_id, country, inbound_channel):
            return self._accept({"country": country, "inbound_channel": inbound_channel})

        log.info("Supplier is not authorized", country=country, inbound_channel=inbound_channel)
        await self._rename(candidate, UNAUTHORIZED_PREFIX)
        await self.notifier.notify(
            candidate,
            MailSubject.AUTHORIZATION,
            UNAUTHORIZED_MESSAGE.format(supplier_id=supplier_id, file_name=file_name),
        )
        candidate.record(SideEffect.NOTIFIED)
        return self._reject(
            RejectionReason.SUPPLIER_NOT_AUTHORIZED,
            {"country": country, "inbound_channel": inbound_channel},
        )

    async def _rename(self, candidate: CandidateFile, prefix: str) -> None:
        await self.inbox.rename_file(
            candidate.supplier_folder,
            candidate.file_name,
            f"{prefix}{candidate.file_name}",
        )
        candidate.record(SideEffect.RENAMED)

"""
ValidationPipeline — runs the gates of one file in order.

    PENDING → AGE_OK → NAME_OK → SIZE_OK → AUTHORIZED
                 ╲        ╲         ╲          ╲
                  └────────┴─────────┴──────────┴──→ REJECTED(reason)

The first rejection stops the run, so a renamed or deleted file is never
seen by a later gate.  Rejections are outcomes, not exceptions; an
exception raised by a collaborator (e.g. the supplier lookup) propagates
to the caller.
"""

from __future__ import annotations

from stock_collector.clients.supplier_directory import SupplierDirectory
from stock_collector.core.config import Settings
from stock_collector.core.constants import ValidationState
from stock_collector.core.logging import get_logger
from stock_collector.ingestion.inbox import SftpInbox
from stock_collector.notifications.alerts import AlertChannel
from stock_collector.notifications.publisher import NotificationPublisher
from stock_collector.pipeline.context import CandidateFile, StageResult, ValidationOutcome
from stock_collector.pipeline.notifier import SupplierNotifier
from stock_collector.pipeline.stage import ValidationStage
from stock_collector.pipeline.stages.age import FileAgeGate
from stock_collector.pipeline.stages.file_name import FileNameGate
from stock_collector.pipeline.stages.file_size import FileSizeGate
from stock_collector.pipeline.stages.supplier import SupplierAuthorizationGate
from stock_collector.repositories.log_store import LogStore

logger = get_logger(__name__)


class ValidationPipeline:
    """
    Runs a sequence of ValidationStage objects against a CandidateFile.

    Usage::

        pipeline = ValidationPipeline.build(settings, inbox, ...)
        outcome = await pipeline.validate("123456", "stock_123456_DE_20220330150345.csv", "123456")
    """

    def __init__(self, stages: list[ValidationStage]) -> None:
        self.stages = stages

    @classmethod
    def build(
        cls,
        settings: Settings,
        inbox: SftpInbox,
        directory: SupplierDirectory,
        publisher: NotificationPublisher,
        alerts: AlertChannel,
        log_store: LogStore,
    ) -> ValidationPipeline:
        """Standard gate sequence wired from settings."""
        notifier = SupplierNotifier(
            directory,
            publisher,
            project=settings.NOTIFICATION_PROJECT,
        )
        return cls([
            FileAgeGate(
                inbox,
                minimum_age_seconds=settings.MINIMUM_FILE_AGE_SECONDS,
                skip=settings.skip_age_check,
            ),
            FileNameGate(inbox, notifier, alerts),
            FileSizeGate(inbox, notifier),
            SupplierAuthorizationGate(
                inbox,
                notifier,
                log_store,
                default_mailbox=settings.DEFAULT_SUPPLIER_MAILBOX,
            ),
        ])

    async def validate(
        self,
        supplier_folder: str,
        file_name: str,
        supplier_id: str,
    ) -> ValidationOutcome:
        candidate = CandidateFile(
            supplier_folder=supplier_folder,
            file_name=file_name,
            supplier_id=supplier_id,
        )
        return await self.run(candidate)

    async def run(self, candidate: CandidateFile) -> ValidationOutcome:
        log = logger.bind(
            supplier_folder=candidate.supplier_folder,
            file_name=candidate.file_name,
        )

        for stage in self.stages:
            if await stage.should_skip(candidate):
                candidate.stage_results.append(
                    StageResult(
                        stage_name=stage.name,
                        accepted=True,
                        state=stage.accepted_state,
                        skipped=True,
                    )
                )
                candidate.state = stage.accepted_state
                log.debug("Stage skipped", stage_name=stage.name)
                continue

            result = await stage.evaluate(candidate)
            candidate.stage_results.append(result)
            candidate.state = result.state

            if not result.accepted:
                candidate.reason = result.reason
                log.info(
                    "File rejected",
                    stage_name=stage.name,
                    reason=str(result.reason),
                    side_effects=[str(effect) for effect in candidate.side_effects],
                )
                break

        outcome = ValidationOutcome.from_candidate(candidate)
        if outcome.accepted:
            log.info("File accepted", supplier_id=candidate.supplier_id)
        elif candidate.state != ValidationState.REJECTED:
            # An empty or partial stage list never reaches AUTHORIZED
            log.warning("Validation ended without a decision", state=str(candidate.state))
        return outcome

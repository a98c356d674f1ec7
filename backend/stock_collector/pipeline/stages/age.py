"""
Age gate — leave files alone while the supplier may still be uploading.
"""

from __future__ import annotations

import time
from typing import Callable

from stock_collector.core.constants import RejectionReason, ValidationState
from stock_collector.core.logging import get_logger
from stock_collector.ingestion.inbox import SftpInbox
from stock_collector.pipeline.context import CandidateFile, StageResult
from stock_collector.pipeline.stage import ValidationStage

logger = get_logger(__name__)


class FileAgeGate(ValidationStage):
    """Reject files modified within the last `minimum_age_seconds`."""

    name = "file_age"
    description = "Check minimum file age"
    accepted_state = ValidationState.AGE_OK

    def __init__(
        self,
        inbox: SftpInbox,
        *,
        minimum_age_seconds: float = 30,
        skip: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(inbox)
        self.minimum_age_seconds = minimum_age_seconds
        self.skip = skip
        self._clock = clock

    async def should_skip(self, candidate: CandidateFile) -> bool:
        return self.skip

    async def evaluate(self, candidate: CandidateFile) -> StageResult:
        stat = await self._stat(candidate)
        age = self._clock() - stat.modify_time
        if age <= self.minimum_age_seconds:
            logger.info(
                "File is too new",
                supplier_folder=candidate.supplier_folder,
                file_name=candidate.file_name,
                age_seconds=round(age, 3),
            )
            return self._reject(RejectionReason.FILE_TOO_NEW, {"age_seconds": age})
        return self._accept({"age_seconds": age})

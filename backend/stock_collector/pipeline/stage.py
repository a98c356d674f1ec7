"""
ValidationStage — abstract base class for the validation gates.

A stage either advances the candidate to its accepted_state or rejects
it with a RejectionReason.  Side effects (rename, delete, notify, alert)
happen inside evaluate() and are recorded on the candidate.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from stock_collector.core.constants import RejectionReason, ValidationState
from stock_collector.ingestion.inbox import SftpInbox
from stock_collector.ingestion.sftp_client import RemoteStat
from stock_collector.pipeline.context import CandidateFile, StageResult


class ValidationStage(ABC):
    """
    Base class for every validation gate.

    Subclasses MUST implement:
        - name (str)              — unique identifier, e.g. "file_age"
        - description (str)       — human-readable label for logs
        - accepted_state          — state reached when the stage passes
        - evaluate(candidate)     — the gate itself

    Subclasses MAY implement:
        - should_skip(candidate)  — a skipped stage counts as passed
    """

    name: str = "unnamed_stage"
    description: str = "No description"
    accepted_state: ValidationState = ValidationState.PENDING

    def __init__(self, inbox: SftpInbox) -> None:
        self.inbox = inbox

    @abstractmethod
    async def evaluate(self, candidate: CandidateFile) -> StageResult:
        ...

    async def should_skip(self, candidate: CandidateFile) -> bool:
        return False

    # ─── Helpers available to all stages ───────────────

    async def _stat(self, candidate: CandidateFile) -> RemoteStat:
        """Remote stat of the candidate, fetched once per file."""
        if candidate.stat is None:
            candidate.stat = await self.inbox.stat_file(
                candidate.supplier_folder, candidate.file_name
            )
        return candidate.stat

    def _accept(self, metadata: dict[str, Any] | None = None) -> StageResult:
        return StageResult(
            stage_name=self.name,
            accepted=True,
            state=self.accepted_state,
            metadata=metadata or {},
        )

    def _reject(
        self,
        reason: RejectionReason,
        metadata: dict[str, Any] | None = None,
    ) -> StageResult:
        return StageResult(
            stage_name=self.name,
            accepted=False,
            state=ValidationState.REJECTED,
            reason=reason,
            metadata=metadata or {},
        )

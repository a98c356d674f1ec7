"""
CandidateFile — mutable state carried through the validation stages.

One CandidateFile is built per discovered file.  Stages read from and
write to it; the pipeline turns the final state into a
ValidationOutcome.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from stock_collector.core.constants import RejectionReason, SideEffect, ValidationState
from stock_collector.ingestion.sftp_client import RemoteStat
from stock_collector.validation.file_name import ParsedFileName


# ═══════════════════════════════════════════════════════════
#  StageResult
# ═══════════════════════════════════════════════════════════

@dataclass
class StageResult:
    """Outcome of a single validation stage."""

    stage_name: str
    accepted: bool
    state: ValidationState
    reason: RejectionReason | None = None
    skipped: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)


# ═══════════════════════════════════════════════════════════
#  CandidateFile
# ═══════════════════════════════════════════════════════════

@dataclass
class CandidateFile:
    """
    A file discovered in a supplier folder.

    Populated progressively: the remote stat is fetched on first use,
    the parsed name is set by the name gate.
    """

    # ─── Identity ──────────────────────────────────────
    supplier_folder: str
    file_name: str
    supplier_id: str

    # ─── Remote metadata / parsed fields ───────────────
    stat: RemoteStat | None = None
    parsed: ParsedFileName | None = None

    # ─── State machine ─────────────────────────────────
    state: ValidationState = ValidationState.PENDING
    reason: RejectionReason | None = None
    side_effects: list[SideEffect] = field(default_factory=list)
    stage_results: list[StageResult] = field(default_factory=list)

    def record(self, effect: SideEffect) -> None:
        self.side_effects.append(effect)


# ═══════════════════════════════════════════════════════════
#  ValidationOutcome
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ValidationOutcome:
    """Tagged result of running a file through every stage."""

    accepted: bool
    state: ValidationState
    reason: RejectionReason | None = None
    side_effects: tuple[SideEffect, ...] = ()

    @classmethod
    def from_candidate(cls, candidate: CandidateFile) -> ValidationOutcome:
        return cls(
            accepted=candidate.state == ValidationState.AUTHORIZED,
            state=candidate.state,
            reason=candidate.reason,
            side_effects=tuple(candidate.side_effects),
        )

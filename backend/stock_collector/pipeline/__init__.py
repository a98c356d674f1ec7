"""
Validation pipeline — the per-file intake state machine.

This package provides the ordered gate sequence (age, name, size,
supplier authorization) that decides whether a discovered stock file
is ingested, with the side effects each rejection carries.
"""

from stock_collector.pipeline.context import CandidateFile, StageResult, ValidationOutcome
from stock_collector.pipeline.engine import ValidationPipeline
from stock_collector.pipeline.stage import ValidationStage

__all__ = [
    "CandidateFile",
    "StageResult",
    "ValidationOutcome",
    "ValidationPipeline",
    "ValidationStage",
]

"""Background processing of a single brain dump."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from time import perf_counter
from typing import Callable, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from braindump.core.errors import AnalysisFailure, BrainDumpNotFound
from braindump.db.models.brain_dump import BrainDump
from braindump.observability.metrics import log_metric
from braindump.observability.tracing import annotate, trace
from braindump.services import brain_dump_analyzer
from braindump.services.brain_dump_analyzer import FALLBACK_ANALYSIS, BrainDumpAnalysis

logger = logging.getLogger(__name__)

Analyzer = Callable[[str], BrainDumpAnalysis]


@dataclass
class ProcessResult:
    brain_dump_id: UUID
    used_fallback: bool


def process_brain_dump(
    db: Session,
    brain_dump_id: UUID | str,
    *,
    analyzer: Optional[Analyzer] = None,
) -> ProcessResult:
    """Analyze a brain dump and write the result back in one commit.

    Runs with internal privilege: no ownership check. A missing record raises
    BrainDumpNotFound and nothing is written. Analysis failures never escape;
    the fixed fallback analysis is stored instead, so the record always ends
    up processed.
    """
    brain_dump = _load(db, brain_dump_id)
    analyze = analyzer or brain_dump_analyzer.request_analysis

    metadata = {"brain_dump_id": str(brain_dump.id), "text_length": len(brain_dump.original_text)}
    start = perf_counter()
    with trace("brain_dump.process", metadata=metadata, user_id=str(brain_dump.user_id)) as span:
        try:
            analysis = analyze(brain_dump.original_text)
            used_fallback = False
        except AnalysisFailure:
            logger.exception("Error processing brain dump %s; storing fallback analysis", brain_dump.id)
            analysis = FALLBACK_ANALYSIS
            used_fallback = True

        apply_analysis(brain_dump, analysis)
        db.commit()
        annotate(span, {**metadata, "used_fallback": used_fallback})

    latency_ms = (perf_counter() - start) * 1000
    log_metric("brain_dump.process.fallback", 1 if used_fallback else 0, metadata={"brain_dump_id": metadata["brain_dump_id"]})
    log_metric("brain_dump.process.latency_ms", latency_ms)
    return ProcessResult(brain_dump_id=brain_dump.id, used_fallback=used_fallback)


def apply_analysis(brain_dump: BrainDump, analysis: BrainDumpAnalysis) -> None:
    """Set every analysis field and the processed flag together."""
    brain_dump.summary = analysis.summary
    brain_dump.what_matters = list(analysis.what_matters)
    brain_dump.what_doesnt = list(analysis.what_doesnt)
    brain_dump.actionable_focus = analysis.actionable_focus
    brain_dump.processed = True
    brain_dump.processed_at = datetime.now(timezone.utc)


def _load(db: Session, brain_dump_id: UUID | str) -> BrainDump:
    try:
        key = brain_dump_id if isinstance(brain_dump_id, UUID) else UUID(str(brain_dump_id))
    except ValueError:
        raise BrainDumpNotFound(brain_dump_id) from None
    brain_dump = db.get(BrainDump, key)
    if brain_dump is None:
        raise BrainDumpNotFound(brain_dump_id)
    return brain_dump

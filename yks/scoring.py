"""
Net scoring for study entries and mock exams.

Net = correct - incorrect / 4. Aggregates are always the sum of per-item
nets; counts are never pooled first.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, Optional
from uuid import uuid4

from engine import INCORRECT_DIVISOR
from yks.models import DenemeEntry, ExamType, StudyEntry, SubjectScore, sections_for

logger = logging.getLogger(__name__)

# Tolerance when comparing a stored total_net with its recomputed value
NET_TOLERANCE = 1e-6


def net_score(correct: float, incorrect: float) -> float:
    return correct - incorrect / INCORRECT_DIVISOR


def entry_net(entry: StudyEntry) -> float:
    return net_score(entry.correct_count, entry.incorrect_count)


def total_net(entries: Iterable[StudyEntry]) -> float:
    return sum(entry_net(e) for e in entries)


def section_net(score: SubjectScore) -> float:
    return net_score(score.correct, score.incorrect)


def deneme_total_net(exam_type: ExamType, scores: Dict[str, SubjectScore]) -> float:
    """Sum of section nets over the sections of this exam format (others are ignored)."""
    return sum(section_net(scores.get(s.key, SubjectScore())) for s in sections_for(exam_type))


def format_net(net: float) -> str:
    """Whole nets print without decimals, everything else with two."""
    return str(int(net)) if float(net).is_integer() else f"{net:.2f}"


def new_deneme_entry(exam_type, scores: Dict[str, SubjectScore], when: Optional[datetime] = None) -> DenemeEntry:
    """
    Build a deneme record ready to save, with total_net computed now.

    Raises:
        ValueError: if no section has been filled in
    """
    exam_type = ExamType(exam_type)
    keys = {s.key for s in sections_for(exam_type)}
    filled = {k: v for k, v in scores.items() if k in keys}
    if not filled:
        raise ValueError("En az bir bölüm için doğru/yanlış girilmelidir.")
    return DenemeEntry(
        id=str(uuid4()),
        exam_type=exam_type,
        scores=dict(filled),
        total_net=deneme_total_net(exam_type, filled),
        created_at=when or datetime.now(timezone.utc),
    )


def reconcile_total_net(deneme: DenemeEntry) -> DenemeEntry:
    """
    Recompute total_net from scores; on mismatch log a warning and return the
    record carrying the recomputed value.
    """
    recomputed = deneme_total_net(deneme.exam_type, deneme.scores)
    if abs(recomputed - deneme.total_net) <= NET_TOLERANCE:
        return deneme
    logger.warning(
        f"Deneme {deneme.id}: stored total_net={deneme.total_net:.2f} "
        f"differs from scores ({recomputed:.2f}); using recomputed value"
    )
    return DenemeEntry(
        id=deneme.id,
        exam_type=deneme.exam_type,
        scores=deneme.scores,
        total_net=recomputed,
        created_at=deneme.created_at,
    )

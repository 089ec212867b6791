"""
Records for YKS Pro: study entries, mock exams (deneme) and their section scores.
Maps between in-memory records and stored Supabase rows (snake_case columns).
"""
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional
from uuid import uuid4

from engine import AYT_SECTIONS, TYT_SECTIONS

logger = logging.getLogger(__name__)


class Subject(str, Enum):
    """Fixed list of YKS subjects offered in the entry form."""

    TURKCE = "Türkçe"
    MATEMATIK = "Matematik"
    GEOMETRI = "Geometri"
    FIZIK = "Fizik"
    KIMYA = "Kimya"
    BIYOLOJI = "Biyoloji"
    TARIH = "Tarih"
    COGRAFYA = "Coğrafya"
    FELSEFE = "Felsefe"
    DIN = "Din Kültürü"
    DIL = "Yabancı Dil"


SUBJECT_COLORS = {
    Subject.TURKCE: "#ef4444",
    Subject.MATEMATIK: "#3b82f6",
    Subject.GEOMETRI: "#0ea5e9",
    Subject.FIZIK: "#8b5cf6",
    Subject.KIMYA: "#10b981",
    Subject.BIYOLOJI: "#22c55e",
    Subject.TARIH: "#f59e0b",
    Subject.COGRAFYA: "#d97706",
    Subject.FELSEFE: "#ec4899",
    Subject.DIN: "#6366f1",
    Subject.DIL: "#a855f7",
}


class ExamType(str, Enum):
    TYT = "TYT"
    AYT = "AYT"


@dataclass(frozen=True)
class ExamSection:
    key: str
    label: str
    max_questions: int
    group: str


EXAM_SECTIONS = {
    ExamType.TYT: [ExamSection(*s) for s in TYT_SECTIONS],
    ExamType.AYT: [ExamSection(*s) for s in AYT_SECTIONS],
}


def sections_for(exam_type: ExamType) -> list[ExamSection]:
    return EXAM_SECTIONS[ExamType(exam_type)]


def parse_timestamp(value) -> datetime:
    """Parse an ISO string from Supabase (accepts trailing 'Z' and bare dates)."""
    if isinstance(value, datetime):
        return value
    if not value:
        raise ValueError("Missing timestamp")
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass(frozen=True)
class StudyEntry:
    """One logged study session. Never mutated after creation."""

    id: str
    date: datetime
    subject: Subject
    topic: str
    question_count: int
    correct_count: int
    incorrect_count: int
    duration_minutes: int
    notes: Optional[str] = None

    def to_row(self) -> Dict:
        row = {
            "id": self.id,
            "date": self.date.isoformat(),
            "subject": self.subject.value,
            "topic": self.topic,
            "question_count": self.question_count,
            "correct_count": self.correct_count,
            "incorrect_count": self.incorrect_count,
            "duration_minutes": self.duration_minutes,
        }
        if self.notes:
            row["notes"] = self.notes
        return row

    @classmethod
    def from_row(cls, row: Dict) -> "StudyEntry":
        """
        Build an entry from a stored row.

        Rows written before correct/incorrect were tracked only carry
        question_count; those read as all-correct.
        """
        question_count = int(row.get("question_count") or 0)
        correct = row.get("correct_count")
        incorrect = row.get("incorrect_count")
        return cls(
            id=str(row["id"]),
            date=parse_timestamp(row.get("date")),
            subject=Subject(row["subject"]),
            topic=row.get("topic") or "",
            question_count=question_count,
            correct_count=question_count if correct is None else int(correct),
            incorrect_count=0 if incorrect is None else int(incorrect),
            duration_minutes=int(row.get("duration_minutes") or 0),
            notes=row.get("notes") or None,
        )


def new_study_entry(
    subject,
    topic: str,
    correct_count,
    incorrect_count,
    duration_minutes,
    notes: Optional[str] = None,
    when: Optional[datetime] = None,
) -> StudyEntry:
    """
    Validate form input and build a new entry with a client-side id.

    All numeric fields are required and must be >= 0; topic is required.
    question_count is always correct + incorrect.

    Raises:
        ValueError: if a required field is missing, fractional or below its minimum
    """
    topic = (topic or "").strip()
    if not topic:
        raise ValueError("Konu alanı zorunludur.")
    values = {}
    for name, value in (
        ("correct_count", correct_count),
        ("incorrect_count", incorrect_count),
        ("duration_minutes", duration_minutes),
    ):
        if value is None or value == "":
            raise ValueError(f"{name} is required")
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"{name} must be a whole number")
        number = int(value)
        if number < 0:
            raise ValueError(f"{name} must be >= 0")
        values[name] = number

    return StudyEntry(
        id=str(uuid4()),
        date=when or datetime.now(timezone.utc),
        subject=Subject(subject),
        topic=topic,
        question_count=values["correct_count"] + values["incorrect_count"],
        correct_count=values["correct_count"],
        incorrect_count=values["incorrect_count"],
        duration_minutes=values["duration_minutes"],
        notes=(notes or "").strip() or None,
    )


@dataclass(frozen=True)
class SubjectScore:
    correct: int = 0
    incorrect: int = 0

    def to_dict(self) -> Dict:
        return {"correct": self.correct, "incorrect": self.incorrect}

    @classmethod
    def from_dict(cls, data: Dict) -> "SubjectScore":
        return cls(correct=int(data.get("correct") or 0), incorrect=int(data.get("incorrect") or 0))


def clamp_section_score(section: ExamSection, correct: int, incorrect: int) -> SubjectScore:
    """Clamp form input to 0..max for the section (the inputs' min/max attributes)."""
    correct = max(0, min(int(correct or 0), section.max_questions))
    incorrect = max(0, min(int(incorrect or 0), section.max_questions))
    return SubjectScore(correct=correct, incorrect=incorrect)


@dataclass(frozen=True)
class DenemeEntry:
    """A saved mock-exam result. total_net is computed once, at save time."""

    id: str
    exam_type: ExamType
    scores: Dict[str, SubjectScore] = field(default_factory=dict)
    total_net: float = 0.0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_row(self) -> Dict:
        return {
            "id": self.id,
            "exam_type": self.exam_type.value,
            "scores": {k: v.to_dict() for k, v in self.scores.items()},
            "total_net": self.total_net,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: Dict) -> "DenemeEntry":
        raw_scores = row.get("scores") or {}
        if isinstance(raw_scores, str):
            raw_scores = json.loads(raw_scores)
        return cls(
            id=str(row["id"]),
            exam_type=ExamType(row["exam_type"]),
            scores={k: SubjectScore.from_dict(v) for k, v in raw_scores.items()},
            total_net=float(row.get("total_net") or 0.0),
            created_at=parse_timestamp(row.get("created_at")),
        )

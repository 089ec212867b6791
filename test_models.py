"""Record building, form validation and row mapping."""
import json
from datetime import datetime, timezone

import pytest

from yks.models import (
    DenemeEntry,
    ExamType,
    StudyEntry,
    Subject,
    SubjectScore,
    clamp_section_score,
    new_study_entry,
    sections_for,
)


def test_new_study_entry_derives_question_count():
    entry = new_study_entry("Matematik", "  Fonksiyonlar ", 30, 8, 60)
    assert entry.subject == Subject.MATEMATIK
    assert entry.topic == "Fonksiyonlar"
    assert entry.question_count == entry.correct_count + entry.incorrect_count == 38
    assert entry.duration_minutes == 60
    assert entry.id
    assert entry.date.tzinfo is not None


def test_new_study_entry_ids_are_unique():
    a = new_study_entry(Subject.KIMYA, "Mol", 1, 0, 5)
    b = new_study_entry(Subject.KIMYA, "Mol", 1, 0, 5)
    assert a.id != b.id


@pytest.mark.parametrize(
    "topic,correct,incorrect,duration",
    [
        ("", 1, 1, 10),
        ("   ", 1, 1, 10),
        ("Optik", None, 1, 10),
        ("Optik", 1, "", 10),
        ("Optik", 1, 1, None),
        ("Optik", -1, 0, 10),
        ("Optik", 1, -2, 10),
        ("Optik", 1, 0, -5),
        ("Optik", 3.7, 0, 10),
        ("Optik", 1, 0.5, 10),
        ("Optik", 1, 0, "2.5"),
    ],
)
def test_new_study_entry_rejects_missing_negative_or_fractional_fields(topic, correct, incorrect, duration):
    with pytest.raises(ValueError):
        new_study_entry(Subject.FIZIK, topic, correct, incorrect, duration)


def test_new_study_entry_rejects_unknown_subject():
    with pytest.raises(ValueError):
        new_study_entry("Astronomi", "Yıldızlar", 1, 0, 10)


def test_study_entry_row_uses_snake_case_columns():
    entry = new_study_entry(Subject.TARIH, "Osmanlı", 12, 3, 40, notes="tekrar et")
    row = entry.to_row()
    assert row == {
        "id": entry.id,
        "date": entry.date.isoformat(),
        "subject": "Tarih",
        "topic": "Osmanlı",
        "question_count": 15,
        "correct_count": 12,
        "incorrect_count": 3,
        "duration_minutes": 40,
        "notes": "tekrar et",
    }
    assert StudyEntry.from_row(row) == entry


def test_legacy_row_without_correct_incorrect_reads_as_all_correct():
    row = {
        "id": "legacy-1",
        "date": "2025-11-02T08:00:00Z",
        "subject": "Coğrafya",
        "topic": "İklim",
        "question_count": 25,
        "duration_minutes": 30,
    }
    entry = StudyEntry.from_row(row)
    assert entry.correct_count == 25
    assert entry.incorrect_count == 0
    assert entry.date == datetime(2025, 11, 2, 8, 0, tzinfo=timezone.utc)
    assert entry.notes is None


def test_deneme_row_round_trip_and_json_scores():
    deneme = DenemeEntry(
        id="d1",
        exam_type=ExamType.TYT,
        scores={"turkce": SubjectScore(20, 4), "matematik": SubjectScore(10, 0)},
        total_net=29.0,
        created_at=datetime(2026, 2, 1, 10, 0, tzinfo=timezone.utc),
    )
    row = deneme.to_row()
    assert row["scores"] == {"turkce": {"correct": 20, "incorrect": 4}, "matematik": {"correct": 10, "incorrect": 0}}
    assert DenemeEntry.from_row(row) == deneme

    row["scores"] = json.dumps(row["scores"])
    assert DenemeEntry.from_row(row) == deneme


def test_sections_per_exam_format():
    tyt = sections_for(ExamType.TYT)
    ayt = sections_for("AYT")
    assert [s.key for s in tyt] == ["turkce", "sosyal", "matematik", "fen"]
    assert sum(s.max_questions for s in tyt) == 120
    assert len(ayt) == 10
    assert sum(s.max_questions for s in ayt) == 154


def test_clamp_section_score_to_section_bounds():
    fizik = next(s for s in sections_for(ExamType.AYT) if s.key == "fizik")
    assert clamp_section_score(fizik, 20, -3) == SubjectScore(14, 0)
    assert clamp_section_score(fizik, None, 5) == SubjectScore(0, 5)


def test_new_study_entry_accepts_whole_floats_from_number_inputs():
    entry = new_study_entry(Subject.FIZIK, "Optik", 3.0, 1.0, "20")
    assert (entry.correct_count, entry.incorrect_count, entry.duration_minutes) == (3, 1, 20)
    assert isinstance(entry.correct_count, int)

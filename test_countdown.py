"""Exam countdown."""
from datetime import datetime, timedelta, timezone

import pytest

from engine import EXAM_DATE
from yks.countdown import countdown_message, exam_date, time_left

TARGET = datetime(2026, 6, 20, 10, 0, tzinfo=timezone.utc)


def test_time_left_breakdown():
    now = TARGET - timedelta(days=3, hours=4, minutes=5, seconds=6)
    assert time_left(now=now, target=TARGET) == {"days": 3, "hours": 4, "minutes": 5, "seconds": 6}


@pytest.mark.parametrize("offset", [timedelta(0), timedelta(seconds=1), timedelta(days=30)])
def test_time_left_is_zero_once_exam_started(offset):
    assert time_left(now=TARGET + offset, target=TARGET) == {"days": 0, "hours": 0, "minutes": 0, "seconds": 0}


@pytest.mark.parametrize(
    "days,expected",
    [
        (200, "Erken başlayan kazanır! 🎯"),
        (181, "Erken başlayan kazanır! 🎯"),
        (180, "Devamlılık her şeydir! 💪"),
        (91, "Devamlılık her şeydir! 💪"),
        (60, "Son sprint'e hazır mısın? 🔥"),
        (8, "Her soru fark yaratır! ⚡"),
        (7, "Sınav kapıda, sakin ol! 🧘"),
        (0, "Sınav kapıda, sakin ol! 🧘"),
    ],
)
def test_countdown_message_thresholds(days, expected):
    assert countdown_message(days) == expected


def test_exam_date_default(monkeypatch):
    monkeypatch.delenv("YKS_EXAM_DATE", raising=False)
    assert exam_date() == datetime.fromisoformat(EXAM_DATE)


def test_exam_date_env_override(monkeypatch):
    monkeypatch.setenv("YKS_EXAM_DATE", "2027-06-19T10:15:00Z")
    assert exam_date() == datetime(2027, 6, 19, 10, 15, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("2027-06-19T10:15:00", datetime(2027, 6, 19, 10, 15)),
        ("2027-06-19", datetime(2027, 6, 19)),
    ],
)
def test_exam_date_without_offset_uses_default_offset(monkeypatch, raw, expected):
    monkeypatch.setenv("YKS_EXAM_DATE", raw)
    target = exam_date()
    assert target.tzinfo is not None
    assert target == expected.replace(tzinfo=datetime.fromisoformat(EXAM_DATE).tzinfo)
    left = time_left(now=target.astimezone(timezone.utc) - timedelta(days=1, hours=2))
    assert (left["days"], left["hours"]) == (1, 2)
    assert time_left()["days"] >= 0


def test_invalid_exam_date_falls_back(monkeypatch, caplog):
    monkeypatch.setenv("YKS_EXAM_DATE", "next june")
    assert exam_date() == datetime.fromisoformat(EXAM_DATE)
    assert "Invalid YKS_EXAM_DATE" in caplog.text

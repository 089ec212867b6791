"""Aggregations over study entries and denemeler for the dashboard and the AI coach."""
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

from yks.models import SUBJECT_COLORS, DenemeEntry, StudyEntry, Subject
from yks.scoring import entry_net

DEFAULT_COLOR = "#6b7280"

TR_WEEKDAYS = ["Pzt", "Sal", "Çar", "Per", "Cum", "Cmt", "Paz"]


def entry_day(entry: StudyEntry) -> date:
    """Calendar day of an entry in local time (naive timestamps are taken as local)."""
    if entry.date.tzinfo is None:
        return entry.date.date()
    return entry.date.astimezone().date()


def entries_on(entries: Iterable[StudyEntry], day: date) -> List[StudyEntry]:
    return [e for e in entries if entry_day(e) == day]


def daily_summary(entries: Iterable[StudyEntry], today: Optional[date] = None) -> Dict:
    """Questions, net and minutes for one day (default: today) plus the all-time net."""
    entries = list(entries)
    today = today or date.today()
    todays = entries_on(entries, today)
    return {
        "date": today,
        "total_questions": sum(e.question_count for e in todays),
        "daily_net": sum(entry_net(e) for e in todays),
        "total_minutes": sum(e.duration_minutes for e in todays),
        "total_net": sum(entry_net(e) for e in entries),
        "subject_breakdown": subject_breakdown(todays),
    }


def subject_breakdown(entries: Iterable[StudyEntry]) -> List[Dict]:
    """[{name, value}] of questions solved per subject, in first-seen order."""
    totals: Dict[str, int] = {}
    for e in entries:
        totals[e.subject.value] = totals.get(e.subject.value, 0) + e.question_count
    return [{"name": name, "value": value} for name, value in totals.items()]


def subject_chart_data(entries: Iterable[StudyEntry]) -> List[Dict]:
    """subject_breakdown rows with each subject's chart colour attached."""
    return [
        {**row, "color": SUBJECT_COLORS.get(Subject(row["name"]), DEFAULT_COLOR)}
        for row in subject_breakdown(entries)
    ]


def last_n_days(entries: Iterable[StudyEntry], days: int = 7, today: Optional[date] = None) -> List[Dict]:
    """Questions per day for the last `days` days, oldest first, zero-filled."""
    today = today or date.today()
    per_day: Dict[date, int] = defaultdict(int)
    for e in entries:
        per_day[entry_day(e)] += e.question_count
    out = []
    for offset in range(days - 1, -1, -1):
        d = today - timedelta(days=offset)
        out.append({"date": d, "label": TR_WEEKDAYS[d.weekday()], "questions": per_day.get(d, 0)})
    return out


def weekly_summary(entries: Iterable[StudyEntry]) -> List[Dict]:
    """Per ISO week totals, most recent week first."""
    weeks: Dict[tuple, Dict] = {}
    for e in entries:
        year, week, _ = entry_day(e).isocalendar()
        bucket = weeks.setdefault(
            (year, week),
            {"week": f"{year}-W{week:02d}", "entries": 0, "questions": 0, "net": 0.0, "minutes": 0},
        )
        bucket["entries"] += 1
        bucket["questions"] += e.question_count
        bucket["net"] += entry_net(e)
        bucket["minutes"] += e.duration_minutes
    return [weeks[k] for k in sorted(weeks, reverse=True)]


def subject_rollups(entries: Iterable[StudyEntry], now: Optional[datetime] = None) -> Dict[str, Dict]:
    """
    Per-subject totals used by the coach prompts.

    net is the sum of per-entry nets; avg_net divides it by the record count.
    """
    now = now or datetime.now(timezone.utc)
    rollups: Dict[str, Dict] = {}
    for e in entries:
        s = rollups.get(e.subject.value)
        if s is None:
            s = rollups[e.subject.value] = {
                "total_questions": 0,
                "correct": 0,
                "incorrect": 0,
                "minutes": 0,
                "count": 0,
                "net": 0.0,
                "last_date": e.date,
            }
        s["total_questions"] += e.question_count
        s["correct"] += e.correct_count
        s["incorrect"] += e.incorrect_count
        s["minutes"] += e.duration_minutes
        s["count"] += 1
        s["net"] += entry_net(e)
        if _as_aware(e.date) > _as_aware(s["last_date"]):
            s["last_date"] = e.date

    for s in rollups.values():
        s["avg_net"] = s["net"] / s["count"]
        s["accuracy"] = s["correct"] / s["total_questions"] * 100 if s["total_questions"] > 0 else 0.0
        s["questions_per_hour"] = s["total_questions"] / s["minutes"] * 60 if s["minutes"] > 0 else 0.0
        s["days_since"] = max(0, (_as_aware(now) - _as_aware(s["last_date"])).days)
    return rollups


def deneme_trend(denemeler: Iterable[DenemeEntry]) -> List[Dict]:
    """Chronological total_net series, one point per saved deneme."""
    ordered = sorted(denemeler, key=lambda d: _as_aware(d.created_at))
    return [{"created_at": d.created_at, "exam_type": d.exam_type.value, "total_net": d.total_net} for d in ordered]


def _as_aware(dt: datetime) -> datetime:
    return dt.astimezone() if dt.tzinfo is None else dt

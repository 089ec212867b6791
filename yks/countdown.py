"""Countdown to the YKS exam date (YKS_EXAM_DATE in .env overrides the default)."""
import logging
import os
from datetime import datetime, timezone
from typing import Dict, Optional

from dotenv import load_dotenv

from engine import EXAM_DATE

load_dotenv()

logger = logging.getLogger(__name__)


def exam_date() -> datetime:
    """Exam start as an aware datetime; a value without offset gets the default's (+03:00)."""
    default = datetime.fromisoformat(EXAM_DATE)
    raw = os.getenv("YKS_EXAM_DATE") or EXAM_DATE
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        logger.error(f"Invalid YKS_EXAM_DATE {raw!r}, falling back to {EXAM_DATE}")
        return default
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=default.tzinfo)
    return parsed


def time_left(now: Optional[datetime] = None, target: Optional[datetime] = None) -> Dict[str, int]:
    """Days/hours/minutes/seconds until the exam, all zero once it has started."""
    now = now or datetime.now(timezone.utc)
    target = target or exam_date()
    seconds = int((target - now).total_seconds())
    if seconds <= 0:
        return {"days": 0, "hours": 0, "minutes": 0, "seconds": 0}
    days, rest = divmod(seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return {"days": days, "hours": hours, "minutes": minutes, "seconds": seconds}


def countdown_message(days: int) -> str:
    if days > 180:
        return "Erken başlayan kazanır! 🎯"
    if days > 90:
        return "Devamlılık her şeydir! 💪"
    if days > 30:
        return "Son sprint'e hazır mısın? 🔥"
    if days > 7:
        return "Her soru fark yaratır! ⚡"
    return "Sınav kapıda, sakin ol! 🧘"

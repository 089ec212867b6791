"""
Pomodoro focus timer.

PomodoroTimer is a two-phase state machine advanced only by tick(), one call
per second. WallClockDriver turns elapsed wall-clock time into tick() calls,
so a Streamlit rerun (or any other scheduler) can drive it.
"""
import logging
import time
from enum import Enum
from typing import Callable, List, Optional

from engine import BREAK_MINUTES, FOCUS_MINUTES

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    FOCUS = "focus"
    BREAK = "break"


class PomodoroTimer:
    """Focus/Break countdown with a completed-session counter. No persistence."""

    def __init__(
        self,
        focus_minutes: int = FOCUS_MINUTES,
        break_minutes: int = BREAK_MINUTES,
        on_focus_complete: Optional[Callable[[int], None]] = None,
    ):
        _check_minutes(focus_minutes, break_minutes)
        self.focus_minutes = focus_minutes
        self.break_minutes = break_minutes
        self.on_focus_complete = on_focus_complete
        self.phase = Phase.FOCUS
        self.remaining = focus_minutes * 60
        self.running = False
        self.sessions = 0

    @property
    def phase_seconds(self) -> int:
        return (self.focus_minutes if self.phase == Phase.FOCUS else self.break_minutes) * 60

    @property
    def progress(self) -> float:
        """Percent of the current phase already elapsed."""
        return (self.phase_seconds - self.remaining) / self.phase_seconds * 100

    @property
    def display(self) -> str:
        minutes, seconds = divmod(self.remaining, 60)
        return f"{minutes:02d}:{seconds:02d}"

    def start(self):
        self.running = True

    def stop(self):
        self.running = False

    def toggle(self):
        self.running = not self.running

    def reset(self):
        """Stop and go back to a full Focus phase, whatever the current phase."""
        self.running = False
        self.phase = Phase.FOCUS
        self.remaining = self.focus_minutes * 60

    def update_settings(self, focus_minutes: int, break_minutes: int):
        """
        Raises:
            ValueError: if either duration is below one minute
        """
        _check_minutes(focus_minutes, break_minutes)
        self.focus_minutes = focus_minutes
        self.break_minutes = break_minutes
        self.reset()

    def tick(self) -> Optional[Phase]:
        """
        Advance one second. Returns the phase just entered when the countdown
        hits zero, otherwise None. Does nothing while stopped.
        """
        if not self.running or self.remaining <= 0:
            return None
        self.remaining -= 1
        if self.remaining > 0:
            return None
        return self._finish_phase()

    def _finish_phase(self) -> Phase:
        if self.phase == Phase.FOCUS:
            self.sessions += 1
            logger.info(f"Focus phase complete ({self.focus_minutes} min), session #{self.sessions}")
            if self.on_focus_complete:
                self.on_focus_complete(self.focus_minutes)
            self.phase = Phase.BREAK
        else:
            logger.info("Break over")
            self.phase = Phase.FOCUS
        self.remaining = self.phase_seconds
        # each phase is started explicitly by the student
        self.running = False
        return self.phase

    def message(self) -> str:
        if self.phase == Phase.BREAK:
            return "Dinlen, enerjini topla. Kısa bir mola her şeyi değiştirir. ☕"
        if not self.running and self.remaining == self.focus_minutes * 60:
            return "Hazır olduğunda başla. Her dakika seni hedefe yaklaştırır."
        if self.running:
            if self.progress < 25:
                return "İyi başladın, odaklan! 🎯"
            if self.progress < 50:
                return "Devam et, harika gidiyorsun! 💪"
            if self.progress < 75:
                return "Yarıyı geçtin, son sprint! 🔥"
            return "Neredeyse bitti, biraz daha dayanabilirsin! ⚡"
        return "Odaklanmaya hazır mısın?"


def _check_minutes(focus_minutes: int, break_minutes: int):
    if int(focus_minutes) < 1 or int(break_minutes) < 1:
        raise ValueError("Focus and break durations must be at least 1 minute")


class WallClockDriver:
    """
    Feeds a PomodoroTimer one tick per elapsed wall-clock second.

    Call sync() on every rerun. Fractions of a second carry over to the next
    sync; time spent stopped is never counted.
    """

    def __init__(self, timer: PomodoroTimer, clock: Callable[[], float] = time.monotonic):
        self.timer = timer
        self.clock = clock
        self._last: Optional[float] = None

    def sync(self) -> List[Phase]:
        now = self.clock()
        if not self.timer.running:
            self._last = None
            return []
        if self._last is None:
            self._last = now
            return []
        transitions = []
        for _ in range(int(now - self._last)):
            self._last += 1
            entered = self.timer.tick()
            if entered is not None:
                transitions.append(entered)
            if not self.timer.running:
                self._last = None
                break
        return transitions

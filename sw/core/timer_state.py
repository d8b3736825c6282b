"""Stopwatch state — pure data, no UI and no clock.

Everything is kept in integer milliseconds.  ``TimerState`` is a plain
object owned by whoever builds the engine; nothing in here is global.
"""

from dataclasses import dataclass, field
from enum import Enum


class Mode(Enum):
    STOPWATCH = "stopwatch"
    COUNTDOWN = "countdown"


class EntryKind(Enum):
    LAP = "lap"
    SPLIT = "split"

    @property
    def label(self):
        return "Lap" if self is EntryKind.LAP else "Split"


@dataclass(frozen=True)
class Breakdown:
    """Elapsed time split into display fields."""
    hours: int
    minutes: int
    seconds: int
    centiseconds: int

    def __str__(self):
        return (f"{self.hours:02d}:{self.minutes:02d}:"
                f"{self.seconds:02d}:{self.centiseconds:02d}")


def breakdown(ms):
    """Decompose a millisecond count into hours/minutes/seconds/centiseconds.

    Negative values clamp to zero.  Hours are not wrapped, so a run longer
    than 99 hours simply renders with more digits.
    """
    ms = max(0, int(ms))
    return Breakdown(
        hours=ms // 3_600_000,
        minutes=(ms % 3_600_000) // 60_000,
        seconds=(ms % 60_000) // 1000,
        centiseconds=(ms % 1000) // 10,
    )


def format_time(ms):
    """Format a millisecond duration as HH:MM:SS:CS."""
    return str(breakdown(ms))


@dataclass(frozen=True)
class LogEntry:
    index: int
    kind: EntryKind
    total_ms: int
    segment_ms: int | None = None  # laps only

    @property
    def number(self):
        return f"{self.kind.label} {self.index}"

    @property
    def total_text(self):
        return format_time(self.total_ms)

    @property
    def segment_text(self):
        if self.segment_ms is None:
            return ""
        return format_time(self.segment_ms)


@dataclass
class TimerState:
    running: bool = False
    elapsed_ms: int = 0
    mode: Mode = Mode.STOPWATCH
    preset_ms: int = 0
    last_lap_mark_ms: int = 0
    lap_count: int = 0  # shared by laps and splits
    entries: list = field(default_factory=list)  # newest first

    @property
    def has_time(self):
        # Lap/split recording (and the buttons for it) is only allowed under this condition.
        return self.running or self.elapsed_ms > 0

    def clear(self):
        self.running = False
        self.elapsed_ms = 0
        self.mode = Mode.STOPWATCH
        self.preset_ms = 0
        self.last_lap_mark_ms = 0
        self.lap_count = 0
        self.entries.clear()

from __future__ import annotations

import re
from dataclasses import dataclass

TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")

MIN_DAY = 1
MAX_DAY = 7


def parse_time_to_minutes(value: str | None) -> int | None:
    """Minutes since midnight, or None when the value is not a 24-hour HH:MM string."""
    if not isinstance(value, str):
        return None
    match = TIME_PATTERN.match(value.strip())
    if match is None:
        return None
    return int(match.group(1)) * 60 + int(match.group(2))


def format_minutes(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def is_valid_day(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and MIN_DAY <= value <= MAX_DAY


@dataclass(frozen=True)
class TimeInterval:
    start: int
    end: int

    @classmethod
    def parse(cls, start: str | None, end: str | None) -> TimeInterval | None:
        start_minutes = parse_time_to_minutes(start)
        end_minutes = parse_time_to_minutes(end)
        if start_minutes is None or end_minutes is None or start_minutes >= end_minutes:
            return None
        return cls(start_minutes, end_minutes)

    @property
    def duration(self) -> int:
        return self.end - self.start

    def overlaps(self, other: TimeInterval) -> bool:
        return overlaps(self, other)

    def as_strings(self) -> tuple[str, str]:
        return format_minutes(self.start), format_minutes(self.end)


def overlaps(first: TimeInterval, second: TimeInterval) -> bool:
    # Half-open: a slot ending at 10:00 does not touch one starting at 10:00.
    return first.start < second.end and second.start < first.end

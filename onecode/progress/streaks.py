"""
Streak arithmetic over calendar dates

Dates come from the wall-clock date parts of activity timestamps, without
timezone normalization.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Union


@dataclass(frozen=True)
class Streaks:
    current: int = 0
    longest: int = 0

    def to_dict(self) -> dict:
        return {"streak": self.current, "longestStreak": self.longest}


def distinct_dates(timestamps: Iterable[Union[datetime, date]]) -> List[date]:
    """Unique calendar dates, oldest first"""
    days = set()
    for ts in timestamps:
        if ts is None:
            continue
        days.add(ts.date() if isinstance(ts, datetime) else ts)
    return sorted(days)


def current_streak(dates: List[date], today: date) -> int:
    """
    Walk back from today; each step may move 0 or 1 day. The first larger
    gap ends the streak.
    """
    count = 0
    previous = today
    for day in sorted(dates, reverse=True):
        gap = (previous - day).days
        if gap not in (0, 1):
            break
        count += 1
        previous = day
    return count


def longest_streak(dates: List[date]) -> int:
    longest = 0
    running = 0
    previous = None
    for day in sorted(dates):
        if previous is not None and (day - previous).days == 1:
            running += 1
        else:
            running = 1
        longest = max(longest, running)
        previous = day
    return longest


def compute_streaks(timestamps: Iterable[Union[datetime, date]], today: date) -> Streaks:
    dates = distinct_dates(timestamps)
    return Streaks(current=current_streak(dates, today), longest=longest_streak(dates))

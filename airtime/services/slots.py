"""
Airtime slot arithmetic: clock strings, durations and schedule windows
"""

import math
import re
from datetime import date, datetime, time, timedelta
from typing import Optional

DURATION_PATTERN = re.compile(r"(\d+)\s*(min|sec)", re.IGNORECASE)
MAX_SLOT_MINUTES = 24 * 60


def parse_clock(value: str) -> time:
    """Parse HH:MM or HH:MM:SS into a time"""
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid time '{value}', expected HH:MM or HH:MM:SS")


def format_clock(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def parse_duration_minutes(duration: str) -> Optional[int]:
    """
    Whole minutes of airtime for a duration like "30 sec" or "2 min".
    Seconds round up to the next minute. None when the text has no duration.
    """
    match = DURATION_PATTERN.search(duration or "")
    if not match:
        return None
    amount, unit = int(match.group(1)), match.group(2).lower()
    if unit == "min":
        return amount
    return math.ceil(amount / 60)


def compute_end_time(air_time: str, duration: str) -> str:
    """End of a slot starting at air_time; wraps past midnight"""
    start = parse_clock(air_time)
    minutes = parse_duration_minutes(duration) or 0
    if minutes >= MAX_SLOT_MINUTES:
        raise ValueError(f"Duration '{duration}' must be shorter than a day")
    total = start.hour * 60 + start.minute + minutes
    return f"{(total // 60) % 24:02d}:{total % 60:02d}"


def slot_window(scheduled_date: date, start_time: str, end_time: str) -> tuple[datetime, datetime]:
    """
    [start, end) of a schedule. An end at or before the start means the
    slot runs past midnight into the next day.
    """
    start = datetime.combine(scheduled_date, parse_clock(start_time))
    end = datetime.combine(scheduled_date, parse_clock(end_time))
    if end <= start:
        end += timedelta(days=1)
    return start, end

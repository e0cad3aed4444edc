"""Date and time helpers shared by the policy modules"""

import calendar
import math
from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Current UTC time as a naive datetime (the form stored in the database)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def days_between(start: datetime, end: datetime) -> int:
    """Whole calendar days from start to end, never negative"""
    return max(0, (end.date() - start.date()).days)


def add_months(moment: datetime, months: int) -> datetime:
    """Shift a datetime by whole months, clamping the day to the target month's end"""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def format_countdown(remaining: timedelta) -> str:
    """Render a remaining duration as MM:SS (floored, never negative)"""
    total_seconds = max(0, int(remaining.total_seconds()))
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"


def minutes_remaining(until: datetime, now: datetime) -> int:
    """Remaining whole minutes until a deadline, rounded up"""
    return max(0, math.ceil((until - now).total_seconds() / 60))

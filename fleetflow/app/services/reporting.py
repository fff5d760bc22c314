"""
Calendar and rounding helpers shared by the dashboards and snapshots.

All boundaries are naive UTC, matching the stored timestamps.
"""

from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Tuple, Union

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def round_half_up(value: float, places: int = 0) -> Union[int, float]:
    """Round like a spreadsheet does (2.5 -> 3), not banker's rounding.

    Returns an int when `places` is 0.
    """
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if places == 0 else float(rounded)


def month_start(moment: datetime) -> datetime:
    return datetime(moment.year, moment.month, 1)


def shift_month(start: datetime, months: int) -> datetime:
    index = start.year * 12 + (start.month - 1) + months
    return datetime(index // 12, index % 12 + 1, 1)


def period_key(moment: datetime) -> str:
    """`YYYY-MM` key of the month containing `moment`."""
    return f"{moment.year:04d}-{moment.month:02d}"


def month_windows(now: datetime, count: int = 6) -> List[Tuple[datetime, datetime]]:
    """The last `count` calendar months as [start, next start) pairs, oldest first.

    The final window is the current month.
    """
    current = month_start(now)
    return [
        (shift_month(current, -offset), shift_month(current, -offset + 1))
        for offset in range(count - 1, -1, -1)
    ]


def day_windows(now: datetime, count: int = 7) -> List[Tuple[datetime, datetime]]:
    """The last `count` days as [midnight, next midnight) pairs, oldest first."""
    today = datetime(now.year, now.month, now.day)
    return [
        (today - timedelta(days=offset), today - timedelta(days=offset - 1))
        for offset in range(count - 1, -1, -1)
    ]

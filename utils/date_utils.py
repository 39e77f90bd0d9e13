import math
from datetime import datetime, timedelta


def utc_now() -> datetime:
    return datetime.utcnow()


def window_start(now: datetime, days: int) -> datetime:
    return now - timedelta(days=days)


def day_offset(now: datetime, day: int) -> datetime:
    return now + timedelta(days=day)


def round_half_up(value: float) -> int:
    # round() would use banker's rounding; stock figures round .5 upwards
    return int(math.floor(value + 0.5))

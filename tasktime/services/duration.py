# TaskTime - Duration Calculator

from datetime import datetime

from tasktime.errors import InvalidRangeError


def compute_minutes(start_time: datetime, end_time: datetime) -> int:
    """
    Whole minutes elapsed between start_time and end_time (floored).

    Equal instants give 0. An end before the start raises InvalidRangeError
    instead of producing a negative duration.
    """
    if end_time < start_time:
        raise InvalidRangeError("End time must not be before start time")

    delta = end_time - start_time
    return int(delta.total_seconds() // 60)

# TaskTime - Time helpers
# All instants are stored as naive UTC datetimes.

from datetime import date, datetime, timezone
from typing import Union

from tasktime.errors import InvalidInputError


InstantLike = Union[datetime, str]


def utcnow() -> datetime:
    """Current instant as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_naive(value: datetime) -> datetime:
    """
    Normalize a datetime to naive UTC.

    Aware values are converted to UTC; naive values are assumed to be UTC
    already.
    """
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_instant(value: InstantLike, field: str = "time") -> datetime:
    """
    Parse an ISO 8601 string (or pass through a datetime) into naive UTC.

    A trailing "Z" is accepted. Raises InvalidInputError on anything that
    cannot be parsed.
    """
    if isinstance(value, datetime):
        return to_utc_naive(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"Invalid {field}: expected an ISO 8601 timestamp")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise InvalidInputError(
            f"Invalid {field} format. Use ISO 8601 (e.g., \"2024-03-01T09:00:00Z\")"
        )
    return to_utc_naive(parsed)


def as_utc(value: datetime) -> datetime:
    """Attach the UTC timezone to a stored naive datetime for output."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

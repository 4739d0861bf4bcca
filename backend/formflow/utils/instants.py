"""Timestamp normalisation at the storage boundary.

Stored documents may carry instants as native datetimes, ISO strings, epoch
numbers (seconds or milliseconds) or ``{"seconds": ..., "nanoseconds": ...}``
wrappers. Everything is folded into epoch milliseconds / UTC datetimes with
millisecond precision so internal logic never branches on the stored shape.
"""

from datetime import UTC, datetime
from typing import Any

# Epoch values above this are treated as milliseconds (year ~2286 in seconds)
_MS_THRESHOLD = 10_000_000_000

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def utc_now() -> datetime:
    """Current UTC time truncated to millisecond precision."""
    return truncate_ms(datetime.now(UTC))


def truncate_ms(value: datetime) -> datetime:
    """Drop sub-millisecond precision and attach UTC to naive values."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    else:
        value = value.astimezone(UTC)
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def to_epoch_ms(value: Any) -> int:
    """Convert any supported instant shape to epoch milliseconds.

    Raises:
        ValueError: If the value cannot be interpreted as an instant.
    """
    if isinstance(value, datetime):
        delta = truncate_ms(value) - _EPOCH
        return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000
    if isinstance(value, bool):
        raise ValueError(f"Not an instant: {value!r}")
    if isinstance(value, (int, float)):
        if abs(value) >= _MS_THRESHOLD:
            return int(round(value))
        return int(round(value * 1000))
    if isinstance(value, str):
        try:
            return to_epoch_ms(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError:
            return to_epoch_ms(float(value))
    if isinstance(value, dict) and isinstance(value.get("seconds"), (int, float)):
        nanos = value.get("nanoseconds") or 0
        return int(value["seconds"] * 1000 + nanos // 1_000_000)
    raise ValueError(f"Not an instant: {value!r}")


def from_epoch_ms(ms: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(ms // 1000, tz=UTC).replace(microsecond=(ms % 1000) * 1000)


def coerce_instant(value: Any) -> datetime | None:
    """Normalise a stored instant to a UTC datetime; ``None`` passes through."""
    if value is None:
        return None
    return from_epoch_ms(to_epoch_ms(value))

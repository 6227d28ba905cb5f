"""Derive TOTP counters from wall-clock time (RFC 6238, section 4)."""

import logging
import math
import re
import time
from datetime import datetime, timezone
from typing import Union

from otp_core.errors import InvalidTimestamp, InvalidTimeStep


logger = logging.getLogger(__name__)

DEFAULT_STEP_SECONDS = 30
DEFAULT_T0 = 0

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_FRACTION = re.compile(r"(\d\d:\d\d:\d\d)\.(\d+)")
_COMPACT_OFFSET = re.compile(r"(\d\d:\d\d(?::\d\d(?:\.\d+)?)?)([+-])(\d\d)(\d\d)$")

Timestamp = Union[None, datetime, int, float, str]


def derive_counter(
    timestamp: Timestamp = None,
    step_seconds: int = DEFAULT_STEP_SECONDS,
    t0: int = DEFAULT_T0,
) -> int:
    """
    Convert a point in time into a TOTP counter.

    The counter is floor((epoch_seconds - t0) / step_seconds), where
    epoch_seconds is the whole-second Unix time. Sub-second precision is
    floored away, never rounded.

    Args:
        timestamp: The point in time (default: now). May be a datetime (naive
            values are UTC), Unix seconds as int or float, or an ISO 8601
            string such as "1970-01-01T00:00:29Z" or "1970-01-01 00:00:59 UTC".
        step_seconds: Length of a time step in seconds (default: 30).
        t0: Unix time at which counting starts (default: 0).

    Returns:
        The non-negative counter value.

    Raises:
        InvalidTimestamp: If the timestamp cannot be interpreted or lies
            before t0.
        InvalidTimeStep: If step_seconds is not a positive integer.
    """
    _check_step(step_seconds)
    elapsed = _elapsed_seconds(timestamp, t0)
    counter = elapsed // step_seconds
    logger.debug(
        "Derived counter %d from %d seconds past T0 (step %ds)",
        counter,
        elapsed,
        step_seconds,
    )
    return counter


def seconds_remaining(
    timestamp: Timestamp = None,
    step_seconds: int = DEFAULT_STEP_SECONDS,
    t0: int = DEFAULT_T0,
) -> int:
    """Seconds until the counter for ``timestamp`` advances (1..step_seconds)."""
    _check_step(step_seconds)
    elapsed = _elapsed_seconds(timestamp, t0)
    return step_seconds - elapsed % step_seconds


def epoch_seconds(timestamp: Timestamp = None) -> int:
    """
    Return the whole-second Unix time of a point in time.

    Raises:
        InvalidTimestamp: If the timestamp cannot be interpreted.
    """
    if timestamp is None:
        return math.floor(time.time())

    # bool is an int subclass
    if isinstance(timestamp, bool):
        raise InvalidTimestamp(f"Invalid timestamp: {timestamp!r}")

    if isinstance(timestamp, datetime):
        return _datetime_seconds(timestamp)

    if isinstance(timestamp, int):
        return timestamp

    if isinstance(timestamp, float):
        if not math.isfinite(timestamp):
            raise InvalidTimestamp(f"Invalid timestamp: {timestamp!r}")
        return math.floor(timestamp)

    if isinstance(timestamp, str):
        return _datetime_seconds(_parse_timestamp(timestamp))

    raise InvalidTimestamp(
        f"Unsupported timestamp type: {type(timestamp).__name__}"
    )


def _elapsed_seconds(timestamp: Timestamp, t0: int) -> int:
    if isinstance(t0, bool) or not isinstance(t0, int):
        raise InvalidTimestamp(f"T0 must be whole Unix seconds, got {t0!r}")

    elapsed = epoch_seconds(timestamp) - t0
    if elapsed < 0:
        raise InvalidTimestamp(f"Timestamp {timestamp!r} is before T0 ({t0})")
    return elapsed


def _check_step(step_seconds: int) -> None:
    if isinstance(step_seconds, bool) or not isinstance(step_seconds, int):
        raise InvalidTimeStep(
            f"Time step must be an integer number of seconds, got {step_seconds!r}"
        )
    if step_seconds <= 0:
        raise InvalidTimeStep(f"Time step must be positive, got {step_seconds}")


def _datetime_seconds(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    delta = value - EPOCH
    # timedelta keeps seconds and microseconds non-negative, so this floors
    return delta.days * 86400 + delta.seconds


def _parse_timestamp(text: str) -> datetime:
    """
    Parse an ISO 8601 timestamp.

    Accepts "T" or a space between date and time, and a trailing "Z" or
    "UTC" as the UTC designator. Strings without an offset are UTC.
    Fractions of any length and "+HHMM" offsets are rewritten to the
    six-digit and "+HH:MM" forms datetime.fromisoformat() takes on 3.9.
    """
    value = text.strip()
    if value.upper().endswith("UTC"):
        value = value[:-3].rstrip() + "+00:00"
    elif value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"

    value = _COMPACT_OFFSET.sub(r"\1\2\3:\4", value)
    value = _FRACTION.sub(
        lambda m: f"{m.group(1)}.{(m.group(2) + '00000')[:6]}", value
    )

    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise InvalidTimestamp(f"Unparseable timestamp: {text!r}") from e

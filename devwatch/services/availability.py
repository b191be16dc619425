"""Availability calculation — percentage of a trailing window a device was reachable.

Two accounting policies are supported:

* ``decreasing`` starts at 100% and subtracts recorded outages.
* ``increasing`` starts at 0% and credits only the span covered by recorded
  history (current uptime plus the uptime snapshotted on the oldest outage),
  minus recorded outages.

Everything here is a pure function of its arguments. ``now`` defaults to the
wall clock only in the public entry points and is passed down explicitly.
Overlapping outage records are not merged and are double-counted.
"""

import math
import time
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from devwatch.config import settings
from devwatch.core.exceptions import InvalidArgumentError

# 1 day     1 * 24 * 60 * 60 =    86400
# 1 week    7 * 24 * 60 * 60 =   604800
# 1 month  30 * 24 * 60 * 60 =  2592000
# 1 year  365 * 24 * 60 * 60 = 31536000
DAY = 86400
WEEK = 604800
MONTH = 2592000
YEAR = 31536000

WINDOWS: dict[str, int] = {
    "day": DAY,
    "week": WEEK,
    "month": MONTH,
    "year": YEAR,
}

DEFAULT_PRECISION = 3


class AvailabilityPolicy(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"


@dataclass(frozen=True)
class OutageInterval:
    """A recorded span during which a device was unreachable (epoch seconds)."""

    started_at: int | float
    ended_at: int | float | None = None
    prior_uptime_seconds: int | float | None = None

    @property
    def ongoing(self) -> bool:
        return self.ended_at is None


@dataclass(frozen=True)
class DeviceSnapshot:
    """Device identity plus its continuous uptime as of "now" (None = unknown)."""

    device_id: int | str
    uptime_seconds: object = None


def window_seconds(period: str) -> int:
    """Map a period name (day/week/month/year) to its duration in seconds."""
    try:
        return WINDOWS[period.lower()]
    except (KeyError, AttributeError):
        raise InvalidArgumentError(
            f"Unknown availability period '{period}'.",
            details={"allowed": sorted(WINDOWS)},
        ) from None


def resolve_policy(policy: AvailabilityPolicy | str | None = None) -> AvailabilityPolicy:
    """Return the policy to use, falling back to the configured default."""
    if policy is None:
        policy = settings.devwatch_availability_policy
    if isinstance(policy, AvailabilityPolicy):
        return policy
    try:
        return AvailabilityPolicy(str(policy).lower())
    except ValueError:
        raise InvalidArgumentError(
            f"Unknown availability policy '{policy}'.",
            details={"allowed": [p.value for p in AvailabilityPolicy]},
        ) from None


def as_number(value: object) -> float | None:
    """Return value as a finite number, or None if it is not numeric."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def _round(value: float, precision: int) -> float:
    """Round half away from zero, on the shortest decimal repr of value."""
    quantum = Decimal(1).scaleb(-precision)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def outages_in_window(
    outages: Iterable[OutageInterval], duration: int, now: int | float
) -> list[OutageInterval]:
    """Outages still relevant to the window ending at now, oldest first.

    Keeps outages that ended at or after the window start, or are ongoing.
    """
    cutoff = now - duration
    relevant = [o for o in outages if o.ongoing or o.ended_at >= cutoff]
    return sorted(relevant, key=lambda o: o.started_at)


def outage_summary(
    outages: Iterable[OutageInterval], duration: int, now: int | float
) -> int | float:
    """Sum of outage seconds falling inside [now - duration, now].

    Ongoing outages are charged up to now. Outages that began before the
    window are clipped to its start. Contributions are not clamped at zero.
    """
    window_start = now - duration
    outage_sum = 0
    for outage in outages:
        up_again = now if outage.ongoing else outage.ended_at

        if outage.started_at >= window_start:
            going_down = outage.started_at
        else:
            going_down = window_start

        outage_sum += up_again - going_down
    return outage_sum


def availability_decreasing(
    outages: list[OutageInterval],
    duration: int,
    precision: int,
    now: int | float,
) -> float:
    """Start from 100% and subtract recorded outages."""
    if not outages:
        return 100.0

    outage_sum = outage_summary(outages, duration, now)
    return _round(100 * (duration - outage_sum) / duration, precision)


def availability_increasing(
    uptime: object,
    outages: list[OutageInterval],
    duration: int,
    precision: int,
    now: int | float,
) -> float | None:
    """Start from 0% and credit only the span covered by recorded history.

    Returns None when the device uptime is unknown.
    """
    uptime = as_number(uptime)
    if uptime is None:
        return None

    if not outages:
        if uptime >= duration:
            return 100.0
        return _round(100 * uptime / duration, precision)

    oldest = outages[0]
    oldest_uptime = as_number(oldest.prior_uptime_seconds) or 0
    recorded_duration = now - (oldest.started_at - oldest_uptime)
    if recorded_duration > duration:
        recorded_duration = duration

    outage_sum = outage_summary(outages, duration, now)
    return _round(100 * (recorded_duration - outage_sum) / duration, precision)


def availability(
    device: DeviceSnapshot,
    outages: Iterable[OutageInterval],
    duration: int,
    precision: int | None = DEFAULT_PRECISION,
    *,
    policy: AvailabilityPolicy | str | None = None,
    now: int | float | None = None,
) -> float | None:
    """Availability of a device over the trailing ``duration`` seconds, in percent.

    Args:
        device: Snapshot carrying the device's continuous uptime.
        outages: Outage intervals for the device. Outages that ended before
            the window are ignored; the rest are evaluated oldest first.
        duration: Window length in seconds. Must be positive.
        precision: Decimal digits to round to. None uses the configured precision.
        policy: Accounting policy. Defaults to the configured policy.
        now: Epoch seconds for the window end. Defaults to the wall clock.

    Returns:
        Percentage rounded to ``precision``, or None when the increasing
        policy has no usable uptime for the device.
    """
    if isinstance(duration, bool) or not isinstance(duration, (int, float)) or duration <= 0:
        raise InvalidArgumentError(
            "Window duration must be a positive number of seconds.",
            details={"duration": duration},
        )
    if precision is None:
        precision = settings.devwatch_availability_precision
    if isinstance(precision, bool) or not isinstance(precision, int) or precision < 0:
        raise InvalidArgumentError(
            "Precision must be a whole number of decimal digits, zero or more.",
            details={"precision": precision},
        )

    policy = resolve_policy(policy)
    if now is None:
        now = int(time.time())

    found = outages_in_window(outages, duration, now)

    if policy is AvailabilityPolicy.INCREASING:
        return availability_increasing(device.uptime_seconds, found, duration, precision, now)
    return availability_decreasing(found, duration, precision, now)


def day(device, outages, precision=DEFAULT_PRECISION, *, policy=None, now=None):
    return availability(device, outages, DAY, precision, policy=policy, now=now)


def week(device, outages, precision=DEFAULT_PRECISION, *, policy=None, now=None):
    return availability(device, outages, WEEK, precision, policy=policy, now=now)


def month(device, outages, precision=DEFAULT_PRECISION, *, policy=None, now=None):
    return availability(device, outages, MONTH, precision, policy=policy, now=now)


def year(device, outages, precision=DEFAULT_PRECISION, *, policy=None, now=None):
    return availability(device, outages, YEAR, precision, policy=policy, now=now)

"""Astronomy computation layer — calendar instant to lunar phase."""

import math
from datetime import date, datetime, time

from pytz import utc
from skyfield.api import load

from asciimoon.models import SYNODIC_MONTH, PhaseResult

# Builtin timescale data only; no ephemeris download is needed for mean phases.
_ts = load.timescale()

# Reference new moon: 2000-01-06 18:14 UTC
_REFERENCE_NEW_MOON = _ts.utc(2000, 1, 6, 18, 14)

NOON = time(12, 0)


def now() -> datetime:
    """Current wall-clock instant in UTC."""
    return datetime.now(utc)


def instant_for(day: date, at: time = NOON) -> datetime:
    """Anchor a calendar day at a fixed UTC time-of-day (noon by default)."""
    return utc.localize(datetime.combine(day, at))


def as_utc(instant: datetime) -> datetime:
    """Return a timezone-aware UTC datetime. Naive values are taken as UTC."""
    if instant.tzinfo is None:
        return utc.localize(instant)
    return instant.astimezone(utc)


def _normalize_fraction(value: float) -> float:
    """Fold a cycle count into [0, 1), absorbing floating error at both ends."""
    fraction = math.fmod(value, 1.0)
    if fraction < 0.0:
        fraction += 1.0
    if fraction >= 1.0:
        fraction = 0.0
    return fraction


def compute_phase(instant: datetime | date) -> PhaseResult:
    """Compute the lunar phase at an instant using the mean synodic month.

    Elapsed days are measured on skyfield's TT scale between the reference new
    moon and the instant, then reduced modulo the synodic month.

    Args:
        instant: Timezone-aware or naive (UTC) datetime. A plain date is
            anchored at noon UTC.

    Returns:
        PhaseResult with fraction in [0, 1), illuminated percent, and waxing flag.
    """
    if not isinstance(instant, datetime):
        instant = instant_for(instant)
    t = _ts.from_datetime(as_utc(instant))
    elapsed_days = float(t.tt) - float(_REFERENCE_NEW_MOON.tt)

    fraction = _normalize_fraction(elapsed_days / SYNODIC_MONTH)
    illuminated = 50.0 * (1.0 - math.cos(2.0 * math.pi * fraction))
    illuminated = max(0.0, min(100.0, illuminated))

    return PhaseResult(
        fraction=fraction,
        illuminated_percent=illuminated,
        waxing=fraction < 0.5,
    )

"""Daylight gate - sunrise/sunset helpers for the nightlight daemon.

The functions here are pure: given a date or instant and a location they
return solar event times or a daytime verdict, with no I/O and no state.
All instants are handled in UTC.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Tuple

from astral import LocationInfo
from astral.sun import sunrise, sunset, elevation as solar_elevation

logger = logging.getLogger(__name__)


def _observer(latitude: float, longitude: float):
    loc = LocationInfo(latitude=latitude, longitude=longitude, timezone="UTC")
    return loc.observer


def _as_utc(now: datetime) -> datetime:
    """Naive datetimes are taken to already be UTC."""
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def sunrise_sunset(day: date, latitude: float, longitude: float) -> Tuple[datetime, datetime]:
    """Return (sunrise, sunset) for ``day`` at the given location.

    Both values are timezone-aware UTC datetimes on the UTC calendar day
    ``day``.

    Raises:
        ValueError: If the sun does not cross the horizon that day
            (polar day or polar night)
    """
    observer = _observer(latitude, longitude)
    return (
        sunrise(observer, date=day, tzinfo=timezone.utc),
        sunset(observer, date=day, tzinfo=timezone.utc),
    )


def is_daytime(now: datetime, latitude: float, longitude: float) -> bool:
    """True when ``now`` falls between sunrise (inclusive) and sunset (exclusive).

    The sunrise/sunset pair is taken from the UTC day containing ``now``.
    """
    now = _as_utc(now)
    try:
        rises_at, sets_at = sunrise_sunset(now.date(), latitude, longitude)
    except ValueError:
        # Sun stays above or below the horizon all day
        elev = solar_elevation(_observer(latitude, longitude), now)
        logger.debug(f"No sunrise/sunset on {now.date()} - solar elevation {elev:.1f}°")
        return elev > 0.0

    if sets_at <= rises_at:
        # Far-east longitudes: UTC sunset of this date comes before its sunrise
        return now >= rises_at or now < sets_at
    return rises_at <= now < sets_at

"""
Solar Reference Module using Astropy
This module recomputes the daylight quantities with the astropy package

This module provides:
- Julian Date conversion
- Apparent solar position (right ascension, declination)
- Geometric solar altitude for an observer
- Rise/set instants found by sampling the altitude curve

It is independent of daylight_astro.py and is used to check the
closed-form model against a full ephemeris.
"""

import math
import numpy as np
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple
import logging
import warnings

# Suppress astropy warnings for cleaner output
warnings.filterwarnings('ignore', category=UserWarning)

# Import astropy modules
from astropy import units as u
from astropy.time import Time
from astropy.coordinates import (
    EarthLocation, AltAz, PrecessedGeocentric,
    get_sun, solar_system_ephemeris
)

logger = logging.getLogger(__name__)

# Set solar system ephemeris (no download needed)
solar_system_ephemeris.set('builtin')

# ============================================================================
# Constants
# ============================================================================

DEG_PER_HOUR = 15.0
MINUTES_PER_DAY = 1440


# ============================================================================
# Time Conversion Functions
# ============================================================================

def julian_date(year: int, month: int, day: int,
                hour: float = 0.0, minute: float = 0.0, second: float = 0.0) -> float:
    """
    Calculate Julian Date for given date and time using astropy.

    Args:
        year: Year
        month: Month (1-12)
        day: Day of month
        hour: Hour (0-23)
        minute: Minute (0-59)
        second: Second (0-59)

    Returns:
        Julian Date
    """
    dt = datetime(year, month, day, int(hour), int(minute), int(second))
    dt = dt + timedelta(seconds=(second % 1))

    t = Time(dt, scale='utc')

    return t.jd


def _observer(latitude: float, longitude: float) -> EarthLocation:
    """Sea-level observer, longitude east positive."""
    return EarthLocation(lon=longitude * u.deg, lat=latitude * u.deg, height=0 * u.m)


# ============================================================================
# Sun Calculations using Astropy
# ============================================================================

def sun_position(jd: float) -> Tuple[float, float]:
    """
    Calculate apparent sun position using astropy.

    Coordinates refer to the mean equator and equinox of date.

    Args:
        jd: Julian Date

    Returns:
        Tuple of (ra, dec) in degrees
    """
    t = Time(jd, format='jd', scale='utc')
    sun = get_sun(t).transform_to(PrecessedGeocentric(equinox=t, obstime=t))

    ra = sun.ra.deg
    dec = sun.dec.deg

    return ra, dec


def sun_altitude(instant: datetime, latitude: float, longitude: float) -> float:
    """
    Calculate geometric altitude of the sun using astropy.

    Args:
        instant: datetime (naive values are taken as UTC)
        latitude: Observer latitude in degrees
        longitude: Observer longitude in degrees (east positive)

    Returns:
        Altitude in degrees (no refraction)
    """
    if instant.tzinfo is not None:
        instant = instant.astimezone(timezone.utc).replace(tzinfo=None)

    t = Time(instant, scale='utc')
    frame = AltAz(obstime=t, location=_observer(latitude, longitude), pressure=0 * u.hPa)

    return get_sun(t).transform_to(frame).alt.deg


def sun_altitude_curve(day: date, latitude: float, longitude: float,
                       step_minutes: float = 2.0) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sample the sun's altitude over one solar day.

    The samples span 12 hours either side of mean local noon.

    Args:
        day: Calendar day (UTC)
        latitude: Observer latitude in degrees
        longitude: Observer longitude in degrees (east positive)
        step_minutes: Sampling interval in minutes

    Returns:
        Tuple of (minutes after 00:00 UTC of the day, altitudes in degrees)
    """
    noon_minutes = (12.0 - longitude / DEG_PER_HOUR) * 60.0
    minutes = noon_minutes + np.arange(-MINUTES_PER_DAY / 2,
                                       MINUTES_PER_DAY / 2 + step_minutes,
                                       step_minutes)

    midnight = Time(datetime(day.year, day.month, day.day), scale='utc')
    times = midnight + minutes * u.min
    frame = AltAz(obstime=times, location=_observer(latitude, longitude), pressure=0 * u.hPa)
    altitudes = get_sun(times).transform_to(frame).alt.deg

    logger.debug(f"Sampled {len(minutes)} sun altitudes for {day.isoformat()}, "
                 f"max {altitudes.max():.3f} deg")

    return minutes, np.asarray(altitudes)


def crossing_times(day: date, latitude: float, longitude: float,
                   altitude: float, step_minutes: float = 2.0
                   ) -> Tuple[Optional[datetime], Optional[datetime]]:
    """
    Find when the sun crosses an altitude going up and going down.

    Args:
        day: Calendar day (UTC)
        latitude: Observer latitude in degrees
        longitude: Observer longitude in degrees (east positive)
        altitude: Target altitude in degrees
        step_minutes: Sampling interval in minutes

    Returns:
        Tuple of (rising, setting) UTC datetimes, None where the sun does
        not cross the altitude
    """
    minutes, alts = sun_altitude_curve(day, latitude, longitude, step_minutes)
    peak = int(np.argmax(alts))
    midnight = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)

    def interpolate(i: int) -> datetime:
        # Linear interpolation between samples i and i + 1
        frac = (altitude - alts[i]) / (alts[i + 1] - alts[i])
        m = minutes[i] + frac * (minutes[i + 1] - minutes[i])
        return midnight + timedelta(minutes=float(m))

    rising = None
    below = np.nonzero(alts[:peak + 1] < altitude)[0]
    if len(below) > 0 and below[-1] < peak:
        rising = interpolate(int(below[-1]))

    setting = None
    below = np.nonzero(alts[peak:] < altitude)[0]
    if len(below) > 0 and below[0] > 0:
        setting = interpolate(peak + int(below[0]) - 1)

    return rising, setting


def angular_difference(a: float, b: float) -> float:
    """Absolute difference between two angles in degrees, in [0, 180]."""
    d = math.fmod(abs(a - b), 360.0)
    return 360.0 - d if d > 180.0 else d

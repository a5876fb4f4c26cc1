"""
Solar Ephemeris Module for Daylight Calculations

This module provides the closed-form solar calculations behind the
daylight calculator:
- Calendar and Julian Date conversions (proleptic Gregorian)
- Orbital parameters of the Earth-Sun system for a given day
- Solar right ascension, declination and equation of time
- Hour angle and altitude calculations

Eccentricity and obliquity are fixed J2000.0 values with no secular
correction, so results stay within about a minute of a full ephemeris
for several decades either side of 2000.
"""

import math
from datetime import datetime
from typing import Optional, Tuple
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

DEG_TO_RAD = math.pi / 180.0
RAD_TO_DEG = 180.0 / math.pi
HOURS_TO_RAD = math.pi / 12.0
RAD_TO_HOURS = 12.0 / math.pi
DEG_PER_HOUR = 15.0
JD_EPOCH_2000 = 2451545.0  # JD for 2000-01-01 12:00 UT

# Orbital elements of the Sun (J2000.0)
# Eccentricity and obliquity are held fixed. The longitude of perihelion,
# measured from the equinox of date, is the difference of the mean
# longitude and mean anomaly, each linear in time.
ORBITAL_ECCENTRICITY = 0.016709
OBLIQUITY_OF_ECLIPTIC = 23.439  # degrees
MEAN_LONGITUDE_AT_EPOCH = 280.461  # degrees at JD_EPOCH_2000
MEAN_LONGITUDE_RATE = 0.9856474  # degrees per day (tropical)
MEAN_ANOMALY_AT_EPOCH = 357.528  # degrees at JD_EPOCH_2000
MEAN_ANOMALY_RATE = 0.9856003  # degrees per day (anomalistic)
PERIHELION_LONGITUDE = MEAN_LONGITUDE_AT_EPOCH - MEAN_ANOMALY_AT_EPOCH + 360.0  # 282.933 at epoch

# Target solar altitudes (degrees) of the upper limb / twilight bands
SUNRISE_ALTITUDE = -0.833  # 16' solar semi-diameter + 34' refraction
CIVIL_TWILIGHT_ALTITUDE = -6.0
NAUTICAL_TWILIGHT_ALTITUDE = -12.0
ASTRONOMICAL_TWILIGHT_ALTITUDE = -18.0

_DAYS_BEFORE_MONTH = (0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class OrbitalParameters:
    """Solar position for one day, all angles in degrees"""
    day_of_year: int
    days_since_epoch: float  # days from J2000.0 to 12:00 UT of the day
    mean_anomaly: float
    true_anomaly: float
    ecliptic_longitude: float
    right_ascension: float
    declination: float
    equation_of_time: float  # minutes, apparent minus mean solar time


# ============================================================================
# Time Conversion Functions
# ============================================================================

def is_leap_year(year: int) -> bool:
    """Proleptic Gregorian leap year rule."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def day_of_year(year: int, month: int, day: int) -> int:
    """
    Calculate the ordinal day of the year.

    Args:
        year: Year
        month: Month (1-12)
        day: Day of month

    Returns:
        Day of year (1-365, or 1-366 in leap years)
    """
    n = _DAYS_BEFORE_MONTH[month - 1] + day
    if month > 2 and is_leap_year(year):
        n += 1
    return n


def julian_date(year: int, month: int, day: int,
                hour: float = 0.0, minute: float = 0.0, second: float = 0.0) -> float:
    """
    Calculate Julian Date for given date and time.

    Uses the Gregorian calendar for all dates, including those before the
    1582 reform.

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
    decimal_hour = hour + minute / 60.0 + second / 3600.0

    # Adjust for January/February
    if month <= 2:
        year -= 1
        month += 12

    a = math.floor(year / 100)
    b = 2 - a + math.floor(a / 4)

    jd = (math.floor(365.25 * (year + 4716)) +
          math.floor(30.6001 * (month + 1)) +
          day + b - 1524.5)
    jd += decimal_hour / 24.0

    return jd


def datetime_to_jd(dt: datetime) -> float:
    """Julian Date of a naive UTC datetime."""
    return julian_date(dt.year, dt.month, dt.day,
                       dt.hour, dt.minute, dt.second + dt.microsecond / 1e6)


# ============================================================================
# Angle Helpers
# ============================================================================

def normalize_degrees(angle: float) -> float:
    """Reduce an angle to the range [0, 360)."""
    angle = math.fmod(angle, 360.0)
    if angle < 0:
        angle += 360.0
    return angle


def signed_degrees(angle: float) -> float:
    """Reduce an angle to the range (-180, 180]."""
    angle = normalize_degrees(angle)
    if angle > 180.0:
        angle -= 360.0
    return angle


# ============================================================================
# Solar Position
# ============================================================================

def mean_anomaly(days_since_epoch: float) -> float:
    """Mean anomaly of the Sun in degrees."""
    return normalize_degrees(MEAN_ANOMALY_AT_EPOCH + MEAN_ANOMALY_RATE * days_since_epoch)


def mean_longitude(days_since_epoch: float) -> float:
    """Mean longitude of the Sun in degrees."""
    return normalize_degrees(MEAN_LONGITUDE_AT_EPOCH + MEAN_LONGITUDE_RATE * days_since_epoch)


def perihelion_longitude(days_since_epoch: float) -> float:
    """Longitude of perihelion from the equinox of date, in degrees."""
    drift = (MEAN_LONGITUDE_RATE - MEAN_ANOMALY_RATE) * days_since_epoch
    return normalize_degrees(PERIHELION_LONGITUDE + drift)


def equation_of_center(mean_anomaly_deg: float) -> float:
    """
    Difference between true and mean anomaly.

    Two-term series solution of Kepler's equation, adequate for the
    small eccentricity of the Earth's orbit.

    Args:
        mean_anomaly_deg: Mean anomaly in degrees

    Returns:
        Equation of center in degrees
    """
    e = ORBITAL_ECCENTRICITY
    m_rad = mean_anomaly_deg * DEG_TO_RAD

    c_rad = ((2.0 * e - e ** 3 / 4.0) * math.sin(m_rad) +
             1.25 * e ** 2 * math.sin(2.0 * m_rad))

    return c_rad * RAD_TO_DEG


def ecliptic_to_equatorial(ecliptic_longitude: float) -> Tuple[float, float]:
    """
    Convert the Sun's ecliptic longitude to equatorial coordinates.

    The Sun's ecliptic latitude is taken as zero.

    Args:
        ecliptic_longitude: Ecliptic longitude in degrees

    Returns:
        Tuple of (right ascension, declination) in degrees, RA in [0, 360)
    """
    lambda_rad = ecliptic_longitude * DEG_TO_RAD
    eps_rad = OBLIQUITY_OF_ECLIPTIC * DEG_TO_RAD

    # atan2 keeps RA in the same quadrant as the ecliptic longitude
    ra_rad = math.atan2(math.cos(eps_rad) * math.sin(lambda_rad), math.cos(lambda_rad))
    dec_rad = math.asin(math.sin(eps_rad) * math.sin(lambda_rad))

    return normalize_degrees(ra_rad * RAD_TO_DEG), dec_rad * RAD_TO_DEG


def orbital_parameters(year: int, month: int, day: int) -> OrbitalParameters:
    """
    Calculate the Sun's orbital parameters for a calendar day.

    The parameters are evaluated at 12:00 UT of the day.

    Args:
        year: Year
        month: Month (1-12)
        day: Day of month

    Returns:
        OrbitalParameters for the day
    """
    n = julian_date(year, month, day, 12, 0, 0) - JD_EPOCH_2000

    m = mean_anomaly(n)
    nu = m + equation_of_center(m)
    lambda_sun = normalize_degrees(nu + perihelion_longitude(n))
    ra, dec = ecliptic_to_equatorial(lambda_sun)

    # Mean longitude minus right ascension, 4 minutes of time per degree
    eot = signed_degrees(mean_longitude(n) - ra) * 60.0 / DEG_PER_HOUR

    return OrbitalParameters(
        day_of_year=day_of_year(year, month, day),
        days_since_epoch=n,
        mean_anomaly=m,
        true_anomaly=normalize_degrees(nu),
        ecliptic_longitude=lambda_sun,
        right_ascension=ra,
        declination=dec,
        equation_of_time=eot,
    )


def solar_noon(params: OrbitalParameters, longitude: float) -> float:
    """
    Calculate the time of local solar noon.

    Args:
        params: Orbital parameters of the day
        longitude: Observer longitude in degrees (east positive)

    Returns:
        Solar noon in hours after 00:00 UT of the day
    """
    return 12.0 - longitude / DEG_PER_HOUR - params.equation_of_time / 60.0


# ============================================================================
# Hour Angle and Altitude Calculations
# ============================================================================

def hour_angle_from_altitude(altitude: float, dec: float, lat: float,
                             polar_tolerance: float = 1e-9) -> Optional[float]:
    """
    Calculate hour angle for given altitude.

    Args:
        altitude: Altitude in degrees
        dec: Declination in degrees
        lat: Observer latitude in degrees
        polar_tolerance: Distance from a pole (degrees) treated as the pole

    Returns:
        Hour angle in hours, or None if the Sun never crosses the altitude
    """
    # The Sun's altitude does not change over the day at the poles
    if 90.0 - abs(lat) <= polar_tolerance:
        return None

    alt_rad = altitude * DEG_TO_RAD
    dec_rad = dec * DEG_TO_RAD
    lat_rad = lat * DEG_TO_RAD

    cos_ha = ((math.sin(alt_rad) - math.sin(dec_rad) * math.sin(lat_rad)) /
              (math.cos(dec_rad) * math.cos(lat_rad)))

    if abs(cos_ha) > 1.0:
        return None

    ha_rad = math.acos(cos_ha)
    return ha_rad * RAD_TO_HOURS


def culmination_altitude(dec: float, lat: float) -> float:
    """Altitude of an object at upper culmination, in degrees."""
    return 90.0 - abs(lat - dec)


def solar_altitude(ha: float, dec: float, lat: float) -> float:
    """
    Calculate altitude of the Sun at a given hour angle.

    Args:
        ha: Hour angle in hours (negative before noon)
        dec: Declination in degrees
        lat: Observer latitude in degrees

    Returns:
        Altitude in degrees
    """
    ha_rad = ha * HOURS_TO_RAD
    dec_rad = dec * DEG_TO_RAD
    lat_rad = lat * DEG_TO_RAD

    sin_alt = (math.sin(dec_rad) * math.sin(lat_rad) +
               math.cos(dec_rad) * math.cos(lat_rad) * math.cos(ha_rad))

    # Handle numerical errors
    if sin_alt > 1.0:
        sin_alt = 1.0
    elif sin_alt < -1.0:
        sin_alt = -1.0

    return math.asin(sin_alt) * RAD_TO_DEG


"""
Daylight Calculator Module

This module computes sunrise, sunset and the civil, nautical and
astronomical twilight boundaries for a calendar day and a location.
All returned instants are timezone-aware UTC datetimes.

Polar day and polar night are reported as event conditions
(ALWAYS_DAYLIGHT / ALWAYS_DARK) rather than as special timestamps.

Example:
    >>> from datetime import date
    >>> from daylight import compute_daylight
    >>> result = compute_daylight(date(2015, 3, 27), 52 + 13 / 60, 5 + 58 / 60)
    >>> result.sunset.instant
    datetime.datetime(2015, 3, 27, 18, 0, 23, tzinfo=datetime.timezone.utc)
"""

import math
import numbers
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum

from daylight_astro import (
    OrbitalParameters, orbital_parameters, solar_noon, hour_angle_from_altitude,
    culmination_altitude, solar_altitude, datetime_to_jd, normalize_degrees,
    signed_degrees, mean_anomaly, mean_longitude, perihelion_longitude,
    equation_of_center, ecliptic_to_equatorial, JD_EPOCH_2000, DEG_PER_HOUR,
    SUNRISE_ALTITUDE, CIVIL_TWILIGHT_ALTITUDE,
    NAUTICAL_TWILIGHT_ALTITUDE, ASTRONOMICAL_TWILIGHT_ALTITUDE
)

logger = logging.getLogger(__name__)


# ============================================================================
# Exceptions
# ============================================================================

class InvalidCoordinate(ValueError):
    """Latitude or longitude outside the valid range"""

    def __init__(self, name: str, value: float, low: float, high: float):
        super().__init__(f"{name} {value!r} is outside [{low:g}, {high:g}] degrees")
        self.name = name
        self.value = value


# ============================================================================
# Enumerations
# ============================================================================

class SolarEventKind(Enum):
    """Solar events reported for a day"""
    SUNRISE = "sunrise"
    SUNSET = "sunset"
    CIVIL_TWILIGHT_BEGIN = "civil_twilight_begin"
    CIVIL_TWILIGHT_END = "civil_twilight_end"
    NAUTICAL_TWILIGHT_BEGIN = "nautical_twilight_begin"
    NAUTICAL_TWILIGHT_END = "nautical_twilight_end"
    ASTRONOMICAL_TWILIGHT_BEGIN = "astronomical_twilight_begin"
    ASTRONOMICAL_TWILIGHT_END = "astronomical_twilight_end"

    @property
    def altitude(self) -> float:
        """Target solar altitude in degrees"""
        return EVENT_ALTITUDES[self]

    @property
    def is_rising(self) -> bool:
        """True for morning events (Sun crossing the altitude upwards)"""
        return self in _RISING_EVENTS


class EventCondition(Enum):
    """Outcome of solving an event for one day"""
    OCCURS = "occurs"
    ALWAYS_DAYLIGHT = "always_daylight"  # Sun stays above the target altitude
    ALWAYS_DARK = "always_dark"  # Sun stays below the target altitude


EVENT_ALTITUDES = {
    SolarEventKind.SUNRISE: SUNRISE_ALTITUDE,
    SolarEventKind.SUNSET: SUNRISE_ALTITUDE,
    SolarEventKind.CIVIL_TWILIGHT_BEGIN: CIVIL_TWILIGHT_ALTITUDE,
    SolarEventKind.CIVIL_TWILIGHT_END: CIVIL_TWILIGHT_ALTITUDE,
    SolarEventKind.NAUTICAL_TWILIGHT_BEGIN: NAUTICAL_TWILIGHT_ALTITUDE,
    SolarEventKind.NAUTICAL_TWILIGHT_END: NAUTICAL_TWILIGHT_ALTITUDE,
    SolarEventKind.ASTRONOMICAL_TWILIGHT_BEGIN: ASTRONOMICAL_TWILIGHT_ALTITUDE,
    SolarEventKind.ASTRONOMICAL_TWILIGHT_END: ASTRONOMICAL_TWILIGHT_ALTITUDE,
}

_RISING_EVENTS = frozenset((
    SolarEventKind.SUNRISE,
    SolarEventKind.CIVIL_TWILIGHT_BEGIN,
    SolarEventKind.NAUTICAL_TWILIGHT_BEGIN,
    SolarEventKind.ASTRONOMICAL_TWILIGHT_BEGIN,
))


# ============================================================================
# Constants and Configuration
# ============================================================================

class Config:
    """Configuration constants for the daylight calculator"""

    # Events computed when the caller does not select any
    DEFAULT_EVENTS = tuple(SolarEventKind)

    # Latitude within this distance of a pole (degrees) is treated as the pole
    POLAR_TOLERANCE = 1e-9

    # Valid coordinate ranges (degrees)
    MIN_LATITUDE = -90.0
    MAX_LATITUDE = 90.0
    MIN_LONGITUDE = -180.0
    MAX_LONGITUDE = 180.0


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class GeoCoordinate:
    """Observer position in decimal degrees (north and east positive)"""
    latitude: float
    longitude: float

    def __post_init__(self):
        _check_range("latitude", self.latitude, Config.MIN_LATITUDE, Config.MAX_LATITUDE)
        _check_range("longitude", self.longitude, Config.MIN_LONGITUDE, Config.MAX_LONGITUDE)


@dataclass(frozen=True)
class SolarEvent:
    """A solved event: either a UTC instant or a polar condition"""
    kind: SolarEventKind
    condition: EventCondition
    instant: Optional[datetime] = None

    @property
    def occurs(self) -> bool:
        return self.condition is EventCondition.OCCURS

    def local_time(self, utc_offset_hours: float) -> Optional[datetime]:
        """
        Express the instant in a fixed UTC offset.

        Args:
            utc_offset_hours: Offset from UTC in hours (e.g. 1.0 for CET)

        Returns:
            Aware datetime in the given offset, or None if the event
            does not occur
        """
        if self.instant is None:
            return None
        tz = timezone(timedelta(hours=utc_offset_hours))
        return self.instant.astimezone(tz)


@dataclass(frozen=True)
class DaylightResult:
    """Solar events for one calendar day at one location"""
    day: date
    coordinate: GeoCoordinate
    declination: float  # degrees
    equation_of_time: float  # minutes
    solar_noon: datetime
    noon_altitude: float  # degrees
    events: Dict[SolarEventKind, SolarEvent] = field(default_factory=dict)

    def __getitem__(self, kind: SolarEventKind) -> SolarEvent:
        return self.events[kind]

    def __contains__(self, kind: SolarEventKind) -> bool:
        return kind in self.events

    @property
    def sunrise(self) -> SolarEvent:
        return self.events[SolarEventKind.SUNRISE]

    @property
    def sunset(self) -> SolarEvent:
        return self.events[SolarEventKind.SUNSET]

    @property
    def civil_twilight_begin(self) -> SolarEvent:
        return self.events[SolarEventKind.CIVIL_TWILIGHT_BEGIN]

    @property
    def civil_twilight_end(self) -> SolarEvent:
        return self.events[SolarEventKind.CIVIL_TWILIGHT_END]

    @property
    def nautical_twilight_begin(self) -> SolarEvent:
        return self.events[SolarEventKind.NAUTICAL_TWILIGHT_BEGIN]

    @property
    def nautical_twilight_end(self) -> SolarEvent:
        return self.events[SolarEventKind.NAUTICAL_TWILIGHT_END]

    @property
    def astronomical_twilight_begin(self) -> SolarEvent:
        return self.events[SolarEventKind.ASTRONOMICAL_TWILIGHT_BEGIN]

    @property
    def astronomical_twilight_end(self) -> SolarEvent:
        return self.events[SolarEventKind.ASTRONOMICAL_TWILIGHT_END]

    @property
    def day_length(self) -> Optional[timedelta]:
        """Time between sunrise and sunset, None without both instants"""
        rise = self.events.get(SolarEventKind.SUNRISE)
        set_ = self.events.get(SolarEventKind.SUNSET)
        if rise is None or set_ is None or not (rise.occurs and set_.occurs):
            return None
        return set_.instant - rise.instant


# ============================================================================
# Helper Functions
# ============================================================================

def _check_range(name: str, value: float, low: float, high: float):
    """Raise InvalidCoordinate unless low <= value <= high."""
    if not isinstance(value, numbers.Real) or isinstance(value, bool):
        raise TypeError(f"{name} must be a number, not {type(value).__name__}")
    if not math.isfinite(value) or not low <= value <= high:
        logger.warning(f"Rejecting {name} {value!r}")
        raise InvalidCoordinate(name, value, low, high)


def _utc_day(when) -> date:
    """Calendar day of a date or datetime, taken in UTC."""
    if isinstance(when, datetime):
        if when.tzinfo is not None and when.utcoffset() is not None:
            when = when.astimezone(timezone.utc)
        return when.date()
    if isinstance(when, date):
        return when
    raise TypeError(f"Expected date or datetime, not {type(when).__name__}")


def _hours_to_instant(midnight: datetime, hours: float) -> datetime:
    """UTC instant a number of hours after midnight, floored to whole seconds."""
    return midnight + timedelta(seconds=math.floor(hours * 3600.0))


# ============================================================================
# Main Calculator Class
# ============================================================================

class SolarEventCalculator:
    """
    Solves solar events for a calendar day and location.

    The calculator keeps only the immutable event selection, so one
    instance can be shared freely.
    """

    def __init__(self, kinds: Optional[Iterable[SolarEventKind]] = None):
        """
        Initialize calculator

        Args:
            kinds: Events to compute (default: all eight)
        """
        self.kinds: Tuple[SolarEventKind, ...] = (
            Config.DEFAULT_EVENTS if kinds is None else tuple(dict.fromkeys(kinds)))
        for kind in self.kinds:
            if not isinstance(kind, SolarEventKind):
                raise TypeError(f"Unknown solar event kind: {kind!r}")

    def compute(self, when, latitude: float, longitude: float) -> DaylightResult:
        """
        Compute the selected solar events.

        Args:
            when: date or datetime; only the calendar day (in UTC) is used
            latitude: Observer latitude in degrees (-90 to 90, north positive)
            longitude: Observer longitude in degrees (-180 to 180, east positive)

        Returns:
            DaylightResult with one SolarEvent per selected kind

        Raises:
            InvalidCoordinate: If latitude or longitude is out of range
        """
        coordinate = GeoCoordinate(latitude, longitude)
        day = _utc_day(when)

        params = orbital_parameters(day.year, day.month, day.day)
        logger.debug(f"{day.isoformat()} (day {params.day_of_year}): "
                     f"M={params.mean_anomaly:.4f} nu={params.true_anomaly:.4f} "
                     f"lambda={params.ecliptic_longitude:.4f} "
                     f"RA={params.right_ascension:.4f} Dec={params.declination:.4f} "
                     f"EoT={params.equation_of_time:.2f} min")

        midnight = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
        noon = solar_noon(params, longitude)

        events = {}
        for kind in self.kinds:
            events[kind] = self._solve(kind, params, coordinate, midnight, noon)

        return DaylightResult(
            day=day,
            coordinate=coordinate,
            declination=params.declination,
            equation_of_time=params.equation_of_time,
            solar_noon=_hours_to_instant(midnight, noon),
            noon_altitude=culmination_altitude(params.declination, latitude),
            events=events,
        )

    def _solve(self, kind: SolarEventKind, params: OrbitalParameters,
               coordinate: GeoCoordinate, midnight: datetime, noon: float) -> SolarEvent:
        """Solve a single event around solar noon."""
        ha = hour_angle_from_altitude(kind.altitude, params.declination,
                                      coordinate.latitude, Config.POLAR_TOLERANCE)

        if ha is None:
            # Sun never crosses the altitude; decide from the noon altitude
            if culmination_altitude(params.declination, coordinate.latitude) > kind.altitude:
                condition = EventCondition.ALWAYS_DAYLIGHT
            else:
                condition = EventCondition.ALWAYS_DARK
            logger.debug(f"{kind.value} at latitude {coordinate.latitude}: {condition.value}")
            return SolarEvent(kind, condition)

        hours = noon - ha if kind.is_rising else noon + ha
        return SolarEvent(kind, EventCondition.OCCURS, _hours_to_instant(midnight, hours))


# ============================================================================
# Module-level Functions
# ============================================================================

def compute_daylight(when, latitude: float, longitude: float,
                     kinds: Optional[Iterable[SolarEventKind]] = None) -> DaylightResult:
    """
    Compute sunrise, sunset and twilight boundaries for a day.

    Args:
        when: date or datetime; only the calendar day (in UTC) is used
        latitude: Observer latitude in degrees (north positive)
        longitude: Observer longitude in degrees (east positive)
        kinds: Events to compute (default: all eight)

    Returns:
        DaylightResult

    Raises:
        InvalidCoordinate: If latitude or longitude is out of range
    """
    return SolarEventCalculator(kinds).compute(when, latitude, longitude)


def solar_altitude_at(instant: datetime, latitude: float, longitude: float) -> float:
    """
    Calculate the Sun's geometric altitude at an instant.

    Args:
        instant: datetime (naive values are taken as UTC)
        latitude: Observer latitude in degrees
        longitude: Observer longitude in degrees (east positive)

    Returns:
        Altitude in degrees (no refraction)

    Raises:
        InvalidCoordinate: If latitude or longitude is out of range
    """
    GeoCoordinate(latitude, longitude)
    if instant.tzinfo is not None and instant.utcoffset() is not None:
        instant = instant.astimezone(timezone.utc).replace(tzinfo=None)

    n = datetime_to_jd(instant) - JD_EPOCH_2000
    m = mean_anomaly(n)
    lambda_sun = normalize_degrees(m + equation_of_center(m) + perihelion_longitude(n))
    ra, dec = ecliptic_to_equatorial(lambda_sun)

    # Hour angle from the mean Sun, corrected by the equation of time
    ut_hours = instant.hour + instant.minute / 60.0 + instant.second / 3600.0
    ha_deg = (ut_hours - 12.0) * DEG_PER_HOUR + longitude + signed_degrees(mean_longitude(n) - ra)

    return solar_altitude(ha_deg / DEG_PER_HOUR, dec, latitude)

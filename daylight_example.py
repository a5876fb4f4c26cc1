"""
Example Usage of the Daylight Calculator

This file demonstrates how to use the daylight module to:
1. Compute today's sunset for a fixed location
2. Print a full daylight report (declination, day length, noon, twilight)
3. Handle polar day and polar night
4. Report invalid coordinates
"""

import sys
import logging
from datetime import datetime, timedelta, timezone

# Add src to path if running from project root
sys.path.insert(0, 'src')

from daylight import (
    compute_daylight, solar_altitude_at, DaylightResult, SolarEvent,
    SolarEventKind, InvalidCoordinate
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Apeldoorn, the Netherlands (52°13'N, 5°58'E), CET = UTC+1
APELDOORN_LATITUDE = 52.0 + 13.0 / 60.0
APELDOORN_LONGITUDE = 5.0 + 58.0 / 60.0
APELDOORN_UTC_OFFSET = 1.0


def format_event(event: SolarEvent, utc_offset: float) -> str:
    """Render an event as 'HH:MM UT / HH:MM local' or its condition"""
    if not event.occurs:
        return event.condition.value.replace('_', ' ')
    local = event.local_time(utc_offset)
    return f"{event.instant.strftime('%H:%M')} UT / {local.strftime('%H:%M')} local"


def demonstrate_sunset(now: datetime):
    """Print when the sun sets today, like a one-line status"""

    result = compute_daylight(now, APELDOORN_LATITUDE, APELDOORN_LONGITUDE,
                              kinds=[SolarEventKind.SUNSET])
    sunset = result.sunset.local_time(APELDOORN_UTC_OFFSET)
    print(f"Today the sun sets in Apeldoorn at {sunset.strftime('%I:%M%p')}")


def print_report(result: DaylightResult, utc_offset: float, now: datetime):
    """Print a full daylight report"""

    print("\n" + "="*60)
    print(f"Daylight for {result.day.isoformat()} at "
          f"{result.coordinate.latitude:.4f}/{result.coordinate.longitude:.4f}")
    print("="*60)

    print(f"Declination:          {result.declination:.4f}°")
    print(f"Equation of time:     {result.equation_of_time:+.2f} min")
    if result.day_length is not None:
        minutes = int(result.day_length.total_seconds() // 60)
        print(f"Day length:           {minutes // 60}:{minutes % 60:02d}")
    else:
        print("Day length:           n/a")

    for kind in (SolarEventKind.ASTRONOMICAL_TWILIGHT_BEGIN,
                 SolarEventKind.NAUTICAL_TWILIGHT_BEGIN,
                 SolarEventKind.CIVIL_TWILIGHT_BEGIN,
                 SolarEventKind.SUNRISE):
        print(f"{kind.value + ':':22s}{format_event(result[kind], utc_offset)}")

    local_noon = result.solar_noon.astimezone(timezone(timedelta(hours=utc_offset)))
    print(f"{'noon:':22s}{result.solar_noon.strftime('%H:%M')} UT / "
          f"{local_noon.strftime('%H:%M')}  (altitude {result.noon_altitude:.1f}°)")

    for kind in (SolarEventKind.SUNSET,
                 SolarEventKind.CIVIL_TWILIGHT_END,
                 SolarEventKind.NAUTICAL_TWILIGHT_END,
                 SolarEventKind.ASTRONOMICAL_TWILIGHT_END):
        print(f"{kind.value + ':':22s}{format_event(result[kind], utc_offset)}")

    altitude = solar_altitude_at(now, result.coordinate.latitude, result.coordinate.longitude)
    print(f"Sun altitude now:     {altitude:.2f}°")


def demonstrate_polar_conditions():
    """Show polar day and polar night"""

    print("\n" + "="*60)
    print("Polar day and night at 78°N (Svalbard)")
    print("="*60)

    for day in (datetime(2015, 6, 21), datetime(2015, 12, 21)):
        result = compute_daylight(day, 78.0, 15.0)
        print(f"{day.date().isoformat()}:")
        for kind in SolarEventKind:
            print(f"  {kind.value:28s} {format_event(result[kind], 1.0)}")


def demonstrate_invalid_coordinates():
    """Show the error raised for invalid input"""

    print("\n" + "="*60)
    print("Invalid coordinates")
    print("="*60)

    for lat, lon in ((91.0, 0.0), (0.0, -200.0)):
        try:
            compute_daylight(datetime(2015, 3, 27), lat, lon)
        except InvalidCoordinate as e:
            print(f"  ({lat}, {lon}): {e}")


def main():
    """Main demonstration function"""

    now = datetime.now(timezone.utc)

    demonstrate_sunset(now)

    result = compute_daylight(now, APELDOORN_LATITUDE, APELDOORN_LONGITUDE)
    print_report(result, APELDOORN_UTC_OFFSET, now)

    demonstrate_polar_conditions()
    demonstrate_invalid_coordinates()


if __name__ == "__main__":
    main()

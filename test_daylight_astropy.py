#!/usr/bin/env python3
"""
Test script to compare daylight.py and daylight_astropy.py outputs
Verifies that the closed-form solar model agrees with astropy within
its stated accuracy (about a minute in time)
"""

import sys
import os
from datetime import date, timedelta

import numpy as np
import pytest

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from astropy.utils import iers

# Use the bundled IERS-B table, no downloads
iers.conf.auto_download = False

# Import both modules
import daylight_astro as astro_orig
import daylight_astropy as astro_py
from daylight import compute_daylight, SolarEventKind, EventCondition

# Apeldoorn, the Netherlands (52°13'N, 5°58'E)
APELDOORN_LATITUDE = 52.0 + 13.0 / 60.0
APELDOORN_LONGITUDE = 5.0 + 58.0 / 60.0

TIME_TOLERANCE = timedelta(minutes=3)


def compare_values(name, val1, val2, tolerance=0.01, unit=""):
    """Compare two values and report differences"""
    if val1 is None and val2 is None:
        print(f"  {name:30s}: Both None - OK")
        return True
    elif val1 is None or val2 is None:
        print(f"  {name:30s}: MISMATCH - Model: {val1}, Astropy: {val2}")
        return False

    diff = abs(val1 - val2)
    if diff <= tolerance:
        print(f"  {name:30s}: {val1:.4f} vs {val2:.4f} {unit} (diff: {diff:.6f}) - OK")
        return True
    else:
        print(f"  {name:30s}: {val1:.4f} vs {val2:.4f} {unit} (diff: {diff:.6f}) - MISMATCH")
        return False


def compare_times(name, model_time, astropy_time):
    """Compare two UTC datetimes within TIME_TOLERANCE"""
    if model_time is None or astropy_time is None:
        print(f"  {name:30s}: Model: {model_time}, Astropy: {astropy_time}")
        return model_time is None and astropy_time is None

    diff = abs(model_time - astropy_time)
    status = "OK" if diff <= TIME_TOLERANCE else "MISMATCH"
    print(f"  {name:30s}: {model_time:%H:%M:%S} vs {astropy_time:%H:%M:%S} "
          f"(diff: {diff.total_seconds():.0f} s) - {status}")
    return diff <= TIME_TOLERANCE


def test_julian_date():
    """Test Julian Date against astropy"""
    print("\n" + "="*70)
    print("TESTING JULIAN DATE")
    print("="*70)

    for args in ((2000, 1, 1, 12, 0, 0), (2015, 3, 27, 12, 0, 0), (2024, 2, 29, 6, 30, 15.5)):
        jd_orig = astro_orig.julian_date(*args)
        jd_py = astro_py.julian_date(*args)
        assert compare_values(f"JD {args[:3]}", jd_orig, jd_py, tolerance=1e-6)


@pytest.mark.parametrize("year, month, day", [
    (2000, 1, 1),
    (2005, 4, 15),
    (2010, 9, 23),
    (2015, 3, 27),
    (2015, 6, 21),
    (2015, 11, 3),
    (2020, 12, 21),
    (2024, 2, 29),
])
def test_sun_position(year, month, day):
    """Compare right ascension and declination at 12:00 UT"""
    print(f"\nSun position {year:04d}-{month:02d}-{day:02d}:")
    params = astro_orig.orbital_parameters(year, month, day)
    ra_py, dec_py = astro_py.sun_position(astro_orig.julian_date(year, month, day, 12, 0, 0))

    assert compare_values("Declination", params.declination, dec_py, tolerance=0.05, unit="deg")
    ra_diff = astro_py.angular_difference(params.right_ascension, ra_py)
    print(f"  {'Right ascension':30s}: {params.right_ascension:.4f} vs {ra_py:.4f} deg "
          f"(diff: {ra_diff:.6f})")
    assert ra_diff < 0.1


@pytest.mark.parametrize("day, latitude, longitude", [
    (date(2015, 3, 27), APELDOORN_LATITUDE, APELDOORN_LONGITUDE),
    (date(2015, 6, 21), APELDOORN_LATITUDE, APELDOORN_LONGITUDE),
    (date(2015, 12, 21), APELDOORN_LATITUDE, APELDOORN_LONGITUDE),
    (date(2015, 6, 21), -33.87, 151.21),
    (date(2024, 2, 29), 40.0, -74.0),
    (date(2020, 9, 22), 0.0, 100.0),
])
def test_rise_set_times(day, latitude, longitude):
    """Compare event instants with the sampled astropy altitude curve"""
    print("\n" + "="*70)
    print(f"TESTING EVENTS {day.isoformat()} at {latitude:.4f}/{longitude:.4f}")
    print("="*70)

    result = compute_daylight(day, latitude, longitude)
    pairs = (
        (SolarEventKind.SUNRISE, SolarEventKind.SUNSET),
        (SolarEventKind.CIVIL_TWILIGHT_BEGIN, SolarEventKind.CIVIL_TWILIGHT_END),
    )
    for rising_kind, setting_kind in pairs:
        rising, setting = astro_py.crossing_times(day, latitude, longitude, rising_kind.altitude)
        assert compare_times(rising_kind.value, result[rising_kind].instant, rising)
        assert compare_times(setting_kind.value, result[setting_kind].instant, setting)


@pytest.mark.parametrize("day, condition", [
    (date(2015, 6, 21), EventCondition.ALWAYS_DAYLIGHT),
    (date(2015, 12, 21), EventCondition.ALWAYS_DARK),
])
def test_polar_conditions(day, condition):
    """Boundary conditions agree with the astropy altitude range"""
    minutes, alts = astro_py.sun_altitude_curve(day, 78.0, 15.0, step_minutes=10.0)
    result = compute_daylight(day, 78.0, 15.0)
    print(f"\n{day.isoformat()} at 78N: altitude {alts.min():.2f} to {alts.max():.2f} deg, "
          f"sunrise {result.sunrise.condition.value}")

    assert result.sunrise.condition is condition
    if condition is EventCondition.ALWAYS_DAYLIGHT:
        assert np.all(alts > SolarEventKind.SUNRISE.altitude)
    else:
        assert np.all(alts < SolarEventKind.SUNRISE.altitude)
    assert astro_py.crossing_times(day, 78.0, 15.0, SolarEventKind.SUNRISE.altitude,
                                   step_minutes=10.0) == (None, None)


def test_altitude_at_sunrise():
    """The astropy altitude at the model's sunrise is the target altitude"""
    result = compute_daylight(date(2015, 3, 27), APELDOORN_LATITUDE, APELDOORN_LONGITUDE)
    alt = astro_py.sun_altitude(result.sunrise.instant, APELDOORN_LATITUDE, APELDOORN_LONGITUDE)
    print(f"\nAstropy altitude at sunrise: {alt:.3f} deg")
    assert alt == pytest.approx(SolarEventKind.SUNRISE.altitude, abs=0.3)


def test_altitude_curve_shape():
    """The sampled curve spans one day around local noon"""
    minutes, alts = astro_py.sun_altitude_curve(date(2015, 3, 27), 0.0, 0.0, step_minutes=30.0)
    assert minutes.shape == alts.shape
    assert minutes[0] == pytest.approx(0.0)
    assert minutes[-1] == pytest.approx(1440.0)
    assert 600.0 < minutes[int(np.argmax(alts))] < 840.0


def main():
    """Run all tests"""
    print("\n" + "="*70)
    print(" Comparison of daylight model and astropy")
    print("="*70)

    test_julian_date()
    test_sun_position(2015, 3, 27)
    test_rise_set_times(date(2015, 3, 27), APELDOORN_LATITUDE, APELDOORN_LONGITUDE)
    test_polar_conditions(date(2015, 6, 21), EventCondition.ALWAYS_DAYLIGHT)
    test_altitude_at_sunrise()
    test_altitude_curve_shape()

    print("\n" + "="*70)
    print(" All comparisons completed successfully!")
    print("="*70 + "\n")


if __name__ == "__main__":
    main()

from datetime import date

import pytest

from asteroid_watch import units


def test_distance_conversions():
    assert units.au_to_km(1) == 149597870.7
    assert units.au_to_lunar(0.05) == pytest.approx(19.4585)
    assert units.km_to_lunar(384400) == 1.0
    assert units.kps_to_kph(10) == 36000


def test_parse_date_formats():
    assert units.parse_date("2026-10-19") == date(2026, 10, 19)
    assert units.parse_date("2026-Oct-21 04:12") == date(2026, 10, 21)
    assert units.parse_date("not a date") is None
    assert units.parse_date(None) is None


def test_date_offset_and_range():
    assert units.date_offset(7, date(2026, 12, 28)) == "2027-01-04"
    assert units.date_offset(1, "2026-02-28") == "2026-03-01"
    days = units.date_range("2026-10-19", "2026-10-22")
    assert days == ["2026-10-19", "2026-10-20", "2026-10-21", "2026-10-22"]
    assert units.date_range(date(2026, 1, 1), date(2026, 1, 1)) == ["2026-01-01"]


def test_as_date_rejects_garbage():
    with pytest.raises(ValueError):
        units.as_date("yesterday")

import pytest

from stormrank.cleaning import (
    damage_multiplier,
    expand_amount,
    expand_damage,
    fill_absent_damage,
    filter_impact,
    filter_years,
    parse_begin_year,
    parse_years,
)
from stormrank.errors import ParseError


@pytest.mark.parametrize("code, multiplier", [("K", 1e3), ("M", 1e6), ("B", 1e9)])
@pytest.mark.parametrize("coefficient", [0.0, 1.0, 2.5, 150.0])
def test_expand_amount_known_codes(coefficient, code, multiplier):
    assert expand_amount(coefficient, code) == coefficient * multiplier


@pytest.mark.parametrize("code", ["", " ", "?", "h", "H", "+", "-", "0", "5", "m", "k", " K"])
def test_unknown_codes_are_absent(code):
    assert damage_multiplier(code) is None
    assert expand_amount(25.0, code) is None


def test_expand_damage_property_and_crop_independent(make_storm_event):
    events = [
        make_storm_event(prop_dmg=5, prop_dmg_exp="K", crop_dmg=3, crop_dmg_exp="?"),
        make_storm_event(prop_dmg=1, prop_dmg_exp="", crop_dmg=2, crop_dmg_exp="M"),
    ]
    out = expand_damage(events)
    assert (out[0].prop_damage, out[0].crop_damage) == (5000.0, None)
    assert (out[1].prop_damage, out[1].crop_damage) == (None, 2e6)
    # inputs are untouched
    assert events[0].prop_damage is None


def test_fill_absent_damage(make_storm_event):
    events = [make_storm_event(prop_damage=None, crop_damage=7.0)]
    out = fill_absent_damage(events)
    assert out[0].prop_damage == 0.0
    assert out[0].crop_damage == 7.0
    assert events[0].prop_damage is None


@pytest.mark.parametrize("text, year", [
    ("06/09/1999", 1999),
    ("6/9/1999 0:00:00", 1999),
    ("4/18/1950 0:00:00", 1950),
    ("12/31/2011 0:00:00", 2011),
])
def test_parse_begin_year(text, year):
    assert parse_begin_year(text) == year


@pytest.mark.parametrize("text", [
    "13/40/1999", "", "1999-06-09", "not a date",
    "6/9/1999 not-a-time", "6/9/1999 25:00:00", "6/9/1999 0:00:00 extra",
])
def test_parse_begin_year_invalid(text):
    with pytest.raises(ParseError):
        parse_begin_year(text)


def test_parse_years_reports_row(make_storm_event):
    events = [make_storm_event(event_id=0), make_storm_event(event_id=1, begin_date="13/40/1999 0:00:00")]
    with pytest.raises(ParseError) as exc:
        parse_years(events)
    assert exc.value.stage == "temporal"
    assert exc.value.row == 1
    assert exc.value.column == "BGN_DATE"


def test_filter_years_boundary(make_storm_event):
    events = parse_years([
        make_storm_event(event_id=0, begin_date="12/31/1995 0:00:00"),
        make_storm_event(event_id=1, begin_date="1/1/1996 0:00:00"),
        make_storm_event(event_id=2, begin_date="7/4/2005 0:00:00"),
    ])
    assert [e.event_id for e in filter_years(events)] == [1, 2]
    assert [e.event_id for e in filter_years(events, start_year=2000)] == [2]


def test_filter_impact(make_storm_event):
    events = [
        make_storm_event(event_id=0, year=2000, prop_damage=0.0, crop_damage=0.0),
        make_storm_event(event_id=1, year=2000, injuries=1, prop_damage=0.0, crop_damage=0.0),
        make_storm_event(event_id=2, year=2001, fatalities=2, prop_damage=10.0, crop_damage=5.0),
        make_storm_event(event_id=3, year=2002, prop_damage=0.0, crop_damage=1.0),
    ]
    out = filter_impact(events)
    assert [e.event_id for e in out] == [1, 2, 3]
    assert out[0].health_impact == 1
    assert out[1].health_impact == 2
    assert out[1].economic_impact == 15.0
    assert out[1].year == 2001


def test_filter_impact_requires_earlier_stages(make_storm_event):
    with pytest.raises(ValueError):
        filter_impact([make_storm_event(injuries=1)])

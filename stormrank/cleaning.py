"""
Cleaning stages
===============

Pure, order-preserving transforms over lists of records. Each function takes a
list and returns a new list; nothing is edited in place.

Order used by the engine:

1) expand_damage       coefficient x exponent code -> dollars (None if unknown)
2) parse_years         BGN_DATE text -> year
3) filter_years        drop everything before the start year
4) fill_absent_damage  None damage -> 0.0
5) filter_impact       keep events with any casualty or damage -> CleanedEvent
"""

from __future__ import annotations
import logging
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional

from .config import DATE_FORMAT, DEFAULT_START_YEAR, TIME_FORMAT
from .errors import ParseError
from .models import CleanedEvent, StormEvent

log = logging.getLogger(__name__)

# Exponent codes documented for PROPDMGEXP / CROPDMGEXP. Matching is exact:
# lower-case, numeric and symbol codes are unknown, not "times one".
EXPONENT_MULTIPLIERS: Dict[str, float] = {
    "K": 1e3,
    "M": 1e6,
    "B": 1e9,
}


# ------------ Monetary -------------------------------------------------------


def damage_multiplier(code: str) -> Optional[float]:
    """Multiplier for an exponent code, or None when the code is not recognized."""
    return EXPONENT_MULTIPLIERS.get(code)


def expand_amount(coefficient: float, code: str) -> Optional[float]:
    """Dollar amount for a coefficient/exponent pair (None = absent)."""
    multiplier = damage_multiplier(code)
    if multiplier is None:
        return None
    return coefficient * multiplier


def expand_damage(events: List[StormEvent]) -> List[StormEvent]:
    """Set prop_damage and crop_damage on every event.

    Property and crop fields are expanded independently; an unknown code on one
    side leaves the other untouched.
    """
    out = [
        replace(
            e,
            prop_damage=expand_amount(e.prop_dmg, e.prop_dmg_exp),
            crop_damage=expand_amount(e.crop_dmg, e.crop_dmg_exp),
        )
        for e in events
    ]
    absent_prop = sum(1 for e in out if e.prop_damage is None)
    absent_crop = sum(1 for e in out if e.crop_damage is None)
    if absent_prop or absent_crop:
        log.warning(
            f"Unrecognized damage exponents: {absent_prop:,} property, {absent_crop:,} crop "
            f"(of {len(out):,} events)"
        )
    return out


def fill_absent_damage(events: List[StormEvent]) -> List[StormEvent]:
    """Replace absent (None) damage amounts with 0.0."""
    return [
        replace(
            e,
            prop_damage=0.0 if e.prop_damage is None else e.prop_damage,
            crop_damage=0.0 if e.crop_damage is None else e.crop_damage,
        )
        for e in events
    ]


# ------------ Temporal -------------------------------------------------------


def parse_begin_year(text: str, fmt: str = DATE_FORMAT) -> int:
    """Parse a BGN_DATE value and return its year.

    Accepts a bare date or a date followed by a time, so both
    "06/09/1999" and "6/9/1999 0:00:00" give 1999. Anything else after the
    date is an error.
    """
    parts = text.split()
    if not parts:
        raise ParseError(f"Empty begin date, expected format {fmt!r}", stage="temporal")
    if len(parts) == 1:
        value, full_fmt = parts[0], fmt
    else:
        value, full_fmt = " ".join(parts), f"{fmt} {TIME_FORMAT}"
    try:
        return datetime.strptime(value, full_fmt).year
    except ValueError as e:
        raise ParseError(f"Invalid begin date {text!r}, expected format {fmt!r}", stage="temporal") from e


def parse_years(events: List[StormEvent], fmt: str = DATE_FORMAT) -> List[StormEvent]:
    """Set `year` on every event. A single bad date aborts the run."""
    out: List[StormEvent] = []
    for e in events:
        try:
            year = parse_begin_year(e.begin_date, fmt)
        except ParseError as err:
            raise ParseError(err.message, stage="temporal", row=e.event_id, column="BGN_DATE") from err
        out.append(replace(e, year=year))
    return out


def filter_years(events: List[StormEvent], start_year: int = DEFAULT_START_YEAR) -> List[StormEvent]:
    """Keep events that began in `start_year` or later."""
    out = [e for e in events if e.year is not None and e.year >= start_year]
    log.info(f"Year filter >= {start_year}: kept {len(out):,} of {len(events):,} events")
    return out


# ------------ Impact ---------------------------------------------------------


def filter_impact(events: List[StormEvent]) -> List[CleanedEvent]:
    """Keep events with any fatality, injury or damage and convert them to CleanedEvent.

    Expects `parse_years` and `fill_absent_damage` to have run already.
    """
    out: List[CleanedEvent] = []
    for e in events:
        if e.year is None or e.prop_damage is None or e.crop_damage is None:
            raise ValueError(f"Event {e.event_id} has not been through the year and damage stages")
        if e.prop_damage > 0 or e.crop_damage > 0 or e.fatalities > 0 or e.injuries > 0:
            out.append(CleanedEvent(
                event_id=e.event_id,
                year=e.year,
                event_type=e.event_type,
                fatalities=e.fatalities,
                injuries=e.injuries,
                prop_damage=e.prop_damage,
                crop_damage=e.crop_damage,
            ))
    log.info(f"Impact filter: kept {len(out):,} of {len(events):,} events")
    return out

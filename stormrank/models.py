"""
Data model (StormEvent, CleanedEvent)
=====================================

Each row of the storm export becomes a `StormEvent` object, and each event
that survives cleaning becomes a `CleanedEvent`.

Both are immutable (`frozen=True`) so that:
- a stage can never edit the records an earlier stage handed over, and
- every stage returns a *new* list, built with `dataclasses.replace`.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

@dataclass(frozen=True)
class StormEvent:
    """One storm observation, reduced to the columns the analysis uses.

    The derived fields (`prop_damage`, `crop_damage`, `year`) are None until
    their stage runs. After `expand_damage`, a None damage amount means the
    exponent code was not recognized (absent, not zero).
    """
    event_id: int
    begin_date: str
    event_type: str
    fatalities: float
    injuries: float
    prop_dmg: float
    prop_dmg_exp: str
    crop_dmg: float
    crop_dmg_exp: str
    prop_damage: Optional[float] = None
    crop_damage: Optional[float] = None
    year: Optional[int] = None

@dataclass(frozen=True)
class CleanedEvent:
    """Immutable record for one event with measurable impact."""
    event_id: int
    year: int
    event_type: str
    fatalities: float
    injuries: float
    prop_damage: float
    crop_damage: float

    @property
    def health_impact(self) -> float:
        return self.fatalities + self.injuries

    @property
    def economic_impact(self) -> float:
        return self.prop_damage + self.crop_damage

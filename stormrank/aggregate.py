"""
Aggregation (group by event type)
=================================

Sums one impact metric per event-type label and ranks the labels.

Ordering rule used everywhere: larger total first, and for equal totals the
label that sorts first alphabetically. `top_n` uses the same rule, so a tie at
the cut-off always keeps the alphabetically earlier label.
"""

from __future__ import annotations
import heapq
from typing import Callable, Dict, Iterable, List, Tuple

from .models import CleanedEvent

METRICS = ("health", "economic", "fatalities", "injuries", "property", "crop")

Ranking = List[Tuple[str, float]]


def metric_getter(metric: str) -> Callable[[CleanedEvent], float]:
    """Map a metric name (or alias) to a function reading it from an event."""
    m = metric.lower().strip()
    if m in ("health", "health_impact"):
        return lambda e: e.health_impact
    if m in ("economic", "economic_impact"):
        return lambda e: e.economic_impact
    if m in ("fatalities", "deaths"):
        return lambda e: e.fatalities
    if m in ("injuries",):
        return lambda e: e.injuries
    if m in ("property", "prop_damage", "property_damage"):
        return lambda e: e.prop_damage
    if m in ("crop", "crop_damage"):
        return lambda e: e.crop_damage
    raise ValueError(f"metric must be one of: {', '.join(METRICS)}")


def totals_by_label(events: Iterable[CleanedEvent], metric: str) -> Dict[str, float]:
    """Sum the metric per event_type label (unordered)."""
    get = metric_getter(metric)
    totals: Dict[str, float] = {}
    for e in events:
        totals[e.event_type] = totals.get(e.event_type, 0.0) + get(e)
    return totals


def _rank_key(item: Tuple[str, float]) -> Tuple[float, str]:
    label, total = item
    return (-total, label)


def aggregate(events: Iterable[CleanedEvent], metric: str) -> Ranking:
    """Return (label, total) pairs, largest total first, ties by label."""
    return sorted(totals_by_label(events, metric).items(), key=_rank_key)


def top_n(events: Iterable[CleanedEvent], metric: str, n: int = 10) -> Ranking:
    """Return the `n` highest-ranked (label, total) pairs."""
    if n < 1:
        raise ValueError(f"n must be at least 1, got {n}")
    return heapq.nsmallest(n, totals_by_label(events, metric).items(), key=_rank_key)

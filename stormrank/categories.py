"""
Event-type normalization
========================

The EVTYPE column is free text: the same kind of event shows up under many
spellings ("TSTM WIND", "THUNDERSTORM WIND", ...). Cleaning all of them is out
of reach, so only the labels that matter for the rankings are reconciled:

1) uppercase every label
2) find the labels whose total impact is above a percentile of the per-label
   totals (the high-impact tail)
3) rewrite only those labels with an ordered list of rules

Rules are plain data (`REWRITE_RULES`) and run top to bottom, each one on the
output of the previous one. Order matters: the exact "HURRICANE" rule runs
after "HURRICANE/TYPHOON" has already been rewritten.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Sequence, Set

import numpy as np

from .aggregate import totals_by_label
from .config import DEFAULT_PERCENTILE
from .models import CleanedEvent

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteRule:
    """Replace `pattern` with `replacement` in a label.

    With exact=True the whole label must equal `pattern`; otherwise every
    occurrence of the substring is replaced.
    """
    pattern: str
    replacement: str
    exact: bool = False

    def apply(self, label: str) -> str:
        if self.exact:
            return self.replacement if label == self.pattern else label
        return label.replace(self.pattern, self.replacement)


REWRITE_RULES: Sequence[RewriteRule] = (
    RewriteRule("TSTM WIND", "THUNDERSTORM WIND"),
    RewriteRule("RIP CURRENTS", "RIP CURRENT"),
    RewriteRule("FOG", "FREEZING FOG"),
    RewriteRule("WILD/FOREST FIRE", "WILDFIRE"),
    RewriteRule("HURRICANE/TYPHOON", "HURRICANE (TYPHOON)"),
    RewriteRule("EXTREME COLD/WIND CHILL", "EXTREME COLD"),
    RewriteRule("HURRICANE", "HURRICANE (TYPHOON)", exact=True),
)


def uppercase_event_types(events: List[CleanedEvent]) -> List[CleanedEvent]:
    """Uppercase every event_type label."""
    return [replace(e, event_type=e.event_type.upper()) for e in events]


def high_impact_labels(
    events: List[CleanedEvent],
    metric: str,
    percentile: float = DEFAULT_PERCENTILE,
) -> Set[str]:
    """Labels whose metric total is strictly above the given percentile.

    The percentile is taken over the per-label totals with linear
    interpolation between order statistics.
    """
    totals = totals_by_label(events, metric)
    if not totals:
        return set()
    threshold = float(np.percentile(list(totals.values()), percentile * 100))
    scope = {label for label, total in totals.items() if total > threshold}
    log.info(
        f"{metric} scope: {len(scope)} of {len(totals)} labels above "
        f"p{percentile * 100:g} ({threshold:,.1f})"
    )
    return scope


def rewrite_label(label: str, rules: Sequence[RewriteRule] = REWRITE_RULES) -> str:
    """Run every rule, in order, over one label."""
    for rule in rules:
        label = rule.apply(label)
    return label


def reconcile_event_types(
    events: List[CleanedEvent],
    metric: str,
    percentile: float = DEFAULT_PERCENTILE,
    rules: Sequence[RewriteRule] = REWRITE_RULES,
) -> List[CleanedEvent]:
    """Rewrite the labels of high-impact events; every other event passes through.

    Only labels change. Row count, order and all impact values are kept.
    """
    scope = high_impact_labels(events, metric, percentile)
    renames: Dict[str, str] = {}
    for label in scope:
        new = rewrite_label(label, rules)
        if new != label:
            renames[label] = new
    for old, new in sorted(renames.items()):
        log.info(f"Rewriting {old!r} -> {new!r}")
    return [replace(e, event_type=renames[e.event_type]) if e.event_type in renames else e for e in events]

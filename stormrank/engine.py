"""
Pipeline engine (STORMRANK)
===========================

This is where the stages are put together. STORMRANK is a one-shot batch job:

1) Load the export -> DataFrame (every column)
2) Select fields -> list of StormEvent records (immutable)
3) Clean: damage dollars, years, year window, absent -> 0, impact filter
4) Uppercase labels, then reconcile the high-impact tail (once per metric family)
5) Aggregate -> six ranking tables

Every stage returns a new list, so the cleaned events can be aggregated again
for any metric without re-running the stages before it.
"""

from __future__ import annotations
import csv
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd

from .aggregate import Ranking, top_n
from .categories import reconcile_event_types, uppercase_event_types
from .cleaning import (
    expand_damage,
    fill_absent_damage,
    filter_impact,
    filter_years,
    parse_years,
)
from .config import PipelineConfig
from .loader import read_storm_csv, select_fields
from .models import CleanedEvent

log = logging.getLogger(__name__)

TABLE_NAMES = ("health", "injuries", "fatalities", "economic", "property", "crop")


@dataclass
class ImpactTables:
    """The six rankings handed to the presentation layer."""
    health: Ranking
    injuries: Ranking
    fatalities: Ranking
    economic: Ranking
    property: Ranking
    crop: Ranking

    def as_dict(self) -> Dict[str, Ranking]:
        return {name: getattr(self, name) for name in TABLE_NAMES}

    def export_csv(self, directory: Union[str, Path]) -> List[Path]:
        """Write one `<table>.csv` per ranking into `directory`."""
        out_dir = Path(directory)
        out_dir.mkdir(parents=True, exist_ok=True)
        paths: List[Path] = []
        for name, rows in self.as_dict().items():
            path = out_dir / f"{name}.csv"
            with open(path, "w", newline="", encoding="utf-8") as f:
                w = csv.writer(f)
                w.writerow(["event_type", "total"])
                for label, total in rows:
                    w.writerow([label, total])
            paths.append(path)
        return paths

    def export_json(self, path: Union[str, Path]) -> None:
        """Write all rankings to one JSON file, keyed by table name."""
        payload = {
            name: [{"event_type": label, "total": total} for label, total in rows]
            for name, rows in self.as_dict().items()
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)


@dataclass
class StormRank:
    """Runs the cleaning stages and builds the rankings.

    The engine stores:
    - config: year window, percentile, top-N size, date format
    - events: the cleaned, uppercased events (labels not yet reconciled)
    - stage_counts: number of rows after each stage, for auditing a run
    """
    config: PipelineConfig = field(default_factory=PipelineConfig)
    events: List[CleanedEvent] = field(default_factory=list)
    stage_counts: Dict[str, int] = field(default_factory=dict)

    def _count(self, stage: str, n: int) -> None:
        self.stage_counts[stage] = n
        log.info(f"[{stage}] {n:,} rows")

    def prepare(self, frame: pd.DataFrame) -> List[CleanedEvent]:
        """Run field selection through uppercasing on a loaded frame."""
        cfg = self.config
        self.stage_counts = {}
        self._count("loaded", len(frame))

        events = select_fields(frame)
        self._count("selected", len(events))

        events = expand_damage(events)
        events = parse_years(events, cfg.date_format)
        events = filter_years(events, cfg.start_year)
        self._count("in_year_window", len(events))

        events = fill_absent_damage(events)
        cleaned = filter_impact(events)
        self._count("with_impact", len(cleaned))

        self.events = uppercase_event_types(cleaned)
        return self.events

    def reconciled(self, metric: str) -> List[CleanedEvent]:
        """Events with the high-impact tail for `metric` reconciled."""
        return reconcile_event_types(self.events, metric, self.config.percentile)

    def tables(self) -> ImpactTables:
        """Build the health rankings and the economic rankings."""
        n = self.config.top_n
        health = self.reconciled("health")
        economic = self.reconciled("economic")
        return ImpactTables(
            health=top_n(health, "health", n),
            injuries=top_n(health, "injuries", n),
            fatalities=top_n(health, "fatalities", n),
            economic=top_n(economic, "economic", n),
            property=top_n(economic, "property", n),
            crop=top_n(economic, "crop", n),
        )


def run_pipeline(path: Union[str, Path], config: Optional[PipelineConfig] = None) -> ImpactTables:
    """Load, clean and rank one storm export.

    Any StormRankError propagates; a failed run produces no tables.
    """
    engine = StormRank(config=config or PipelineConfig())
    frame = read_storm_csv(path, encoding=engine.config.encoding)
    engine.prepare(frame)
    return engine.tables()

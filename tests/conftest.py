import bz2
import csv
import gzip
import lzma
from pathlib import Path

import pytest

from stormrank.models import CleanedEvent, StormEvent

from storm_data import FIVE_ROWS, HEADER

OPENERS = {".bz2": bz2.open, ".gz": gzip.open, ".xz": lzma.open}


@pytest.fixture
def write_storm_csv(tmp_path: Path):
    """Write rows (plus the header) to a CSV compressed by its suffix and return its path."""
    def _write(rows, header=HEADER, name="storm.csv.bz2"):
        path = tmp_path / name
        opener = OPENERS.get(path.suffix, open)
        with opener(path, "wt", encoding="latin-1", newline="") as f:
            w = csv.writer(f)
            w.writerow(header)
            w.writerows(rows)
        return path
    return _write


@pytest.fixture
def storm_csv(write_storm_csv):
    return write_storm_csv(FIVE_ROWS)


@pytest.fixture
def make_storm_event():
    def _make(event_id=0, begin_date="1/1/2000 0:00:00", event_type="HAIL", fatalities=0.0, injuries=0.0,
              prop_dmg=0.0, prop_dmg_exp="", crop_dmg=0.0, crop_dmg_exp="", **derived):
        return StormEvent(
            event_id=event_id,
            begin_date=begin_date,
            event_type=event_type,
            fatalities=fatalities,
            injuries=injuries,
            prop_dmg=prop_dmg,
            prop_dmg_exp=prop_dmg_exp,
            crop_dmg=crop_dmg,
            crop_dmg_exp=crop_dmg_exp,
            **derived,
        )
    return _make


@pytest.fixture
def make_cleaned_event():
    def _make(event_type, fatalities=0.0, injuries=0.0, prop_damage=0.0, crop_damage=0.0, event_id=0, year=2000):
        return CleanedEvent(
            event_id=event_id,
            year=year,
            event_type=event_type,
            fatalities=fatalities,
            injuries=injuries,
            prop_damage=prop_damage,
            crop_damage=crop_damage,
        )
    return _make

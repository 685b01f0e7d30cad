"""
Dataset loader (compressed CSV -> StormEvent list)
==================================================

This module reads the NOAA Storm Database export and converts each row into a
`StormEvent` object.

Key ideas:
- The file is read once into a pandas DataFrame with every column kept.
- Field counts are checked row by row before pandas parses the file, because
  pandas pads short rows instead of rejecting them. A malformed row stops the
  run; it is never dropped.
- `select_fields` then keeps the eight columns the analysis needs and turns
  each row into an immutable record.
"""

from __future__ import annotations
import bz2
import csv
import gzip
import logging
import lzma
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from .config import (
    BGN_DATE,
    CROPDMG,
    CROPDMGEXP,
    DEFAULT_ENCODING,
    EVTYPE,
    FATALITIES,
    INJURIES,
    NUMERIC_COLUMNS,
    PROPDMG,
    PROPDMGEXP,
    REQUIRED_COLUMNS,
)
from .errors import DataLoadError, ParseError, SchemaError
from .models import StormEvent

log = logging.getLogger(__name__)

# suffix -> (opener for the row check, pandas compression name)
_COMPRESSION: Dict[str, Tuple[Callable, Optional[str]]] = {
    ".bz2": (bz2.open, "bz2"),
    ".gz": (gzip.open, "gzip"),
    ".xz": (lzma.open, "xz"),
}

# counts must not be negative
_NON_NEGATIVE = (FATALITIES, INJURIES)


def _compression_for(path: Path) -> Tuple[Callable, Optional[str]]:
    return _COMPRESSION.get(path.suffix.lower(), (open, None))


def _check_field_counts(path: Path, encoding: str) -> int:
    """Stream the file once and make sure every row matches the header width.

    Returns the number of data rows (blank lines are not rows).
    """
    opener, _ = _compression_for(path)
    with opener(path, "rt", encoding=encoding, newline="") as f:
        reader = csv.reader(f)
        header = next((fields for fields in reader if fields), None)
        if not header:
            raise ParseError(f"No header row in {path}", stage="load")
        width = len(header)
        rows = 0
        for fields in reader:
            if not fields:
                continue
            if len(fields) != width:
                raise ParseError(
                    f"Expected {width} fields, saw {len(fields)} in {path}",
                    stage="load",
                    row=rows,
                )
            rows += 1
    return rows


def read_storm_csv(path: Union[str, Path], *, encoding: str = DEFAULT_ENCODING) -> pd.DataFrame:
    """
    Read the compressed storm export with strict error handling.

    Every column is kept and pandas infers text or number per column. Blank
    cells stay empty strings (keep_default_na=False) so nothing is turned
    into NaN behind our back. Row order is the file order.
    """
    p = Path(path)
    _, compression = _compression_for(p)
    try:
        expected_rows = _check_field_counts(p, encoding)
        df = pd.read_csv(
            p,
            compression=compression,
            encoding=encoding,
            keep_default_na=False,
            low_memory=False,
            on_bad_lines="error",
        )
    except FileNotFoundError as e:
        msg = f"Missing input file: {p}"
        log.error(msg)
        raise DataLoadError(msg, stage="load") from e
    except pd.errors.EmptyDataError as e:
        msg = f"Empty CSV, no header row: {p}"
        log.error(msg)
        raise ParseError(msg, stage="load") from e
    except pd.errors.ParserError as e:
        msg = f"Could not parse CSV: {p}\nPandas error: {e}"
        log.error(msg)
        raise ParseError(msg, stage="load") from e
    except csv.Error as e:
        msg = f"Could not parse CSV: {p}\ncsv error: {e}"
        log.error(msg)
        raise ParseError(msg, stage="load") from e
    except UnicodeDecodeError as e:
        msg = f"Could not decode {p} as {encoding}: {e}"
        log.error(msg)
        raise DataLoadError(msg, stage="load") from e
    except (OSError, EOFError, lzma.LZMAError) as e:
        msg = f"Could not open or decompress {p}: {type(e).__name__}: {e}"
        log.error(msg)
        raise DataLoadError(msg, stage="load") from e

    if len(df) != expected_rows:
        msg = f"Row count mismatch in {p}: {expected_rows} rows checked, {len(df)} parsed"
        log.error(msg)
        raise ParseError(msg, stage="load")

    log.info(f"Loaded {len(df):,} rows x {len(df.columns)} columns from {p}")
    return df


# ------------ Field selection -----------------------------------------------


def _numeric(frame: pd.DataFrame, column: str) -> List[float]:
    """Coerce one column to floats; any cell that is not a finite number is fatal."""
    values = pd.to_numeric(frame[column], errors="coerce")
    bad = values.isna() | ~np.isfinite(values)
    if column in _NON_NEGATIVE:
        bad = bad | (values < 0)
    if bad.any():
        pos = int(bad.to_numpy().nonzero()[0][0])
        raw = frame[column].iloc[pos]
        raise ParseError(f"Invalid value {raw!r} in numeric column", stage="select", row=pos, column=column)
    return values.astype(float).tolist()


def _text(frame: pd.DataFrame, column: str) -> List[str]:
    return frame[column].astype(str).tolist()


def select_fields(frame: pd.DataFrame) -> List[StormEvent]:
    """
    Keep the eight analysis columns and convert each row into a StormEvent.

    Fails fast with SchemaError if any required column is missing, before a
    single row is converted.
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
    if missing:
        msg = f"Missing required columns: {missing}"
        log.error(msg)
        raise SchemaError(msg, stage="select")

    frame = frame.loc[:, REQUIRED_COLUMNS].reset_index(drop=True)
    numbers = {c: _numeric(frame, c) for c in NUMERIC_COLUMNS}

    events = [
        StormEvent(
            event_id=i,
            begin_date=begin_date,
            event_type=event_type,
            fatalities=fatalities,
            injuries=injuries,
            prop_dmg=prop_dmg,
            prop_dmg_exp=prop_dmg_exp,
            crop_dmg=crop_dmg,
            crop_dmg_exp=crop_dmg_exp,
        )
        for i, (begin_date, event_type, fatalities, injuries, prop_dmg, prop_dmg_exp, crop_dmg, crop_dmg_exp)
        in enumerate(zip(
            _text(frame, BGN_DATE),
            _text(frame, EVTYPE),
            numbers[FATALITIES],
            numbers[INJURIES],
            numbers[PROPDMG],
            _text(frame, PROPDMGEXP),
            numbers[CROPDMG],
            _text(frame, CROPDMGEXP),
        ))
    ]
    log.info(f"Selected {len(REQUIRED_COLUMNS)} columns for {len(events):,} events")
    return events

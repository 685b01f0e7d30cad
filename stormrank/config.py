from __future__ import annotations

from dataclasses import dataclass
from typing import List

# Source columns (NOAA Storm Database export)
BGN_DATE = "BGN_DATE"
EVTYPE = "EVTYPE"
FATALITIES = "FATALITIES"
INJURIES = "INJURIES"
PROPDMG = "PROPDMG"
PROPDMGEXP = "PROPDMGEXP"
CROPDMG = "CROPDMG"
CROPDMGEXP = "CROPDMGEXP"

# Columns kept by the field selector, in this order
REQUIRED_COLUMNS: List[str] = [
    BGN_DATE,
    EVTYPE,
    FATALITIES,
    INJURIES,
    PROPDMG,
    PROPDMGEXP,
    CROPDMG,
    CROPDMGEXP,
]
NUMERIC_COLUMNS: List[str] = [FATALITIES, INJURIES, PROPDMG, CROPDMG]

# BGN_DATE looks like "4/18/1950 0:00:00"; the time part is optional
DATE_FORMAT = "%m/%d/%Y"
TIME_FORMAT = "%H:%M:%S"

# First year with all 48 event types recorded
DEFAULT_START_YEAR = 1996
DEFAULT_PERCENTILE = 0.90
DEFAULT_TOP_N = 10

# The export is not UTF-8 clean
DEFAULT_ENCODING = "latin-1"


@dataclass
class PipelineConfig:
    """Tunable knobs for one pipeline run."""
    start_year: int = DEFAULT_START_YEAR
    percentile: float = DEFAULT_PERCENTILE
    top_n: int = DEFAULT_TOP_N
    date_format: str = DATE_FORMAT
    encoding: str = DEFAULT_ENCODING

    def __post_init__(self) -> None:
        if not 0.0 <= self.percentile <= 1.0:
            raise ValueError(f"percentile must be within [0, 1], got {self.percentile}")
        if self.top_n < 1:
            raise ValueError(f"top_n must be at least 1, got {self.top_n}")

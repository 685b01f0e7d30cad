"""
Pipeline errors
===============

Every failure in STORMRANK is fatal: the run stops and no table is produced.
The exceptions carry enough context for the CLI to tell the operator which
stage failed and, where it applies, which row and column were at fault.
"""

from __future__ import annotations
from typing import Optional


class StormRankError(Exception):
    """Base class for all pipeline failures."""
    code = "E-PIPE-001"
    title = "Pipeline step failed"
    hint = "Re-run with -v and review the log output."

    def __init__(
        self,
        message: str,
        *,
        stage: str,
        row: Optional[int] = None,
        column: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.row = row
        self.column = column

    def __str__(self) -> str:
        where = []
        if self.row is not None:
            where.append(f"row {self.row}")
        if self.column is not None:
            where.append(f"column {self.column}")
        if where:
            return f"{self.message} ({', '.join(where)})"
        return self.message


class DataLoadError(StormRankError):
    """Raised when the source file is missing, unreadable, or not decompressable."""
    code = "E-LOAD-001"
    title = "Storm data could not be read"
    hint = "Check the path and re-download the compressed export if it is corrupted."


class ParseError(StormRankError, ValueError):
    """Raised on a malformed header, row, numeric cell or date."""
    code = "E-PARSE-001"
    title = "Storm data could not be parsed"
    hint = "Open the file and check the reported row; rows are never skipped."


class SchemaError(StormRankError):
    """Raised when a required column is missing from the source header."""
    code = "E-SCHEMA-001"
    title = "Required columns not found"
    hint = "The export must carry the NOAA column names (BGN_DATE, EVTYPE, ...)."

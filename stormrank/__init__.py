"""
STORMRANK package
=================

This package ranks U.S. weather event types by their health and economic
impact, using the NOAA Storm Database export.

- The CLI entry point is in `stormrank/cli.py`.
- The pipeline orchestration (stages, tables, exports) is in `stormrank/engine.py`.
- Dataset loading and column selection are in `stormrank/loader.py`.
"""

__version__ = '0.1.0'

"""Data lookups — province regions, location supports and the sector catalogue."""

from tesvik_engine.data.source import (
    IncentiveDataSource,
    StaticDataSource,
    default_data_source,
    load_default_sectors,
    load_sectors_csv,
)

__all__ = [
    "IncentiveDataSource",
    "StaticDataSource",
    "default_data_source",
    "load_default_sectors",
    "load_sectors_csv",
]

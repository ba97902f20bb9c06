"""Data model for configuration format."""

from typing import Tuple, Optional, NamedTuple


class DataSourceConfig(NamedTuple):
    """The data source to use, and the arguments to construct it with."""
    type: str
    args: Tuple[str, ...] = ()


class ZoneinfoConfig(NamedTuple):
    """Where to search for zoneinfo directories."""
    search_path: Tuple[str, ...]
    alternate_iso3166_tab_search_path: Tuple[str, ...]


class Config(NamedTuple):
    """
    Global configuration.

    A `data_source` of `None` means the data source is detected when first
    needed.
    """
    data_source: Optional[DataSourceConfig]
    zoneinfo: ZoneinfoConfig

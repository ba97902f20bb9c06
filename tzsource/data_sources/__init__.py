"""Concrete sources of timezone and country data."""

from tzsource.data_sources.bundled import BundledDataSource
from tzsource.data_sources.zoneinfo import (
    DEFAULT_SEARCH_PATH,
    ZoneinfoDataSource,
    DEFAULT_ALTERNATE_ISO3166_TAB_SEARCH_PATH,
)

__all__ = (
    'BundledDataSource',
    'ZoneinfoDataSource',
    'DEFAULT_SEARCH_PATH',
    'DEFAULT_ALTERNATE_ISO3166_TAB_SEARCH_PATH',
)

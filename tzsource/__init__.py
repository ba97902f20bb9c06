"""Timezone and country metadata from interchangeable data sources."""

from tzsource.info import (
    CountryInfo,
    TimezoneInfo,
    CountryTimezone,
    DataTimezoneInfo,
    LinkedTimezoneInfo,
)
from tzsource.registry import (
    DataSourceRegistry,
    default_registry,
    get_data_source,
    set_data_source,
    create_data_source,
)
from tzsource.exceptions import (
    ConfigError,
    InvalidDataSource,
    DataSourceNotFound,
    InvalidCountryCode,
    InvalidZoneinfoFile,
    InvalidZoneinfoDirectory,
    RequiredDependencyMissing,
    InvalidTimezoneIdentifier,
    ZoneinfoDirectoryNotFound,
)
from tzsource.data_source import DataSource
from tzsource.data_sources import BundledDataSource, ZoneinfoDataSource

__all__ = (
    'DataSource',
    'BundledDataSource',
    'ZoneinfoDataSource',
    'DataSourceRegistry',
    'default_registry',
    'get_data_source',
    'set_data_source',
    'create_data_source',
    'CountryInfo',
    'TimezoneInfo',
    'CountryTimezone',
    'DataTimezoneInfo',
    'LinkedTimezoneInfo',
    'ConfigError',
    'InvalidDataSource',
    'DataSourceNotFound',
    'InvalidCountryCode',
    'InvalidZoneinfoFile',
    'InvalidZoneinfoDirectory',
    'RequiredDependencyMissing',
    'InvalidTimezoneIdentifier',
    'ZoneinfoDirectoryNotFound',
)

"""Loading of data source configuration."""

from tzsource.config.model import Config, ZoneinfoConfig, DataSourceConfig
from tzsource.exceptions import ConfigError
from tzsource.config.loader import (
    ZONEINFO_PATH_ENV,
    yaml_load,
    load_config,
    load_search_path,
)

__all__ = (
    'yaml_load',
    'load_config',
    'load_search_path',
    'Config',
    'ZoneinfoConfig',
    'DataSourceConfig',
    'ConfigError',
    'ZONEINFO_PATH_ENV',
)

"""Loading and validation of configuration."""

import os
import importlib.resources
from typing import IO, Any, Dict, List, Tuple, Union, Optional

import yaml
import jsonschema
import jsonschema.exceptions

from tzsource.exceptions import ConfigError
from tzsource.config.model import Config, ZoneinfoConfig, DataSourceConfig
from tzsource.data_sources import (
    DEFAULT_SEARCH_PATH,
    DEFAULT_ALTERNATE_ISO3166_TAB_SEARCH_PATH,
)

Yaml = Dict[str, Any]

ZONEINFO_PATH_ENV = 'TZSOURCE_ZONEINFO_PATH'


def yaml_load(stream: Union[IO[str], str]) -> Any:
    """Parse the first YAML document from the given stream."""
    return yaml.load(stream, getattr(yaml, 'CSafeLoader', yaml.SafeLoader))


def load_config(yaml: Optional[Yaml]) -> Config:
    """Unpack parsed YAML into a `Config` object."""
    if yaml is None:
        # An empty file
        yaml = {}

    _schema_validate(yaml)

    return Config(
        data_source=_load_data_source(yaml.get('data_source')),
        zoneinfo=_load_zoneinfo_config(yaml.get('zoneinfo', {})),
    )


def load_search_path() -> Tuple[str, ...]:
    """
    Load the zoneinfo search path from the environment.

    `TZSOURCE_ZONEINFO_PATH` holds directories separated by `os.pathsep`. The
    default search path is used if it is unset.
    """
    value = os.environ.get(ZONEINFO_PATH_ENV)

    if value is None:
        return DEFAULT_SEARCH_PATH

    search_path = tuple(x for x in value.split(os.pathsep) if x)

    if not search_path:
        raise ConfigError(f"{ZONEINFO_PATH_ENV} contains no paths.")

    return search_path


def _schema_validate(config: Yaml) -> None:
    schema_raw = importlib.resources.files(
        'tzsource.config',
    ).joinpath('schema.yaml').read_text(encoding='utf-8')
    schema_yaml = yaml_load(schema_raw)

    try:
        jsonschema.validate(config, schema_yaml)
    except jsonschema.exceptions.ValidationError as e:
        path = '.'.join(str(x) for x in e.absolute_path) or 'top level'
        raise ConfigError(
            f"Could not validate config file against schema ({path}: "
            f"{e.message}).",
        ) from None


def _load_data_source(
    yaml_data_source: Optional[Yaml],
) -> Optional[DataSourceConfig]:
    if yaml_data_source is None:
        return None

    type_ = yaml_data_source['type']
    directory = yaml_data_source.get('directory')
    iso3166_table = yaml_data_source.get('iso3166_table')
    args: List[str] = yaml_data_source.get('args', [])

    if type_ == 'zoneinfo':
        if args:
            raise ConfigError(
                "The zoneinfo data source is configured with `directory` and "
                "`iso3166_table`, not `args`.",
            )

        if iso3166_table is not None and directory is None:
            raise ConfigError(
                "`iso3166_table` may only be given together with "
                "`directory`.",
            )

        return DataSourceConfig(
            type=type_,
            args=tuple(x for x in (directory, iso3166_table) if x is not None),
        )

    if directory is not None or iso3166_table is not None:
        raise ConfigError(
            "`directory` and `iso3166_table` are only valid for the zoneinfo "
            f"data source, not {type_}.",
        )

    return DataSourceConfig(type=type_, args=tuple(args))


def _load_zoneinfo_config(yaml_zoneinfo: Yaml) -> ZoneinfoConfig:
    search_path = yaml_zoneinfo.get('search_path')
    alternate_search_path = yaml_zoneinfo.get('alternate_iso3166_search_path')

    return ZoneinfoConfig(
        search_path=(
            tuple(search_path)
            if search_path is not None
            else load_search_path()
        ),
        alternate_iso3166_tab_search_path=(
            tuple(alternate_search_path)
            if alternate_search_path is not None
            else DEFAULT_ALTERNATE_ISO3166_TAB_SEARCH_PATH
        ),
    )
